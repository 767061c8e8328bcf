"""
Plaid client
Link token creation, public token exchange, balances and one page of transactions.
Responses are returned as plain dicts so the normalizer can treat them like any
other raw record source.
"""
import datetime
import logging
from functools import lru_cache
from typing import Any, Dict, Optional

import plaid
from plaid.api import plaid_api
from plaid.model.accounts_balance_get_request import AccountsBalanceGetRequest
from plaid.model.country_code import CountryCode
from plaid.model.item_public_token_exchange_request import ItemPublicTokenExchangeRequest
from plaid.model.link_token_create_request import LinkTokenCreateRequest
from plaid.model.link_token_create_request_user import LinkTokenCreateRequestUser
from plaid.model.products import Products
from plaid.model.transactions_get_request import TransactionsGetRequest
from plaid.model.transactions_get_request_options import TransactionsGetRequestOptions

from smartspend.core.config import settings
from smartspend.core.exceptions import PlaidNotConfigured

logger = logging.getLogger(__name__)

PLAID_HOSTS = {
    "sandbox": plaid.Environment.Sandbox,
    "production": plaid.Environment.Production,
}

CLIENT_NAME = "SmartSpend"
CLIENT_USER_ID = "demo-user-id"


@lru_cache(maxsize=1)
def get_client() -> plaid_api.PlaidApi:
    if not settings.PLAID_CLIENT_ID or not settings.PLAID_SECRET:
        raise PlaidNotConfigured("PLAID_CLIENT_ID and PLAID_SECRET must be set")

    host = PLAID_HOSTS.get(settings.PLAID_ENV.lower(), plaid.Environment.Sandbox)
    configuration = plaid.Configuration(
        host=host,
        api_key={
            "clientId": settings.PLAID_CLIENT_ID,
            "secret": settings.PLAID_SECRET,
        },
    )
    logger.info(f"Plaid client configured for {settings.PLAID_ENV}")
    return plaid_api.PlaidApi(plaid.ApiClient(configuration))


def create_link_token() -> Dict[str, Any]:
    kwargs = {
        "user": LinkTokenCreateRequestUser(client_user_id=CLIENT_USER_ID),
        "client_name": CLIENT_NAME,
        "products": [Products(product) for product in settings.plaid_products],
        "country_codes": [CountryCode(code) for code in settings.plaid_country_codes],
        "language": "en",
    }
    if settings.PLAID_REDIRECT_URI:
        kwargs["redirect_uri"] = settings.PLAID_REDIRECT_URI

    response = get_client().link_token_create(LinkTokenCreateRequest(**kwargs))
    return response.to_dict()


def exchange_public_token(public_token: str) -> str:
    request = ItemPublicTokenExchangeRequest(public_token=public_token)
    response = get_client().item_public_token_exchange(request)
    return response["access_token"]


def get_accounts(access_token: str) -> Dict[str, Any]:
    request = AccountsBalanceGetRequest(access_token=access_token)
    return get_client().accounts_balance_get(request).to_dict()


def default_date_range(
    start_date: Optional[datetime.date] = None,
    end_date: Optional[datetime.date] = None,
):
    """Fill in a missing range end with today and a missing start with the lookback window."""
    end_date = end_date or datetime.date.today()
    start_date = start_date or end_date - datetime.timedelta(days=settings.PLAID_LOOKBACK_DAYS)
    return start_date, end_date


def get_transactions(
    access_token: str,
    start_date: Optional[datetime.date] = None,
    end_date: Optional[datetime.date] = None,
) -> Dict[str, Any]:
    start_date, end_date = default_date_range(start_date, end_date)
    request = TransactionsGetRequest(
        access_token=access_token,
        start_date=start_date,
        end_date=end_date,
        options=TransactionsGetRequestOptions(
            count=settings.PLAID_TRANSACTIONS_PAGE_SIZE,
            offset=0,
            include_personal_finance_category=True,
        ),
    )
    response = get_client().transactions_get(request).to_dict()
    logger.info(
        f"Fetched {len(response.get('transactions', []))} of "
        f"{response.get('total_transactions', 0)} Plaid transactions ({start_date} to {end_date})"
    )
    return response
