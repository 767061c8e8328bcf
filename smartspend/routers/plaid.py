"""
Plaid Router
Link token creation, public token exchange, balances and transactions
"""
import datetime
import logging
from typing import Dict, Optional

import plaid
from fastapi import APIRouter, HTTPException, Query, status
from pydantic import BaseModel

from smartspend.core.exceptions import PlaidNotConfigured
from smartspend.db import token_store
from smartspend.utils import plaid_client

router = APIRouter()
logger = logging.getLogger(__name__)


class PublicTokenExchange(BaseModel):
    public_token: Optional[str] = None


def require_access_token() -> str:
    access_token = token_store.get_access_token()
    if not access_token:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No access token")
    return access_token


def _plaid_error(action: str, e: Exception) -> HTTPException:
    if isinstance(e, PlaidNotConfigured):
        logger.error(f"{action} error: {str(e)}")
        return HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Plaid is not configured")
    if isinstance(e, plaid.ApiException):
        logger.error(f"{action} error: {e.body}")
    else:
        logger.error(f"{action} error: {str(e)}", exc_info=True)
    return HTTPException(status_code=500, detail=f"Failed to {action}")


@router.post("/create_link_token")
def create_link_token() -> Dict:
    try:
        return plaid_client.create_link_token()
    except Exception as e:
        raise _plaid_error("create link token", e)


@router.post("/exchange_public_token")
def exchange_public_token(body: PublicTokenExchange) -> Dict:
    if not body.public_token:
        raise HTTPException(status_code=400, detail="public_token is required")
    try:
        access_token = plaid_client.exchange_public_token(body.public_token)
    except Exception as e:
        raise _plaid_error("exchange public token", e)

    token_store.set_access_token(access_token)
    logger.info("Plaid public token exchanged")
    return {"ok": True}


@router.get("/accounts")
def get_accounts() -> Dict:
    access_token = require_access_token()
    try:
        return plaid_client.get_accounts(access_token)
    except Exception as e:
        raise _plaid_error("fetch accounts", e)


@router.get("/transactions")
def get_transactions(
    start_date: Optional[datetime.date] = Query(None),
    end_date: Optional[datetime.date] = Query(None),
) -> Dict:
    """
    One page of transactions. end_date defaults to today and start_date to the
    configured lookback window before end_date.
    """
    access_token = require_access_token()
    try:
        return plaid_client.get_transactions(access_token, start_date, end_date)
    except Exception as e:
        raise _plaid_error("fetch transactions", e)
