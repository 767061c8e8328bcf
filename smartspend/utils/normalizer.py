"""
Transaction normalization.

Plaid transactions and uploaded CSV rows name their fields differently and
encode values differently. Each source kind gets a ``KeyAliasTable`` listing,
per logical field, the keys to probe in order; ``normalize`` walks those
tables and produces a canonical ``Transaction`` with a deterministic default
for every field.
"""
from __future__ import annotations

import datetime as dt
import logging
import math
import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any, List, Optional, Tuple, Union

from dateutil import parser as date_parser

from smartspend.core.exceptions import InvalidInputShape, InvalidRecordShape
from smartspend.models.transaction import DEFAULT_CATEGORY, Transaction

logger = logging.getLogger(__name__)

# Everything except digits, the decimal point and minus signs.
_NON_NUMERIC = re.compile(r"[^\d.\-]")
# Longest leading decimal number, e.g. "-12.5" out of "-12.5.3".
_LEADING_NUMBER = re.compile(r"^-?(?:\d+\.?\d*|\.\d+)")

_DATE_DEFAULTS = (dt.datetime(2000, 1, 1), dt.datetime(2001, 2, 2))

CategoryValue = Union[str, Sequence]


@dataclass(frozen=True)
class KeyAliasTable:
    """Ordered key aliases for each canonical field of one source kind."""

    date: Tuple[str, ...]
    name: Tuple[str, ...]
    amount: Tuple[str, ...]
    category: Tuple[str, ...]
    # Use the first column's value as the date when no date alias matches.
    first_column_date: bool = False
    # Key of a {"primary": ...} mapping that outranks the category aliases.
    structured_category: Optional[str] = None


GENERIC_ALIASES = KeyAliasTable(
    date=("date", "Date", "datetime", "authorized_date"),
    name=("description", "Description", "merchant_name", "name", "Merchant"),
    amount=("amount", "Amount", "DEBIT", "CREDIT"),
    category=("category", "Category"),
    structured_category="personal_finance_category",
)

PLAID_ALIASES = KeyAliasTable(
    date=("date", "datetime", "authorized_date"),
    name=("name", "merchant_name"),
    amount=("amount",),
    category=("category",),
    structured_category="personal_finance_category",
)

CSV_ALIASES = KeyAliasTable(
    date=("date", "Date", "TRANSACTION_DATE"),
    name=("description", "Description", "NAME", "Merchant"),
    amount=("amount", "Amount", "DEBIT", "CREDIT"),
    category=("category", "Category"),
    first_column_date=True,
)


def _is_present(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, str) and not value.strip():
        return False
    return True


def _first_present(raw: Mapping, aliases: Tuple[str, ...]) -> Any:
    for key in aliases:
        value = raw.get(key)
        if _is_present(value):
            return value
    return None


def parse_date(value: Any) -> Optional[Union[dt.date, str]]:
    """Reduce a source date to a calendar date, passing unparseable values through."""
    if value is None:
        return None
    if isinstance(value, dt.datetime):
        return value.date()
    if isinstance(value, dt.date):
        return value

    text = str(value).strip()
    if not text:
        return None
    # dateutil fills missing parts from its default; two different defaults
    # agreeing means year, month and day all came from the text itself
    try:
        first = date_parser.parse(text, default=_DATE_DEFAULTS[0]).date()
        second = date_parser.parse(text, default=_DATE_DEFAULTS[1]).date()
    except (ValueError, OverflowError):
        return text
    return first if first == second else text


def parse_amount(value: Any) -> float:
    """Parse a numeric or currency-formatted amount; unparseable input yields 0."""
    if value is None:
        return 0.0
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        try:
            number = float(value)
        except OverflowError:
            return 0.0
        return number if math.isfinite(number) else 0.0

    cleaned = _NON_NUMERIC.sub("", str(value))
    match = _LEADING_NUMBER.match(cleaned)
    if not match:
        return 0.0
    try:
        number = float(match.group(0))
    except ValueError:
        return 0.0
    return number if math.isfinite(number) else 0.0


def resolve_category(value: Optional[CategoryValue]) -> str:
    """Collapse a scalar label or an ordered hierarchy into one label."""
    if isinstance(value, str):
        return value.strip() or DEFAULT_CATEGORY
    if isinstance(value, Sequence) and not isinstance(value, (bytes, bytearray)):
        # only the most general level counts, even when it is blank
        if value and _is_present(value[0]):
            return str(value[0]).strip()
        return DEFAULT_CATEGORY
    if _is_present(value):
        return str(value).strip() or DEFAULT_CATEGORY
    return DEFAULT_CATEGORY


def _resolve_date(raw: Mapping, aliases: KeyAliasTable) -> Optional[Union[dt.date, str]]:
    value = _first_present(raw, aliases.date)
    if value is None and aliases.first_column_date and raw:
        value = next(iter(raw.values()))
    return parse_date(value)


def _resolve_category(raw: Mapping, aliases: KeyAliasTable) -> str:
    if aliases.structured_category:
        structured = raw.get(aliases.structured_category)
        if isinstance(structured, Mapping) and _is_present(structured.get("primary")):
            return str(structured["primary"]).strip()
    return resolve_category(_first_present(raw, aliases.category))


def normalize(raw: Any, aliases: KeyAliasTable = GENERIC_ALIASES) -> Transaction:
    """Map one source-native record onto the canonical ``Transaction``.

    Never fails for a mapping: unknown or malformed fields fall back to an
    empty name, a zero amount and the ``"Other"`` category.
    """
    if not isinstance(raw, Mapping):
        raise InvalidRecordShape(f"Expected a mapping, got {type(raw).__name__}")

    name = _first_present(raw, aliases.name)
    return Transaction(
        date=_resolve_date(raw, aliases),
        name=str(name).strip() if name is not None else "",
        amount=parse_amount(_first_present(raw, aliases.amount)),
        category=_resolve_category(raw, aliases),
    )


def normalize_batch(records: Any, aliases: KeyAliasTable = GENERIC_ALIASES) -> List[Transaction]:
    if not isinstance(records, Sequence) or isinstance(records, (str, bytes, bytearray)):
        raise InvalidInputShape(f"Expected a list of records, got {type(records).__name__}")

    transactions = [normalize(record, aliases) for record in records]
    logger.debug(f"Normalized {len(transactions)} records")
    return transactions
