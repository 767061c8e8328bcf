import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, HTTPException, Query

from smartspend.core.exceptions import InvalidInputShape, InvalidRecordShape
from smartspend.utils.analyzer import InsightsAnalyzer
from smartspend.utils.normalizer import CSV_ALIASES, GENERIC_ALIASES, PLAID_ALIASES, normalize_batch

router = APIRouter()
logger = logging.getLogger(__name__)
insights_analyzer = InsightsAnalyzer()

ALIAS_TABLES = {
    "plaid": PLAID_ALIASES,
    "csv": CSV_ALIASES,
}


def parse_month(month: str):
    year, _, month_number = month.partition("-")
    if not (year.isdigit() and month_number.isdigit() and 1 <= int(month_number) <= 12):
        raise HTTPException(status_code=400, detail="month must follow YYYY-MM format")
    return int(year), int(month_number)


def alias_table(source: Optional[str]):
    if source is None:
        return GENERIC_ALIASES
    if source not in ALIAS_TABLES:
        raise HTTPException(status_code=400, detail=f"source must be one of {sorted(ALIAS_TABLES)}")
    return ALIAS_TABLES[source]


@router.post("/insights")
def compute_insights(
    payload: Any = Body(None),
    month: Optional[str] = Query(None, description="Restrict to one calendar month, e.g. 2024-01"),
    source: Optional[str] = Query(None, description="plaid or csv; mixed batches use the generic aliases"),
) -> Dict:
    """
    Normalize posted Plaid or CSV transactions and summarize them.
    Every nonzero transaction in the batch is counted unless month is given.
    """
    period = parse_month(month) if month else None
    aliases = alias_table(source)
    records = payload.get("transactions") if isinstance(payload, dict) else None

    try:
        transactions = normalize_batch(records, aliases)
        if period:
            transactions = insights_analyzer.filter_to_month(transactions, *period)
        insights = insights_analyzer.summarize(transactions)
    except InvalidInputShape:
        raise HTTPException(status_code=400, detail="transactions[] required")
    except InvalidRecordShape as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"insights error: {str(e)}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to compute insights")

    return {"insights": insights.to_dict()}
