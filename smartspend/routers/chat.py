"""
Chat Router
Answers questions about the user's spending with the configured chat model
"""
import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from smartspend.core.exceptions import AssistantError, InvalidRecordShape
from smartspend.utils import assistant
from smartspend.utils.normalizer import GENERIC_ALIASES, normalize_batch

router = APIRouter()
logger = logging.getLogger(__name__)


class ChatRequest(BaseModel):
    question: Optional[str] = None
    summary: Optional[str] = None
    transactions: Optional[List[Any]] = None  # raw records, summarized when no summary is sent
    accounts: Optional[List[Dict[str, Any]]] = None


@router.post("/chat")
def chat(request: ChatRequest) -> Dict:
    if not request.question or not request.question.strip():
        raise HTTPException(status_code=400, detail="question is required")

    summary = request.summary
    if summary is None and request.transactions:
        try:
            transactions = normalize_batch(request.transactions, GENERIC_ALIASES)
        except InvalidRecordShape as e:
            raise HTTPException(status_code=400, detail=str(e))
        summary = assistant.summarize_for_chat(transactions, request.accounts)

    try:
        answer = assistant.ask_assistant(request.question, summary)
    except AssistantError as e:
        logger.error(f"chat error: {str(e)}")
        raise HTTPException(status_code=500, detail="Failed to get chat response")
    except Exception as e:
        logger.error(f"chat error: {str(e)}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to get chat response")

    return {"answer": answer}
