"""
Assistant Service
Builds the financial summary embedded in chat prompts and calls the chat model.
Groq is used through its OpenAI-compatible endpoint when GROQ_API_KEY is set,
otherwise OpenAI when OPENAI_API_KEY is set.
"""
import logging
import re
from typing import Any, Dict, List, Optional, Sequence

from openai import OpenAI, OpenAIError

from smartspend.core.config import settings
from smartspend.core.exceptions import AssistantError
from smartspend.models.transaction import Insights, Transaction
from smartspend.utils.analyzer import compute_insights

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = """You are SmartSpend AI, a helpful financial assistant integrated into the SmartSpend financial tracking app.

Your role is to help users with:
- Personal finance advice and budgeting tips
- Expense tracking and categorization guidance
- Savings strategies and financial planning
- Investment basics and recommendations
- Debt management advice
- Financial goal setting

Keep responses concise, practical, and actionable. Always be encouraging and supportive about financial wellness. If users ask about specific transactions or account data, remind them that you can provide better insights once they connect their accounts or add more transaction data.

Respond in a friendly, conversational tone and keep answers under 150 words unless the user specifically asks for detailed information."""

FALLBACK_SYSTEM_PROMPT = """You are SmartSpend AI, a helpful financial assistant.

Provide concise, practical financial advice in a friendly tone. Focus on:
- Budgeting and saving strategies
- Expense tracking tips
- Investment basics
- Debt management

Keep responses under 150 words and be encouraging about financial wellness."""

NO_DATA_NOTICE = (
    "No transaction data available yet. Please connect a bank account or upload a CSV "
    "to get personalized insights."
)
NO_MODEL_ANSWER = "Sorry, no model configured."
RECENT_TRANSACTION_LIMIT = 5


def format_category_name(category: str) -> str:
    """FOOD_AND_DRINK -> Food And Drink"""
    words = category.replace("_", " ").lower()
    return re.sub(r"\b\w", lambda m: m.group(0).upper(), words)


def _money(value: float) -> str:
    return f"${value:,.2f}"


def total_balance(accounts: Optional[Sequence[Dict[str, Any]]]) -> float:
    total = 0.0
    for account in accounts or []:
        balances = account.get("balances") or {}
        total += float(balances.get("current") or 0)
    return total


def build_financial_summary(
    insights: Optional[Insights],
    transactions: Sequence[Transaction] = (),
    accounts: Optional[Sequence[Dict[str, Any]]] = None,
) -> str:
    total = insights.total_this_month if insights else 0.0
    categories = insights.top_categories if insights else []

    category_lines = "\n".join(
        f"- {format_category_name(c.name)}: {_money(c.total)}" for c in categories
    ) or "No categories yet"
    recent_lines = "\n".join(
        f"{t.name}: {'-' if t.amount < 0 else '+'}{_money(abs(t.amount))} ({format_category_name(t.category)})"
        for t in list(transactions)[:RECENT_TRANSACTION_LIMIT]
    ) or "No recent transactions"

    return (
        f"Total Monthly Spending: {_money(total)}\n"
        f"Total Account Balance: {_money(total_balance(accounts))}\n"
        f"Number of Transactions: {len(transactions)}\n"
        f"\n"
        f"Top Spending Categories:\n"
        f"{category_lines}\n"
        f"\n"
        f"Recent Transactions:\n"
        f"{recent_lines}"
    )


def build_user_prompt(question: str, summary: Optional[str]) -> str:
    return (
        f"USER QUESTION: {question}\n"
        f"\n"
        f"FINANCIAL DATA SUMMARY:\n"
        f"{summary or NO_DATA_NOTICE}\n"
        f"\n"
        f"Please provide a helpful, personalized response based on this financial data."
    )


def _complete(client: OpenAI, model: str, system_prompt: str, user_content: str, max_tokens: int) -> Optional[str]:
    completion = client.chat.completions.create(
        model=model,
        messages=[
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": user_content},
        ],
        temperature=settings.AI_TEMPERATURE,
        max_tokens=max_tokens,
    )
    if not completion.choices:
        return None
    return completion.choices[0].message.content


def _ask_groq(user_content: str) -> Optional[str]:
    client = OpenAI(api_key=settings.GROQ_API_KEY, base_url=settings.GROQ_BASE_URL)
    try:
        return _complete(client, settings.GROQ_MODEL, SYSTEM_PROMPT, user_content, settings.AI_MAX_TOKENS)
    except OpenAIError as e:
        logger.warning(f"Groq model {settings.GROQ_MODEL} failed: {str(e)}")

    for model in settings.groq_fallback_models:
        if model == settings.GROQ_MODEL:
            continue
        try:
            logger.info(f"Retrying chat with fallback model {model}")
            return _complete(
                client, model, FALLBACK_SYSTEM_PROMPT, user_content, settings.AI_FALLBACK_MAX_TOKENS
            )
        except OpenAIError as e:
            logger.warning(f"Groq fallback model {model} failed: {str(e)}")

    raise AssistantError("All Groq models failed")


def _ask_openai(user_content: str) -> Optional[str]:
    client = OpenAI(api_key=settings.OPENAI_API_KEY)
    try:
        return _complete(client, settings.OPENAI_MODEL, SYSTEM_PROMPT, user_content, settings.AI_MAX_TOKENS)
    except OpenAIError as e:
        raise AssistantError(f"OpenAI model {settings.OPENAI_MODEL} failed: {str(e)}") from e


def ask_assistant(question: str, summary: Optional[str] = None) -> str:
    user_content = build_user_prompt(question, summary)

    if settings.GROQ_API_KEY:
        answer = _ask_groq(user_content)
    elif settings.OPENAI_API_KEY:
        answer = _ask_openai(user_content)
    else:
        logger.warning("No chat model configured")
        return NO_MODEL_ANSWER

    return answer or NO_MODEL_ANSWER


def summarize_for_chat(
    transactions: List[Transaction],
    accounts: Optional[Sequence[Dict[str, Any]]] = None,
) -> str:
    return build_financial_summary(compute_insights(transactions), transactions, accounts)
