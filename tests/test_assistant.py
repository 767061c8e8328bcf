from types import SimpleNamespace

import httpx
import pytest
from openai import APIError

from smartspend.core.config import settings
from smartspend.core.exceptions import AssistantError
from smartspend.models.transaction import Transaction
from smartspend.utils import assistant
from smartspend.utils.analyzer import compute_insights

sample_transactions = [
    Transaction(date="2024-01-05", amount=-45.00, category="FOOD_AND_DRINK", name="Cafe"),
    Transaction(date="2024-01-06", amount=-20.00, category="FOOD_AND_DRINK", name="Diner"),
    Transaction(date="2024-01-07", amount=-100.00, category="TRAVEL", name="Airline"),
]
sample_accounts = [
    {"name": "Checking", "balances": {"current": 1200.5}},
    {"name": "Savings", "balances": {"current": None}},
    {"name": "Card", "balances": {"current": 300}},
]


class FakeOpenAI:
    """Records requests; fails for models listed in ``failing``."""

    calls = []
    failing = set()

    def __init__(self, api_key=None, base_url=None):
        self.base_url = base_url
        self.chat = SimpleNamespace(completions=SimpleNamespace(create=self._create))

    def _create(self, **kwargs):
        FakeOpenAI.calls.append(dict(kwargs, base_url=self.base_url))
        if kwargs["model"] in FakeOpenAI.failing:
            raise APIError("model unavailable", httpx.Request("POST", "https://example.test"), body=None)
        message = SimpleNamespace(content=f"answer from {kwargs['model']}")
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


@pytest.fixture
def fake_openai(monkeypatch):
    FakeOpenAI.calls = []
    FakeOpenAI.failing = set()
    monkeypatch.setattr(assistant, "OpenAI", FakeOpenAI)
    monkeypatch.setattr(settings, "GROQ_API_KEY", None)
    monkeypatch.setattr(settings, "OPENAI_API_KEY", None)
    return FakeOpenAI


def test_format_category_name():
    assert assistant.format_category_name("FOOD_AND_DRINK") == "Food And Drink"
    assert assistant.format_category_name("travel") == "Travel"


def test_build_financial_summary():
    summary = assistant.build_financial_summary(compute_insights(sample_transactions), sample_transactions, sample_accounts)
    assert summary.splitlines() == [
        "Total Monthly Spending: $165.00",
        "Total Account Balance: $1,500.50",
        "Number of Transactions: 3",
        "",
        "Top Spending Categories:",
        "- Travel: $100.00",
        "- Food And Drink: $65.00",
        "",
        "Recent Transactions:",
        "Cafe: -$45.00 (Food And Drink)",
        "Diner: -$20.00 (Food And Drink)",
        "Airline: -$100.00 (Travel)",
    ]


def test_summary_without_data():
    summary = assistant.build_financial_summary(None)
    assert "Total Monthly Spending: $0.00" in summary
    assert "No categories yet" in summary
    assert "No recent transactions" in summary


def test_summary_lists_at_most_five_recent_transactions():
    transactions = [Transaction(amount=i + 1, name=f"T{i}") for i in range(8)]
    summary = assistant.summarize_for_chat(transactions)
    assert "Number of Transactions: 8" in summary
    assert "T4: +$5.00 (Other)" in summary
    assert "T5:" not in summary


def test_user_prompt_embeds_summary_or_notice():
    assert "FINANCIAL DATA SUMMARY:\nspent a lot" in assistant.build_user_prompt("How am I doing?", "spent a lot")
    assert assistant.NO_DATA_NOTICE in assistant.build_user_prompt("How am I doing?", None)


def test_no_model_configured(fake_openai):
    assert assistant.ask_assistant("hi") == assistant.NO_MODEL_ANSWER
    assert fake_openai.calls == []


def test_groq_is_preferred(fake_openai, monkeypatch):
    monkeypatch.setattr(settings, "GROQ_API_KEY", "gsk-test")
    monkeypatch.setattr(settings, "OPENAI_API_KEY", "sk-test")

    assert assistant.ask_assistant("hi", "summary") == f"answer from {settings.GROQ_MODEL}"
    call = fake_openai.calls[0]
    assert call["base_url"] == settings.GROQ_BASE_URL
    assert call["messages"][0]["content"] == assistant.SYSTEM_PROMPT
    assert call["max_tokens"] == settings.AI_MAX_TOKENS


def test_groq_falls_back_to_other_models(fake_openai, monkeypatch):
    monkeypatch.setattr(settings, "GROQ_API_KEY", "gsk-test")
    monkeypatch.setattr(settings, "GROQ_MODEL", "primary-model")
    monkeypatch.setattr(settings, "GROQ_FALLBACK_MODELS", "primary-model,backup-a,backup-b")
    fake_openai.failing = {"primary-model", "backup-a"}

    assert assistant.ask_assistant("hi") == "answer from backup-b"
    assert [c["model"] for c in fake_openai.calls] == ["primary-model", "backup-a", "backup-b"]
    assert fake_openai.calls[-1]["messages"][0]["content"] == assistant.FALLBACK_SYSTEM_PROMPT
    assert fake_openai.calls[-1]["max_tokens"] == settings.AI_FALLBACK_MAX_TOKENS


def test_groq_raises_when_every_model_fails(fake_openai, monkeypatch):
    monkeypatch.setattr(settings, "GROQ_API_KEY", "gsk-test")
    monkeypatch.setattr(settings, "GROQ_MODEL", "only-model")
    monkeypatch.setattr(settings, "GROQ_FALLBACK_MODELS", "only-model")
    fake_openai.failing = {"only-model"}

    with pytest.raises(AssistantError):
        assistant.ask_assistant("hi")


def test_openai_used_without_groq(fake_openai, monkeypatch):
    monkeypatch.setattr(settings, "OPENAI_API_KEY", "sk-test")

    assert assistant.ask_assistant("hi") == f"answer from {settings.OPENAI_MODEL}"
    assert fake_openai.calls[0]["base_url"] is None
