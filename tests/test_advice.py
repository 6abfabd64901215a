import asyncio
from types import SimpleNamespace

import pytest

from tracker.advice import (
    EMPTY_FALLBACK,
    ERROR_FALLBACK,
    AdviceService,
    build_prompt,
    get_advice,
    monthly_comparison,
)
from tracker.config import Settings
from tracker.domain import Account, Transaction


def make_tx(id, date, type, amount, category="Living"):
    return Transaction(id=id, date=date, type=type, main_category=category,
                       amount=amount, account_id="a1")


class FakeModels:
    def __init__(self, text=None, error=None, delay=0):
        self.text = text
        self.error = error
        self.delay = delay
        self.calls = []

    async def generate_content(self, model, contents, config=None):
        self.calls.append({"model": model, "contents": contents})
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error:
            raise self.error
        return SimpleNamespace(text=self.text)


def make_client(**kwargs):
    models = FakeModels(**kwargs)
    return SimpleNamespace(aio=SimpleNamespace(models=models)), models


def make_settings(timeout=5.0):
    config = Settings()
    config.GEMINI_API_KEY = "test-key"
    config.ADVICE_MODEL = "test-model"
    config.ADVICE_TIMEOUT = timeout
    return config


TRANSACTIONS = (
    make_tx("t1", "2024-03-01", "income", 3000, "Work income"),
    make_tx("t2", "2024-03-05", "income", 200, "Investment income"),
    make_tx("t3", "2024-03-09", "expense", 1200),
    make_tx("t4", "2024-02-11", "income", 2500, "Work income"),
    make_tx("t5", "2024-02-20", "expense", 1500),
    make_tx("t6", "2023-03-02", "income", 1800, "Work income"),
)
ACCOUNTS = (Account("a1", "Wallet", 0),)


def test_monthly_comparison():
    c = monthly_comparison(TRANSACTIONS, "2024-03")
    assert c.last_month == "2024-02"
    assert c.current_month_income == 3200
    assert c.current_month_expense == 1200
    assert c.current_month_surplus == 2000
    assert c.last_month_surplus == 1000
    assert c.current_month_investment_income == 200
    assert c.last_year_same_month_income == 1800


def test_previous_month_crosses_year():
    c = monthly_comparison((make_tx("t1", "2023-12-31", "income", 10),), "2024-01")
    assert c.last_month == "2023-12"
    assert c.last_month_surplus == 10
    assert c.last_year_same_month_income is None


def test_prompt_mentions_figures_and_accounts():
    prompt = build_prompt(monthly_comparison(TRANSACTIONS, "2024-03"), ACCOUNTS)
    assert "3,200" in prompt
    assert "Wallet" in prompt


@pytest.mark.asyncio
async def test_returns_model_text():
    client, models = make_client(text="Wow! 🎉\nKeep going!")
    advice = await AdviceService(client, make_settings()).get_advice(TRANSACTIONS, ACCOUNTS, "2024-03")
    assert advice == "Wow! 🎉\nKeep going!"
    assert models.calls[0]["model"] == "test-model"


@pytest.mark.asyncio
async def test_empty_reply_uses_fallback():
    client, _ = make_client(text="")
    advice = await AdviceService(client, make_settings()).get_advice(TRANSACTIONS, ACCOUNTS, "2024-03")
    assert advice == EMPTY_FALLBACK


@pytest.mark.asyncio
async def test_error_uses_fallback():
    client, _ = make_client(error=RuntimeError("quota exceeded"))
    advice = await get_advice(TRANSACTIONS, ACCOUNTS, "2024-03", client=client)
    assert advice == ERROR_FALLBACK


@pytest.mark.asyncio
async def test_timeout_uses_fallback():
    client, _ = make_client(text="late", delay=1)
    advice = await AdviceService(client, make_settings(timeout=0.01)).get_advice(TRANSACTIONS, ACCOUNTS, "2024-03")
    assert advice == ERROR_FALLBACK


@pytest.mark.asyncio
async def test_missing_key_uses_fallback():
    config = make_settings()
    config.GEMINI_API_KEY = ""
    advice = await AdviceService(config=config).get_advice(TRANSACTIONS, ACCOUNTS, "2024-03")
    assert advice == ERROR_FALLBACK


@pytest.mark.asyncio
async def test_overlapping_request_gets_fallback():
    client, models = make_client(text="ok", delay=0.01)
    service = AdviceService(client, make_settings())
    results = await asyncio.gather(
        service.get_advice(TRANSACTIONS, ACCOUNTS, "2024-03"),
        service.get_advice(TRANSACTIONS, ACCOUNTS, "2024-03"),
    )
    assert results == ["ok", EMPTY_FALLBACK]
    assert len(models.calls) == 1
    assert not service.busy


def test_service_survives_separate_event_loops():
    client, models = make_client(text="ok", delay=0.01)
    service = AdviceService(client, make_settings())

    async def overlap():
        return await asyncio.gather(
            service.get_advice(TRANSACTIONS, ACCOUNTS, "2024-03"),
            service.get_advice(TRANSACTIONS, ACCOUNTS, "2024-03"),
        )

    assert asyncio.run(overlap()) == ["ok", EMPTY_FALLBACK]
    assert asyncio.run(overlap()) == ["ok", EMPTY_FALLBACK]
    assert len(models.calls) == 2
    assert not service.busy


def test_lock_released_after_failure():
    client, _ = make_client(error=RuntimeError("boom"))
    service = AdviceService(client, make_settings())
    assert asyncio.run(service.get_advice(TRANSACTIONS, ACCOUNTS, "2024-03")) == ERROR_FALLBACK
    assert not service.busy
