"""Friendly monthly advice from the Gemini API.

The numbers sent to the model are computed here; the reply is treated as an
opaque display string. Any failure becomes one of the fallback messages so
the dashboard never sees an exception from this module.
"""
import asyncio
import logging
import threading
from typing import Iterable, Optional

from google import genai

from tracker.config import Settings, settings as default_settings
from tracker.dates import shift_month
from tracker.domain import (
    EXPENSE,
    INCOME,
    INVESTMENT_INCOME,
    Account,
    MonthlyComparison,
    Transaction,
)

logger = logging.getLogger(__name__)

EMPTY_FALLBACK = "Your little helper is still counting, check back in a moment! ✨"
ERROR_FALLBACK = "Your little helper dozed off for a second. Let's keep saving together! 🍵"


def _month_total(trans: Iterable[Transaction], month: str, type_: str) -> float:
    return sum(t.amount for t in trans if t.date.startswith(month) and t.type == type_)


def monthly_comparison(trans: Iterable[Transaction], current_month: str) -> MonthlyComparison:
    """Shape this month vs last month figures for the prompt.

    The previous month is found by calendar subtraction on the YYYY-MM key.
    """
    trans = tuple(trans)
    last_month = shift_month(current_month, -1)
    last_year = shift_month(current_month, -12)

    income = _month_total(trans, current_month, INCOME)
    expense = _month_total(trans, current_month, EXPENSE)
    last_surplus = _month_total(trans, last_month, INCOME) - _month_total(trans, last_month, EXPENSE)
    investment = sum(
        t.amount for t in trans
        if t.date.startswith(current_month) and t.main_category == INVESTMENT_INCOME
    )
    last_year_income = _month_total(trans, last_year, INCOME)

    return MonthlyComparison(
        current_month=current_month,
        current_month_income=income,
        current_month_expense=expense,
        current_month_surplus=income - expense,
        last_month=last_month,
        last_month_surplus=last_surplus,
        current_month_investment_income=investment,
        last_year_same_month_income=last_year_income or None,
    )


def build_prompt(c: MonthlyComparison, accounts: Iterable[Account]) -> str:
    names = ", ".join(a.name for a in accounts) or "none yet"
    lines = [
        "You are an adorable, warm and slightly playful personal finance buddy.",
        f"Here is my financial report for {c.current_month}:",
        f"- Total income this month: {c.current_month_income:,.0f}",
        f"- Total expenses this month: {c.current_month_expense:,.0f}",
        f"- Investment income this month: {c.current_month_investment_income:,.0f}",
        f"- Surplus last month ({c.last_month}): {c.last_month_surplus:,.0f}",
        f"- Surplus this month: {c.current_month_surplus:,.0f}",
    ]
    if c.last_year_same_month_income is not None:
        lines.append(f"- Income in the same month last year: {c.last_year_same_month_income:,.0f}")
    lines += [
        f"- My virtual accounts: {names}",
        "",
        "Give me three conversational observations, one per line:",
        "1. Compare this month's surplus and spending with last month.",
        "2. Cheer on my investment income.",
        "3. Point out unusual spending or something worth praising.",
        "",
        "Sound like a good friend, keep each line under 40 words and use plenty of emoji.",
    ]
    return "\n".join(lines)


class AdviceService:
    """Runs advice requests one at a time against a Gemini client.

    One instance is shared by every Streamlit session, each calling
    asyncio.run with a fresh event loop from its own thread.
    """

    def __init__(self, client: Optional[genai.Client] = None, config: Optional[Settings] = None):
        self.config = config or default_settings
        self._client = client
        self._lock = threading.Lock()

    @property
    def client(self) -> Optional[genai.Client]:
        if self._client is None and self.config.advice_enabled:
            self._client = genai.Client(api_key=self.config.GEMINI_API_KEY)
        return self._client

    @property
    def busy(self) -> bool:
        return self._lock.locked()

    async def _generate(self, prompt: str) -> str:
        response = await self.client.aio.models.generate_content(
            model=self.config.ADVICE_MODEL,
            contents=prompt,
            config={"thinking_config": {"thinking_budget": 0}},
        )
        return (response.text or "").strip()

    async def get_advice(
        self,
        trans: Iterable[Transaction],
        accounts: Iterable[Account],
        current_month: str,
    ) -> str:
        """Return advice text, or a fallback message; never raises.

        Only one request runs at a time across all threads and event loops.
        A call made while another is in flight gets EMPTY_FALLBACK.
        """
        accounts = tuple(accounts)
        prompt = build_prompt(monthly_comparison(trans, current_month), accounts)

        if not self._lock.acquire(blocking=False):
            logger.info("Advice request already running, skipping")
            return EMPTY_FALLBACK
        try:
            if self.client is None:
                logger.warning("GEMINI_API_KEY is not set, skipping advice request")
                return ERROR_FALLBACK
            text = await asyncio.wait_for(self._generate(prompt), self.config.ADVICE_TIMEOUT)
        except Exception:
            logger.exception("Advice request failed")
            return ERROR_FALLBACK
        finally:
            self._lock.release()
        return text or EMPTY_FALLBACK


async def get_advice(
    trans: Iterable[Transaction],
    accounts: Iterable[Account],
    current_month: str,
    client: Optional[genai.Client] = None,
) -> str:
    return await AdviceService(client).get_advice(trans, accounts, current_month)
