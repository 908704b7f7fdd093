"""Financial context aggregation for improvement plan prompts"""

from datetime import datetime
from typing import List
from credit_health.domain.models import Account, Budget, FinancialContext, Transaction
from credit_health.utils.date_utils import to_naive_utc, trailing_window_start, utc_now

RECENT_SPENDING_DAYS = 30


def build_financial_context(
    accounts: List[Account],
    budgets: List[Budget],
    transactions: List[Transaction],
    now: datetime | None = None,
) -> FinancialContext:
    """
    Summarize a user's linked accounts, budgets and recent activity.

    Requirements:
    - Total balance across all linked accounts
    - Total budget allocation
    - Absolute spending over the trailing 30 days (strictly after now - 30x24h)
    - Empty collections report 0, never omitted
    """
    window_start = trailing_window_start(now or utc_now(), RECENT_SPENDING_DAYS)

    total_balance = sum(acc.balance for acc in accounts)
    monthly_budget = sum(budget.amount for budget in budgets)
    recent_spending = sum(
        abs(t.amount) for t in transactions
        if to_naive_utc(t.date) > window_start
    )

    return FinancialContext(
        total_balance=float(total_balance),
        monthly_budget=float(monthly_budget),
        recent_spending=float(recent_spending),
        connected_accounts=len(accounts),
    )
