"""Application use cases package."""

from .get_monthly_summary import GetMonthlySummaryUseCase
from .get_yearly_series import GetYearlySeriesUseCase
from .list_transactions import ListTransactionsUseCase
from .live_summary import (
    CurrentMonthScope,
    LiveSummaryController,
    MonthScope,
    SubscriptionState,
    SummaryUpdate,
    YearScope,
)
from .submit_transaction import (
    SubmitTransactionResult,
    SubmitTransactionUseCase,
)

__all__ = [
    "GetMonthlySummaryUseCase",
    "GetYearlySeriesUseCase",
    "ListTransactionsUseCase",
    "LiveSummaryController",
    "SubscriptionState",
    "SummaryUpdate",
    "CurrentMonthScope",
    "MonthScope",
    "YearScope",
    "SubmitTransactionUseCase",
    "SubmitTransactionResult",
]
