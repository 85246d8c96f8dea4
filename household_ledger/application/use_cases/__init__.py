"""Application use cases package."""

from .exchange_rates import ExchangeRateResolver
from .get_account_totals import AccountTotals, GetAccountTotalsUseCase
from .get_net_worth_series import GetNetWorthSeriesUseCase, NetWorthSeriesBuilder
from .manage_valuations import (
    CreateValuationUseCase,
    DeleteEntryUseCase,
    UpdateValuationEntryUseCase,
)
from .reconcile_balance import ReconcileableAccount, ReconciliationManager

__all__ = [
    "ExchangeRateResolver",
    "AccountTotals",
    "GetAccountTotalsUseCase",
    "GetNetWorthSeriesUseCase",
    "NetWorthSeriesBuilder",
    "CreateValuationUseCase",
    "DeleteEntryUseCase",
    "UpdateValuationEntryUseCase",
    "ReconcileableAccount",
    "ReconciliationManager",
]
