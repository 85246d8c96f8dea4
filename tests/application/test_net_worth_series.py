"""Tests for the net worth series builder."""

from datetime import date
from decimal import Decimal

import pytest

from household_ledger.application.use_cases.get_net_worth_series import (
    GetNetWorthSeriesUseCase,
)
from household_ledger.domain.exceptions import NotFoundError
from household_ledger.domain.models import Family, Money, Period


PERIOD = Period.custom(date(2026, 10, 1), date(2026, 10, 12))


@pytest.fixture
def use_case(repository, rate_provider, cache, logger, clock):
    return GetNetWorthSeriesUseCase(
        repository,
        rate_provider,
        cache,
        logger=logger,
        clock=clock,
    )


def _balances(series) -> dict[date, Decimal]:
    return {point.date: point.balance.amount for point in series.points}


def test_series_sums_assets_and_subtracts_liabilities(
    use_case,
    repository,
    make_account,
    make_entry,
) -> None:
    repository.add_account(make_account("checking"))
    repository.add_account(make_account("card", accountable_type="CreditCard"))
    repository.add_entry(
        make_entry(
            "v-checking",
            date(2026, 10, 1),
            "1000",
            account_id="checking",
            valuation=True,
        )
    )
    repository.add_entry(
        make_entry("t-salary", date(2026, 10, 10), "50", account_id="checking")
    )
    repository.add_entry(
        make_entry(
            "v-card",
            date(2026, 10, 5),
            "200",
            account_id="card",
            valuation=True,
        )
    )

    series = use_case.execute("fam-1", PERIOD)

    balances = _balances(series)
    assert len(series.points) == 12
    assert balances[date(2026, 10, 1)] == Decimal("1000")
    assert balances[date(2026, 10, 5)] == Decimal("800")
    assert balances[date(2026, 10, 9)] == Decimal("800")
    assert balances[date(2026, 10, 10)] == Decimal("850")
    assert balances[date(2026, 10, 12)] == Decimal("850")
    assert series.currency == "USD"
    assert series.trend.value == Money.of("-150", "USD")


def test_series_skips_hidden_accounts(
    use_case,
    repository,
    make_account,
    make_entry,
) -> None:
    repository.add_account(make_account("closed", status="pending_deletion"))
    repository.add_entry(
        make_entry("v", date(2026, 10, 1), "999", account_id="closed", valuation=True)
    )

    series = use_case.execute("fam-1", PERIOD)

    assert set(_balances(series).values()) == {Decimal("0")}


def test_series_converts_with_manual_rates(
    repository,
    rate_provider,
    cache,
    logger,
    clock,
    make_account,
    make_entry,
) -> None:
    """Entries without their own rate reuse the account's manual rate."""
    repository.add_family(Family(id="fam-eu", name="Eu", currency="EUR"))
    repository.add_account(
        make_account("naira", currency="NGN", family_id="fam-eu")
    )
    repository.add_entry(
        make_entry(
            "v-naira",
            date(2026, 10, 1),
            "10000",
            account_id="naira",
            currency="NGN",
            valuation=True,
            rate="0.000556",
        )
    )
    repository.add_entry(
        make_entry(
            "t-naira",
            date(2026, 10, 2),
            "1000",
            account_id="naira",
            currency="NGN",
        )
    )
    use_case = GetNetWorthSeriesUseCase(
        repository,
        rate_provider,
        cache,
        logger=logger,
        clock=clock,
    )

    series = use_case.execute("fam-eu", PERIOD)

    balances = _balances(series)
    assert balances[date(2026, 10, 1)] == Decimal("5.56")
    assert balances[date(2026, 10, 2)] == Decimal("6.12")
    assert series.currency == "EUR"
    rate_provider.find_rate.assert_not_called()


def test_series_defaults_to_last_30_days(use_case, now) -> None:
    series = use_case.execute("fam-1")

    assert series.period.end_date == now.date()
    assert series.points[0].date == date(2026, 9, 19)
    assert series.points[-1].date == date(2026, 10, 19)


def test_series_is_cached_per_period(
    use_case,
    repository,
    cache,
    make_account,
    make_entry,
    now,
) -> None:
    repository.add_account(make_account("checking"))
    repository.add_entry(
        make_entry("v", date(2026, 10, 1), "10", account_id="checking", valuation=True)
    )

    first = use_case.execute("fam-1", PERIOD)
    second = use_case.execute("fam-1", PERIOD)

    assert first is second
    stamp = int(now.timestamp())
    assert cache.computed == [
        "family:fam-1:balance_sheet_net_worth_series:2026-10-01:2026-10-12:"
        f"manual_exchange_rates_0:entries_{stamp}:v2_bucket_{stamp}"
    ]


def test_unknown_family_raises(use_case) -> None:
    with pytest.raises(NotFoundError):
        use_case.execute("fam-unknown", PERIOD)
