"""CLI adapter to record valuations and inspect family aggregates.

Subcommands:

* ``create``: record a reported balance for an account.
* ``update``: edit an existing valuation entry.
* ``delete``: delete an entry and request a full resync.
* ``net-worth``: print the net worth series of a family.
* ``totals``: print assets and liabilities of a family.
"""

import argparse
from collections.abc import Sequence
from datetime import date

from household_ledger.domain.exceptions import NotFoundError
from household_ledger.domain.models import Period, ReconciliationResult
from household_ledger.infrastructure.container import (
    build_account_totals_use_case,
    build_create_valuation_use_case,
    build_database_adapter,
    build_delete_entry_use_case,
    build_net_worth_series_use_case,
    build_update_valuation_use_case,
)
from household_ledger.infrastructure.logging.logger import (
    get_app_logger,
    get_usage_logger,
)


PERIOD_CHOICES = {
    "30d": Period.last_30_days,
    "90d": Period.last_90_days,
    "365d": Period.last_365_days,
    "mtd": Period.current_month,
    "ytd": Period.year_to_date,
}


def build_parser() -> argparse.ArgumentParser:
    """Return the argument parser for all subcommands."""
    parser = argparse.ArgumentParser(
        prog="household-ledger",
        description="Reconcile account balances and report net worth.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    create = subparsers.add_parser("create", help="Record a valuation")
    create.add_argument("account_id")
    create.add_argument("balance")
    create.add_argument("-d", "--date", default=None)
    create.add_argument("-c", "--currency", default=None)
    create.add_argument("-r", "--exchange-rate", default=None)
    create.add_argument("--dry-run", action="store_true")

    update = subparsers.add_parser("update", help="Edit a valuation entry")
    update.add_argument("entry_id")
    update.add_argument("-a", "--amount", default=None)
    update.add_argument("-d", "--date", default=None)
    update.add_argument("-c", "--currency", default=None)
    update.add_argument("-r", "--exchange-rate", default=None)
    update.add_argument("-n", "--notes", default=None)
    update.add_argument("--dry-run", action="store_true")

    delete = subparsers.add_parser("delete", help="Delete an entry")
    delete.add_argument("entry_id")

    net_worth = subparsers.add_parser("net-worth", help="Net worth series")
    net_worth.add_argument("family_id")
    net_worth.add_argument(
        "-p",
        "--period",
        choices=sorted(PERIOD_CHOICES),
        default="30d",
    )
    net_worth.add_argument("--start", default=None)
    net_worth.add_argument("--end", default=None)

    totals = subparsers.add_parser("totals", help="Account totals")
    totals.add_argument("family_id")
    return parser


def _resolve_period(args, today: date) -> Period:
    if args.start or args.end:
        end = date.fromisoformat(args.end) if args.end else today
        start = date.fromisoformat(args.start) if args.start else end
        return Period.custom(start, end)
    return PERIOD_CHOICES[args.period](today)


def _print_result(result: ReconciliationResult) -> int:
    if not result.success:
        print(f"Error: {result.error_message}")
        return 2 if result.not_found else 1
    entry = result.entry
    prefix = "Dry run" if result.dry_run else "Saved"
    if not result.changed and not result.dry_run:
        prefix = "Unchanged"
    print(
        f"{prefix}: {entry.name} {entry.date} {entry.amount} {entry.currency}"
        + (f" @ {entry.exchange_rate}" if entry.exchange_rate is not None else "")
    )
    preview = result.preview
    if preview is not None:
        converted = preview.converted_balance
        print(f"Converted: {converted.amount} {converted.currency}")
        if preview.change is not None:
            print(f"Change: {preview.change.amount} {preview.change.currency}")
    return 0


def _run_create(args, db_adapter) -> int:
    use_case = build_create_valuation_use_case(db_adapter)
    result = use_case.execute(
        args.account_id,
        balance=args.balance,
        date=args.date or date.today(),
        currency=args.currency,
        exchange_rate=args.exchange_rate,
        dry_run=args.dry_run,
    )
    if result.success and not args.dry_run:
        get_usage_logger().info(
            f"Valuation recorded for account {args.account_id}"
        )
    return _print_result(result)


def _run_update(args, db_adapter) -> int:
    use_case = build_update_valuation_use_case(db_adapter)
    result = use_case.execute(
        args.entry_id,
        amount=args.amount,
        date=args.date,
        currency=args.currency,
        exchange_rate=args.exchange_rate,
        notes=args.notes,
        dry_run=args.dry_run,
    )
    if result.success and not args.dry_run:
        get_usage_logger().info(f"Valuation {args.entry_id} updated")
    return _print_result(result)


def _run_delete(args, db_adapter) -> int:
    use_case = build_delete_entry_use_case(db_adapter)
    try:
        entry = use_case.execute(args.entry_id)
    except NotFoundError as exc:
        print(f"Error: {exc}")
        return 2
    get_usage_logger().info(f"Entry {entry.id} deleted")
    print(f"Deleted: {entry.name} {entry.date} {entry.amount} {entry.currency}")
    return 0


def _run_net_worth(args, db_adapter) -> int:
    use_case = build_net_worth_series_use_case(db_adapter)
    period = _resolve_period(args, date.today())
    try:
        series = use_case.execute(args.family_id, period)
    except NotFoundError as exc:
        print(f"Error: {exc}")
        return 2
    for point in series.points:
        print(f"{point.date}\t{point.balance.amount}")
    trend = series.trend
    if trend is not None:
        percent = f" ({trend.percent}%)" if trend.percent is not None else ""
        print(f"Change: {trend.value.amount} {series.currency}{percent}")
    return 0


def _run_totals(args, db_adapter) -> int:
    use_case = build_account_totals_use_case(db_adapter)
    try:
        view = use_case.execute(args.family_id)
    except NotFoundError as exc:
        print(f"Error: {exc}")
        return 2
    for title, rows, total in (
        ("Assets", view.asset_accounts, view.asset_total),
        ("Liabilities", view.liability_accounts, view.liability_total),
    ):
        print(f"{title}: {total.amount} {total.currency}")
        for row in rows:
            syncing = " (syncing)" if row.is_syncing else ""
            print(
                f"  {row.name}\t{row.converted_balance.amount} "
                f"{row.converted_balance.currency}{syncing}"
            )
    return 0


COMMANDS = {
    "create": _run_create,
    "update": _run_update,
    "delete": _run_delete,
    "net-worth": _run_net_worth,
    "totals": _run_totals,
}


def main(argv: Sequence[str] | None = None) -> int:
    """Parse arguments and run the selected subcommand.

    Returns:
        int: Process exit code; 1 for validation errors, 2 for unknown ids.
    """
    args = build_parser().parse_args(argv)
    logger = get_app_logger()
    logger.debug(f"Running command {args.command}")
    db_adapter = build_database_adapter()
    return COMMANDS[args.command](args, db_adapter)


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
