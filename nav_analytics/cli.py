"""Command-line entrypoint for NAV analytics."""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from nav_analytics.application.use_cases import (
    ComputeReturnsUseCase,
    GetSchemeUseCase,
    NavAnalyticsContext,
    SearchSchemesUseCase,
    SimulateLumpsumUseCase,
    SimulateSipUseCase,
)
from nav_analytics.domain.errors import NavAnalyticsError, NoSuccessfulInvestments
from nav_analytics.domain.models import InvestmentSchedule
from nav_analytics.infrastructure.repositories.file_repository import FileNavSeriesRepository
from nav_analytics.infrastructure.repositories.mfapi_repository import MfapiNavRepository
from nav_analytics.infrastructure.storage.ttl_cache import InMemoryTtlCache
from nav_analytics.log import setup_logging
from nav_analytics.presentation.report import (
    events_to_rows,
    lumpsum_rows,
    render_csv,
    returns_rows,
    review_warning,
    sip_rows,
)


def parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Mutual fund NAV returns, SIP and lumpsum calculator")
    parser.add_argument("--file", type=Path, help="Read NAV history from a CSV/Excel file instead of mfapi.in")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    commands = parser.add_subparsers(dest="command", required=True)

    schemes = commands.add_parser("schemes", help="Search scheme names")
    schemes.add_argument("--search", default="")
    schemes.add_argument("--limit", type=int, default=20)

    scheme = commands.add_parser("scheme", help="Show scheme details")
    scheme.add_argument("code")

    returns = commands.add_parser("returns", help="Point-to-point returns")
    returns.add_argument("code")
    returns.add_argument("--period", choices=["1m", "3m", "6m", "1y"])
    returns.add_argument("--from", dest="from_date")
    returns.add_argument("--to", dest="to_date")

    sip = commands.add_parser("sip", help="Simulate a systematic investment plan")
    sip.add_argument("code")
    sip.add_argument("--amount", required=True)
    sip.add_argument("--frequency", default="monthly", choices=["daily", "weekly", "monthly"])
    sip.add_argument("--from", dest="from_date", required=True)
    sip.add_argument("--to", dest="to_date", required=True)
    sip.add_argument("--csv", type=Path, help="Write the sampled investment log to this CSV file")

    lumpsum = commands.add_parser("lumpsum", help="Simulate a one-time investment")
    lumpsum.add_argument("code")
    lumpsum.add_argument("--amount", required=True)
    lumpsum.add_argument("--date", dest="invest_date", required=True)

    return parser.parse_args(argv)


def build_context(args: argparse.Namespace) -> NavAnalyticsContext:
    if args.file is not None:
        code = getattr(args, "code", "0")
        repository = FileNavSeriesRepository(args.file, code=code)
    else:
        repository = MfapiNavRepository()
    return NavAnalyticsContext(repository=repository, cache=InMemoryTtlCache())


def _print_rows(rows: list[tuple[str, str]]) -> None:
    width = max(len(label) for label, _ in rows)
    for label, value in rows:
        print(f"{label.ljust(width)}  {value}")


def _run(args: argparse.Namespace, context: NavAnalyticsContext) -> int:
    if args.command == "schemes":
        response = SearchSchemesUseCase(context).execute(search=args.search, limit=args.limit)
        for item in response.schemes:
            print(f"{item.code}\t{item.name}")
        if response.stale:
            print("(stale scheme list: provider unavailable)")
        return 0

    if args.command == "scheme":
        details = GetSchemeUseCase(context).execute(args.code).details
        latest = details.series.latest
        _print_rows(
            [
                ("Code", details.meta.code),
                ("Name", details.meta.name),
                ("Fund house", details.meta.fund_house),
                ("Category", details.meta.category),
                ("Observations", str(len(details.series))),
                ("First NAV date", details.series.first_date.isoformat() if latest else "n/a"),
                ("Latest NAV", f"{latest.nav} ({latest.nav_date.isoformat()})" if latest else "n/a"),
            ]
        )
        return 0

    if args.command == "returns":
        response = ComputeReturnsUseCase(context).execute(
            args.code, period=args.period, from_date=args.from_date, to_date=args.to_date
        )
        print(f"Returns for {response.scheme_name}")
        _print_rows(returns_rows(response.result))
        return 0

    if args.command == "sip":
        schedule = InvestmentSchedule.create(args.amount, args.frequency, args.from_date, args.to_date)
        response = SimulateSipUseCase(context).execute(args.code, schedule)
        print(f"SIP for {response.scheme_name}")
        _print_rows(sip_rows(response.result))
        warning = review_warning(response.result)
        if warning:
            print(f"\nWARNING: {warning}")
        if args.csv is not None:
            args.csv.write_bytes(render_csv(response.result.investment_sample))
        return 0

    if args.command == "lumpsum":
        response = SimulateLumpsumUseCase(context).execute(args.code, args.amount, args.invest_date)
        print(f"Lumpsum for {response.scheme_name}")
        _print_rows(lumpsum_rows(response.result))
        return 0

    raise ValueError(f"Unknown command: {args.command}")


def main(argv: list[str] | None = None) -> int:
    args = parse_args(sys.argv[1:] if argv is None else argv)
    setup_logging(logging.DEBUG if args.verbose else None)
    context = build_context(args)
    try:
        return _run(args, context)
    except NoSuccessfulInvestments as exc:
        print(f"Error: {exc.message}")
        for row in events_to_rows(exc.events):
            print(f"- {row['date']}: {row['status']} ({row['reason']})")
        if exc.hint():
            print(exc.hint())
        return 1
    except NavAnalyticsError as exc:
        print(f"Error: {exc.message}")
        if exc.hint():
            print(exc.hint())
        return 1


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
