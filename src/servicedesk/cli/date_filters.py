"""CLI helpers for date range resolution."""

from datetime import date

import click

from servicedesk.utils.date_parser import get_date_range, parse_date

PERIOD_FLAGS_HELP = "--this-month, --last-month, --this-year, --last-year, --last-6-months"


def period_options(command):
    """Add the mutually exclusive period flags to a command."""
    for flag, period in reversed(
        [
            ("--this-month", "this-month"),
            ("--last-month", "last-month"),
            ("--this-year", "this-year"),
            ("--last-year", "last-year"),
            ("--last-6-months", "last-6-months"),
        ]
    ):
        command = click.option(
            flag, period.replace("-", "_"), is_flag=True, help=f"Limit to {period.replace('-', ' ')}"
        )(command)
    return command


def collect_period_flags(**flags: bool) -> dict[str, bool]:
    """Map click's flag parameters back to period names."""
    return {name.replace("_", "-"): bool(value) for name, value in flags.items()}


def resolve_cli_date_range(
    ctx,
    *,
    start_date: str | None,
    end_date: str | None,
    period_flags: dict[str, bool],
) -> tuple[date | None, date | None]:
    """Resolve CLI date range from period flags or explicit dates."""
    period_count = sum(1 for is_set in period_flags.values() if is_set)

    if period_count > 1:
        click.echo(
            f"Error: Only one period option ({PERIOD_FLAGS_HELP}) can be specified at a time.",
            err=True,
        )
        ctx.exit(1)

    if period_count > 0 and (start_date or end_date):
        click.echo(
            "Error: Period options cannot be combined with --start-date or --end-date.",
            err=True,
        )
        ctx.exit(1)

    start = None
    end = None

    if period_count == 1:
        period = next(name for name, is_set in period_flags.items() if is_set)
        start, end = get_date_range(period)
    else:
        if start_date:
            try:
                start = parse_date(start_date)
            except ValueError as e:
                click.echo(f"Error: Invalid start date: {e}", err=True)
                ctx.exit(1)

        if end_date:
            try:
                end = parse_date(end_date)
            except ValueError as e:
                click.echo(f"Error: Invalid end date: {e}", err=True)
                ctx.exit(1)

    if start is not None and end is not None and start > end:
        click.echo("Error: Start date is after end date.", err=True)
        ctx.exit(1)

    return start, end
