"""Dashboard command."""

import click

from servicedesk.cli.date_filters import collect_period_flags, period_options, resolve_cli_date_range
from servicedesk.cli.error_handling import handle_domain_error
from servicedesk.cli.session import require_company_id
from servicedesk.domain.dashboard import DashboardService
from servicedesk.domain.errors import DomainError
from servicedesk.utils.amount_parser import format_amount
from servicedesk.utils.date_parser import parse_date

BAR_WIDTH = 30


def _bar(value, largest) -> str:
    if largest <= 0:
        return ""
    return "#" * int(BAR_WIDTH * value / largest)


@click.command("dashboard")
@click.option("--start-date", help="Start date (defaults to the first day of the month 5 months ago)")
@click.option("--end-date", help="End date (defaults to the last day of this month)")
@click.option("--as-of", help="Reference date for the default range (defaults to today)")
@period_options
@click.pass_context
def dashboard(ctx, start_date: str | None, end_date: str | None, as_of: str | None, **periods: bool):
    """Show revenue totals, the monthly series and revenue per service type."""
    service = DashboardService(ctx.obj["db"], require_company_id(ctx))

    today = None
    if as_of:
        try:
            today = parse_date(as_of)
        except ValueError as e:
            click.echo(f"Error: Invalid date: {e}", err=True)
            ctx.exit(1)

    start, end = resolve_cli_date_range(
        ctx, start_date=start_date, end_date=end_date, period_flags=collect_period_flags(**periods)
    )

    try:
        report = service.build_report(start_date=start, end_date=end, today=today)
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"\nDashboard {report.start_date} to {report.end_date}")
    click.echo("=" * 60)
    click.echo(f"Revenue:  {format_amount(report.total_revenue)} ({report.entry_count} entries)")
    click.echo(f"Services: {report.service_count}")
    click.echo(f"Clients:  {report.client_count}")

    click.echo("\nMonthly revenue:")
    largest = max((m.value for m in report.monthly), default=0)
    for month in report.monthly:
        click.echo(f"  {month.label:9s} {format_amount(month.value):>14s} {_bar(month.value, largest)}")

    click.echo("\nRevenue by service type:")
    if not report.by_category:
        click.echo("  No entries in this period.")
    for category in report.by_category:
        click.echo(f"  {category.name:25s} {format_amount(category.value):>14s}")


def register_commands(cli):
    """Register dashboard command with main CLI."""
    cli.add_command(dashboard)
