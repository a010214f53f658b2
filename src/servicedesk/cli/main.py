"""Main CLI entry point."""

import logging

import click

from servicedesk import __version__
from servicedesk.cli.session import TokenFileWriter, read_token
from servicedesk.config import load_settings
from servicedesk.database.factories import create_sqlite_database
from servicedesk.domain.auth import AuthService, SessionContext
from servicedesk.logging_config import setup_logging, teardown_logging

# Import and register all commands at module level
from servicedesk.cli.commands import (
    auth,
    client,
    collaborator,
    category,
    inventory,
    service,
    financial,
    dashboard,
)

logger = logging.getLogger(__name__)


@click.group()
@click.version_option(__version__, prog_name="servicedesk")
@click.option(
    "--db-path",
    type=click.Path(dir_okay=False),
    help="Path to database file (overrides SERVICEDESK_DB_PATH environment variable)",
    envvar="SERVICEDESK_DB_PATH",
)
@click.option(
    "--session-file",
    type=click.Path(dir_okay=False),
    help="Where the session token is kept (overrides SERVICEDESK_SESSION_FILE)",
    envvar="SERVICEDESK_SESSION_FILE",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    help="Log level (overrides SERVICEDESK_LOG_LEVEL, default WARNING)",
    envvar="SERVICEDESK_LOG_LEVEL",
)
@click.pass_context
def cli(ctx, db_path: str | None, session_file: str | None, log_level: str | None):
    """Servicedesk - clients, service tickets and revenue for service companies.

    Sign up or log in with the 'auth' commands first; every other command
    works on the data of your company.
    """
    ctx.ensure_object(dict)

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is None:
        return

    settings = load_settings(database_path=db_path, session_file=session_file, log_level=log_level)
    setup_logging(settings.log_level)
    ctx.call_on_close(teardown_logging)

    db = create_sqlite_database(database_path=settings.database_path)
    db.connect()
    db.initialize_schema()
    ctx.call_on_close(db.disconnect)

    session = SessionContext(AuthService(db, bcrypt_rounds=settings.bcrypt_rounds))
    session.subscribe(TokenFileWriter(settings.session_file))
    ctx.call_on_close(session.close)
    session.start(read_token(settings.session_file))
    logger.debug("Started with database %s", settings.database_path)

    ctx.obj["settings"] = settings
    ctx.obj["db"] = db
    ctx.obj["session"] = session


# Register all commands
auth.register_commands(cli)
client.register_commands(cli)
collaborator.register_commands(cli)
category.register_commands(cli)
inventory.register_commands(cli)
service.register_commands(cli)
financial.register_commands(cli)
dashboard.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
