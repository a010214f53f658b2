"""Sign-up, sign-in and password commands."""

import click

from servicedesk.cli.error_handling import handle_domain_error
from servicedesk.cli.session import get_session_context
from servicedesk.domain.errors import DomainError


@click.group()
def auth_group():
    """Sign up, sign in and manage your password."""
    pass


@auth_group.command("signup")
@click.argument("email")
@click.option("--password", prompt=True, hide_input=True, confirmation_prompt=True, help="Password (6 characters or more)")
@click.option("--company", "company_name", help="Company name (defaults to the email address)")
@click.pass_context
def signup(ctx, email: str, password: str, company_name: str | None):
    """Register a company and sign in as its first user.

    Examples:
        servicedesk auth signup ana@example.com --company "Frio Bom"
    """
    session = get_session_context(ctx)
    try:
        user = session.sign_up(email, password, company_name=company_name)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Signed up as {user.email} (company ID: {user.company_id})")


@auth_group.command("login")
@click.argument("email")
@click.option("--password", prompt=True, hide_input=True, help="Password")
@click.pass_context
def login(ctx, email: str, password: str):
    """Sign in with email and password."""
    session = get_session_context(ctx)
    try:
        user = session.sign_in(email, password)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Signed in as {user.email}")


@auth_group.command("logout")
@click.pass_context
def logout(ctx):
    """Sign out and forget the stored session."""
    session = get_session_context(ctx)
    was_signed_in = session.is_authenticated
    session.sign_out()
    click.echo("Signed out." if was_signed_in else "Not signed in.")


@auth_group.command("whoami")
@click.pass_context
def whoami(ctx):
    """Show the signed-in user."""
    session = get_session_context(ctx)
    if session.user is None:
        click.echo("Not signed in.")
        return

    company = ctx.obj["db"].get_company(session.user.company_id)
    click.echo(f"Email:   {session.user.email}")
    click.echo(f"Company: {company.name if company else '?'} (ID: {session.user.company_id})")
    click.echo(f"Session: {session.session.kind.value}")


@auth_group.command("reset-password")
@click.argument("email")
@click.pass_context
def reset_password(ctx, email: str):
    """Issue a password recovery token.

    The token stands in for the recovery email; use it with 'auth recover'.
    """
    session = get_session_context(ctx)
    try:
        token = session.reset_password(email)
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo("If the address is registered, a recovery token has been issued.")
    if token is not None:
        click.echo(f"Recovery token: {token}")


@auth_group.command("recover")
@click.argument("token")
@click.option("--password", prompt="New password", hide_input=True, confirmation_prompt=True, help="New password")
@click.pass_context
def recover(ctx, token: str, password: str):
    """Set a new password using a recovery token."""
    session = get_session_context(ctx)
    try:
        session.recover(token)
        user = session.update_password(password)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Password updated. Signed in as {user.email}")


@auth_group.command("update-password")
@click.option("--password", prompt="New password", hide_input=True, confirmation_prompt=True, help="New password")
@click.pass_context
def update_password(ctx, password: str):
    """Change the password of the signed-in user."""
    session = get_session_context(ctx)
    try:
        session.update_password(password)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo("Password updated.")


def register_commands(cli):
    """Register auth commands with main CLI."""
    cli.add_command(auth_group, name="auth")
