"""Session token persistence and identity helpers for commands."""

import logging
import os
from pathlib import Path
from typing import Optional

import click

from servicedesk.cli.error_handling import handle_domain_error
from servicedesk.domain.auth import SessionContext
from servicedesk.domain.entities import AuthEvent, AuthSession
from servicedesk.domain.errors import AuthenticationError

logger = logging.getLogger(__name__)


def read_token(path: str) -> Optional[str]:
    """Return the token stored in ``path``, or None."""
    token_file = Path(path)
    if not token_file.is_file():
        return None
    token = token_file.read_text(encoding="utf-8").strip()
    return token or None


def write_token(path: str, token: str) -> None:
    """Store ``token`` in ``path``, readable only by the owner."""
    token_file = Path(path)
    token_file.parent.mkdir(parents=True, exist_ok=True)
    token_file.touch(mode=0o600, exist_ok=True)
    os.chmod(token_file, 0o600)
    token_file.write_text(token + "\n", encoding="utf-8")


def clear_token(path: str) -> None:
    Path(path).unlink(missing_ok=True)


class TokenFileWriter:
    """SessionContext subscriber that keeps the session file in sync."""

    def __init__(self, path: str):
        self.path = path

    def __call__(self, event: AuthEvent, session: Optional[AuthSession]) -> None:
        if session is None:
            clear_token(self.path)
        else:
            write_token(self.path, session.token)
        logger.debug("Session file updated after %s", event.value)


def get_session_context(ctx: click.Context) -> SessionContext:
    return ctx.obj["session"]


def require_company_id(ctx: click.Context) -> int:
    """Company of the signed-in user, or exit with an error."""
    try:
        return get_session_context(ctx).require_company_id()
    except AuthenticationError as e:
        handle_domain_error(ctx, e)
