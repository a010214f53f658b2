"""Authentication and the session context.

``AuthService`` issues, checks and revokes opaque session tokens backed by
bcrypt password hashes. ``SessionContext`` holds the signed-in user of one
running application and notifies subscribers of every state change.
"""

import logging
import re
import secrets
from typing import TYPE_CHECKING, Callable, Optional

import bcrypt

from servicedesk.config import get_bcrypt_rounds
from servicedesk.domain.entities import AuthEvent, AuthSession, SessionKind, User
from servicedesk.domain.errors import AuthenticationError, ConflictError, ValidationError

if TYPE_CHECKING:
    from servicedesk.database.base import Database

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+$")
MIN_PASSWORD_LENGTH = 6
# bcrypt only looks at the first 72 bytes
MAX_PASSWORD_BYTES = 72
TOKEN_BYTES = 32

INVALID_CREDENTIALS = "Invalid login credentials"


def hash_password(password: str, rounds: int) -> str:
    """Hash a password with bcrypt."""
    salt = bcrypt.gensalt(rounds=rounds)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Check a password against a bcrypt hash."""
    if not password_hash.startswith(("$2a$", "$2b$", "$2y$")):
        return False
    return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))


def validate_email(email: Optional[str]) -> str:
    """Normalize an email address (stripped, lower case)."""
    text = (email or "").strip().lower()
    if not EMAIL_PATTERN.match(text):
        raise ValidationError("Invalid email address", field="email")
    return text


def validate_password(password: Optional[str]) -> str:
    if password is None or len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(
            f"Password must have at least {MIN_PASSWORD_LENGTH} characters", field="password"
        )
    if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValidationError(
            f"Password must be at most {MAX_PASSWORD_BYTES} bytes long", field="password"
        )
    return password


class AuthService:
    """Identity provider backed by the users and auth_sessions tables."""

    def __init__(self, db: "Database", bcrypt_rounds: Optional[int] = None):
        """Initialize auth service.

        Args:
            db: Database instance
            bcrypt_rounds: Cost factor (defaults to SERVICEDESK_BCRYPT_ROUNDS or 12)
        """
        self.db = db
        self.bcrypt_rounds = bcrypt_rounds or get_bcrypt_rounds()

    def sign_up(self, email: str, password: str, company_name: Optional[str] = None) -> User:
        """Register a company and its first user.

        Args:
            email: Login email (case-insensitive, unique)
            password: Plain password, 6 to 72 bytes
            company_name: Defaults to the email address

        Returns:
            The new user

        Raises:
            ValidationError: If the email or password is invalid
            ConflictError: If the email is already registered
        """
        email = validate_email(email)
        password = validate_password(password)
        if self.db.get_user_by_email(email) is not None:
            raise ConflictError("User already registered")

        password_hash = hash_password(password, self.bcrypt_rounds)
        with self.db.transaction():
            company_id = self.db.create_company((company_name or "").strip() or email)
            user_id = self.db.create_user(email, password_hash, company_id)

        logger.info("Registered user %s for company %s", user_id, company_id)
        return self.db.get_user(user_id)

    def sign_in_with_password(self, email: str, password: str) -> AuthSession:
        """Check credentials and open a new session.

        Raises:
            AuthenticationError: If the email is unknown or the password is wrong
        """
        user = self.db.get_user_by_email((email or "").strip())
        if user is None:
            raise AuthenticationError(INVALID_CREDENTIALS)
        password_hash = self.db.get_password_hash(user.id)
        if password_hash is None or not verify_password(password or "", password_hash):
            logger.warning("Failed sign-in for user %s", user.id)
            raise AuthenticationError(INVALID_CREDENTIALS)

        session = self._issue(user.id, SessionKind.PASSWORD)
        logger.info("User %s signed in", user.id)
        return session

    def sign_out(self, token: str) -> None:
        """Revoke a session. Unknown tokens are ignored."""
        self.db.revoke_auth_session(token)

    def get_session(self, token: Optional[str]) -> Optional[AuthSession]:
        """Get the session of a token if it is still active."""
        if not token:
            return None
        session = self.db.get_auth_session(token)
        if session is None or not session.is_active:
            return None
        return session

    def get_user(self, token: Optional[str]) -> Optional[User]:
        """Get the user of an active session."""
        session = self.get_session(token)
        if session is None:
            return None
        return self.db.get_user(session.user_id)

    def reset_password_for_email(self, email: str) -> Optional[str]:
        """Issue a one-off recovery token for an account.

        Delivering the token is left to the caller. Unknown addresses return
        None so callers cannot tell registered emails apart.
        """
        user = self.db.get_user_by_email(validate_email(email))
        if user is None:
            logger.info("Password reset requested for an unknown email")
            return None
        session = self._issue(user.id, SessionKind.RECOVERY)
        logger.info("Issued recovery token for user %s", user.id)
        return session.token

    def verify_recovery(self, token: str) -> AuthSession:
        """Check that a token is an unused recovery token.

        Raises:
            AuthenticationError: If the token is unknown, used or not a recovery token
        """
        session = self.get_session(token)
        if session is None or session.kind is not SessionKind.RECOVERY:
            raise AuthenticationError("Invalid or expired recovery token")
        return session

    def update_user_password(self, token: str, new_password: str) -> AuthSession:
        """Change the password of the session's user.

        A recovery session is consumed and replaced by a regular session.

        Returns:
            The session to keep using

        Raises:
            AuthenticationError: If the session is not active
            ValidationError: If the new password is invalid
        """
        session = self.get_session(token)
        if session is None:
            raise AuthenticationError("Not signed in")
        new_password = validate_password(new_password)

        self.db.update_user_password(session.user_id, hash_password(new_password, self.bcrypt_rounds))
        logger.info("Password updated for user %s", session.user_id)

        if session.kind is SessionKind.RECOVERY:
            self.db.revoke_auth_session(session.token)
            return self._issue(session.user_id, SessionKind.PASSWORD)
        return session

    def _issue(self, user_id: int, kind: SessionKind) -> AuthSession:
        token = secrets.token_urlsafe(TOKEN_BYTES)
        self.db.create_auth_session(token, user_id, kind)
        return self.db.get_auth_session(token)


AuthCallback = Callable[[AuthEvent, Optional[AuthSession]], None]


class Subscription:
    """Handle returned by SessionContext.subscribe."""

    def __init__(self, context: "SessionContext", callback: AuthCallback):
        self._context = context
        self._callback = callback

    @property
    def active(self) -> bool:
        return self._callback in self._context._subscribers

    def unsubscribe(self) -> None:
        """Stop receiving events. Calling it twice is harmless."""
        if self.active:
            self._context._subscribers.remove(self._callback)


class SessionContext:
    """Signed-in state of one running application.

    Created at start-up, passed to whatever needs the current identity, and
    closed at shutdown. Subscribers are called with ``(event, session)``
    after every change.
    """

    def __init__(self, auth: AuthService):
        self.auth = auth
        self._session: Optional[AuthSession] = None
        self._user: Optional[User] = None
        self._subscribers: list[AuthCallback] = []
        self._closed = False

    @property
    def session(self) -> Optional[AuthSession]:
        return self._session

    @property
    def user(self) -> Optional[User]:
        return self._user

    @property
    def company_id(self) -> Optional[int]:
        return self._user.company_id if self._user is not None else None

    @property
    def is_authenticated(self) -> bool:
        return self._user is not None

    def subscribe(self, callback: AuthCallback) -> Subscription:
        """Register a callback for session changes."""
        if self._closed:
            raise RuntimeError("Session context is closed")
        self._subscribers.append(callback)
        return Subscription(self, callback)

    def start(self, token: Optional[str] = None) -> Optional[User]:
        """Restore a persisted session and emit INITIAL_SESSION.

        A missing, revoked or unknown token starts signed out.
        """
        session = self.auth.get_session(token)
        self._set(session)
        self._emit(AuthEvent.INITIAL_SESSION)
        return self._user

    def sign_up(self, email: str, password: str, company_name: Optional[str] = None) -> User:
        """Register and sign in."""
        self.auth.sign_up(email, password, company_name=company_name)
        return self.sign_in(email, password)

    def sign_in(self, email: str, password: str) -> User:
        session = self.auth.sign_in_with_password(email, password)
        self._set(session)
        self._emit(AuthEvent.SIGNED_IN)
        return self._user

    def sign_out(self) -> None:
        """Revoke the current session, if any, and emit SIGNED_OUT."""
        if self._session is not None:
            self.auth.sign_out(self._session.token)
        self._set(None)
        self._emit(AuthEvent.SIGNED_OUT)

    def reset_password(self, email: str) -> Optional[str]:
        return self.auth.reset_password_for_email(email)

    def recover(self, token: str) -> User:
        """Enter a recovery session and emit PASSWORD_RECOVERY."""
        session = self.auth.verify_recovery(token)
        self._set(session)
        self._emit(AuthEvent.PASSWORD_RECOVERY)
        return self._user

    def update_password(self, new_password: str) -> User:
        """Change the password of the current user and emit USER_UPDATED."""
        if self._session is None:
            raise AuthenticationError("Not signed in")
        session = self.auth.update_user_password(self._session.token, new_password)
        self._set(session)
        self._emit(AuthEvent.USER_UPDATED)
        return self._user

    def require_company_id(self) -> int:
        """Company of the signed-in user.

        Raises:
            AuthenticationError: If nobody is signed in
        """
        if self._user is None:
            raise AuthenticationError("Not signed in. Run 'servicedesk auth login' first.")
        return self._user.company_id

    def close(self) -> None:
        """Detach every subscriber."""
        self._subscribers.clear()
        self._closed = True

    def __enter__(self) -> "SessionContext":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def _set(self, session: Optional[AuthSession]) -> None:
        self._session = session
        self._user = self.auth.db.get_user(session.user_id) if session is not None else None

    def _emit(self, event: AuthEvent) -> None:
        for callback in list(self._subscribers):
            callback(event, self._session)
