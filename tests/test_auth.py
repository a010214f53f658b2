"""Tests for authentication and the session context."""

import pytest

from servicedesk.domain.auth import (
    INVALID_CREDENTIALS,
    SessionContext,
    hash_password,
    validate_email,
    validate_password,
    verify_password,
)
from servicedesk.domain.entities import AuthEvent, SessionKind
from servicedesk.domain.errors import AuthenticationError, ConflictError, ValidationError

from conftest import TEST_EMAIL, TEST_PASSWORD


class TestPasswordHelpers:
    def test_hash_and_verify(self):
        password_hash = hash_password("secret123", rounds=4)

        assert password_hash.startswith("$2")
        assert verify_password("secret123", password_hash)
        assert not verify_password("wrong", password_hash)

    def test_verify_rejects_non_bcrypt_hash(self):
        assert not verify_password("secret123", "plain-text")

    def test_validate_email_normalizes(self):
        assert validate_email("  Ana@Example.COM ") == "ana@example.com"

    @pytest.mark.parametrize("email", ["", None, "ana", "ana@", "a b@example.com"])
    def test_validate_email_rejects(self, email):
        with pytest.raises(ValidationError) as excinfo:
            validate_email(email)
        assert excinfo.value.field == "email"

    def test_validate_password_length(self):
        assert validate_password("123456") == "123456"
        with pytest.raises(ValidationError):
            validate_password("12345")
        with pytest.raises(ValidationError):
            validate_password("x" * 73)


class TestAuthService:
    def test_sign_up_creates_company_and_user(self, temp_db, auth_service):
        user = auth_service.sign_up("Owner@Example.com", TEST_PASSWORD, company_name="Frio Bom")

        assert user.email == "owner@example.com"
        assert temp_db.get_company(user.company_id).name == "Frio Bom"

    def test_company_name_defaults_to_email(self, temp_db, auth_service):
        user = auth_service.sign_up("solo@example.com", TEST_PASSWORD)

        assert temp_db.get_company(user.company_id).name == "solo@example.com"

    def test_duplicate_email(self, auth_service, registered_user):
        with pytest.raises(ConflictError, match="already registered"):
            auth_service.sign_up(TEST_EMAIL.upper(), TEST_PASSWORD)

    def test_sign_in(self, auth_service, registered_user):
        session = auth_service.sign_in_with_password(TEST_EMAIL, TEST_PASSWORD)

        assert session.user_id == registered_user.id
        assert session.kind is SessionKind.PASSWORD
        assert auth_service.get_user(session.token) == registered_user

    def test_sign_in_wrong_password(self, auth_service, registered_user):
        with pytest.raises(AuthenticationError, match=INVALID_CREDENTIALS):
            auth_service.sign_in_with_password(TEST_EMAIL, "not-it")

    def test_sign_in_unknown_email(self, auth_service):
        with pytest.raises(AuthenticationError, match=INVALID_CREDENTIALS):
            auth_service.sign_in_with_password("nobody@example.com", TEST_PASSWORD)

    def test_sign_out_revokes(self, auth_service, registered_user):
        session = auth_service.sign_in_with_password(TEST_EMAIL, TEST_PASSWORD)

        auth_service.sign_out(session.token)

        assert auth_service.get_session(session.token) is None
        assert auth_service.get_user(session.token) is None

    def test_unknown_token(self, auth_service):
        assert auth_service.get_session("nope") is None
        assert auth_service.get_session(None) is None

    def test_password_recovery(self, auth_service, registered_user):
        token = auth_service.reset_password_for_email(TEST_EMAIL)
        recovery = auth_service.verify_recovery(token)
        assert recovery.kind is SessionKind.RECOVERY

        session = auth_service.update_user_password(token, "new-secret")

        assert session.kind is SessionKind.PASSWORD
        assert auth_service.get_session(token) is None
        with pytest.raises(AuthenticationError):
            auth_service.sign_in_with_password(TEST_EMAIL, TEST_PASSWORD)
        assert auth_service.sign_in_with_password(TEST_EMAIL, "new-secret").user_id == registered_user.id

    def test_reset_for_unknown_email_returns_none(self, auth_service):
        assert auth_service.reset_password_for_email("nobody@example.com") is None

    def test_password_session_is_not_a_recovery_token(self, auth_service, registered_user):
        session = auth_service.sign_in_with_password(TEST_EMAIL, TEST_PASSWORD)

        with pytest.raises(AuthenticationError):
            auth_service.verify_recovery(session.token)

    def test_update_password_keeps_password_session(self, auth_service, registered_user):
        session = auth_service.sign_in_with_password(TEST_EMAIL, TEST_PASSWORD)

        assert auth_service.update_user_password(session.token, "another1").token == session.token


class TestSessionContext:
    def test_start_without_token(self, session_context):
        events = []
        session_context.subscribe(lambda event, session: events.append((event, session)))

        assert session_context.start(None) is None
        assert events == [(AuthEvent.INITIAL_SESSION, None)]
        assert not session_context.is_authenticated

    def test_start_restores_session(self, auth_service, registered_user, session_context):
        session = auth_service.sign_in_with_password(TEST_EMAIL, TEST_PASSWORD)

        user = session_context.start(session.token)

        assert user == registered_user
        assert session_context.company_id == registered_user.company_id

    def test_start_with_revoked_token(self, auth_service, registered_user, session_context):
        session = auth_service.sign_in_with_password(TEST_EMAIL, TEST_PASSWORD)
        auth_service.sign_out(session.token)

        assert session_context.start(session.token) is None

    def test_sign_in_and_out_events(self, registered_user, session_context):
        events = []
        session_context.subscribe(lambda event, session: events.append(event))

        session_context.sign_in(TEST_EMAIL, TEST_PASSWORD)
        assert session_context.require_company_id() == registered_user.company_id
        session_context.sign_out()

        assert events == [AuthEvent.SIGNED_IN, AuthEvent.SIGNED_OUT]
        assert session_context.session is None

    def test_sign_up_signs_in(self, session_context):
        user = session_context.sign_up("new@example.com", TEST_PASSWORD)

        assert session_context.user == user

    def test_require_company_id_when_signed_out(self, session_context):
        with pytest.raises(AuthenticationError, match="Not signed in"):
            session_context.require_company_id()

    def test_recovery_flow_events(self, registered_user, session_context):
        token = session_context.reset_password(TEST_EMAIL)
        events = []
        session_context.subscribe(lambda event, session: events.append((event, session.kind)))

        session_context.recover(token)
        session_context.update_password("brand-new")

        assert events == [
            (AuthEvent.PASSWORD_RECOVERY, SessionKind.RECOVERY),
            (AuthEvent.USER_UPDATED, SessionKind.PASSWORD),
        ]

    def test_update_password_when_signed_out(self, session_context):
        with pytest.raises(AuthenticationError):
            session_context.update_password("whatever")

    def test_unsubscribe(self, registered_user, session_context):
        events = []
        subscription = session_context.subscribe(lambda event, session: events.append(event))

        subscription.unsubscribe()
        subscription.unsubscribe()
        session_context.sign_in(TEST_EMAIL, TEST_PASSWORD)

        assert not subscription.active
        assert events == []

    def test_closed_context_rejects_subscribers(self, auth_service):
        context = SessionContext(auth_service)
        context.subscribe(lambda event, session: None)

        context.close()

        with pytest.raises(RuntimeError):
            context.subscribe(lambda event, session: None)
