"""Shared pytest fixtures for servicedesk tests."""

import tempfile
import os
from datetime import date
from decimal import Decimal

import pytest

from servicedesk.database.factories import create_sqlite_database
from servicedesk.domain.auth import AuthService, SessionContext
from servicedesk.domain.category import CategoryService
from servicedesk.domain.client import ClientService
from servicedesk.domain.collaborator import CollaboratorService
from servicedesk.domain.entities import (
    CategoryDraft,
    CategoryType,
    ClientDraft,
    CollaboratorDraft,
    InventoryItemDraft,
)
from servicedesk.domain.financial import FinancialEntryService
from servicedesk.domain.inventory import InventoryService
from servicedesk.domain.service_ticket import ServiceTicketService

TEST_EMAIL = "owner@cleanair.example"
TEST_PASSWORD = "secret123"


@pytest.fixture(autouse=True)
def fast_bcrypt(monkeypatch):
    """Use the cheapest bcrypt cost so tests stay fast."""
    monkeypatch.setenv("SERVICEDESK_BCRYPT_ROUNDS", "4")


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    # Create a temporary file for the database
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    # Create database
    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    # Cleanup
    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def auth_service(temp_db):
    """Create an AuthService with a temporary database."""
    return AuthService(temp_db, bcrypt_rounds=4)


@pytest.fixture
def registered_user(auth_service):
    """Sign up a company owner."""
    return auth_service.sign_up(TEST_EMAIL, TEST_PASSWORD, company_name="Clean Air Ltda")


@pytest.fixture
def company_id(registered_user):
    """Company of the registered user."""
    return registered_user.company_id


@pytest.fixture
def other_company_id(auth_service):
    """A second, unrelated company."""
    return auth_service.sign_up("other@frost.example", TEST_PASSWORD, company_name="Frost").company_id


@pytest.fixture
def session_context(auth_service):
    """A SessionContext closed after the test."""
    with SessionContext(auth_service) as context:
        yield context


@pytest.fixture
def client_service(temp_db, company_id):
    return ClientService(temp_db, company_id)


@pytest.fixture
def collaborator_service(temp_db, company_id):
    return CollaboratorService(temp_db, company_id)


@pytest.fixture
def category_service(temp_db, company_id):
    return CategoryService(temp_db, company_id)


@pytest.fixture
def inventory_service(temp_db, company_id):
    return InventoryService(temp_db, company_id)


@pytest.fixture
def entry_service(temp_db, company_id):
    return FinancialEntryService(temp_db, company_id)


@pytest.fixture
def ticket_service(temp_db, company_id):
    return ServiceTicketService(temp_db, company_id)


@pytest.fixture
def sample_client(client_service):
    """Create a sample client for testing."""
    client_id = client_service.create_client(ClientDraft(full_name="Ana Silva", phone="11 99999-0000"))
    return client_service.get_client(client_id)


@pytest.fixture
def sample_collaborator(collaborator_service):
    collaborator_id = collaborator_service.create_collaborator(CollaboratorDraft(name="Bruno"))
    return collaborator_service.get_collaborator(collaborator_id)


@pytest.fixture
def sample_catalog(category_service, inventory_service):
    """Service types plus two inventory items: Filter (10.00) and Gas (5.00)."""
    category_service.create_category(CategoryDraft(name="maintenance", category_type=CategoryType.SERVICE))
    category_service.create_category(CategoryDraft(name="cleaning", category_type=CategoryType.SERVICE))
    parts_id = category_service.create_category(CategoryDraft(name="Parts", category_type=CategoryType.PRODUCT))

    filter_id = inventory_service.create_item(
        InventoryItemDraft(name="Filter", value=Decimal("10.00"), category_id=parts_id)
    )
    gas_id = inventory_service.create_item(
        InventoryItemDraft(name="Gas", value=Decimal("5.00"), category_id=parts_id)
    )
    return {
        "filter": inventory_service.get_item(filter_id),
        "gas": inventory_service.get_item(gas_id),
    }


@pytest.fixture
def today():
    return date(2024, 6, 15)


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()


@pytest.fixture
def cli_env(temp_db, tmp_path):
    """Global CLI options pointing at the temporary database and session file."""
    return [
        "--db-path",
        temp_db.database_path,
        "--session-file",
        str(tmp_path / "session"),
    ]


@pytest.fixture
def signed_in_cli(cli_runner, cli_env):
    """Sign up through the CLI so later invocations reuse the stored session."""
    from servicedesk.cli.main import cli

    result = cli_runner.invoke(
        cli,
        cli_env
        + ["auth", "signup", TEST_EMAIL, "--password", TEST_PASSWORD, "--company", "Clean Air Ltda"],
    )
    assert result.exit_code == 0, result.output
    return cli_env
