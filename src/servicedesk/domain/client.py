"""Client domain service."""

import logging
from dataclasses import replace
from typing import TYPE_CHECKING, Optional

from servicedesk.domain.entities import Client, ClientDetail, ClientDraft
from servicedesk.domain.errors import NotFoundError, not_found
from servicedesk.domain.validation import optional_text, require_text
from servicedesk.utils.search import matches_search

if TYPE_CHECKING:
    from servicedesk.database.base import Database

logger = logging.getLogger(__name__)


class ClientService:
    """Service for managing the clients of one company."""

    def __init__(self, db: "Database", company_id: int):
        """Initialize client service.

        Args:
            db: Database instance
            company_id: Company every read and write is scoped to
        """
        self.db = db
        self.company_id = company_id

    def _clean(self, draft: ClientDraft) -> ClientDraft:
        return replace(
            draft,
            full_name=require_text(draft.full_name, "full_name", "Full name", min_length=2),
            formal_name=optional_text(draft.formal_name),
            phone=optional_text(draft.phone),
            address=optional_text(draft.address),
            district=optional_text(draft.district),
            city=optional_text(draft.city),
            notes=optional_text(draft.notes),
            send_maintenance_reminders=bool(draft.send_maintenance_reminders),
            send_welcome_message=bool(draft.send_welcome_message),
        )

    def create_client(self, draft: ClientDraft) -> int:
        """Create a client.

        Args:
            draft: Client fields

        Returns:
            Client ID

        Raises:
            ValidationError: If the full name is missing or shorter than 2 characters
        """
        client_id = self.db.create_client(self.company_id, self._clean(draft))
        logger.info("Created client %s for company %s", client_id, self.company_id)
        return client_id

    def get_client(self, client_id: int) -> Optional[Client]:
        """Get client by ID, or None if it is not in this company."""
        return self.db.get_client(self.company_id, client_id)

    def list_clients(self) -> list[Client]:
        """List clients ordered by full name."""
        return self.db.list_clients(self.company_id)

    def search_clients(self, term: Optional[str]) -> list[Client]:
        """Filter clients by full name or phone."""
        return [
            client
            for client in self.list_clients()
            if matches_search(term, client.full_name, client.phone)
        ]

    def update_client(self, client_id: int, draft: ClientDraft) -> None:
        """Overwrite every field of a client.

        Raises:
            ValidationError: If the draft is invalid
            NotFoundError: If the client does not exist
        """
        self.db.update_client(self.company_id, client_id, self._clean(draft))
        logger.info("Updated client %s", client_id)

    def delete_client(self, client_id: int) -> None:
        """Delete a client.

        Services and financial entries keep existing without the client;
        its messages are deleted with it.

        Raises:
            NotFoundError: If the client does not exist
        """
        self.db.delete_client(self.company_id, client_id)
        logger.info("Deleted client %s", client_id)

    def get_detail(self, client_id: int) -> ClientDetail:
        """Get a client with its services and sent messages, newest first.

        Raises:
            NotFoundError: If the client does not exist
        """
        client = self.get_client(client_id)
        if client is None:
            raise NotFoundError(not_found("Client", client_id))
        services = self.db.list_services(self.company_id, client_id=client_id)
        messages = self.db.list_sent_messages(self.company_id, client_id=client_id)
        return ClientDetail(client=client, services=tuple(services), sent_messages=tuple(messages))
