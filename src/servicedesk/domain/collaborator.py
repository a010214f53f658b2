"""Collaborator domain service."""

import logging
from typing import TYPE_CHECKING, Optional

from servicedesk.domain.entities import Collaborator, CollaboratorDraft
from servicedesk.domain.validation import require_text
from servicedesk.utils.search import matches_search

if TYPE_CHECKING:
    from servicedesk.database.base import Database

logger = logging.getLogger(__name__)


class CollaboratorService:
    """Service for managing the technicians who perform services."""

    def __init__(self, db: "Database", company_id: int):
        self.db = db
        self.company_id = company_id

    def create_collaborator(self, draft: CollaboratorDraft) -> int:
        """Create a collaborator. Returns collaborator ID."""
        name = require_text(draft.name, "name", "Name")
        collaborator_id = self.db.create_collaborator(self.company_id, CollaboratorDraft(name=name))
        logger.info("Created collaborator %s for company %s", collaborator_id, self.company_id)
        return collaborator_id

    def get_collaborator(self, collaborator_id: int) -> Optional[Collaborator]:
        return self.db.get_collaborator(self.company_id, collaborator_id)

    def list_collaborators(self) -> list[Collaborator]:
        return self.db.list_collaborators(self.company_id)

    def search_collaborators(self, term: Optional[str]) -> list[Collaborator]:
        """Filter collaborators by name."""
        return [c for c in self.list_collaborators() if matches_search(term, c.name)]

    def update_collaborator(self, collaborator_id: int, draft: CollaboratorDraft) -> None:
        """Rename a collaborator."""
        name = require_text(draft.name, "name", "Name")
        self.db.update_collaborator(self.company_id, collaborator_id, CollaboratorDraft(name=name))
        logger.info("Updated collaborator %s", collaborator_id)

    def delete_collaborator(self, collaborator_id: int) -> None:
        """Delete a collaborator. Their services remain, without a performer."""
        self.db.delete_collaborator(self.company_id, collaborator_id)
        logger.info("Deleted collaborator %s", collaborator_id)
