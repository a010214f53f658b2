"""Read-only access to loyalty and maintenance messages."""

from typing import TYPE_CHECKING, Optional

from servicedesk.domain.entities import ScheduledMessage, SentMessage

if TYPE_CHECKING:
    from servicedesk.database.base import Database


class MessageService:
    """Lists messages sent to or queued for clients.

    Messages are produced outside this application; nothing here writes them.
    """

    def __init__(self, db: "Database", company_id: int):
        self.db = db
        self.company_id = company_id

    def list_sent(self, client_id: Optional[int] = None) -> list[SentMessage]:
        """Sent messages, newest first."""
        return self.db.list_sent_messages(self.company_id, client_id=client_id)

    def list_scheduled(self, client_id: Optional[int] = None) -> list[ScheduledMessage]:
        """Queued messages, soonest first."""
        return self.db.list_scheduled_messages(self.company_id, client_id=client_id)
