"""Domain layer for servicedesk application."""

from servicedesk.domain.auth import AuthService, SessionContext
from servicedesk.domain.client import ClientService
from servicedesk.domain.collaborator import CollaboratorService
from servicedesk.domain.category import CategoryService
from servicedesk.domain.inventory import InventoryService
from servicedesk.domain.line_items import LineItemAccumulator
from servicedesk.domain.service_ticket import FinancialEntryPolicy, ServiceTicketService
from servicedesk.domain.financial import FinancialEntryService
from servicedesk.domain.messages import MessageService
from servicedesk.domain.dashboard import DashboardService

__all__ = [
    "AuthService",
    "SessionContext",
    "ClientService",
    "CollaboratorService",
    "CategoryService",
    "InventoryService",
    "LineItemAccumulator",
    "FinancialEntryPolicy",
    "ServiceTicketService",
    "FinancialEntryService",
    "MessageService",
    "DashboardService",
]
