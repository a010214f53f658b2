"""Mapper functions to convert between domain models and SQLAlchemy models.

This layer isolates the conversion logic, so domain entities stay stable
when the table layout changes. Display fields of parent rows (client name,
service type, item name) are read from eagerly loaded relationships.
"""

from servicedesk.domain import entities as domain
from servicedesk.database.models import (
    Company as ORMCompany,
    User as ORMUser,
    AuthSession as ORMAuthSession,
    Client as ORMClient,
    Collaborator as ORMCollaborator,
    Category as ORMCategory,
    InventoryItem as ORMInventoryItem,
    Service as ORMService,
    ServiceItem as ORMServiceItem,
    FinancialEntry as ORMFinancialEntry,
    SentMessage as ORMSentMessage,
    ScheduledMessage as ORMScheduledMessage,
)


def company_to_domain(orm_company: ORMCompany) -> domain.Company:
    """Convert SQLAlchemy Company model to domain Company entity."""
    return domain.Company(
        id=orm_company.id,
        name=orm_company.name,
        created_at=orm_company.created_at,
    )


def user_to_domain(orm_user: ORMUser) -> domain.User:
    """Convert SQLAlchemy User model to domain User entity."""
    return domain.User(
        id=orm_user.id,
        email=orm_user.email,
        company_id=orm_user.company_id,
        created_at=orm_user.created_at,
    )


def auth_session_to_domain(orm_session: ORMAuthSession) -> domain.AuthSession:
    """Convert SQLAlchemy AuthSession model to domain AuthSession entity."""
    return domain.AuthSession(
        token=orm_session.token,
        user_id=orm_session.user_id,
        kind=domain.SessionKind(orm_session.kind),
        created_at=orm_session.created_at,
        revoked_at=orm_session.revoked_at,
    )


def client_to_domain(orm_client: ORMClient) -> domain.Client:
    """Convert SQLAlchemy Client model to domain Client entity."""
    return domain.Client(
        id=orm_client.id,
        company_id=orm_client.company_id,
        full_name=orm_client.full_name,
        formal_name=orm_client.formal_name,
        phone=orm_client.phone,
        address=orm_client.address,
        district=orm_client.district,
        city=orm_client.city,
        notes=orm_client.notes,
        send_maintenance_reminders=bool(orm_client.send_maintenance_reminders),
        send_welcome_message=bool(orm_client.send_welcome_message),
        created_at=orm_client.created_at,
        updated_at=orm_client.updated_at,
    )


def collaborator_to_domain(orm_collaborator: ORMCollaborator) -> domain.Collaborator:
    """Convert SQLAlchemy Collaborator model to domain Collaborator entity."""
    return domain.Collaborator(
        id=orm_collaborator.id,
        company_id=orm_collaborator.company_id,
        name=orm_collaborator.name,
        created_at=orm_collaborator.created_at,
        updated_at=orm_collaborator.updated_at,
    )


def category_to_domain(orm_category: ORMCategory) -> domain.Category:
    """Convert SQLAlchemy Category model to domain Category entity."""
    return domain.Category(
        id=orm_category.id,
        company_id=orm_category.company_id,
        name=orm_category.name,
        category_type=domain.CategoryType(orm_category.type),
        created_at=orm_category.created_at,
        updated_at=orm_category.updated_at,
    )


def inventory_item_to_domain(orm_item: ORMInventoryItem) -> domain.InventoryItem:
    """Convert SQLAlchemy InventoryItem model to domain InventoryItem entity."""
    return domain.InventoryItem(
        id=orm_item.id,
        company_id=orm_item.company_id,
        name=orm_item.name,
        value=orm_item.value,
        category_id=orm_item.category_id,
        created_at=orm_item.created_at,
        updated_at=orm_item.updated_at,
        category_name=orm_item.category.name if orm_item.category is not None else None,
    )


def service_to_domain(orm_service: ORMService) -> domain.Service:
    """Convert SQLAlchemy Service model to domain Service entity."""
    return domain.Service(
        id=orm_service.id,
        company_id=orm_service.company_id,
        service_date=orm_service.service_date,
        service_type=orm_service.service_type,
        client_id=orm_service.client_id,
        collaborator_id=orm_service.collaborator_id,
        notes=orm_service.notes,
        total_value=orm_service.total_value,
        created_at=orm_service.created_at,
        updated_at=orm_service.updated_at,
        client_name=orm_service.client.full_name if orm_service.client is not None else None,
        collaborator_name=(
            orm_service.collaborator.name if orm_service.collaborator is not None else None
        ),
    )


def service_item_to_domain(orm_item: ORMServiceItem) -> domain.ServiceItem:
    """Convert SQLAlchemy ServiceItem model to domain ServiceItem entity."""
    return domain.ServiceItem(
        id=orm_item.id,
        service_id=orm_item.service_id,
        inventory_item_id=orm_item.inventory_item_id,
        quantity=orm_item.quantity,
        price=orm_item.price,
        created_at=orm_item.created_at,
        item_name=orm_item.inventory_item.name if orm_item.inventory_item is not None else None,
    )


def financial_entry_to_domain(orm_entry: ORMFinancialEntry) -> domain.FinancialEntry:
    """Convert SQLAlchemy FinancialEntry model to domain FinancialEntry entity."""
    return domain.FinancialEntry(
        id=orm_entry.id,
        company_id=orm_entry.company_id,
        entry_date=orm_entry.entry_date,
        value=orm_entry.value,
        client_id=orm_entry.client_id,
        service_id=orm_entry.service_id,
        notes=orm_entry.notes,
        created_at=orm_entry.created_at,
        updated_at=orm_entry.updated_at,
        client_name=orm_entry.client.full_name if orm_entry.client is not None else None,
        service_type=orm_entry.service.service_type if orm_entry.service is not None else None,
    )


def sent_message_to_domain(orm_message: ORMSentMessage) -> domain.SentMessage:
    """Convert SQLAlchemy SentMessage model to domain SentMessage entity."""
    return domain.SentMessage(
        id=orm_message.id,
        company_id=orm_message.company_id,
        client_id=orm_message.client_id,
        message_type=orm_message.type,
        content=orm_message.content,
        status=orm_message.status,
        sent_at=orm_message.sent_at,
    )


def scheduled_message_to_domain(orm_message: ORMScheduledMessage) -> domain.ScheduledMessage:
    """Convert SQLAlchemy ScheduledMessage model to domain ScheduledMessage entity."""
    return domain.ScheduledMessage(
        id=orm_message.id,
        company_id=orm_message.company_id,
        client_id=orm_message.client_id,
        message_type=orm_message.type,
        content=orm_message.content,
        status=orm_message.status,
        scheduled_date=orm_message.scheduled_date,
        template_id=orm_message.template_id,
        created_at=orm_message.created_at,
    )
