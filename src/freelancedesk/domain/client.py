"""Client domain service."""

import logging
from typing import Any, Optional, Union

from freelancedesk.database.base import Database
from freelancedesk.domain.entities import Client as ClientEntity, ClientStatus
from freelancedesk.domain.errors import (
    ConflictError,
    DependencyError,
    NotFoundError,
    ValidationError,
    delete_blocked,
    duplicate_client_email,
    not_found,
)
from freelancedesk.domain.validation import normalize_email, parse_choice, require_text

logger = logging.getLogger(__name__)

NAME_MAX_LENGTH = 100


def _validate_payment_terms(payment_terms: int) -> int:
    terms = int(payment_terms)
    if terms < 0:
        raise ValidationError("Payment terms cannot be negative")
    return terms


class ClientService:
    """Service for managing clients."""

    def __init__(self, db: Database):
        """Initialize client service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_client(
        self,
        name: str,
        email: str,
        phone: Optional[str] = None,
        company: Optional[str] = None,
        status: Union[ClientStatus, str] = ClientStatus.ACTIVE,
        payment_terms: int = 30,
        notes: Optional[str] = None,
    ) -> int:
        """Create a new client.

        Args:
            name: Client name
            email: Contact email, stored lowercased
            phone: Optional phone number
            company: Optional company name
            status: active, inactive or prospect
            payment_terms: Days between invoice issue and due date
            notes: Optional notes

        Returns:
            Client ID

        Raises:
            ValidationError: If a field is invalid
            ConflictError: If a client with the same email exists
        """
        name = require_text(name, "name", NAME_MAX_LENGTH)
        email = normalize_email(email)
        client_status = parse_choice(ClientStatus, status, "client status")
        payment_terms = _validate_payment_terms(payment_terms)

        if self.db.get_client_by_email(email) is not None:
            raise ConflictError(duplicate_client_email(email))

        client_id = self.db.create_client(
            name=name,
            email=email,
            phone=phone,
            company=company,
            status=client_status.value,
            payment_terms=payment_terms,
            notes=notes,
        )
        logger.info("Created client %s (%s)", client_id, email)
        return client_id

    def get_client(self, client_id: int) -> Optional[ClientEntity]:
        """Get client by ID.

        Args:
            client_id: Client ID

        Returns:
            Client entity or None if not found
        """
        return self.db.get_client(client_id)

    def list_clients(
        self,
        status: Union[ClientStatus, str, None] = None,
        search: Optional[str] = None,
    ) -> list[ClientEntity]:
        """List clients ordered by name.

        Args:
            status: Optional status filter
            search: Optional case-insensitive search on name, email and company

        Returns:
            List of client entities
        """
        status_value = None
        if status is not None:
            status_value = parse_choice(ClientStatus, status, "client status").value
        return self.db.list_clients(status=status_value, search=search)

    def update_client(self, client_id: int, **fields: Any) -> ClientEntity:
        """Update a client.

        Args:
            client_id: Client ID
            **fields: Any of name, email, phone, company, status,
                payment_terms, notes

        Returns:
            Updated client entity

        Raises:
            NotFoundError: If client not found
            ConflictError: If the new email belongs to another client
        """
        if self.db.get_client(client_id) is None:
            raise NotFoundError(not_found("Client", client_id))

        changes = dict(fields)
        if "name" in changes:
            changes["name"] = require_text(changes["name"], "name", NAME_MAX_LENGTH)
        if "email" in changes:
            changes["email"] = normalize_email(changes["email"])
            other = self.db.get_client_by_email(changes["email"])
            if other is not None and other.id != client_id:
                raise ConflictError(duplicate_client_email(changes["email"]))
        if "status" in changes:
            changes["status"] = parse_choice(
                ClientStatus, changes["status"], "client status"
            ).value
        if "payment_terms" in changes:
            changes["payment_terms"] = _validate_payment_terms(changes["payment_terms"])

        if changes:
            self.db.update_client(client_id, **changes)
        return self.db.get_client(client_id)

    def delete_client(self, client_id: int) -> None:
        """Delete a client.

        Args:
            client_id: Client ID to delete

        Raises:
            NotFoundError: If client not found
            DependencyError: If projects or invoices still reference the client
        """
        if self.db.get_client(client_id) is None:
            raise NotFoundError(not_found("Client", client_id))

        counts = self.db.get_client_dependency_counts(client_id)
        if any(counts.values()):
            raise DependencyError(delete_blocked("client", client_id, counts))

        self.db.delete_client(client_id)
        logger.info("Deleted client %s", client_id)
