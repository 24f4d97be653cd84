"""Ticket Store Port - Domain interface for ticket persistence.

The threading processor only needs three operations on the ticket store:
look a ticket up, append a message, change a status. Adapters decide how
(and in which transaction) these are executed.

Architecture: Hexagonal - Port interface in domain layer
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional
from uuid import UUID

from .ticket_status import TicketStatus


@dataclass(frozen=True)
class TicketSnapshot:
    """Read-only view of a ticket as seen by the threading processor.

    Attributes:
        id: Ticket UUID (correlation identifier)
        status: Current lifecycle status
        requester_name: Name given on the original submission
        requester_email: Email given on the original submission
    """
    id: UUID
    status: TicketStatus
    requester_name: str
    requester_email: str


class TicketStorePort(ABC):
    """Port interface for the ticket store collaborator."""

    @abstractmethod
    def find_by_id(self, ticket_id: str) -> Optional[TicketSnapshot]:
        """Look up a ticket by its correlation identifier.

        Args:
            ticket_id: Identifier as extracted from the subject line

        Returns:
            TicketSnapshot, or None if no ticket has this id (including
            identifiers that are not valid UUIDs)
        """

    @abstractmethod
    def insert_message(
        self,
        ticket_id: UUID,
        sender_type: str,
        sender_name: Optional[str],
        body: str,
    ) -> UUID:
        """Append a message to a ticket.

        Returns:
            UUID: Id of the created message
        """

    @abstractmethod
    def update_status(self, ticket_id: UUID, status: TicketStatus) -> None:
        """Set a ticket's status.

        Raises:
            InvalidStatusTransition: If the lifecycle forbids the change
        """
