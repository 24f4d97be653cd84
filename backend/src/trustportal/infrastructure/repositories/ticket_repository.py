"""SQLAlchemy implementation of TicketStorePort.

Operations flush but never commit: the caller owns the transaction, so a
message insert and the status change it triggers are committed (or rolled
back) together.
"""

import logging
from typing import Optional
from uuid import UUID

from sqlalchemy.orm import Session

from ...domain.tickets.ports import TicketSnapshot, TicketStorePort
from ...domain.tickets.ticket_status import TicketStatus
from ...models.ticket import Ticket, TicketMessage

logger = logging.getLogger(__name__)


class SqlAlchemyTicketStore(TicketStorePort):
    """Ticket store backed by the contact_submissions/ticket_messages tables.

    Args:
        session: Request-scoped SQLAlchemy session
    """

    def __init__(self, session: Session):
        self.session = session

    def _get(self, ticket_id: UUID) -> Optional[Ticket]:
        return self.session.get(Ticket, ticket_id)

    def find_by_id(self, ticket_id: str) -> Optional[TicketSnapshot]:
        try:
            ticket_uuid = UUID(ticket_id)
        except ValueError:
            # Matches the 36-char pattern but is not a real UUID
            logger.info(f"Ticket id is not a valid UUID: {ticket_id}")
            return None

        ticket = self._get(ticket_uuid)
        if ticket is None:
            return None

        return TicketSnapshot(
            id=ticket.id,
            status=TicketStatus(ticket.status),
            requester_name=ticket.requester_name,
            requester_email=ticket.requester_email,
        )

    def insert_message(
        self,
        ticket_id: UUID,
        sender_type: str,
        sender_name: Optional[str],
        body: str,
    ) -> UUID:
        message = TicketMessage(
            ticket_id=ticket_id,
            sender_type=sender_type,
            sender_id=None,
            sender_name=sender_name,
            message=body,
        )
        self.session.add(message)
        self.session.flush()
        return message.id

    def update_status(self, ticket_id: UUID, status: TicketStatus) -> None:
        ticket = self._get(ticket_id)
        if ticket is None:
            raise LookupError(f"Ticket {ticket_id} disappeared during update")
        ticket.status = status.value
        self.session.flush()

    def create_ticket(
        self,
        name: str,
        email: str,
        subject: str,
        message: str,
        organization: Optional[str] = None,
    ) -> Ticket:
        """Create a new ticket in status 'new' (contact form submissions)."""
        ticket = Ticket(
            name=name,
            email=email,
            organization=organization or None,
            subject=subject,
            message=message,
            status=TicketStatus.NEW.value,
        )
        self.session.add(ticket)
        self.session.flush()
        return ticket
