"""Ticket and TicketMessage models - Support conversations.

A Ticket is created from the public contact form. Replies from the
requester (via inbound email) and from administrators are stored as
TicketMessage rows ordered by created_at.

The ticket id doubles as the correlation identifier embedded in outbound
notification subjects ("[#<uuid>]"), so it must stay a canonical UUID.
"""

import uuid
from datetime import datetime, timezone
from enum import Enum

from sqlalchemy import (
    Column,
    DateTime,
    ForeignKey,
    Index,
    String,
    Text,
    Uuid,
)
from sqlalchemy.orm import relationship, validates

from .base import Base
from ..domain.tickets.ticket_status import TicketStatus, can_transition
from ..domain.tickets.exceptions import InvalidStatusTransition


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SenderType(str, Enum):
    """Author of a ticket message.

    USER: The original requester (contact form or email reply)
    ADMIN: A portal administrator replying from the console
    """
    USER = "user"
    ADMIN = "admin"


class Ticket(Base):
    """Support ticket raised through the public contact form.

    Stored in the contact_submissions table; the requester identity
    (name/email) is the fallback sender attribution for email replies.
    """
    __tablename__ = "contact_submissions"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)

    # Requester identity
    name = Column(Text, nullable=False)
    email = Column(String(320), nullable=False, index=True)
    organization = Column(Text, nullable=True)

    subject = Column(Text, nullable=False)
    message = Column(Text, nullable=False)

    status = Column(String(32), nullable=False, default=TicketStatus.NEW.value)

    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        onupdate=_utcnow,
    )

    __table_args__ = (
        Index("idx_contact_submissions_status", "status"),
    )

    messages = relationship(
        "TicketMessage",
        back_populates="ticket",
        cascade="all, delete-orphan",
        order_by="TicketMessage.created_at",
    )

    @property
    def requester_name(self) -> str:
        return self.name

    @property
    def requester_email(self) -> str:
        return self.email

    @validates("status")
    def validate_status_transition(self, key, new_status):
        """Validate ticket status transitions.

        New rows may start in any status; existing rows must follow
        the ticket lifecycle (see ticket_status.ALLOWED_TRANSITIONS).

        Raises:
            InvalidStatusTransition: If the value or transition is not allowed
        """
        try:
            new_status = TicketStatus(new_status)
        except ValueError:
            raise InvalidStatusTransition(f"Invalid ticket status: {new_status}")

        current = self.status
        if current is not None and current != new_status.value:
            if not can_transition(TicketStatus(current), new_status):
                raise InvalidStatusTransition(
                    f"Invalid status transition: {current} → {new_status.value}"
                )

        return new_status.value

    def __repr__(self):
        return f"<Ticket(id={self.id}, status={self.status}, email={self.email})>"


class TicketMessage(Base):
    """A single message within a ticket conversation."""
    __tablename__ = "ticket_messages"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)

    ticket_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("contact_submissions.id", ondelete="CASCADE"),
        nullable=False,
    )

    sender_type = Column(String(16), nullable=False)
    # Admin user id for console replies; always NULL for email replies
    sender_id = Column(Uuid(as_uuid=True), nullable=True)
    sender_name = Column(Text, nullable=True)

    message = Column(Text, nullable=False)

    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)

    __table_args__ = (
        Index("idx_ticket_messages_ticket_created", "ticket_id", "created_at"),
    )

    ticket = relationship("Ticket", back_populates="messages")

    @validates("sender_type")
    def validate_sender_type(self, key, value):
        """Ensure sender_type is a valid SenderType value."""
        try:
            return SenderType(value).value
        except ValueError:
            raise ValueError(f"Invalid sender_type: {value}. Must be user or admin")

    @validates("message")
    def validate_message(self, key, value):
        if not value or not value.strip():
            raise ValueError("Ticket message body must not be empty")
        return value

    def __repr__(self):
        return (
            f"<TicketMessage(id={self.id}, ticket_id={self.ticket_id}, "
            f"sender_type={self.sender_type})>"
        )
