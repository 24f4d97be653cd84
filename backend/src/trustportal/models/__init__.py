"""SQLAlchemy models for the Trust Portal backend."""

from .base import Base
from .ticket import SenderType, Ticket, TicketMessage

__all__ = ["Base", "SenderType", "Ticket", "TicketMessage"]
