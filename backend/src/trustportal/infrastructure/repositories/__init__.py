"""SQLAlchemy repositories implementing domain ports."""

from .ticket_repository import SqlAlchemyTicketStore

__all__ = ["SqlAlchemyTicketStore"]
