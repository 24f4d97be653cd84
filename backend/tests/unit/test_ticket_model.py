"""Unit tests for Ticket/TicketMessage model validation"""

import pytest
from sqlalchemy.orm import Session

from trustportal.domain.tickets.exceptions import InvalidStatusTransition
from trustportal.models import Ticket, TicketMessage


class TestTicketModel:

    def test_invalid_status_value(self):
        with pytest.raises(InvalidStatusTransition):
            Ticket(name="A", email="a@x.com", subject="s", message="m", status="closed")

    def test_forbidden_transition(self, resolved_ticket: Ticket):
        with pytest.raises(InvalidStatusTransition):
            resolved_ticket.status = "new"

    def test_reopen_transition(self, db_session: Session, resolved_ticket: Ticket):
        resolved_ticket.status = "in_progress"
        db_session.commit()
        db_session.refresh(resolved_ticket)
        assert resolved_ticket.status == "in_progress"

    def test_messages_ordered_by_creation(self, db_session: Session, new_ticket: Ticket):
        for body in ("first", "second"):
            db_session.add(TicketMessage(
                ticket_id=new_ticket.id,
                sender_type="user",
                sender_name="Jane",
                message=body,
            ))
            db_session.commit()

        db_session.refresh(new_ticket)
        assert [m.message for m in new_ticket.messages] == ["first", "second"]

    def test_invalid_sender_type(self, new_ticket: Ticket):
        with pytest.raises(ValueError):
            TicketMessage(ticket_id=new_ticket.id, sender_type="bot", message="hi")

    def test_empty_message_rejected(self, new_ticket: Ticket):
        with pytest.raises(ValueError):
            TicketMessage(ticket_id=new_ticket.id, sender_type="user", message="   ")
