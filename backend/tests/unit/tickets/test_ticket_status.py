"""Unit tests for the TicketStatus state machine"""

from trustportal.domain.tickets.ticket_status import (
    TicketStatus,
    can_transition,
    get_allowed_transitions,
    status_after_user_reply,
)


class TestTicketStatusStateMachine:
    """Test TicketStatus enum and transition validation"""

    def test_ticket_status_enum_values(self):
        assert TicketStatus.NEW.value == "new"
        assert TicketStatus.IN_PROGRESS.value == "in_progress"
        assert TicketStatus.RESOLVED.value == "resolved"

    def test_initial_state_transition(self):
        assert can_transition(None, TicketStatus.NEW) is True
        assert can_transition(None, TicketStatus.RESOLVED) is False

    def test_new_transitions(self):
        assert can_transition(TicketStatus.NEW, TicketStatus.IN_PROGRESS) is True
        assert can_transition(TicketStatus.NEW, TicketStatus.RESOLVED) is True

    def test_in_progress_to_resolved(self):
        assert can_transition(TicketStatus.IN_PROGRESS, TicketStatus.RESOLVED) is True
        assert can_transition(TicketStatus.IN_PROGRESS, TicketStatus.NEW) is False

    def test_resolved_reopens_to_in_progress(self):
        assert can_transition(TicketStatus.RESOLVED, TicketStatus.IN_PROGRESS) is True
        assert can_transition(TicketStatus.RESOLVED, TicketStatus.NEW) is False

    def test_get_allowed_transitions(self):
        assert get_allowed_transitions(TicketStatus.RESOLVED) == [TicketStatus.IN_PROGRESS]


class TestStatusAfterUserReply:
    """Only resolved tickets change status when the requester replies"""

    def test_resolved_reopens(self):
        assert status_after_user_reply(TicketStatus.RESOLVED) == TicketStatus.IN_PROGRESS

    def test_new_unchanged(self):
        assert status_after_user_reply(TicketStatus.NEW) is None

    def test_in_progress_unchanged(self):
        assert status_after_user_reply(TicketStatus.IN_PROGRESS) is None
