"""TicketStatus state machine for the support ticket lifecycle"""

from enum import Enum
from typing import Optional, Dict, List


class TicketStatus(str, Enum):
    """Ticket status enum

    State flow:
    NEW → IN_PROGRESS → RESOLVED
    NEW → RESOLVED (answered in a single reply)
    RESOLVED → IN_PROGRESS (requester replied to a resolved ticket)

    Tickets never move back to NEW. This is deliberately stricter than a
    free-form status field: an admin status endpoint built on Ticket must
    reopen with IN_PROGRESS and will get InvalidStatusTransition for NEW.
    """
    NEW = "new"                  # Submitted, nobody has looked at it yet
    IN_PROGRESS = "in_progress"  # Conversation ongoing
    RESOLVED = "resolved"        # Closed by an administrator, can reopen


# State transition rules
ALLOWED_TRANSITIONS: Dict[Optional[TicketStatus], List[TicketStatus]] = {
    None: [TicketStatus.NEW],
    TicketStatus.NEW: [TicketStatus.IN_PROGRESS, TicketStatus.RESOLVED],
    TicketStatus.IN_PROGRESS: [TicketStatus.RESOLVED],
    TicketStatus.RESOLVED: [TicketStatus.IN_PROGRESS],
}


def can_transition(from_status: Optional[TicketStatus], to_status: TicketStatus) -> bool:
    """Validate if status transition is allowed

    Args:
        from_status: Current status (None for new tickets)
        to_status: Target status

    Returns:
        True if transition is allowed, False otherwise

    Example:
        >>> can_transition(TicketStatus.RESOLVED, TicketStatus.IN_PROGRESS)
        True
        >>> can_transition(TicketStatus.IN_PROGRESS, TicketStatus.NEW)
        False
    """
    allowed = ALLOWED_TRANSITIONS.get(from_status, [])
    return to_status in allowed


def get_allowed_transitions(from_status: Optional[TicketStatus]) -> List[TicketStatus]:
    """Get list of allowed transitions from current status"""
    return ALLOWED_TRANSITIONS.get(from_status, [])


def status_after_user_reply(current: TicketStatus) -> Optional[TicketStatus]:
    """Status a ticket moves to when the requester replies.

    Only resolved tickets are reopened; new and in-progress tickets keep
    their status and simply gain a message.

    Returns:
        The target status, or None when no transition applies
    """
    if current == TicketStatus.RESOLVED:
        return TicketStatus.IN_PROGRESS
    return None
