"""Tickets domain module - lifecycle, reply extraction, email threading"""

from .exceptions import InboundEmailValidationError, InvalidStatusTransition
from .ports import TicketSnapshot, TicketStorePort
from .reply_extraction import (
    extract_message_body,
    extract_ticket_id,
    html_to_text,
    parse_sender,
)
from .ticket_status import (
    ALLOWED_TRANSITIONS,
    TicketStatus,
    can_transition,
    get_allowed_transitions,
)

__all__ = [
    "InboundEmailValidationError",
    "InvalidStatusTransition",
    "TicketSnapshot",
    "TicketStorePort",
    "extract_message_body",
    "extract_ticket_id",
    "html_to_text",
    "parse_sender",
    "ALLOWED_TRANSITIONS",
    "TicketStatus",
    "can_transition",
    "get_allowed_transitions",
]
