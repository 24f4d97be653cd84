"""Exceptions raised by the ticket domain."""


class InboundEmailValidationError(ValueError):
    """Inbound email payload is missing required fields (from/subject)."""


class InvalidStatusTransition(ValueError):
    """Ticket status change not permitted by the lifecycle."""
