"""Ticket threading for inbound email replies.

Turns a decoded inbound email (as delivered by the relay webhook) into a
new user message on the ticket referenced in its subject, and reopens the
ticket if it had been resolved.

Processing:
1. Validate from/subject are present
2. Extract the ticket id from the subject ("[#<uuid>]")
3. Look up the ticket
4. Resolve sender name (display name, else the ticket's requester name)
5. Clean the body (quoted history and signatures removed)
6. Optionally suppress duplicates redelivered by the relay
7. Insert the message
8. resolved → in_progress

Every "nothing to do" case is an ignored outcome, not an error: the relay
retries on errors, and retrying a reply without a usable ticket id would
never succeed.
"""

import hashlib
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional
from uuid import UUID

from ...models.ticket import SenderType
from ...ratelimit.ports import RateLimitStorePort
from .exceptions import InboundEmailValidationError
from .ports import TicketStorePort
from .reply_extraction import extract_message_body, extract_ticket_id, parse_sender
from .ticket_status import status_after_user_reply

logger = logging.getLogger(__name__)


@dataclass
class InboundEmail:
    """Inbound email fields as posted by the relay."""
    from_: Optional[str]
    subject: Optional[str]
    text: Optional[str] = None
    html: Optional[str] = None
    to: Optional[str] = None


class ThreadingOutcome(str, Enum):
    """Result classification for a processed inbound email."""
    THREADED = "threaded"
    IGNORED_NO_TICKET_ID = "ignored_no_ticket_id"
    IGNORED_TICKET_NOT_FOUND = "ignored_ticket_not_found"
    IGNORED_EMPTY_BODY = "ignored_empty_body"
    IGNORED_DUPLICATE = "ignored_duplicate"


IGNORED_REASONS = {
    ThreadingOutcome.IGNORED_NO_TICKET_ID: "No ticket ID found, email ignored",
    ThreadingOutcome.IGNORED_TICKET_NOT_FOUND: "Ticket not found, email ignored",
    ThreadingOutcome.IGNORED_EMPTY_BODY: "Empty message, email ignored",
    ThreadingOutcome.IGNORED_DUPLICATE: "Duplicate message, email ignored",
}


@dataclass
class ThreadingResult:
    """Outcome of processing one inbound email."""
    outcome: ThreadingOutcome
    ticket_id: Optional[str] = None
    message_id: Optional[UUID] = None
    reopened: bool = False

    @property
    def threaded(self) -> bool:
        return self.outcome == ThreadingOutcome.THREADED

    @property
    def reason(self) -> Optional[str]:
        return IGNORED_REASONS.get(self.outcome)


def dedup_key(from_: str, subject: str, body: str) -> str:
    """Build the duplicate-suppression key for an inbound reply."""
    digest = hashlib.sha256(f"{from_}\n{subject}\n{body}".encode()).hexdigest()
    return f"dedup:{digest}"


class TicketThreadProcessor:
    """Threads inbound email replies onto existing tickets.

    Args:
        store: Ticket store adapter
        dedup_store: Counter store used to remember recent replies; only
            consulted when dedup_ttl_seconds > 0
        dedup_ttl_seconds: How long an identical reply is suppressed
    """

    def __init__(
        self,
        store: TicketStorePort,
        dedup_store: Optional[RateLimitStorePort] = None,
        dedup_ttl_seconds: int = 0,
    ):
        self.store = store
        self.dedup_store = dedup_store
        self.dedup_ttl_seconds = dedup_ttl_seconds
        # Key recorded by the last process() call, until its result is committed
        self.pending_dedup_key: Optional[str] = None

    def _is_duplicate(self, from_: str, subject: str, body: str) -> bool:
        if self.dedup_store is None or self.dedup_ttl_seconds <= 0:
            return False
        key = dedup_key(from_, subject, body)
        # Ceiling of 1: the first delivery passes, repeats within the TTL do not
        if self.dedup_store.increment(key, self.dedup_ttl_seconds, 1):
            return True
        self.pending_dedup_key = key
        return False

    def discard_dedup_mark(self) -> None:
        """Forget the reply recorded by the last process() call.

        Called when the transaction holding the message is rolled back, so
        a redelivery of the same reply is threaded instead of being
        ignored as a duplicate.
        """
        if self.pending_dedup_key is None:
            return
        self.dedup_store.delete(self.pending_dedup_key)
        logger.info("Discarded dedup mark for rolled back reply")
        self.pending_dedup_key = None

    def process(self, email: InboundEmail) -> ThreadingResult:
        """Thread one inbound email onto its ticket.

        Args:
            email: Decoded relay payload

        Returns:
            ThreadingResult: THREADED or one of the IGNORED_* outcomes

        Raises:
            InboundEmailValidationError: If from or subject is missing
            Exception: Store failures propagate to the caller
        """
        self.pending_dedup_key = None

        if not email.from_ or not email.subject:
            raise InboundEmailValidationError("Missing required fields")

        ticket_id = extract_ticket_id(email.subject)
        if not ticket_id:
            logger.info(f"No ticket ID found in subject: {email.subject}")
            return ThreadingResult(outcome=ThreadingOutcome.IGNORED_NO_TICKET_ID)

        logger.info(
            f"Processing reply for ticket: {ticket_id}",
            extra={"ticket_id": ticket_id},
        )

        ticket = self.store.find_by_id(ticket_id)
        if not ticket:
            logger.info(f"Ticket not found: {ticket_id}")
            return ThreadingResult(
                outcome=ThreadingOutcome.IGNORED_TICKET_NOT_FOUND,
                ticket_id=ticket_id,
            )

        display_name, sender_email = parse_sender(email.from_)
        sender_name = display_name or ticket.requester_name

        body = extract_message_body(email.text, email.html)
        if not body:
            logger.info(f"Empty message body for ticket {ticket_id}")
            return ThreadingResult(
                outcome=ThreadingOutcome.IGNORED_EMPTY_BODY,
                ticket_id=ticket_id,
            )

        if self._is_duplicate(sender_email, email.subject, body):
            logger.warning(
                f"Duplicate reply from {sender_email} for ticket {ticket_id}, skipping"
            )
            return ThreadingResult(
                outcome=ThreadingOutcome.IGNORED_DUPLICATE,
                ticket_id=ticket_id,
            )

        message_id = self.store.insert_message(
            ticket_id=ticket.id,
            sender_type=SenderType.USER.value,
            sender_name=sender_name,
            body=body,
        )
        logger.info(
            f"Message {message_id} saved for ticket {ticket_id}",
            extra={"ticket_id": ticket_id},
        )

        reopened = False
        target = status_after_user_reply(ticket.status)
        if target is not None:
            self.store.update_status(ticket.id, target)
            reopened = True
            logger.info(f"Ticket {ticket_id} status updated to {target.value}")

        return ThreadingResult(
            outcome=ThreadingOutcome.THREADED,
            ticket_id=ticket_id,
            message_id=message_id,
            reopened=reopened,
        )
