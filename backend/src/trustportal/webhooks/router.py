"""Webhooks Router

Handles inbound webhooks from the email relay (SendGrid Inbound Parse style).
These endpoints don't require authentication. A reply is only threaded when
its subject carries the id of an existing ticket, so correctness relies on
ticket ids being unguessable UUIDs.

Response policy: everything except a malformed payload is answered with
200, including internal errors, because the relay retries non-2xx
responses and a retry cannot fix any of those cases.
"""

import logging
from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Form, Request, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from ..database import get_db
from ..domain.tickets.exceptions import InboundEmailValidationError
from ..domain.tickets.thread_processor import InboundEmail, TicketThreadProcessor
from ..infrastructure.repositories.ticket_repository import SqlAlchemyTicketStore
from ..observability.metrics import inbound_emails_total
from .schemas import InboundEmailIgnored, InboundEmailThreaded, WebhookError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/webhooks", tags=["Webhooks"])

INTERNAL_ERROR_MESSAGE = "Internal error, logged"


def get_thread_processor(
    request: Request,
    db: Annotated[Session, Depends(get_db)],
) -> TicketThreadProcessor:
    """Build a TicketThreadProcessor bound to the request's DB session."""
    settings = request.app.state.settings
    return TicketThreadProcessor(
        store=SqlAlchemyTicketStore(db),
        dedup_store=request.app.state.rate_limit_store,
        dedup_ttl_seconds=settings.INBOUND_DEDUP_TTL_SECONDS,
    )


@router.post(
    "/inbound-email",
    responses={
        200: {"model": InboundEmailThreaded, "description": "Threaded or ignored"},
        400: {"model": WebhookError, "description": "Missing from or subject"},
    },
)
def receive_inbound_email(
    db: Annotated[Session, Depends(get_db)],
    processor: Annotated[TicketThreadProcessor, Depends(get_thread_processor)],
    from_: Annotated[Optional[str], Form(alias="from")] = None,
    to: Annotated[Optional[str], Form()] = None,
    subject: Annotated[Optional[str], Form()] = None,
    text: Annotated[Optional[str], Form()] = None,
    html: Annotated[Optional[str], Form()] = None,
    envelope: Annotated[Optional[str], Form()] = None,
) -> JSONResponse:
    """Receive a parsed email from the relay and thread it onto its ticket.

    Form fields: from, to, subject, text, html, envelope (envelope is
    accepted but unused). Attachments are ignored.

    Returns:
        200 {"success": true, "ticketId", "messageId"}: reply threaded
        200 {"message": reason}: ignored or internal error (logged)
        400 {"error": "Missing required fields"}: from/subject absent
    """
    logger.info("Received inbound email webhook")

    email = InboundEmail(from_=from_, subject=subject, text=text, html=html, to=to)

    try:
        result = processor.process(email)
        db.commit()
    except InboundEmailValidationError as e:
        logger.info(f"Rejected inbound email: {e}")
        inbound_emails_total.labels(outcome="invalid").inc()
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=WebhookError(error="Missing required fields").model_dump(),
        )
    except Exception:
        db.rollback()
        processor.discard_dedup_mark()
        logger.error(
            f"Error processing inbound email (subject={subject!r})",
            exc_info=True,
        )
        inbound_emails_total.labels(outcome="error").inc()
        return JSONResponse(
            status_code=status.HTTP_200_OK,
            content=InboundEmailIgnored(message=INTERNAL_ERROR_MESSAGE).model_dump(),
        )

    inbound_emails_total.labels(outcome=result.outcome.value).inc()
    logger.info(
        f"Inbound email processed: {result.outcome.value}",
        extra={"ticket_id": result.ticket_id, "outcome": result.outcome.value},
    )

    if not result.threaded:
        return JSONResponse(
            status_code=status.HTTP_200_OK,
            content=InboundEmailIgnored(message=result.reason).model_dump(),
        )

    body = InboundEmailThreaded(ticket_id=result.ticket_id, message_id=result.message_id)
    return JSONResponse(
        status_code=status.HTTP_200_OK,
        content=body.model_dump(mode="json", by_alias=True),
    )
