"""Contact form API

Public endpoint that opens a support ticket. Submissions trigger outgoing
notification email, so the endpoint is guarded by the email rate limiter
(per client IP and per submitted email address).
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..database import get_db
from ..infrastructure.repositories.ticket_repository import SqlAlchemyTicketStore
from ..ratelimit.dependencies import email_rate_limit
from .schemas import ContactSubmission, ContactSubmitted

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/contact", tags=["Contact"])

REQUIRED_FIELDS_MESSAGE = "Name, email, subject, and message are required"


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=ContactSubmitted,
    dependencies=[Depends(email_rate_limit)],
)
def submit_contact(
    submission: ContactSubmission,
    db: Annotated[Session, Depends(get_db)],
) -> JSONResponse:
    """Submit the contact form, creating a ticket in status 'new'.

    Returns:
        201 {"success": true, "message", "ticketId"}
        400 {"error"}: a required field is missing
        429 {"error"}: rate limit exceeded
        500 {"error"}: the ticket could not be stored
    """
    if not (submission.name and submission.email and submission.subject and submission.message):
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": REQUIRED_FIELDS_MESSAGE},
        )

    store = SqlAlchemyTicketStore(db)
    try:
        ticket = store.create_ticket(
            name=submission.name,
            email=submission.email,
            organization=submission.organization,
            subject=submission.subject,
            message=submission.message,
        )
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Failed to store contact submission: {e}", exc_info=True)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Failed to submit contact form"},
        )

    logger.info(f"Contact submission stored as ticket {ticket.id}")

    return JSONResponse(
        status_code=status.HTTP_201_CREATED,
        content=ContactSubmitted(ticket_id=ticket.id).model_dump(mode="json", by_alias=True),
    )
