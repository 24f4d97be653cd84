"""Pydantic schemas for the contact form API"""

from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class ContactSubmission(BaseModel):
    """Contact form payload.

    Fields are optional at the schema level so that missing values produce
    the portal's own 400 message instead of a generic 422.
    """
    name: Optional[str] = None
    email: Optional[str] = None
    organization: Optional[str] = None
    subject: Optional[str] = None
    message: Optional[str] = None


class ContactSubmitted(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    message: str = "Contact form submitted successfully"
    ticket_id: UUID = Field(..., alias="ticketId")
