"""Pydantic schemas for the inbound email webhook responses"""

from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class InboundEmailThreaded(BaseModel):
    """Reply was stored as a new ticket message"""
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    ticket_id: str = Field(..., alias="ticketId", description="Ticket the reply was threaded onto")
    message_id: UUID = Field(..., alias="messageId", description="Created ticket message")


class InboundEmailIgnored(BaseModel):
    """Delivery acknowledged without creating anything (no retry wanted)"""

    message: str = Field(..., description="Why the email was ignored")


class WebhookError(BaseModel):
    """Malformed delivery"""

    error: str
