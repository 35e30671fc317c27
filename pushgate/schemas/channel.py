"""Pydantic schemas for the channel API."""

from typing import Any, Optional

from pydantic import BaseModel, Field

from pushgate.schemas.template import MessageTemplate


class ChannelSummary(BaseModel):
    type: str
    label: str


class ChannelTemplates(BaseModel):
    type: str
    label: str
    templates: list[MessageTemplate]


class DeliveryOptionsIn(BaseModel):
    endpoint: str = Field("", description="Webhook URL to deliver to")
    secret: Optional[str] = Field(None, description="Shared signing secret, if the bot requires one")


class SendMessageRequest(BaseModel):
    message: dict = Field(..., description="Message payload matching one of the channel's templates")
    options: DeliveryOptionsIn


class SendMessageResponse(BaseModel):
    channel: str
    status_code: int
    body: Optional[Any] = None
