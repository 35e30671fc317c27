"""Discord channel adapter."""

import json
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import Field, TypeAdapter

from pushgate.channels.base import BaseChannel, WireModel, parse_json_field
from pushgate.schemas.template import (
    ChannelConfig,
    ChannelType,
    FieldComponent,
    FieldSpec,
    MessageTemplate,
)

EMBEDS_FIELD = "embeds"

DISCORD_CONFIG = ChannelConfig(
    type=ChannelType.DISCORD,
    label="Discord Webhook",
    templates=(
        MessageTemplate(
            type="text",
            name="Text",
            description="Plain text message",
            fields=(
                FieldSpec(key="content", description="Message content", required=True,
                          component=FieldComponent.TEXTAREA),
                FieldSpec(key="username", description="Override the webhook's display name"),
                FieldSpec(key="msg_type", component=FieldComponent.HIDDEN, default_value="text"),
            ),
        ),
        MessageTemplate(
            type="embed",
            name="Embed",
            description="Rich embed message",
            fields=(
                FieldSpec(key="content", description="Text shown above the embeds"),
                FieldSpec(
                    key=EMBEDS_FIELD,
                    description="Embeds (JSON array)",
                    required=True,
                    component=FieldComponent.TEXTAREA,
                    placeholder=json.dumps(
                        [{"title": "New Submission", "color": 0xD4A843,
                          "fields": [{"name": "Status", "value": "ok", "inline": True}]}],
                        indent=2,
                    ),
                ),
                FieldSpec(key="username", description="Override the webhook's display name"),
                FieldSpec(key="msg_type", component=FieldComponent.HIDDEN, default_value="embed"),
            ),
        ),
    ),
)


class DiscordTextMessage(WireModel):
    msg_type: Literal["text"]
    content: str
    username: Optional[str] = None


class DiscordEmbedMessage(WireModel):
    msg_type: Literal["embed"]
    content: Optional[str] = None
    embeds: Any
    username: Optional[str] = None


DiscordMessage = Annotated[
    Union[DiscordTextMessage, DiscordEmbedMessage],
    Field(discriminator="msg_type"),
]


class DiscordChannel(BaseChannel):
    """Discord webhook. Success is ``204 No Content``; errors carry ``message``."""

    config = DISCORD_CONFIG
    message_adapter = TypeAdapter(DiscordMessage)
    error_field = "message"
    wire_discriminator = False

    def build_payload(self, message: dict) -> dict[str, Any]:
        parsed = self.parse_message(message)
        payload = self.dump_message(parsed)
        if isinstance(parsed, DiscordEmbedMessage):
            payload["embeds"] = parse_json_field(parsed.embeds, EMBEDS_FIELD)
        return payload
