"""Slack channel adapter."""

import json
from typing import Annotated, Any, Literal, Optional, Union

import httpx
from pydantic import Field, TypeAdapter

from pushgate.channels.base import BaseChannel, WireModel, parse_json_field
from pushgate.schemas.template import (
    ChannelConfig,
    ChannelType,
    FieldComponent,
    FieldSpec,
    MessageTemplate,
)

BLOCKS_FIELD = "blocks"

SLACK_CONFIG = ChannelConfig(
    type=ChannelType.SLACK,
    label="Slack Incoming Webhook",
    templates=(
        MessageTemplate(
            type="text",
            name="Text",
            description="Plain mrkdwn text message",
            fields=(
                FieldSpec(key="text", description="Message text", required=True,
                          component=FieldComponent.TEXTAREA),
                FieldSpec(key="msg_type", component=FieldComponent.HIDDEN, default_value="text"),
            ),
        ),
        MessageTemplate(
            type="blocks",
            name="Blocks",
            description="Block Kit layout",
            fields=(
                FieldSpec(key="text", description="Fallback text for notifications", required=True),
                FieldSpec(
                    key=BLOCKS_FIELD,
                    description="Blocks (JSON), see https://api.slack.com/block-kit",
                    required=True,
                    component=FieldComponent.TEXTAREA,
                    placeholder=json.dumps(
                        [{"type": "section", "text": {"type": "mrkdwn", "text": "*New deploy* finished"}}],
                        indent=2,
                    ),
                ),
                FieldSpec(key="msg_type", component=FieldComponent.HIDDEN, default_value="blocks"),
            ),
        ),
    ),
)


class SlackTextMessage(WireModel):
    msg_type: Literal["text"]
    text: str


class SlackBlocksMessage(WireModel):
    msg_type: Literal["blocks"]
    text: Optional[str] = None
    blocks: Any


SlackMessage = Annotated[
    Union[SlackTextMessage, SlackBlocksMessage],
    Field(discriminator="msg_type"),
]


class SlackChannel(BaseChannel):
    """
    Slack incoming webhook.

    Slack payloads have no type tag, so ``msg_type`` only selects the
    template and is dropped before sending. Errors are plain-text bodies
    such as ``invalid_token``.
    """

    config = SLACK_CONFIG
    message_adapter = TypeAdapter(SlackMessage)
    wire_discriminator = False

    def build_payload(self, message: dict) -> dict[str, Any]:
        parsed = self.parse_message(message)
        payload = self.dump_message(parsed)
        if isinstance(parsed, SlackBlocksMessage):
            payload["blocks"] = parse_json_field(parsed.blocks, BLOCKS_FIELD)
        return payload

    def extract_error(self, response: httpx.Response) -> Optional[str]:
        text = response.text.strip()
        return text[:200] or None
