"""WeCom (WeChat Work) group robot channel adapter."""

from typing import Annotated, Any, Literal, Optional, Union

from pydantic import Field, TypeAdapter, field_validator

from pushgate.channels.base import BaseChannel, WireModel
from pushgate.schemas.template import (
    ChannelConfig,
    ChannelType,
    FieldComponent,
    FieldSpec,
    MessageTemplate,
)

WECOM_CONFIG = ChannelConfig(
    type=ChannelType.WECOM,
    label="WeCom Group Robot",
    discriminator="msgtype",
    templates=(
        MessageTemplate(
            type="text",
            name="Text",
            description="Plain text message",
            fields=(
                FieldSpec(key="text.content", description="Text content", required=True,
                          component=FieldComponent.TEXTAREA),
                FieldSpec(key="text.mentioned_list", description="User ids to @, comma separated",
                          placeholder="wangqing,@all"),
                FieldSpec(key="msgtype", component=FieldComponent.HIDDEN, default_value="text"),
            ),
        ),
        MessageTemplate(
            type="markdown",
            name="Markdown",
            description="Markdown message",
            fields=(
                FieldSpec(key="markdown.content", description="Markdown content", required=True,
                          component=FieldComponent.TEXTAREA),
                FieldSpec(key="msgtype", component=FieldComponent.HIDDEN, default_value="markdown"),
            ),
        ),
    ),
)


class _Text(WireModel):
    content: str
    mentioned_list: Optional[list[str]] = None

    @field_validator("mentioned_list", mode="before")
    @classmethod
    def _split_mentions(cls, value):
        if isinstance(value, str):
            return [m.strip() for m in value.split(",") if m.strip()]
        return value


class _Markdown(WireModel):
    content: str


class WeComTextMessage(WireModel):
    msgtype: Literal["text"]
    text: _Text


class WeComMarkdownMessage(WireModel):
    msgtype: Literal["markdown"]
    markdown: _Markdown


WeComMessage = Annotated[
    Union[WeComTextMessage, WeComMarkdownMessage],
    Field(discriminator="msgtype"),
]


class WeComChannel(BaseChannel):
    """WeCom group robot webhook. The key in the URL is the only credential."""

    config = WECOM_CONFIG
    message_adapter = TypeAdapter(WeComMessage)
    error_field = "errmsg"

    def build_payload(self, message: dict) -> dict[str, Any]:
        return self.dump_message(self.parse_message(message))
