"""DingTalk custom robot channel adapter."""

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
from pushgate.signing import DingTalkSigner

DINGTALK_CONFIG = ChannelConfig(
    type=ChannelType.DINGTALK,
    label="DingTalk Group Robot",
    discriminator="msgtype",
    templates=(
        MessageTemplate(
            type="text",
            name="Text",
            description="Plain text message",
            fields=(
                FieldSpec(key="text.content", description="Text content", required=True,
                          component=FieldComponent.TEXTAREA),
                FieldSpec(key="at.atMobiles", description="Mobile numbers to @, comma separated",
                          placeholder="13800000000,13900000000"),
                FieldSpec(key="at.isAtAll", description="@ everyone", component=FieldComponent.CHECKBOX,
                          default_value=False),
                FieldSpec(key="msgtype", component=FieldComponent.HIDDEN, default_value="text"),
            ),
        ),
        MessageTemplate(
            type="markdown",
            name="Markdown",
            description="Markdown message with a title shown in the conversation list",
            fields=(
                FieldSpec(key="markdown.title", description="Title", required=True),
                FieldSpec(key="markdown.text", description="Markdown content", required=True,
                          component=FieldComponent.TEXTAREA),
                FieldSpec(key="at.atMobiles", description="Mobile numbers to @, comma separated"),
                FieldSpec(key="at.isAtAll", description="@ everyone", component=FieldComponent.CHECKBOX,
                          default_value=False),
                FieldSpec(key="msgtype", component=FieldComponent.HIDDEN, default_value="markdown"),
            ),
        ),
        MessageTemplate(
            type="link",
            name="Link",
            description="Link card with title, summary and optional picture",
            fields=(
                FieldSpec(key="link.title", description="Title", required=True),
                FieldSpec(key="link.text", description="Summary", required=True,
                          component=FieldComponent.TEXTAREA),
                FieldSpec(key="link.messageUrl", description="Target URL", required=True),
                FieldSpec(key="link.picUrl", description="Picture URL"),
                FieldSpec(key="msgtype", component=FieldComponent.HIDDEN, default_value="link"),
            ),
        ),
    ),
)


class _At(WireModel):
    atMobiles: Optional[list[str]] = None
    isAtAll: bool = False

    @field_validator("atMobiles", mode="before")
    @classmethod
    def _split_mobiles(cls, value):
        if isinstance(value, str):
            return [m.strip() for m in value.split(",") if m.strip()]
        return value


class _Text(WireModel):
    content: str


class _Markdown(WireModel):
    title: str
    text: str


class _Link(WireModel):
    title: str
    text: str
    messageUrl: str
    picUrl: Optional[str] = None


class DingTalkTextMessage(WireModel):
    msgtype: Literal["text"]
    text: _Text
    at: Optional[_At] = None


class DingTalkMarkdownMessage(WireModel):
    msgtype: Literal["markdown"]
    markdown: _Markdown
    at: Optional[_At] = None


class DingTalkLinkMessage(WireModel):
    msgtype: Literal["link"]
    link: _Link


DingTalkMessage = Annotated[
    Union[DingTalkTextMessage, DingTalkMarkdownMessage, DingTalkLinkMessage],
    Field(discriminator="msgtype"),
]


class DingTalkChannel(BaseChannel):
    """
    DingTalk custom robot webhook.

    Signed requests carry ``timestamp`` (Unix milliseconds) and ``sign`` as
    query parameters on the webhook URL rather than in the body.
    """

    config = DINGTALK_CONFIG
    message_adapter = TypeAdapter(DingTalkMessage)
    signer = DingTalkSigner()
    error_field = "errmsg"

    def build_payload(self, message: dict) -> dict[str, Any]:
        return self.dump_message(self.parse_message(message))

    def attach_signature(self, payload: dict[str, Any], timestamp: str, sign: str) -> dict[str, str]:
        return {"timestamp": timestamp, "sign": sign}
