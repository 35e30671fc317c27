"""Feishu (Lark) group bot channel adapter."""

import json
from typing import Annotated, Any, Literal, Union

from pydantic import Field, TypeAdapter

from pushgate.channels.base import BaseChannel, WireModel, parse_json_field
from pushgate.schemas.template import (
    ChannelConfig,
    ChannelType,
    FieldComponent,
    FieldSpec,
    MessageTemplate,
)
from pushgate.signing import FeishuSigner

POST_CONTENT_FIELD = "content.post.zh_cn.content"
CARD_FIELD = "content.card"

_POST_PLACEHOLDER = json.dumps(
    [
        [
            {"tag": "text", "text": "Project updated: "},
            {"tag": "a", "text": "view details", "href": "http://www.example.com/"},
            {"tag": "at", "user_id": "ou_18eac8********17ad4f02e8bbbb"},
        ]
    ],
    ensure_ascii=False,
)

_CARD_PLACEHOLDER = json.dumps(
    {
        "config": {"wide_screen_mode": True},
        "elements": [
            {
                "tag": "div",
                "text": {"content": "This is an interactive card", "tag": "lark_md"},
            },
            {
                "tag": "action",
                "actions": [
                    {
                        "tag": "button",
                        "text": {"tag": "plain_text", "content": "View details"},
                        "url": "https://example.com",
                        "type": "default",
                    }
                ],
            },
        ],
        "header": {
            "title": {"content": "Notification title", "tag": "plain_text"},
            "template": "blue",
        },
    },
    ensure_ascii=False,
    indent=2,
)

FEISHU_CONFIG = ChannelConfig(
    type=ChannelType.FEISHU,
    label="Feishu Group Bot",
    templates=(
        MessageTemplate(
            type="text",
            name="Text",
            description="Plain text message",
            fields=(
                FieldSpec(key="content.text", description="Text content", required=True,
                          component=FieldComponent.TEXTAREA),
                FieldSpec(key="msg_type", component=FieldComponent.HIDDEN, default_value="text"),
            ),
        ),
        MessageTemplate(
            type="post",
            name="Rich text",
            description="Rich text message with a title and formatted content",
            fields=(
                FieldSpec(key="content.post.zh_cn.title", description="Title", required=True),
                FieldSpec(
                    key=POST_CONTENT_FIELD,
                    description=(
                        "Rich text content (JSON), see "
                        "https://open.feishu.cn/document/client-docs/bot-v3/add-custom-bot"
                    ),
                    required=True,
                    component=FieldComponent.TEXTAREA,
                    placeholder=_POST_PLACEHOLDER,
                ),
                FieldSpec(key="msg_type", component=FieldComponent.HIDDEN, default_value="post"),
            ),
        ),
        MessageTemplate(
            type="interactive",
            name="Interactive card",
            description="Card message with rich interactive elements",
            fields=(
                FieldSpec(
                    key=CARD_FIELD,
                    description=(
                        "Card content (JSON), see "
                        "https://open.feishu.cn/document/ukTMukTMukTM/ugTNwUjL4UDM14CO1ATN"
                    ),
                    required=True,
                    component=FieldComponent.TEXTAREA,
                    placeholder=_CARD_PLACEHOLDER,
                ),
                FieldSpec(key="msg_type", component=FieldComponent.HIDDEN, default_value="interactive"),
            ),
        ),
    ),
)


class _TextContent(WireModel):
    text: str


class FeishuTextMessage(WireModel):
    msg_type: Literal["text"]
    content: _TextContent


class _PostBody(WireModel):
    title: str
    content: Any  # JSON string or list of paragraphs


class _PostLocales(WireModel):
    zh_cn: _PostBody


class _PostContent(WireModel):
    post: _PostLocales


class FeishuPostMessage(WireModel):
    msg_type: Literal["post"]
    content: _PostContent


class _CardContent(WireModel):
    card: Any  # opaque card JSON, only checked for being JSON


class FeishuCardMessage(WireModel):
    msg_type: Literal["interactive"]
    content: _CardContent


FeishuMessage = Annotated[
    Union[FeishuTextMessage, FeishuPostMessage, FeishuCardMessage],
    Field(discriminator="msg_type"),
]


class FeishuChannel(BaseChannel):
    """
    Feishu custom bot webhook.

    Signed requests carry ``timestamp`` (Unix seconds) and ``sign`` at the top
    level of the JSON body. Errors come back as ``{"code": ..., "msg": ...}``.
    """

    config = FEISHU_CONFIG
    message_adapter = TypeAdapter(FeishuMessage)
    signer = FeishuSigner()
    error_field = "msg"

    def build_payload(self, message: dict) -> dict[str, Any]:
        parsed = self.parse_message(message)
        payload = self.dump_message(parsed)

        if isinstance(parsed, FeishuPostMessage):
            body = payload["content"]["post"]["zh_cn"]
            body["content"] = parse_json_field(parsed.content.post.zh_cn.content, POST_CONTENT_FIELD)
        elif isinstance(parsed, FeishuCardMessage):
            payload["content"]["card"] = parse_json_field(parsed.content.card, CARD_FIELD)

        return payload
