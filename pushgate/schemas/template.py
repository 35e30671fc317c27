"""Static message template catalog models."""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field, model_validator


class ChannelType(str, Enum):
    FEISHU = "feishu"
    DINGTALK = "dingtalk"
    WECOM = "wecom"
    SLACK = "slack"
    DISCORD = "discord"


class FieldComponent(str, Enum):
    """UI hint for rendering a template field."""

    INPUT = "input"
    TEXTAREA = "textarea"
    HIDDEN = "hidden"
    SELECT = "select"
    CHECKBOX = "checkbox"


class FieldSpec(BaseModel):
    """
    One editable leaf of a message.

    ``key`` is a dotted path into the message payload (e.g.
    ``content.post.zh_cn.title``). It is consumed by the form renderer only.
    """

    key: str
    description: str = ""
    required: bool = False
    component: FieldComponent = FieldComponent.INPUT
    default_value: Optional[Any] = None
    placeholder: Optional[str] = None

    model_config = {"frozen": True}


class MessageTemplate(BaseModel):
    type: str
    name: str
    description: str = ""
    fields: tuple[FieldSpec, ...]

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def _check_discriminant(self) -> "MessageTemplate":
        hidden = [f for f in self.fields if f.component == FieldComponent.HIDDEN]
        if len(hidden) != 1:
            raise ValueError(
                f"Template '{self.type}' must have exactly one hidden field, found {len(hidden)}"
            )
        if hidden[0].default_value != self.type:
            raise ValueError(
                f"Template '{self.type}' hidden field '{hidden[0].key}' must default to '{self.type}'"
            )
        return self

    @property
    def discriminant(self) -> FieldSpec:
        return next(f for f in self.fields if f.component == FieldComponent.HIDDEN)


class ChannelConfig(BaseModel):
    type: ChannelType
    label: str
    discriminator: str = "msg_type"
    templates: tuple[MessageTemplate, ...] = Field(min_length=1)

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def _check_templates(self) -> "ChannelConfig":
        seen: set[str] = set()
        for template in self.templates:
            if template.type in seen:
                raise ValueError(f"Duplicate template type: {template.type}")
            seen.add(template.type)
            if template.discriminant.key != self.discriminator:
                raise ValueError(
                    f"Template '{template.type}' hidden field must be '{self.discriminator}'"
                )
        return self

    def get_template(self, template_type: str) -> Optional[MessageTemplate]:
        for template in self.templates:
            if template.type == template_type:
                return template
        return None
