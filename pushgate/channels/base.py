"""Common contract for every notification channel."""

import json
import logging
from abc import ABC, abstractmethod
from typing import Any, Optional

import httpx
from pydantic import BaseModel, TypeAdapter, ValidationError

from pushgate.channels import DeliveryOptions
from pushgate.channels.validate import validate_endpoint
from pushgate.errors import DeliveryError, PayloadFormatError
from pushgate.schemas.template import ChannelConfig, MessageTemplate
from pushgate.signing import SigningStrategy
from pushgate.transport import HttpTransport

logger = logging.getLogger(__name__)


class WireModel(BaseModel):
    """Message model that keeps fields it does not declare, so they reach the wire."""

    model_config = {"extra": "allow"}


def ensure_serializable(value: Any, field: str) -> Any:
    """Raise ``PayloadFormatError`` if *value* cannot be encoded as JSON."""
    try:
        json.dumps(value)
    except (TypeError, ValueError):
        raise PayloadFormatError(field, f"field {field} is not JSON serializable")
    return value


def parse_json_field(value: Any, field: str) -> Any:
    """Parse *value* as JSON if it arrived as a string; structured values pass through."""
    if not isinstance(value, str):
        return ensure_serializable(value, field)
    try:
        return json.loads(value)
    except json.JSONDecodeError:
        raise PayloadFormatError(field)


class BaseChannel(ABC):
    """
    One group-chat webhook integration.

    Subclasses declare their static ``config`` (label and template catalog),
    a pydantic ``message_adapter`` describing the tagged message union, an
    optional ``signer`` and the name of the error field in the remote
    service's JSON error body. ``send_message`` runs the shared pipeline:
    endpoint check, validation, normalization, signing, one POST.
    """

    config: ChannelConfig
    message_adapter: TypeAdapter
    signer: Optional[SigningStrategy] = None
    error_field: str = "msg"
    # False for services whose payload has no type tag of its own
    wire_discriminator: bool = True

    def __init__(self, transport: Optional[HttpTransport] = None):
        self.transport = transport or HttpTransport()

    @property
    def channel_type(self) -> str:
        return self.config.type.value

    def get_label(self) -> str:
        return self.config.label

    def get_templates(self) -> tuple[MessageTemplate, ...]:
        return self.config.templates

    # --- Message pipeline ---

    def parse_message(self, message: dict) -> BaseModel:
        """Validate *message* against the channel's tagged union."""
        discriminator = self.config.discriminator
        if not isinstance(message, dict):
            raise PayloadFormatError("message", "message must be a JSON object")
        try:
            return self.message_adapter.validate_python(message)
        except ValidationError as e:
            err = e.errors()[0]
            loc = [str(part) for part in err["loc"]]
            if err["type"].startswith("union_tag"):
                raise PayloadFormatError(
                    discriminator,
                    f"unsupported {discriminator}: {message.get(discriminator)!r}",
                )
            # Discriminated unions prefix the location with the tag value
            if loc and loc[0] == str(message.get(discriminator)):
                loc = loc[1:]
            field = ".".join(loc) or discriminator
            raise PayloadFormatError(field, f"invalid field {field}: {err['msg']}")

    def dump_message(self, message: BaseModel) -> dict[str, Any]:
        payload = message.model_dump(exclude_none=True)
        if not self.wire_discriminator:
            payload.pop(self.config.discriminator, None)
        return payload

    @abstractmethod
    def build_payload(self, message: dict) -> dict[str, Any]:
        """Validate and normalize *message* into the wire payload."""
        ...

    def attach_signature(
        self,
        payload: dict[str, Any],
        timestamp: str,
        sign: str,
    ) -> Optional[dict[str, str]]:
        """
        Attach a signature to the outgoing request.

        The default places ``timestamp`` and ``sign`` at the top level of the
        body. Returns query parameters to add to the URL, if any.
        """
        payload["timestamp"] = timestamp
        payload["sign"] = sign
        return None

    def extract_error(self, response: httpx.Response) -> Optional[str]:
        """Pull the remote error text out of a failed response, if parseable."""
        try:
            data = response.json()
        except ValueError:
            return None
        if isinstance(data, dict):
            message = data.get(self.error_field)
            if message:
                return str(message)
        return None

    async def send_message(self, message: dict, options: DeliveryOptions) -> httpx.Response:
        """
        Deliver *message* to ``options.endpoint``.

        Raises:
            ConfigurationError: the endpoint is missing or malformed.
            PayloadFormatError: the message does not match any template shape,
                or a JSON-encoded field could not be parsed,
                or part of it cannot be encoded as JSON.
            DeliveryError: the remote service answered with a non-2xx status.
        """
        endpoint = validate_endpoint(options.endpoint)
        payload = ensure_serializable(self.build_payload(message), "message")

        params = None
        if options.secret:
            if self.signer is not None:
                timestamp = self.signer.timestamp()
                sign = self.signer.sign(options.secret, timestamp)
                params = self.attach_signature(payload, timestamp, sign)
            else:
                logger.debug("Channel %s does not sign requests; ignoring secret", self.channel_type)

        response = await self.transport.post_json(endpoint, payload, params=params)

        if not response.is_success:
            remote_message = self.extract_error(response)
            logger.warning(
                "Channel %s returned status %s: %s",
                self.channel_type,
                response.status_code,
                remote_message or response.text[:200],
            )
            raise DeliveryError(response.status_code, remote_message)

        logger.info(
            "Sent %s message via %s",
            message.get(self.config.discriminator, "message"),
            self.channel_type,
        )
        return response
