"""Error taxonomy for channel delivery."""

from typing import Optional


class PushgateError(Exception):
    """Base class for every error raised by a channel or the registry."""


class ConfigurationError(PushgateError):
    """A required delivery option is missing or malformed. Not retryable."""


class PayloadFormatError(PushgateError):
    """A caller-supplied message field is malformed.

    ``field`` is the dotted path of the logical field that failed, so a bad
    rich-text body and a bad card body are distinguishable.
    """

    def __init__(self, field: str, message: Optional[str] = None):
        self.field = field
        super().__init__(message or f"invalid JSON in field {field}")


class DeliveryError(PushgateError):
    """The remote endpoint answered with a non-success status."""

    def __init__(self, status_code: int, remote_message: Optional[str] = None):
        self.status_code = status_code
        self.remote_message = remote_message
        if remote_message:
            detail = f"delivery failed: {remote_message}"
        else:
            detail = f"delivery failed with status {status_code}"
        super().__init__(detail)


class UnknownChannelError(PushgateError):
    def __init__(
        self,
        channel_type: str,
        suggestion: Optional[str] = None,
        message: Optional[str] = None,
    ):
        self.channel_type = channel_type
        self.suggestion = suggestion
        hint = f" Did you mean '{suggestion}'?" if suggestion else ""
        super().__init__(message or f"Unknown channel type: {channel_type}.{hint}")
