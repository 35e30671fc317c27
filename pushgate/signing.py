"""
Webhook signing strategies.

Each group-chat service authenticates custom bots with its own variant of an
HMAC-SHA256 signature over a timestamp and a shared secret. A strategy only
computes the token; attaching it to the request is up to the channel.
"""

import base64
import hashlib
import hmac
import time
from abc import ABC, abstractmethod


class SigningStrategy(ABC):
    """Compute an authentication token from a shared secret and a timestamp."""

    @abstractmethod
    def timestamp(self) -> str:
        """Current timestamp in the unit the remote service expects."""
        ...

    @abstractmethod
    def sign(self, secret: str, timestamp: str) -> str:
        ...


class FeishuSigner(SigningStrategy):
    """
    Feishu custom bot signature.

    The HMAC key is ``"{timestamp}\\n{secret}"`` and the authenticated message
    is the secret itself; the digest is base64 encoded. Timestamps are Unix
    seconds.
    """

    def timestamp(self) -> str:
        return str(int(time.time()))

    def sign(self, secret: str, timestamp: str) -> str:
        string_to_sign = f"{timestamp}\n{secret}"
        hmac_code = hmac.new(
            string_to_sign.encode("utf-8"),
            secret.encode("utf-8"),
            digestmod=hashlib.sha256,
        ).digest()
        return base64.b64encode(hmac_code).decode("utf-8")


class DingTalkSigner(SigningStrategy):
    """
    DingTalk custom robot signature.

    Key is the secret, message is ``"{timestamp}\\n{secret}"``; the digest is
    base64 encoded. It travels as a query parameter, so the transport
    URL-encodes it. Timestamps are Unix milliseconds.
    """

    def timestamp(self) -> str:
        return str(int(time.time() * 1000))

    def sign(self, secret: str, timestamp: str) -> str:
        string_to_sign = f"{timestamp}\n{secret}"
        hmac_code = hmac.new(
            secret.encode("utf-8"),
            string_to_sign.encode("utf-8"),
            digestmod=hashlib.sha256,
        ).digest()
        return base64.b64encode(hmac_code).decode("utf-8")
