"""Base types for notification channel adapters."""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class DeliveryOptions:
    """Where to deliver a message, and the optional shared signing secret."""
    endpoint: str
    secret: Optional[str] = None
