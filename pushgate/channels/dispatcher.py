"""Route send requests to channels, one at a time or concurrently."""

import asyncio
import logging
from dataclasses import dataclass
from typing import Optional, Union
from urllib.parse import urlsplit

import httpx

from pushgate.channels import DeliveryOptions
from pushgate.channels.detect import detect_channel_type
from pushgate.channels.registry import ChannelRegistry
from pushgate.channels.validate import validate_endpoint
from pushgate.errors import DeliveryError, PushgateError, UnknownChannelError
from pushgate.schemas.template import ChannelType

logger = logging.getLogger(__name__)


@dataclass
class DispatchTarget:
    """One message bound for one channel. ``channel_type=None`` auto-detects from the endpoint."""
    channel_type: Optional[Union[str, ChannelType]]
    message: dict
    options: DeliveryOptions


@dataclass
class DispatchOutcome:
    channel_type: Optional[str]
    success: bool
    status_code: Optional[int] = None
    error: Optional[str] = None


def resolve_channel_type(
    channel_type: Optional[Union[str, ChannelType]],
    options: DeliveryOptions,
) -> Union[str, ChannelType]:
    """Return *channel_type*, or infer it from the endpoint URL when not given."""
    if channel_type:
        return channel_type
    endpoint = validate_endpoint(options.endpoint)
    detected = detect_channel_type(endpoint)
    if detected is None:
        raise UnknownChannelError(
            "",
            message=f"Cannot detect channel type from endpoint host {urlsplit(endpoint).hostname}",
        )
    return detected


def _reported_type(target: DispatchTarget) -> Optional[str]:
    try:
        resolved = resolve_channel_type(target.channel_type, target.options)
    except PushgateError:
        resolved = target.channel_type
    return str(getattr(resolved, "value", resolved or "")) or None


async def dispatch_message(
    registry: ChannelRegistry,
    channel_type: Optional[Union[str, ChannelType]],
    message: dict,
    options: DeliveryOptions,
) -> httpx.Response:
    """
    Resolve the channel and send one message.

    Errors from the channel (and transport errors) propagate unchanged.
    """
    channel = registry.resolve(resolve_channel_type(channel_type, options))
    return await channel.send_message(message, options)


async def dispatch_many(
    registry: ChannelRegistry,
    targets: list[DispatchTarget],
) -> list[DispatchOutcome]:
    """
    Send every target concurrently and report one outcome per target, in order.

    Failures are recorded in the outcome instead of raised. Each outcome names the
    channel type that was used, including auto-detected ones.
    """
    channel_types = [_reported_type(target) for target in targets]
    tasks = [
        dispatch_message(registry, target.channel_type, target.message, target.options)
        for target in targets
    ]
    results = await asyncio.gather(*tasks, return_exceptions=True)

    outcomes = []
    for channel_type, result in zip(channel_types, results):
        if isinstance(result, httpx.Response):
            outcomes.append(DispatchOutcome(channel_type, True, status_code=result.status_code))
        elif isinstance(result, DeliveryError):
            outcomes.append(DispatchOutcome(channel_type, False, status_code=result.status_code,
                                            error=str(result)))
        elif isinstance(result, PushgateError):
            outcomes.append(DispatchOutcome(channel_type, False, error=str(result)))
        else:
            logger.error("Failed to dispatch to channel %s: %s", channel_type, result, exc_info=result)
            outcomes.append(DispatchOutcome(channel_type, False, error=str(result) or type(result).__name__))

    sent = sum(1 for o in outcomes if o.success)
    logger.info("Dispatched %d/%d messages", sent, len(outcomes))
    return outcomes
