"""Routes for the channel catalog and message delivery."""

import logging

import httpx
from fastapi import APIRouter, Depends, HTTPException

from pushgate.channels import DeliveryOptions
from pushgate.channels.registry import ChannelRegistry, create_default_registry
from pushgate.errors import (
    ConfigurationError,
    DeliveryError,
    PayloadFormatError,
    UnknownChannelError,
)
from pushgate.response import single_response
from pushgate.schemas.channel import (
    ChannelSummary,
    ChannelTemplates,
    SendMessageRequest,
    SendMessageResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/channels", tags=["channels"])

_registry = create_default_registry()


def get_registry() -> ChannelRegistry:
    return _registry


def _resolve(channel_type: str, registry: ChannelRegistry):
    try:
        return registry.resolve(channel_type)
    except UnknownChannelError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.get("", summary="List available channels")
async def list_channels(registry: ChannelRegistry = Depends(get_registry)):
    items = [
        ChannelSummary(type=channel.channel_type, label=channel.get_label())
        for channel in registry.channels()
    ]
    return single_response(items)


@router.get("/{channel_type}/templates", summary="List message templates for a channel")
async def list_templates(channel_type: str, registry: ChannelRegistry = Depends(get_registry)):
    channel = _resolve(channel_type, registry)
    return single_response(
        ChannelTemplates(
            type=channel.channel_type,
            label=channel.get_label(),
            templates=list(channel.get_templates()),
        )
    )


@router.post("/{channel_type}/messages", summary="Send a message through a channel")
async def send_message(
    channel_type: str,
    body: SendMessageRequest,
    registry: ChannelRegistry = Depends(get_registry),
):
    channel = _resolve(channel_type, registry)
    options = DeliveryOptions(endpoint=body.options.endpoint, secret=body.options.secret)

    try:
        response = await channel.send_message(body.message, options)
    except ConfigurationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except PayloadFormatError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except DeliveryError as e:
        raise HTTPException(status_code=502, detail=str(e))
    except httpx.HTTPError as e:
        logger.warning("Transport error sending via %s: %s", channel.channel_type, e)
        raise HTTPException(status_code=502, detail="Could not reach the webhook endpoint")

    try:
        remote_body = response.json()
    except ValueError:
        remote_body = response.text or None

    return single_response(
        SendMessageResponse(
            channel=channel.channel_type,
            status_code=response.status_code,
            body=remote_body,
        )
    )
