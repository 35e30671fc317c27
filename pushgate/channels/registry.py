"""Lookup table from channel type to channel implementation."""

import logging
from functools import partial
from typing import Callable, Optional, Union

from pushgate.channels.base import BaseChannel
from pushgate.channels.dingtalk import DingTalkChannel
from pushgate.channels.discord import DiscordChannel
from pushgate.channels.feishu import FeishuChannel
from pushgate.channels.slack import SlackChannel
from pushgate.channels.validate import suggest_channel_type
from pushgate.channels.wecom import WeComChannel
from pushgate.errors import UnknownChannelError
from pushgate.schemas.template import ChannelType
from pushgate.transport import HttpTransport

logger = logging.getLogger(__name__)

ChannelFactory = Callable[[], BaseChannel]

BUILTIN_CHANNELS: dict[ChannelType, type[BaseChannel]] = {
    ChannelType.FEISHU: FeishuChannel,
    ChannelType.DINGTALK: DingTalkChannel,
    ChannelType.WECOM: WeComChannel,
    ChannelType.SLACK: SlackChannel,
    ChannelType.DISCORD: DiscordChannel,
}


def _key(channel_type: Union[str, ChannelType]) -> str:
    if isinstance(channel_type, ChannelType):
        return channel_type.value
    return str(channel_type).strip().lower()


class ChannelRegistry:
    """
    Maps channel type identifiers to channels.

    Entries are either channel instances or zero-argument factories; a
    factory is called on every ``resolve``. Register everything at startup;
    after that the registry is only read.
    """

    def __init__(self) -> None:
        self._entries: dict[str, Union[BaseChannel, ChannelFactory]] = {}

    def register(
        self,
        channel_type: Union[str, ChannelType],
        channel: Union[BaseChannel, ChannelFactory],
    ) -> None:
        key = _key(channel_type)
        if key in self._entries:
            logger.warning("Replacing registered channel %s", key)
        self._entries[key] = channel

    def resolve(self, channel_type: Union[str, ChannelType]) -> BaseChannel:
        key = _key(channel_type)
        entry = self._entries.get(key)
        if entry is None:
            raise UnknownChannelError(key, suggest_channel_type(key, set(self._entries)))
        if isinstance(entry, BaseChannel):
            return entry
        return entry()

    def types(self) -> list[str]:
        return list(self._entries)

    def channels(self) -> list[BaseChannel]:
        return [self.resolve(key) for key in self._entries]

    def __contains__(self, channel_type: object) -> bool:
        if not isinstance(channel_type, (str, ChannelType)):
            return False
        return _key(channel_type) in self._entries


def create_default_registry(transport: Optional[HttpTransport] = None) -> ChannelRegistry:
    """Build a registry holding every built-in channel, sharing one transport."""
    registry = ChannelRegistry()
    for channel_type, channel_cls in BUILTIN_CHANNELS.items():
        registry.register(channel_type, partial(channel_cls, transport=transport))
    return registry
