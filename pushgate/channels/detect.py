"""Auto-detection of channel type from a webhook URL."""

from typing import Optional

from pushgate.schemas.template import ChannelType


def detect_channel_type(url: str) -> Optional[ChannelType]:
    """
    Detect the channel type from a webhook URL.

    Returns:
        The matching ChannelType, or None when the URL is not recognised.
    """
    url_lower = url.lower()

    if "open.feishu.cn/open-apis/bot" in url_lower or "open.larksuite.com/open-apis/bot" in url_lower:
        return ChannelType.FEISHU

    if "oapi.dingtalk.com/robot/send" in url_lower:
        return ChannelType.DINGTALK

    if "qyapi.weixin.qq.com/cgi-bin/webhook" in url_lower:
        return ChannelType.WECOM

    if "hooks.slack.com/" in url_lower:
        return ChannelType.SLACK

    if "discord.com/api/webhooks" in url_lower or "discordapp.com/api/webhooks" in url_lower:
        return ChannelType.DISCORD

    return None
