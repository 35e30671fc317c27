"""Validation of delivery options and channel type names."""

from typing import Optional
from urllib.parse import urlparse

from pushgate.errors import ConfigurationError

# Common typos -> correct type
_CHANNEL_SUGGESTIONS: dict[str, str] = {
    "fieshu": "feishu",
    "feishu-bot": "feishu",
    "lark": "feishu",
    "larksuite": "feishu",
    "dingding": "dingtalk",
    "ding": "dingtalk",
    "dingtalk-bot": "dingtalk",
    "wechat-work": "wecom",
    "wework": "wecom",
    "weixin": "wecom",
    "qywx": "wecom",
    "slak": "slack",
    "sclack": "slack",
    "discrod": "discord",
    "dicord": "discord",
    "disocrd": "discord",
}


def suggest_channel_type(input_type: str, valid_types: Optional[set[str]] = None) -> Optional[str]:
    """Return a suggestion if the input looks like a typo of a valid type."""
    if valid_types is not None and input_type in valid_types:
        return None
    suggestion = _CHANNEL_SUGGESTIONS.get(input_type.lower())
    if valid_types is not None and suggestion not in valid_types:
        return None
    return suggestion


def validate_endpoint(endpoint: Optional[str]) -> str:
    """
    Check that *endpoint* is a usable http(s) URL.

    Returns the endpoint unchanged, or raises ``ConfigurationError``.
    """
    if not isinstance(endpoint, str) or not endpoint.strip():
        raise ConfigurationError("missing endpoint")
    endpoint = endpoint.strip()
    try:
        parsed = urlparse(endpoint)
    except ValueError:
        raise ConfigurationError("invalid endpoint: not a valid URL")
    if parsed.scheme not in ("http", "https"):
        raise ConfigurationError("invalid endpoint: must use http or https protocol")
    if not parsed.netloc:
        raise ConfigurationError("invalid endpoint: not a valid URL")
    return endpoint
