"""HTTP transport used by every channel to deliver a prepared payload."""

import json
import logging
from typing import Any, Optional
from urllib.parse import urlencode

import httpx

from pushgate.config import settings
from pushgate.security import safe_http_client

logger = logging.getLogger(__name__)


class HttpTransport:
    """
    Send one JSON POST and hand back the raw response.

    Transport failures (connect errors, timeouts, blocked hosts) are not
    translated; they propagate to the caller as ``httpx`` exceptions.

    Args:
        timeout: Request timeout in seconds. Defaults to ``settings.request_timeout``.
        ssrf_protection: Refuse private/reserved destinations. Defaults to
            ``settings.ssrf_protection``.
        transport: Optional ``httpx`` transport to use instead of the network
            (e.g. ``httpx.MockTransport``); bypasses SSRF protection.
    """

    def __init__(
        self,
        timeout: Optional[float] = None,
        ssrf_protection: Optional[bool] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.timeout = settings.request_timeout if timeout is None else timeout
        self.ssrf_protection = settings.ssrf_protection if ssrf_protection is None else ssrf_protection
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        if self._transport is not None:
            return httpx.AsyncClient(timeout=self.timeout, transport=self._transport)
        if self.ssrf_protection:
            return safe_http_client(timeout=self.timeout)
        return httpx.AsyncClient(timeout=self.timeout)

    async def post_json(
        self,
        url: str,
        body: dict[str, Any],
        params: Optional[dict[str, str]] = None,
    ) -> httpx.Response:
        if params:
            url = f"{url}{'&' if '?' in url else '?'}{urlencode(params)}"
        async with self._client() as client:
            response = await client.post(
                url,
                headers={"Content-Type": "application/json"},
                content=json.dumps(body, ensure_ascii=False).encode("utf-8"),
            )
        logger.debug("POST %s -> %s", response.request.url.host, response.status_code)
        return response
