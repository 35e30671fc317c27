"""SSRF protection for outbound webhook delivery."""

import asyncio
import ipaddress
import logging
import socket

import httpx

logger = logging.getLogger(__name__)

_BLOCKED_NETWORKS = [
    ipaddress.ip_network("10.0.0.0/8"),
    ipaddress.ip_network("172.16.0.0/12"),
    ipaddress.ip_network("192.168.0.0/16"),
    ipaddress.ip_network("127.0.0.0/8"),
    ipaddress.ip_network("169.254.0.0/16"),
    ipaddress.ip_network("0.0.0.0/8"),
    ipaddress.ip_network("::1/128"),
    ipaddress.ip_network("fc00::/7"),
    ipaddress.ip_network("fe80::/10"),
]

_BLOCKED_HOSTNAMES = {
    "localhost",
    "metadata",
    "metadata.google.internal",
}


def is_ip_blocked(ip_str: str) -> bool:
    try:
        ip = ipaddress.ip_address(ip_str)
        return any(ip in network for network in _BLOCKED_NETWORKS)
    except ValueError:
        return True


async def check_hostname(hostname: str) -> None:
    """Raise ``httpx.ConnectError`` if *hostname* is private or unresolvable."""
    if hostname.lower() in _BLOCKED_HOSTNAMES:
        raise httpx.ConnectError(f"Blocked hostname: {hostname}")
    loop = asyncio.get_running_loop()
    try:
        addr_infos = await loop.getaddrinfo(hostname, None, family=socket.AF_UNSPEC, type=socket.SOCK_STREAM)
    except socket.gaierror:
        raise httpx.ConnectError(f"Cannot resolve hostname: {hostname}")
    for _family, _, _, _, sockaddr in addr_infos:
        if is_ip_blocked(sockaddr[0]):
            logger.warning("Refusing delivery to %s: resolves to %s", hostname, sockaddr[0])
            raise httpx.ConnectError(f"DNS resolved to blocked IP for {hostname}")


class SSRFSafeTransport(httpx.AsyncHTTPTransport):
    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        hostname = request.url.host
        if hostname:
            await check_hostname(hostname)
        return await super().handle_async_request(request)


def safe_http_client(
    timeout: float = 15,
    follow_redirects: bool = False,
    **kwargs,
) -> httpx.AsyncClient:
    return httpx.AsyncClient(
        timeout=timeout,
        follow_redirects=follow_redirects,
        transport=SSRFSafeTransport(),
        **kwargs,
    )
