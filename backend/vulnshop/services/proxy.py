"""Request forwarding for the API gateway."""
from typing import Dict, Iterable, Optional, Tuple

import httpx

from ..core.logging import get_logger

logger = get_logger("vulnshop.proxy")

# Framing headers that httpx and the ASGI server manage themselves
HOP_HEADERS = {"host", "content-length", "transfer-encoding", "connection", "content-encoding"}


def build_target_url(service_url: str, path: str, params: Dict[str, str], query: str = "") -> str:
    """
    Turn a route template into an upstream URL.

    VULNERABILITY: Parameter values are substituted by plain text replacement
    of the parameter name anywhere in the URL, without encoding.
    """
    target = service_url + path.replace(":", "")
    for key, value in params.items():
        target = target.replace(key, value, 1)
    if query:
        target += "?" + query
    return target


class ServiceProxy:
    """Forward one request to an upstream service."""

    def __init__(self, transport: Optional[httpx.BaseTransport] = None, timeout: Optional[float] = None):
        self.transport = transport
        self.timeout = timeout

    def forward(
        self,
        method: str,
        url: str,
        headers: Iterable[Tuple[str, str]],
        body: bytes = b"",
    ) -> httpx.Response:
        """Send the request with every client header copied across."""
        outgoing = [(k, v) for k, v in headers if k.lower() not in HOP_HEADERS]
        with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
            response = client.request(method, url, headers=outgoing, content=body)
            response.read()
        logger.debug("Proxied request", method=method, url=url, status_code=response.status_code)
        return response

    @staticmethod
    def response_headers(response: httpx.Response) -> Dict[str, str]:
        return {k: v for k, v in response.headers.items() if k.lower() not in HOP_HEADERS}
