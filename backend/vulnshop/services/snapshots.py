"""Point-in-time copies of users and products for new orders."""
from typing import Any, Dict, Optional

import httpx

from ..core.logging import get_logger

logger = get_logger("vulnshop.snapshots")


class SnapshotClient:
    """Fetch user and product records from their services."""

    def __init__(
        self,
        users_url: str,
        products_url: str,
        timeout: float = 2.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.users_url = users_url.rstrip("/")
        self.products_url = products_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport

    def fetch_user(self, user_id: int) -> Dict[str, Any]:
        return self._fetch(f"{self.users_url}/users/id/{user_id}")

    def fetch_product(self, product_id: int) -> Dict[str, Any]:
        return self._fetch(f"{self.products_url}/products/{product_id}")

    def _fetch(self, url: str) -> Dict[str, Any]:
        """GET a JSON object; any failure gives an empty snapshot."""
        try:
            with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
                response = client.get(url)
            if response.status_code != 200:
                return {}
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("Snapshot fetch failed", url=url, error=str(e))
            return {}
        return data if isinstance(data, dict) else {}
