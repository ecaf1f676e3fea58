"""Authenticated JSON-RPC calls against the bridge node."""

import logging
from typing import Any, Dict

from .exceptions import EndpointUnavailable

logger = logging.getLogger(__name__)

LOCAL_HEAD_REQUEST: Dict[str, Any] = {"id": 1, "jsonrpc": "2.0", "method": "header.LocalHead", "params": []}


class BridgeRpcClient:
    """Bearer-token JSON-RPC client used both functionally and as a readiness probe."""

    def __init__(self, client: Any, rpc_url: str, auth_token: str):
        self.client = client
        self.rpc_url = rpc_url
        self.auth_token = auth_token

    @property
    def headers(self) -> Dict[str, str]:
        return {"Authorization": f"Bearer {self.auth_token}", "Content-Type": "application/json"}

    async def local_head(self) -> Any:
        """Return the ``result`` of ``header.LocalHead``."""
        response = await self.client.post_json(self.rpc_url, LOCAL_HEAD_REQUEST, headers=self.headers)
        if not isinstance(response, dict) or response.get("error") is not None or "result" not in response:
            raise EndpointUnavailable(f"header.LocalHead returned an error response: {response!r}", url=self.rpc_url)
        return response["result"]

    async def is_responding(self) -> bool:
        try:
            await self.local_head()
        except EndpointUnavailable as exc:
            logger.debug("Bridge RPC not responding: %s", exc)
            return False
        return True


__all__ = ["BridgeRpcClient", "LOCAL_HEAD_REQUEST"]
