"""
Chain client backed by a CosmWasm LCD (REST) gateway.

Smart queries are encoded as compact JSON, URL-safe base64 in the path, and
answered with `{"data": <contract response>}`.
"""

import asyncio
import base64
import json
import logging
from typing import Any, Dict, Optional, cast

import requests

from constants import DEFAULT_HTTP_TIMEOUT, SMART_QUERY_PATH

logger = logging.getLogger(__name__)


def encode_query_msg(query_msg: Dict[str, Any]) -> str:
    """Return the base64 path segment for a smart query message."""
    raw = json.dumps(query_msg, separators=(",", ":")).encode("utf-8")
    return base64.urlsafe_b64encode(raw).decode("ascii")


class LcdClient:
    def __init__(
        self,
        lcd_addr: str,
        timeout: float = DEFAULT_HTTP_TIMEOUT,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.lcd_addr = lcd_addr.rstrip("/")
        self.timeout = timeout
        self._session = session or requests.Session()

    def smart_query_url(self, contract_address: str, query_msg: Dict[str, Any]) -> str:
        path = SMART_QUERY_PATH.format(
            address=contract_address,
            query=encode_query_msg(query_msg),
        )
        return f"{self.lcd_addr}{path}"

    def query_smart_sync(self, contract_address: str, query_msg: Dict[str, Any]) -> Any:
        """
        Run a smart query and return the decoded contract response.

        Raises:
            requests.HTTPError: if the gateway answers with a non-2xx status
                (contract errors surface this way).
            ValueError: if the body carries no `data` member.
        """
        url = self.smart_query_url(contract_address, query_msg)
        logger.debug("smart query %s → %s", contract_address, query_msg)

        response = self._session.get(
            url,
            timeout=self.timeout,
            headers={"Accept": "application/json"},
        )
        response.raise_for_status()

        body = response.json()
        if not isinstance(body, dict) or "data" not in body:
            raise ValueError(f"No query data returned by `{contract_address}`.")
        return cast(Dict[str, Any], body)["data"]

    async def query_smart(self, contract_address: str, query_msg: Dict[str, Any]) -> Any:
        return await asyncio.to_thread(self.query_smart_sync, contract_address, query_msg)
