# blocklist_manager/core/zoraxy_client.py
from typing import Any, Dict, List, Optional

import httpx
from pydantic import TypeAdapter, ValidationError

from blocklist_manager.core.exceptions import UpstreamError
from blocklist_manager.schemas.zoraxy import AccessRule
from blocklist_manager.utils.logger import get_logger

logger = get_logger(__name__)

_ACCESS_RULES = TypeAdapter(Optional[List[AccessRule]])
_IP_LIST = TypeAdapter(Optional[List[str]])


class ZoraxyClient:
    """
    Thin async wrapper around the Zoraxy plugin API.
    Every failure (transport, status, body) comes out as UpstreamError; nothing is retried.
    """

    ADD_IP_PATH = "/plugin/api/blacklist/ip/add"
    LIST_ACCESS_RULES_PATH = "/plugin/api/access/list"
    LIST_BLACKLIST_PATH = "/plugin/api/blacklist/list"

    def __init__(self, base_url: str, api_key: str, http_client: httpx.AsyncClient):
        """
        Args:
            base_url: Zoraxy address, e.g. http://localhost:8000
            api_key: plugin API key, sent as a bearer token
            http_client: shared client; its lifetime is owned by the caller
        """
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.http = http_client

    async def _request(
        self, method: str, path: str, params: Optional[Dict[str, str]] = None
    ) -> httpx.Response:
        try:
            response = await self.http.request(
                method,
                f"{self.base_url}{path}",
                params=params,
                headers={"Authorization": f"Bearer {self.api_key}"},
            )
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise UpstreamError(str(e) or e.__class__.__name__) from e
        return response

    @staticmethod
    def _decode(response: httpx.Response, adapter: TypeAdapter) -> Any:
        try:
            return adapter.validate_json(response.content)
        except ValidationError as e:
            raise UpstreamError(f"unexpected response from {response.request.url.path}: {e}") from e

    async def add_ip_to_blacklist(self, access_rule_id: str, ip: str) -> None:
        await self._request("POST", self.ADD_IP_PATH, params={"id": access_rule_id, "ip": ip})

    async def list_access_rules(self) -> List[AccessRule]:
        response = await self._request("GET", self.LIST_ACCESS_RULES_PATH)
        # Zoraxy encodes an empty list as null
        return self._decode(response, _ACCESS_RULES) or []

    async def list_blacklisted_ips(self, rule_id: str) -> List[str]:
        response = await self._request(
            "GET", self.LIST_BLACKLIST_PATH, params={"id": rule_id, "type": "ip"}
        )
        ips = self._decode(response, _IP_LIST) or []
        logger.debug(f"Rule {rule_id} has {len(ips)} blocklisted IPs")
        return ips
