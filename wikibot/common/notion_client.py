"""
Notion Client

Thin async wrapper over the Notion REST API covering the two calls
the retriever needs: page search and block children listing.
"""

import logging
from typing import Any, Dict, List, Optional

import httpx

logger = logging.getLogger("wikibot.common.notion_client")


class NotionError(Exception):
    """Raised when a Notion API call fails"""

    def __init__(self, message: str, status_code: Optional[int] = None, code: Optional[str] = None):
        super().__init__(message)
        self.status_code = status_code
        self.code = code


class NotionClient:
    """
    Async Notion API client.

    The underlying httpx client is created lazily and can be injected
    (tests pass one backed by httpx.MockTransport).
    """

    def __init__(
        self,
        token: str,
        api_version: str = "2022-06-28",
        base_url: str = "https://api.notion.com/v1",
        timeout: float = 30.0,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Initialize Notion client.

        Args:
            token: Integration token (secret_... / ntn_...)
            api_version: Value of the Notion-Version header
            base_url: API root
            timeout: Per-request timeout in seconds
            http_client: Pre-built httpx client (optional)
        """
        self._token = token
        self._api_version = api_version
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._http = http_client

    @classmethod
    def from_config(cls, notion_config) -> "NotionClient":
        """Build a client from a NotionConfig section"""
        return cls(
            token=notion_config.token,
            api_version=notion_config.api_version,
            base_url=notion_config.base_url,
            timeout=notion_config.timeout,
        )

    def _ensure_client(self) -> httpx.AsyncClient:
        if self._http is None:
            self._http = httpx.AsyncClient(timeout=httpx.Timeout(self._timeout))
        return self._http

    @property
    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self._token}",
            "Notion-Version": self._api_version,
            "Content-Type": "application/json",
        }

    async def _request(
        self,
        method: str,
        path: str,
        *,
        json: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        client = self._ensure_client()
        try:
            response = await client.request(
                method,
                f"{self._base_url}{path}",
                headers=self._headers,
                json=json,
                params=params,
            )
        except httpx.HTTPError as e:
            raise NotionError(f"Notion request {method} {path} failed: {e}") from e

        if response.status_code >= 400:
            try:
                body = response.json()
            except ValueError:
                body = {}
            raise NotionError(
                f"Notion API {method} {path} returned {response.status_code}: "
                f"{body.get('message', response.text)}",
                status_code=response.status_code,
                code=body.get("code"),
            )

        return response.json()

    async def search(self, query: str, page_size: int = 20) -> List[Dict[str, Any]]:
        """
        Search pages shared with the integration.

        Results are page objects only, most recently edited first.

        Args:
            query: Free-text query
            page_size: Number of results to request

        Returns:
            Raw Notion page objects
        """
        payload = {
            "query": query,
            "filter": {"property": "object", "value": "page"},
            "page_size": page_size,
            "sort": {"direction": "descending", "timestamp": "last_edited_time"},
        }
        data = await self._request("POST", "/search", json=payload)
        return data.get("results", [])

    async def get_block_children(self, block_id: str, page_size: int = 50) -> List[Dict[str, Any]]:
        """
        List the first page of children of a block (or page).

        Args:
            block_id: Block or page ID
            page_size: Number of children to request

        Returns:
            Raw Notion block objects in document order
        """
        data = await self._request(
            "GET",
            f"/blocks/{block_id}/children",
            params={"page_size": page_size},
        )
        if data.get("has_more"):
            logger.debug("Block %s has more than %d children; only the first page is used", block_id, page_size)
        return data.get("results", [])

    async def aclose(self) -> None:
        """Close the underlying HTTP client"""
        if self._http is not None:
            await self._http.aclose()
            self._http = None
