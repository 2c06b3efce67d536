"""
Slack Client

Minimal async Slack Web API client for posting answers and toggling
the "thinking" reaction.
"""

import logging
from typing import Any, Dict, Optional

import httpx

logger = logging.getLogger("wikibot.bot.slack_client")

SLACK_API_URL = "https://slack.com/api"


class SlackError(Exception):
    """Raised when a Slack Web API call fails"""

    def __init__(self, message: str, error: Optional[str] = None):
        super().__init__(message)
        self.error = error


class SlackClient:
    """Async Slack Web API client (bot token)"""

    def __init__(
        self,
        bot_token: str,
        api_url: str = SLACK_API_URL,
        timeout: float = 10.0,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self._token = bot_token
        self._api_url = api_url.rstrip("/")
        self._timeout = timeout
        self._http = http_client

    def _ensure_client(self) -> httpx.AsyncClient:
        if self._http is None:
            self._http = httpx.AsyncClient(timeout=httpx.Timeout(self._timeout))
        return self._http

    async def _call(self, method: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        client = self._ensure_client()
        try:
            response = await client.post(
                f"{self._api_url}/{method}",
                json=payload,
                headers={
                    "Authorization": f"Bearer {self._token}",
                    "Content-Type": "application/json; charset=utf-8",
                },
            )
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise SlackError(f"Slack {method} failed: {e}") from e

        data = response.json()
        if not data.get("ok"):
            raise SlackError(f"Slack {method} error: {data.get('error')}", error=data.get("error"))
        return data

    async def post_message(
        self,
        channel: str,
        text: str,
        thread_ts: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Post a message, optionally as a thread reply"""
        payload: Dict[str, Any] = {"channel": channel, "text": text, "mrkdwn": True}
        if thread_ts:
            payload["thread_ts"] = thread_ts
        return await self._call("chat.postMessage", payload)

    async def add_reaction(self, channel: str, timestamp: str, name: str) -> bool:
        """Add a reaction; failures are logged, never raised"""
        try:
            await self._call("reactions.add", {"channel": channel, "timestamp": timestamp, "name": name})
            return True
        except SlackError as e:
            logger.debug("Could not add reaction %s: %s", name, e)
            return False

    async def remove_reaction(self, channel: str, timestamp: str, name: str) -> bool:
        """Remove a reaction; failures are logged, never raised"""
        try:
            await self._call("reactions.remove", {"channel": channel, "timestamp": timestamp, "name": name})
            return True
        except SlackError as e:
            logger.debug("Could not remove reaction %s: %s", name, e)
            return False

    async def respond(self, response_url: str, text: str, ephemeral: bool = True) -> None:
        """Reply to a slash command through its response_url"""
        client = self._ensure_client()
        payload = {
            "response_type": "ephemeral" if ephemeral else "in_channel",
            "text": text,
        }
        try:
            response = await client.post(response_url, json=payload)
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise SlackError(f"Slack response_url call failed: {e}") from e

    async def aclose(self) -> None:
        """Close the underlying HTTP client"""
        if self._http is not None:
            await self._http.aclose()
            self._http = None
