"""Tests for SlackClient Web API calls."""

import json

import httpx
import pytest

from wikibot.bot.slack_client import SlackClient, SlackError


def _client(handler):
    http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return SlackClient(bot_token="xoxb-test", http_client=http)


class TestPostMessage:
    @pytest.mark.asyncio
    async def test_thread_reply(self):
        seen = {}

        def handler(request):
            seen["url"] = str(request.url)
            seen["auth"] = request.headers["Authorization"]
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"ok": True, "ts": "1.2"})

        data = await _client(handler).post_message("C1", "hello", thread_ts="1.1")

        assert data["ts"] == "1.2"
        assert seen["url"] == "https://slack.com/api/chat.postMessage"
        assert seen["auth"] == "Bearer xoxb-test"
        assert seen["body"] == {"channel": "C1", "text": "hello", "mrkdwn": True, "thread_ts": "1.1"}

    @pytest.mark.asyncio
    async def test_no_thread(self):
        bodies = []

        def handler(request):
            bodies.append(json.loads(request.content))
            return httpx.Response(200, json={"ok": True})

        await _client(handler).post_message("C1", "hello")

        assert "thread_ts" not in bodies[0]

    @pytest.mark.asyncio
    async def test_api_error(self):
        client = _client(lambda request: httpx.Response(200, json={"ok": False, "error": "not_in_channel"}))

        with pytest.raises(SlackError) as exc_info:
            await client.post_message("C1", "hello")

        assert exc_info.value.error == "not_in_channel"

    @pytest.mark.asyncio
    async def test_http_error(self):
        client = _client(lambda request: httpx.Response(500, text="oops"))

        with pytest.raises(SlackError):
            await client.post_message("C1", "hello")


class TestReactions:
    @pytest.mark.asyncio
    async def test_add_and_remove(self):
        paths = []

        def handler(request):
            paths.append(request.url.path)
            return httpx.Response(200, json={"ok": True})

        client = _client(handler)

        assert await client.add_reaction("C1", "1.1", "thinking_face") is True
        assert await client.remove_reaction("C1", "1.1", "thinking_face") is True
        assert paths == ["/api/reactions.add", "/api/reactions.remove"]

    @pytest.mark.asyncio
    async def test_failures_do_not_raise(self):
        client = _client(lambda request: httpx.Response(200, json={"ok": False, "error": "already_reacted"}))

        assert await client.add_reaction("C1", "1.1", "thinking_face") is False
        assert await client.remove_reaction("C1", "1.1", "thinking_face") is False


class TestRespond:
    @pytest.mark.asyncio
    async def test_ephemeral_response(self):
        seen = {}

        def handler(request):
            seen["url"] = str(request.url)
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, text="ok")

        await _client(handler).respond("https://hooks.slack.com/commands/x", "sorry")

        assert seen["url"] == "https://hooks.slack.com/commands/x"
        assert seen["body"] == {"response_type": "ephemeral", "text": "sorry"}
