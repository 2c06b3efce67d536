"""Shared fakes for the Notion store and LLM client."""

from typing import Any, Dict, List, Optional
from unittest.mock import AsyncMock

import pytest

from wikibot.common.llm_client import ContentSegment


def rich(text: str) -> List[Dict[str, Any]]:
    return [{"type": "text", "plain_text": text}]


def make_block(block_type: str, text: str = "", block_id: str = "", has_children: bool = False, **extra) -> Dict[str, Any]:
    """Notion block object of the given type"""
    data: Dict[str, Any] = {"rich_text": rich(text)}
    data.update(extra)
    return {
        "object": "block",
        "id": block_id or f"{block_type}-{text}",
        "type": block_type,
        "has_children": has_children,
        block_type: data,
    }


def make_page(page_id: str, title: Optional[str] = "Page", database_id: Optional[str] = None) -> Dict[str, Any]:
    """Full Notion page object"""
    properties: Dict[str, Any] = {"Tags": {"type": "multi_select", "multi_select": []}}
    if title is not None:
        properties["Name"] = {"type": "title", "title": rich(title)}
    parent = (
        {"type": "database_id", "database_id": database_id}
        if database_id
        else {"type": "workspace", "workspace": True}
    )
    return {
        "object": "page",
        "id": page_id,
        "url": f"https://www.notion.so/{page_id.replace('-', '')}",
        "parent": parent,
        "properties": properties,
    }


class FakeStore:
    """In-memory document store keyed by block ID"""

    def __init__(self, pages=None, children=None, failing=()):
        self.pages = pages or []
        self.children = children or {}
        self.failing = set(failing)
        self.search_calls = []
        self.children_calls = []

    async def search(self, query: str, page_size: int = 20):
        self.search_calls.append((query, page_size))
        return self.pages

    async def get_block_children(self, block_id: str, page_size: int = 50):
        self.children_calls.append((block_id, page_size))
        if block_id in self.failing:
            raise RuntimeError(f"fetch failed for {block_id}")
        return self.children.get(block_id, [])


@pytest.fixture
def fake_store():
    return FakeStore


@pytest.fixture
def block():
    return make_block


@pytest.fixture
def page():
    return make_page


@pytest.fixture
def mock_llm():
    llm = AsyncMock()
    llm.complete.return_value = [ContentSegment("text", "The answer.\n📚 *Sources:* <https://x|X>")]
    return llm
