"""
WikiBot Common Module

Shared infrastructure: configuration, fixed texts and the Notion and
LLM clients the retriever runs on.
"""

from .config import WikiBotConfig, load_config, validate_config
from .llm_client import LLMClient, ContentSegment
from .messages import get_messages
from .notion_client import NotionClient, NotionError

__all__ = [
    "WikiBotConfig",
    "load_config",
    "validate_config",
    "LLMClient",
    "ContentSegment",
    "get_messages",
    "NotionClient",
    "NotionError",
]
