"""
Configuration Management for WikiBot

Loads configuration from ~/.wikibot/config.json and environment variables.
"""

import os
import json
import logging
from pathlib import Path
from dataclasses import dataclass, field
from typing import List

logger = logging.getLogger("wikibot.common.config")

# Default config paths
CONFIG_DIR = Path.home() / ".wikibot"
CONFIG_PATH = CONFIG_DIR / "config.json"


@dataclass
class NotionConfig:
    """Notion document store configuration"""
    token: str = ""
    database_id: str = ""  # Optional scope: only pages of this database are used
    api_version: str = "2022-06-28"
    base_url: str = "https://api.notion.com/v1"
    search_page_size: int = 20  # Upscaled to compensate for database filtering
    block_page_size: int = 50
    timeout: float = 30.0


@dataclass
class LLMConfig:
    """LLM provider configuration"""
    provider: str = "anthropic"
    anthropic_api_key: str = ""
    anthropic_model: str = "claude-sonnet-4-20250514"
    openai_api_key: str = ""
    openai_model: str = "gpt-4o-mini"
    google_api_key: str = ""
    google_model: str = "gemini-2.0-flash"
    max_tokens: int = 1024
    timeout: float = 60.0

    @property
    def model(self) -> str:
        """Model name for the selected provider"""
        return {
            "anthropic": self.anthropic_model,
            "openai": self.openai_model,
            "google": self.google_model,
        }.get(self.provider, "")

    @property
    def api_key(self) -> str:
        """API key for the selected provider"""
        return {
            "anthropic": self.anthropic_api_key,
            "openai": self.openai_api_key,
            "google": self.google_api_key,
        }.get(self.provider, "")


@dataclass
class RetrieverConfig:
    """Retrieval and synthesis configuration"""
    max_documents: int = 5
    max_document_chars: int = 3000
    max_concurrency: int = 1  # 1 = candidates are processed one after another
    language: str = "en"  # "en" or "es"


@dataclass
class SlackConfig:
    """Slack bot configuration"""
    bot_token: str = ""
    signing_secret: str = ""
    port: int = 3000
    slash_command: str = "/wiki"


@dataclass
class WikiBotConfig:
    """Main WikiBot configuration"""
    notion: NotionConfig = field(default_factory=NotionConfig)
    llm: LLMConfig = field(default_factory=LLMConfig)
    retriever: RetrieverConfig = field(default_factory=RetrieverConfig)
    slack: SlackConfig = field(default_factory=SlackConfig)


def _parse_notion_config(data: dict) -> NotionConfig:
    """Parse notion section from config dict"""
    notion_data = data.get("notion", {})
    defaults = NotionConfig()
    return NotionConfig(
        token=notion_data.get("token", ""),
        database_id=notion_data.get("database_id", ""),
        api_version=notion_data.get("api_version", defaults.api_version),
        base_url=notion_data.get("base_url", defaults.base_url),
        search_page_size=notion_data.get("search_page_size", defaults.search_page_size),
        block_page_size=notion_data.get("block_page_size", defaults.block_page_size),
        timeout=notion_data.get("timeout", defaults.timeout),
    )


def _parse_llm_config(data: dict) -> LLMConfig:
    """Parse llm section from config dict"""
    llm_data = data.get("llm", {})
    defaults = LLMConfig()
    return LLMConfig(
        provider=llm_data.get("provider", defaults.provider),
        anthropic_api_key=llm_data.get("anthropic_api_key", ""),
        anthropic_model=llm_data.get("anthropic_model", defaults.anthropic_model),
        openai_api_key=llm_data.get("openai_api_key", ""),
        openai_model=llm_data.get("openai_model", defaults.openai_model),
        google_api_key=llm_data.get("google_api_key", ""),
        google_model=llm_data.get("google_model", defaults.google_model),
        max_tokens=llm_data.get("max_tokens", defaults.max_tokens),
        timeout=llm_data.get("timeout", defaults.timeout),
    )


def _parse_retriever_config(data: dict) -> RetrieverConfig:
    """Parse retriever section from config dict"""
    retriever_data = data.get("retriever", {})
    defaults = RetrieverConfig()
    return RetrieverConfig(
        max_documents=retriever_data.get("max_documents", defaults.max_documents),
        max_document_chars=retriever_data.get("max_document_chars", defaults.max_document_chars),
        max_concurrency=retriever_data.get("max_concurrency", defaults.max_concurrency),
        language=retriever_data.get("language", defaults.language),
    )


def _parse_slack_config(data: dict) -> SlackConfig:
    """Parse slack section from config dict"""
    slack_data = data.get("slack", {})
    defaults = SlackConfig()
    return SlackConfig(
        bot_token=slack_data.get("bot_token", ""),
        signing_secret=slack_data.get("signing_secret", ""),
        port=slack_data.get("port", defaults.port),
        slash_command=slack_data.get("slash_command", defaults.slash_command),
    )


def load_config() -> WikiBotConfig:
    """
    Load configuration from file and environment variables.

    Priority (highest to lowest):
    1. Environment variables
    2. Config file (~/.wikibot/config.json)
    3. Default values
    """
    config = WikiBotConfig()

    # Load from config file if exists
    if CONFIG_PATH.exists():
        try:
            with open(CONFIG_PATH) as f:
                data = json.load(f)

            config.notion = _parse_notion_config(data)
            config.llm = _parse_llm_config(data)
            config.retriever = _parse_retriever_config(data)
            config.slack = _parse_slack_config(data)
        except (json.JSONDecodeError, IOError) as e:
            logger.warning("Failed to load config file: %s", e)

    # Environment variable overrides
    if os.getenv("NOTION_TOKEN"):
        config.notion.token = os.getenv("NOTION_TOKEN")
    if os.getenv("NOTION_DATABASE_ID"):
        config.notion.database_id = os.getenv("NOTION_DATABASE_ID")

    if os.getenv("SLACK_BOT_TOKEN"):
        config.slack.bot_token = os.getenv("SLACK_BOT_TOKEN")
    if os.getenv("SLACK_SIGNING_SECRET"):
        config.slack.signing_secret = os.getenv("SLACK_SIGNING_SECRET")
    if os.getenv("PORT"):
        config.slack.port = int(os.getenv("PORT"))

    if os.getenv("WIKIBOT_LANGUAGE"):
        config.retriever.language = os.getenv("WIKIBOT_LANGUAGE")

    _env_llm_map = {
        "ANTHROPIC_API_KEY": "anthropic_api_key",
        "ANTHROPIC_MODEL": "anthropic_model",
        "OPENAI_API_KEY": "openai_api_key",
        "OPENAI_MODEL": "openai_model",
        "GOOGLE_API_KEY": "google_api_key",
        "GEMINI_API_KEY": "google_api_key",
        "GOOGLE_MODEL": "google_model",
        "WIKIBOT_LLM_PROVIDER": "provider",
    }
    for env_var, attr in _env_llm_map.items():
        val = os.getenv(env_var)
        if val:
            setattr(config.llm, attr, val)

    return config


def validate_config(config: WikiBotConfig) -> List[str]:
    """
    List required settings that are missing.

    Returns:
        Environment variable names to set (empty if the config is complete)
    """
    missing = []
    if not config.notion.token:
        missing.append("NOTION_TOKEN")
    if not config.slack.bot_token:
        missing.append("SLACK_BOT_TOKEN")
    if not config.slack.signing_secret:
        missing.append("SLACK_SIGNING_SECRET")

    key_vars = {
        "anthropic": "ANTHROPIC_API_KEY",
        "openai": "OPENAI_API_KEY",
        "google": "GOOGLE_API_KEY",
    }
    if config.llm.provider not in key_vars:
        missing.append("WIKIBOT_LLM_PROVIDER")
    elif not config.llm.api_key:
        missing.append(key_vars[config.llm.provider])

    return missing
