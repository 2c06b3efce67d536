"""
Platform Handlers

Handlers for the chat platforms the bot listens on.
Each handler converts platform-specific requests to a common Question format.

Available Handlers:
- SlackHandler: Slack app mentions and slash commands
"""

from .base import BaseHandler, Question
from .slack import SlackHandler, SlashCommandPayload

__all__ = [
    "BaseHandler",
    "Question",
    "SlackHandler",
    "SlashCommandPayload",
]
