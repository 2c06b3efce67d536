"""
Bot - Slack front end

Receives questions as app mentions and slash commands, acknowledges
them right away and posts the wiki answer when it is ready.

Key Components:
- SlackHandler: Signature verification and request parsing
- SlackClient: Posting answers and toggling reactions
- server: FastAPI app and uvicorn entry point
"""

from .handlers import SlackHandler, Question
from .slack_client import SlackClient, SlackError

__all__ = [
    "SlackHandler",
    "Question",
    "SlackClient",
    "SlackError",
]
