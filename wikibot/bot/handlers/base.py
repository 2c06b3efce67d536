"""
Base Handler

Abstract base class for chat platform handlers.
Provides a common request format for questions asked to the bot.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional, Dict, Any


@dataclass
class Question:
    """
    A question addressed to the bot.

    Standardized format the server works with, whether the question
    arrived as a mention or as a slash command.
    """
    query: str
    user: str
    channel: str
    source: str  # "mention" or "command"
    timestamp: Optional[str] = None  # Message ts (mentions only)
    thread_ts: Optional[str] = None  # Thread to reply in (mentions only)
    response_url: Optional[str] = None  # Ephemeral reply URL (commands only)
    user_name: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        """Check if there is no actual question"""
        return not self.query.strip()

    @property
    def reply_thread(self) -> Optional[str]:
        """Thread to answer in: the existing thread, or start one on the message"""
        return self.thread_ts or self.timestamp


class BaseHandler(ABC):
    """
    Abstract base class for chat platform handlers.

    Each handler must implement:
    - parse_event: Convert a raw event to a Question
    - verify_signature: Verify webhook signature
    """

    def __init__(self, source_name: str):
        """
        Initialize handler.

        Args:
            source_name: Name of the platform (e.g., "slack")
        """
        self.source_name = source_name

    @abstractmethod
    def parse_event(self, raw_data: Dict[str, Any]) -> Optional[Question]:
        """
        Parse raw event data into a Question.

        Args:
            raw_data: Raw event data from the platform

        Returns:
            Question or None if the event should be ignored
        """
        pass

    @abstractmethod
    def verify_signature(
        self,
        body: bytes,
        signature: str,
        timestamp: str
    ) -> bool:
        """
        Verify the webhook signature.

        Args:
            body: Raw request body
            signature: Signature from headers
            timestamp: Timestamp from headers

        Returns:
            True if signature is valid
        """
        pass
