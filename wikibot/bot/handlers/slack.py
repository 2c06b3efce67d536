"""
Slack Handler

Handles Slack Events API callbacks and slash commands and converts
them to Questions.
"""

import hmac
import hashlib
import re
import time
from typing import Optional, Dict, Any
from urllib.parse import parse_qs

from pydantic import BaseModel, ValidationError

from .base import BaseHandler, Question

# Slack mentions format: <@U12345678>
MENTION_RE = re.compile(r"<@[A-Z0-9]+>")


class SlashCommandPayload(BaseModel):
    """Form fields Slack sends with a slash command"""
    command: str
    text: str = ""
    user_id: str
    user_name: str = ""
    channel_id: str
    response_url: str = ""


def strip_mentions(text: str) -> str:
    """Remove user mentions and surrounding whitespace"""
    return MENTION_RE.sub("", text or "").strip()


class SlackHandler(BaseHandler):
    """
    Handler for Slack webhooks.

    Processes:
    - app_mention events (@WikiBot question)
    - slash commands (/wiki question)

    Ignores:
    - Bot-authored events
    - Any other event type
    """

    def __init__(self, signing_secret: str = ""):
        """
        Initialize Slack handler.

        Args:
            signing_secret: Slack signing secret for verification
        """
        super().__init__("slack")
        self._signing_secret = signing_secret

    def parse_event(self, raw_data: Dict[str, Any]) -> Optional[Question]:
        """
        Parse a Slack event callback into a Question.

        Args:
            raw_data: Raw Slack event payload

        Returns:
            Question or None if the event should be ignored
        """
        if raw_data.get("type") != "event_callback":
            return None

        event = raw_data.get("event", {})
        if event.get("type") != "app_mention":
            return None

        # Skip bot messages (including our own replies)
        if event.get("bot_id") or event.get("subtype") == "bot_message":
            return None

        return Question(
            query=strip_mentions(event.get("text", "")),
            user=event.get("user", ""),
            channel=event.get("channel", ""),
            source="mention",
            timestamp=event.get("ts"),
            thread_ts=event.get("thread_ts"),
        )

    def parse_command(self, body: bytes) -> Optional[Question]:
        """
        Parse a form-encoded slash command into a Question.

        Args:
            body: Raw request body

        Returns:
            Question or None if required fields are missing
        """
        form = {
            key: values[0]
            for key, values in parse_qs(body.decode("utf-8"), keep_blank_values=True).items()
        }
        try:
            payload = SlashCommandPayload(**form)
        except ValidationError:
            return None

        return Question(
            query=payload.text.strip(),
            user=payload.user_id,
            channel=payload.channel_id,
            source="command",
            response_url=payload.response_url or None,
            user_name=payload.user_name or None,
        )

    def verify_signature(
        self,
        body: bytes,
        signature: str,
        timestamp: str
    ) -> bool:
        """
        Verify Slack request signature.

        Args:
            body: Raw request body
            signature: X-Slack-Signature header
            timestamp: X-Slack-Request-Timestamp header

        Returns:
            True if signature is valid
        """
        if not self._signing_secret:
            # Skip verification if no secret configured
            return True

        if not signature or not timestamp:
            return False

        # Check timestamp is recent (within 5 minutes)
        try:
            ts = int(timestamp)
            if abs(time.time() - ts) > 300:
                return False
        except ValueError:
            return False

        # Compute expected signature
        sig_basestring = f"v0:{timestamp}:{body.decode('utf-8')}"
        expected_sig = "v0=" + hmac.new(
            self._signing_secret.encode('utf-8'),
            sig_basestring.encode('utf-8'),
            hashlib.sha256
        ).hexdigest()

        return hmac.compare_digest(expected_sig, signature)

    def is_url_verification(self, raw_data: Dict[str, Any]) -> bool:
        """Check if request is URL verification"""
        return raw_data.get("type") == "url_verification"

    def get_challenge(self, raw_data: Dict[str, Any]) -> Optional[str]:
        """Get challenge for URL verification"""
        if self.is_url_verification(raw_data):
            return raw_data.get("challenge")
        return None
