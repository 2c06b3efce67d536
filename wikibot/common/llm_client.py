"""
Provider-agnostic LLM client for WikiBot.

Supports Anthropic, OpenAI, and Google Gemini with a shared async
completion interface. Responses are normalized to a list of typed
content segments so callers can pick the text parts.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional

logger = logging.getLogger("wikibot.common.llm_client")


@dataclass(frozen=True)
class ContentSegment:
    """One segment of a model response ("text", "tool_use", "thinking", ...)"""
    type: str
    text: Optional[str] = None

    @property
    def is_text(self) -> bool:
        return self.type == "text" and self.text is not None


class LLMClient:
    """Unified async completion client across LLM providers."""

    def __init__(
        self,
        provider: str = "anthropic",
        model: str = "",
        anthropic_api_key: Optional[str] = None,
        openai_api_key: Optional[str] = None,
        google_api_key: Optional[str] = None,
        timeout: float = 60.0,
    ) -> None:
        self.provider = (provider or "anthropic").lower()
        self.model = model
        self.timeout = timeout
        self._client = None

        if self.provider == "auto":
            raise ValueError(
                '"auto" provider must be resolved before creating LLMClient. '
                'Set WIKIBOT_LLM_PROVIDER to anthropic, openai or google.'
            )

        if self.provider == "anthropic":
            if not anthropic_api_key:
                logger.info("%s API key not provided, LLM client unavailable", self.provider)
                return
            try:
                import anthropic

                self._client = anthropic.AsyncAnthropic(api_key=anthropic_api_key)
            except ImportError:
                logger.warning("anthropic package not installed")
            except Exception as e:
                logger.warning("Failed to initialize Anthropic client: %s", e)
            return

        if self.provider == "openai":
            if not openai_api_key:
                logger.info("%s API key not provided, LLM client unavailable", self.provider)
                return
            try:
                from openai import AsyncOpenAI

                self._client = AsyncOpenAI(api_key=openai_api_key)
            except ImportError:
                logger.warning("openai package not installed")
            except Exception as e:
                logger.warning("Failed to initialize OpenAI client: %s", e)
            return

        if self.provider == "google":
            if not google_api_key:
                logger.info("%s API key not provided, LLM client unavailable", self.provider)
                return
            try:
                import google.generativeai as genai

                genai.configure(api_key=google_api_key)
                self._client = genai  # Store the module, not a model instance
            except ImportError:
                logger.warning("google-generativeai package not installed")
            except Exception as e:
                logger.warning("Failed to initialize Gemini client: %s", e)
            return

        logger.warning("Unsupported LLM provider: %s", self.provider)

    @classmethod
    def from_config(cls, llm_config) -> "LLMClient":
        """Build a client from an LLMConfig section"""
        return cls(
            provider=llm_config.provider,
            model=llm_config.model,
            anthropic_api_key=llm_config.anthropic_api_key or None,
            openai_api_key=llm_config.openai_api_key or None,
            google_api_key=llm_config.google_api_key or None,
            timeout=llm_config.timeout,
        )

    @property
    def is_available(self) -> bool:
        return self._client is not None

    async def complete(
        self,
        system: str,
        user_message: str,
        *,
        max_tokens: int = 1024,
    ) -> List[ContentSegment]:
        """
        Run a single, non-streaming completion.

        Args:
            system: System instruction
            user_message: The single user turn
            max_tokens: Upper bound on generated tokens

        Returns:
            Response content segments in model order
        """
        if not self.is_available:
            raise RuntimeError("LLM client is not available")

        if self.provider == "anthropic":
            response = await self._client.messages.create(
                model=self.model,
                max_tokens=max_tokens,
                system=system,
                messages=[{"role": "user", "content": user_message}],
                timeout=self.timeout,
            )
            return [
                ContentSegment(type=block.type, text=getattr(block, "text", None))
                for block in response.content
            ]

        if self.provider == "openai":
            response = await self._client.chat.completions.create(
                model=self.model,
                max_tokens=max_tokens,
                messages=[
                    {"role": "system", "content": system},
                    {"role": "user", "content": user_message},
                ],
                timeout=self.timeout,
            )
            if not response.choices:
                return []
            content = response.choices[0].message.content
            return [ContentSegment(type="text", text=content)] if content else []

        if self.provider == "google":
            model = self._client.GenerativeModel(
                model_name=self.model,
                system_instruction=system,
            )
            response = await model.generate_content_async(
                user_message,
                generation_config={"max_output_tokens": max_tokens},
                request_options={"timeout": self.timeout},
            )
            segments = []
            for candidate in response.candidates[:1]:
                for part in candidate.content.parts:
                    text = getattr(part, "text", "")
                    if text:
                        segments.append(ContentSegment(type="text", text=text))
                    else:
                        segments.append(ContentSegment(type="other"))
            return segments

        raise RuntimeError(f"Unsupported LLM provider: {self.provider}")
