"""
Synthesizer

LLM-based answer synthesis from rendered wiki pages.

Key principle: answer only from the supplied pages.
- Pages are numbered and separated by a marker no block rendering produces
- The model must say when the pages are not enough instead of guessing
- Every answer ends with a Slack-style sources line
"""

import logging
from typing import List, Optional

from ..common.messages import get_messages
from .selector import RenderedDocument

logger = logging.getLogger("wikibot.retriever.synthesizer")

# Separates pages in the context; distinct from the divider block rendering ("---")
DOCUMENT_SEPARATOR = "\n\n==========\n\n"

DEFAULT_MAX_TOKENS = 1024


# System prompts per response language
SYSTEM_PROMPTS = {
    "en": """You are an internal company assistant. Your job is to answer the team's questions using only the information from the Notion wiki provided to you as context.

Rules:
- ALWAYS respond in English
- Base your answers EXCLUSIVELY on the provided Notion context
- If the context does not have enough information, say so clearly instead of making things up
- Be concise and direct, but complete
- Use Markdown formatting: bold, lists, etc. when it improves readability
- At the end of every answer, include the sources with this exact format:
  📚 *Sources:* <URL_1|Page_Name_1>, <URL_2|Page_Name_2>
  (use Slack link format: <url|text>)
- If several pages are relevant, mention which section answers which part""",
    "es": """Eres un asistente interno de empresa. Tu función es responder preguntas del equipo usando únicamente la información del wiki de Notion que se te proporcionará como contexto.

Reglas:
- Responde SIEMPRE en español
- Basa tus respuestas EXCLUSIVAMENTE en el contexto de Notion proporcionado
- Si el contexto no tiene suficiente información, dilo claramente en lugar de inventar
- Sé conciso y directo, pero completo
- Usa formato Markdown: negritas, listas, etc. cuando mejore la legibilidad
- Al final de cada respuesta, incluye las fuentes con este formato exacto:
  📚 *Fuente(s):* <URL_1|Nombre_Página_1>, <URL_2|Nombre_Página_2>
  (usa formato de enlace de Slack: <url|texto>)
- Si hay varias páginas relevantes, menciona cuál sección responde qué parte""",
}

PAGE_HEADERS = {
    "en": '[PAGE {index}: "{title}"]',
    "es": '[PÁGINA {index}: "{title}"]',
}


def get_system_prompt(language: str) -> str:
    return SYSTEM_PROMPTS.get((language or "").lower(), SYSTEM_PROMPTS["en"])


def build_context(documents: List[RenderedDocument], language: str = "en") -> str:
    """Render documents as numbered blocks joined by DOCUMENT_SEPARATOR"""
    header = PAGE_HEADERS.get((language or "").lower(), PAGE_HEADERS["en"])
    blocks = [
        f"{header.format(index=i, title=doc.title)}\nURL: {doc.url}\n\n{doc.text}"
        for i, doc in enumerate(documents, 1)
    ]
    return DOCUMENT_SEPARATOR.join(blocks)


def build_user_message(query: str, context: str, language: str = "en") -> str:
    """Context first, then the literal question"""
    messages = get_messages(language)
    return (
        f"{messages['context_header']}\n\n{context}"
        f"{DOCUMENT_SEPARATOR}"
        f"{messages['question']}: {query}"
    )


class Synthesizer:
    """
    Synthesizes answers from rendered pages using an LLM.

    Returns fixed texts when there is nothing to answer from or the
    model returns no text; LLM transport errors propagate.
    """

    def __init__(
        self,
        llm_client,
        language: str = "en",
        max_tokens: int = DEFAULT_MAX_TOKENS,
    ):
        """
        Initialize synthesizer.

        Args:
            llm_client: LLMClient (anything with an async complete())
            language: Response language ("en" or "es")
            max_tokens: Output token budget for the answer
        """
        self._llm = llm_client
        self._language = language
        self._max_tokens = max_tokens
        self._messages = get_messages(language)

    @property
    def system_prompt(self) -> str:
        return get_system_prompt(self._language)

    async def synthesize(self, query: str, documents: List[RenderedDocument]) -> str:
        """
        Answer a query from documents.

        Args:
            query: User question
            documents: Rendered pages in relevance order

        Returns:
            Answer text, or a fixed message for empty input / non-text output
        """
        if not documents:
            return self._messages["no_results"]

        context = build_context(documents, self._language)
        user_message = build_user_message(query, context, self._language)

        logger.info("Generating answer with %d context page(s)", len(documents))

        segments = await self._llm.complete(
            self.system_prompt,
            user_message,
            max_tokens=self._max_tokens,
        )

        text = first_text(segments)
        if text is None:
            logger.warning("LLM response contained no text segment")
            return self._messages["no_response"]
        return text


def first_text(segments) -> Optional[str]:
    """Text of the first text-typed segment, if any"""
    for segment in segments or []:
        if segment.is_text:
            return segment.text
    return None
