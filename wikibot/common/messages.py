"""
Localized fixed texts.

Every user-facing text that is not produced by the LLM lives here,
one table per response language.
"""

from typing import Dict

MESSAGES: Dict[str, Dict[str, str]] = {
    "en": {
        "no_results": (
            "❌ I couldn't find relevant information in the Notion wiki for your question.\n\n"
            "Try rephrasing it, use more specific terms, or check Notion directly."
        ),
        "no_response": "⚠️ Could not generate a response. Please try again.",
        "error": "❌ Something went wrong while processing your question. Please try again.",
        "untitled": "Untitled",
        "mention_usage": (
            "Hi! Mention me with a question and I'll search the Notion wiki. Example:\n"
            "`@WikiBot What is our vacation policy?`"
        ),
        "command_usage": (
            "⚠️ Include a question. Example:\n"
            "`{command} What is our vacation policy?`"
        ),
        "asked": "*<@{user_id}> asked:* {query}",
        "context_header": "Context from the Notion wiki:",
        "question": "Question",
    },
    "es": {
        "no_results": (
            "❌ No encontré información relevante en el wiki de Notion para tu pregunta.\n\n"
            "Intenta reformularla, usa términos más específicos, o revisa directamente en Notion."
        ),
        "no_response": "⚠️ No se pudo generar una respuesta. Intenta de nuevo.",
        "error": "❌ Ocurrió un error al procesar tu consulta. Por favor intenta de nuevo.",
        "untitled": "Sin título",
        "mention_usage": (
            "¡Hola! Mencióname con una pregunta y buscaré en el wiki de Notion. Ejemplo:\n"
            "`@WikiBot ¿Cuál es nuestra política de vacaciones?`"
        ),
        "command_usage": (
            "⚠️ Incluye una pregunta. Ejemplo:\n"
            "`{command} ¿Cuál es nuestra política de vacaciones?`"
        ),
        "asked": "*<@{user_id}> preguntó:* {query}",
        "context_header": "Contexto del wiki de Notion:",
        "question": "Pregunta",
    },
}

DEFAULT_LANGUAGE = "en"


def get_messages(language: str) -> Dict[str, str]:
    """Return the text table for a language, falling back to English."""
    return MESSAGES.get((language or "").lower(), MESSAGES[DEFAULT_LANGUAGE])
