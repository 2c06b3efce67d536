"""
Pipeline Scenario Tests

Runs WikiAnswerer end to end over an in-memory Notion workspace and a
mocked LLM:
- Scoped search with pages inside and outside the wiki database
- Pages that are blank, broken, or nested deeper than the flattener follows
- Non-text model output
"""

import logging
from unittest.mock import AsyncMock, patch

import pytest

from wikibot.common.config import WikiBotConfig
from wikibot.common.llm_client import ContentSegment
from wikibot.common.messages import get_messages
from wikibot.retriever.pipeline import WikiAnswerer
from wikibot.retriever.synthesizer import DOCUMENT_SEPARATOR, get_system_prompt

WIKI_DB = "8f1e2d3c-4b5a-6978-8a9b-0c1d2e3f4a5b"


@pytest.fixture
def config():
    cfg = WikiBotConfig()
    cfg.notion.database_id = WIKI_DB.replace("-", "")
    return cfg


@pytest.fixture
def workspace(fake_store, page, block):
    """A small wiki: two useful pages, one off-scope, one blank, one broken"""
    return fake_store(
        pages=[
            page("vac-1", "Vacation policy", database_id=WIKI_DB),
            page("draft-1", "Personal notes", database_id="00000000-0000-0000-0000-000000000000"),
            page("blank-1", "Empty template", database_id=WIKI_DB),
            page("broken-1", "Broken page", database_id=WIKI_DB),
            page("exp-1", "Expenses", database_id=WIKI_DB),
        ],
        children={
            "vac-1": [
                block("heading_2", "Days off"),
                block("bulleted_list_item", "25 working days per year", block_id="b1", has_children=True),
                block("divider"),
            ],
            "b1": [block("paragraph", "Pro-rated in the first year")],
            "draft-1": [block("paragraph", "secret")],
            "blank-1": [block("paragraph", " ")],
            "exp-1": [block("callout", "Submit receipts within 30 days")],
        },
        failing={"broken-1"},
    )


class TestAnswerScenarios:
    @pytest.mark.asyncio
    async def test_full_answer(self, config, workspace, mock_llm):
        answerer = WikiAnswerer.from_config(config, store=workspace, llm_client=mock_llm)

        answer = await answerer.answer("How many vacation days do we get?")

        assert answer.startswith("The answer.")
        system, user_message = mock_llm.complete.call_args.args
        assert system == get_system_prompt("en")

        pages = user_message.split(DOCUMENT_SEPARATOR)
        assert pages[0].endswith(
            '[PAGE 1: "Vacation policy"]\nURL: https://www.notion.so/vac1\n\n'
            "## Days off\n• 25 working days per year\nPro-rated in the first year\n---"
        )
        assert pages[1] == (
            '[PAGE 2: "Expenses"]\nURL: https://www.notion.so/exp1\n\n'
            "📌 Submit receipts within 30 days"
        )
        assert pages[2] == "Question: How many vacation days do we get?"
        assert "secret" not in user_message

    @pytest.mark.asyncio
    async def test_broken_page_is_logged_not_raised(self, config, workspace, mock_llm, caplog):
        answerer = WikiAnswerer.from_config(config, store=workspace, llm_client=mock_llm)

        with caplog.at_level(logging.ERROR, logger="wikibot.retriever.selector"):
            await answerer.answer("anything")

        assert "broken-1" in caplog.text

    @pytest.mark.asyncio
    async def test_only_blank_pages_gives_no_results(self, config, fake_store, page, block, mock_llm):
        store = fake_store(
            pages=[page("blank", database_id=WIKI_DB)],
            children={"blank": [block("paragraph", "   ")]},
        )
        answerer = WikiAnswerer.from_config(config, store=store, llm_client=mock_llm)

        answer = await answerer.answer("anything")

        assert answer == get_messages("en")["no_results"]
        mock_llm.complete.assert_not_called()

    @pytest.mark.asyncio
    async def test_non_text_reply_gives_fallback(self, config, workspace, mock_llm):
        mock_llm.complete.return_value = [ContentSegment("tool_use")]
        answerer = WikiAnswerer.from_config(config, store=workspace, llm_client=mock_llm)

        assert await answerer.answer("q") == get_messages("en")["no_response"]

    @pytest.mark.asyncio
    async def test_deterministic(self, config, workspace, mock_llm):
        answerer = WikiAnswerer.from_config(config, store=workspace, llm_client=mock_llm)

        first = await answerer.answer("q")
        first_request = mock_llm.complete.call_args
        second = await answerer.answer("q")

        assert first == second
        assert mock_llm.complete.call_args == first_request

    @pytest.mark.asyncio
    async def test_spanish_deployment(self, config, fake_store, page, block, mock_llm):
        config.retriever.language = "es"
        store = fake_store(
            pages=[page("p", title=None, database_id=WIKI_DB)],
            children={"p": [block("paragraph", "Hola")]},
        )
        answerer = WikiAnswerer.from_config(config, store=store, llm_client=mock_llm)

        await answerer.answer("¿Qué?")

        system, user_message = mock_llm.complete.call_args.args
        assert "Responde SIEMPRE en español" in system
        assert '[PÁGINA 1: "Sin título"]' in user_message
        assert user_message.endswith("Pregunta: ¿Qué?")

    @pytest.mark.asyncio
    async def test_search_failure_propagates(self, config, fake_store, mock_llm):
        store = fake_store()

        async def boom(query, page_size=20):
            raise ConnectionError("notion unreachable")

        store.search = boom
        answerer = WikiAnswerer.from_config(config, store=store, llm_client=mock_llm)

        with pytest.raises(ConnectionError):
            await answerer.answer("q")

    @pytest.mark.asyncio
    async def test_config_limits_are_applied(self, config, fake_store, page, block, mock_llm):
        config.notion.database_id = ""
        config.retriever.max_documents = 2
        config.retriever.max_document_chars = 10
        config.notion.block_page_size = 7
        config.notion.search_page_size = 12
        ids = ["a", "b", "c"]
        store = fake_store(
            pages=[page(i) for i in ids],
            children={i: [block("paragraph", i * 50)] for i in ids},
        )
        answerer = WikiAnswerer.from_config(config, store=store, llm_client=mock_llm)

        await answerer.answer("q")

        assert store.search_calls == [("q", 12)]
        assert store.children_calls == [("a", 7), ("b", 7)]
        user_message = mock_llm.complete.call_args.args[1]
        assert "a" * 10 in user_message and "a" * 11 not in user_message


class TestAclose:
    @pytest.mark.asyncio
    async def test_closes_store_it_created(self, config, mock_llm):
        notion = AsyncMock()
        with patch("wikibot.retriever.pipeline.NotionClient.from_config", return_value=notion):
            answerer = WikiAnswerer.from_config(config, llm_client=mock_llm)

        await answerer.aclose()

        notion.aclose.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_leaves_injected_store_open(self, config, mock_llm):
        store = AsyncMock()
        answerer = WikiAnswerer.from_config(config, store=store, llm_client=mock_llm)

        await answerer.aclose()

        store.aclose.assert_not_called()
