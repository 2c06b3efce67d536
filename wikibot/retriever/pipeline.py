"""
WikiAnswerer

Single entry point of the retrieval-and-synthesis pipeline:
question in, answer text out. Holds no per-query state.
"""

from ..common.config import WikiBotConfig
from ..common.llm_client import LLMClient
from ..common.messages import get_messages
from ..common.notion_client import NotionClient
from .flattener import BlockFlattener
from .selector import DocumentSelector
from .synthesizer import Synthesizer


class WikiAnswerer:
    """Answers questions from the Notion wiki"""

    def __init__(self, selector: DocumentSelector, synthesizer: Synthesizer, store=None):
        """
        Args:
            selector: Document selector
            synthesizer: Answer synthesizer
            store: Document store closed by aclose() (optional)
        """
        self._selector = selector
        self._synthesizer = synthesizer
        self._store = store

    @classmethod
    def from_config(cls, config: WikiBotConfig, store=None, llm_client=None) -> "WikiAnswerer":
        """
        Wire the pipeline from configuration.

        Args:
            config: Loaded configuration
            store: Document store override (defaults to NotionClient, owned by the answerer)
            llm_client: LLM client override (defaults to LLMClient)
        """
        owned_store = None
        if store is None:
            store = owned_store = NotionClient.from_config(config.notion)
        llm_client = llm_client or LLMClient.from_config(config.llm)

        selector = DocumentSelector(
            store,
            flattener=BlockFlattener(store, page_size=config.notion.block_page_size),
            database_id=config.notion.database_id,
            search_page_size=config.notion.search_page_size,
            max_documents=config.retriever.max_documents,
            max_document_chars=config.retriever.max_document_chars,
            max_concurrency=config.retriever.max_concurrency,
            untitled=get_messages(config.retriever.language)["untitled"],
        )
        synthesizer = Synthesizer(
            llm_client,
            language=config.retriever.language,
            max_tokens=config.llm.max_tokens,
        )
        return cls(selector, synthesizer, store=owned_store)

    async def answer(self, query: str) -> str:
        """
        Answer a question.

        Empty results and non-text model output come back as fixed
        texts; search and LLM transport errors propagate to the caller.
        """
        documents = await self._selector.select(query)
        return await self._synthesizer.synthesize(query, documents)

    async def aclose(self) -> None:
        """Close the document store this answerer created"""
        if self._store is not None:
            await self._store.aclose()
