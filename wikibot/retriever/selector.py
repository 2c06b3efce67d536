"""
Document Selector

Searches the Notion wiki and turns the best matching pages into
bounded plain-text documents for synthesis.
Restricts results to a single database when one is configured.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .flattener import BlockFlattener

logger = logging.getLogger("wikibot.retriever.selector")


def normalize_id(notion_id: str) -> str:
    """Strip dash separators so dashed and compact Notion IDs compare equal"""
    return (notion_id or "").replace("-", "").lower()


def extract_title(properties: Dict[str, Any], untitled: str = "Untitled") -> str:
    """Title from the first title-typed property of a page"""
    for prop in (properties or {}).values():
        if prop.get("type") == "title":
            return "".join(t.get("plain_text", "") for t in prop.get("title", []))
    return untitled


@dataclass
class DocumentRef:
    """A page matched by search, title not yet read"""
    id: str
    url: str
    parent_database_id: Optional[str] = None
    properties: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_page(cls, page: Dict[str, Any]) -> Optional["DocumentRef"]:
        """Build from a full page object; partial objects yield None"""
        if page.get("object", "page") != "page":
            return None
        if "properties" not in page or "url" not in page:
            return None

        parent = page.get("parent") or {}
        database_id = parent.get("database_id") if parent.get("type") == "database_id" else None

        return cls(
            id=page["id"],
            url=page["url"],
            parent_database_id=database_id,
            properties=page["properties"] or {},
        )

    def in_scope(self, database_id: str) -> bool:
        """Check if the page belongs to the given database"""
        if not self.parent_database_id:
            return False
        return normalize_id(self.parent_database_id) == normalize_id(database_id)


@dataclass
class RenderedDocument:
    """A flattened, truncated page ready for the LLM context"""
    id: str
    title: str
    url: str
    text: str


class DocumentSelector:
    """
    Selects and renders wiki pages for a query.

    Pipeline:
    1. Search pages (most recently edited first)
    2. Keep pages of the configured database (if any)
    3. Flatten the first ``max_documents`` candidates
    4. Truncate each to ``max_document_chars``, drop empty pages

    A failure on one page is logged and skipped; search failures propagate.
    """

    def __init__(
        self,
        store,
        flattener: Optional[BlockFlattener] = None,
        database_id: Optional[str] = None,
        search_page_size: int = 20,
        max_documents: int = 5,
        max_document_chars: int = 3000,
        max_concurrency: int = 1,
        untitled: str = "Untitled",
    ):
        """
        Initialize selector.

        Args:
            store: Document store client with search() and get_block_children()
            flattener: Block flattener (built on top of store if omitted)
            database_id: Only keep pages of this database (optional)
            search_page_size: Results requested from search
            max_documents: Candidates rendered after filtering
            max_document_chars: Hard character cap per document
            max_concurrency: Candidates rendered at the same time
            untitled: Title used for pages without one
        """
        self._store = store
        self._flattener = flattener or BlockFlattener(store)
        self._database_id = database_id or None
        self._search_page_size = search_page_size
        self._max_documents = max_documents
        self._max_document_chars = max_document_chars
        self._max_concurrency = max(1, max_concurrency)
        self._untitled = untitled

    async def select(self, query: str) -> List[RenderedDocument]:
        """
        Find and render the pages relevant to a query.

        Args:
            query: User question

        Returns:
            Rendered documents in search order
        """
        scope = f" (database: {self._database_id})" if self._database_id else ""
        logger.info('Searching Notion: "%s"%s', query, scope)

        results = await self._store.search(query, page_size=self._search_page_size)

        candidates = self.filter_candidates(results)
        logger.info(
            "Notion results: %d total, %d in scope", len(results), len(candidates)
        )

        candidates = candidates[: self._max_documents]
        semaphore = asyncio.Semaphore(self._max_concurrency)

        async def render(ref: DocumentRef) -> Optional[RenderedDocument]:
            async with semaphore:
                return await self._render_candidate(ref)

        rendered = await asyncio.gather(*(render(ref) for ref in candidates))
        return [doc for doc in rendered if doc is not None]

    def filter_candidates(self, results: List[Dict[str, Any]]) -> List[DocumentRef]:
        """Parse search results and apply the database scope"""
        refs = []
        for page in results:
            ref = DocumentRef.from_page(page)
            if ref is None:
                continue
            if self._database_id and not ref.in_scope(self._database_id):
                continue
            refs.append(ref)
        return refs

    async def _render_candidate(self, ref: DocumentRef) -> Optional[RenderedDocument]:
        """Title and flatten one page; None if it is empty or fails"""
        try:
            title = extract_title(ref.properties, self._untitled)
            content = await self._flattener.flatten(ref.id)
        except Exception as e:
            logger.error("Error processing page %s: %s", ref.id, e)
            return None

        text = content[: self._max_document_chars]
        if not text.strip():
            return None

        logger.info('Page added: "%s" (%d chars)', title, len(content))
        return RenderedDocument(id=ref.id, title=title, url=ref.url, text=text)
