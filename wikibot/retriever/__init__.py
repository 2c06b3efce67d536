"""
Retriever - Notion Wiki Question Answering

Finds wiki pages for a question and synthesizes a cited answer with an LLM.

Key Components:
- BlockFlattener: Renders a page's block tree as plain text
- DocumentSelector: Searches Notion, scopes and renders the best pages
- Synthesizer: Builds the LLM context and extracts the answer
- WikiAnswerer: The whole pipeline behind one answer() call

Pipeline:
1. Search Notion pages (most recently edited first)
2. Keep pages of the configured database
3. Flatten up to 5 pages, 3000 characters each
4. Synthesize an answer with sources from the LLM
"""

from .blocks import BlockKind, ContentBlock
from .flattener import BlockFlattener
from .selector import DocumentSelector, DocumentRef, RenderedDocument
from .synthesizer import Synthesizer
from .pipeline import WikiAnswerer

__all__ = [
    "BlockKind",
    "ContentBlock",
    "BlockFlattener",
    "DocumentSelector",
    "DocumentRef",
    "RenderedDocument",
    "Synthesizer",
    "WikiAnswerer",
]
