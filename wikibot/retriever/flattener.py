"""
Block Flattener

Turns a page's block tree into plain text, one line per block,
walking nested children up to a fixed depth.
"""

from typing import List

from .blocks import ContentBlock

# Containers deeper than this are never fetched
MAX_DEPTH = 3
# Children are only followed from blocks above this depth
MAX_CHILD_DEPTH = 2


class BlockFlattener:
    """
    Recursive block tree renderer.

    The store only needs ``get_block_children(block_id, page_size)``.
    Only the first page of children of each container is rendered.
    """

    def __init__(self, store, page_size: int = 50):
        """
        Initialize flattener.

        Args:
            store: Document store client (e.g. NotionClient)
            page_size: Children fetched per container
        """
        self._store = store
        self._page_size = page_size

    async def flatten(self, block_id: str, depth: int = 0) -> str:
        """
        Flatten the children of a block container into text.

        Args:
            block_id: Page or block ID whose children are rendered
            depth: Current recursion depth (0 for a page)

        Returns:
            Newline-joined rendering, empty if nothing renders
        """
        if depth > MAX_DEPTH:
            return ""

        raw_blocks = await self._store.get_block_children(block_id, page_size=self._page_size)

        lines: List[str] = []
        for raw in raw_blocks:
            if "type" not in raw:
                continue
            block = ContentBlock.from_api(raw)

            text = block.render()
            if text.strip():
                lines.append(text)

            # Toggles, tables, columns etc. keep their content in children
            if block.has_children and depth < MAX_CHILD_DEPTH:
                child_text = await self.flatten(block.id, depth + 1)
                if child_text:
                    lines.append(child_text)

        return "\n".join(lines)
