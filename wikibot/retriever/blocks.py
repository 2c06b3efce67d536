"""
Content Blocks

Typed view over Notion block objects and their plain-text rendering.
Styling in rich text is discarded; only plain_text is kept.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class BlockKind(str, Enum):
    """Block types the flattener knows how to render"""
    PARAGRAPH = "paragraph"
    HEADING_1 = "heading_1"
    HEADING_2 = "heading_2"
    HEADING_3 = "heading_3"
    BULLETED_LIST_ITEM = "bulleted_list_item"
    NUMBERED_LIST_ITEM = "numbered_list_item"
    TO_DO = "to_do"
    TOGGLE = "toggle"
    QUOTE = "quote"
    CALLOUT = "callout"
    CODE = "code"
    TABLE_ROW = "table_row"
    DIVIDER = "divider"
    UNSUPPORTED = "unsupported"

    @classmethod
    def from_type(cls, block_type: str) -> "BlockKind":
        try:
            return cls(block_type)
        except ValueError:
            return cls.UNSUPPORTED


# Prefix conventions for single-line kinds
_PREFIXES = {
    BlockKind.PARAGRAPH: "",
    BlockKind.HEADING_1: "# ",
    BlockKind.HEADING_2: "## ",
    BlockKind.HEADING_3: "### ",
    BlockKind.BULLETED_LIST_ITEM: "• ",
    BlockKind.NUMBERED_LIST_ITEM: "",  # ordinals are not available per block
    BlockKind.TOGGLE: "",
    BlockKind.QUOTE: "> ",
    BlockKind.CALLOUT: "📌 ",
}


def plain_text(rich_text: Optional[List[Dict[str, Any]]]) -> str:
    """Concatenate the plain_text of rich text spans"""
    return "".join(span.get("plain_text", "") for span in rich_text or [])


@dataclass(frozen=True)
class ContentBlock:
    """A single block of a page's content tree"""
    id: str
    kind: BlockKind
    text: str = ""
    has_children: bool = False
    checked: bool = False  # to_do
    language: str = ""  # code
    cells: List[str] = field(default_factory=list)  # table_row
    raw_type: str = ""

    @classmethod
    def from_api(cls, raw: Dict[str, Any]) -> "ContentBlock":
        """Build from a Notion block object"""
        raw_type = raw.get("type", "")
        kind = BlockKind.from_type(raw_type)
        data = raw.get(raw_type) or {}

        return cls(
            id=raw.get("id", ""),
            kind=kind,
            text=plain_text(data.get("rich_text")),
            has_children=bool(raw.get("has_children", False)),
            checked=bool(data.get("checked", False)),
            language=data.get("language", "") if kind == BlockKind.CODE else "",
            cells=[plain_text(cell) for cell in data.get("cells", [])] if kind == BlockKind.TABLE_ROW else [],
            raw_type=raw_type,
        )

    def render(self) -> str:
        """Render the block's own content (children are not included)"""
        if self.kind in _PREFIXES:
            return f"{_PREFIXES[self.kind]}{self.text}"

        if self.kind == BlockKind.TO_DO:
            mark = "✓" if self.checked else "○"
            return f"{mark} {self.text}"

        if self.kind == BlockKind.CODE:
            return f"```{self.language}\n{self.text}\n```"

        if self.kind == BlockKind.TABLE_ROW:
            return " | ".join(self.cells)

        if self.kind == BlockKind.DIVIDER:
            return "---"

        return ""
