"""
Markdown event models

Immutable structures describing one parsed markdown document as a flat,
ordered stream of events. The rewriter consumes and re-emits these; the
serializer turns them back into markdown text.
"""

from dataclasses import dataclass
from typing import Optional, Union


# Block kinds the rewriter and serializer care about. Any other top-level
# block travels as an Other event carrying its own kind string.
CODE_BLOCK = "code_block"
PARAGRAPH = "paragraph"
# Generated only: every line written inside gets a container line prefix
PREFIXED = "prefixed"


@dataclass(frozen=True)
class BlockStart:
    """
    Opening marker of a block

    Attributes:
        kind: Block kind (CODE_BLOCK, PARAGRAPH or PREFIXED)
        tag: Fence language tag for code blocks (e.g., "svgdx", "xml"),
             empty for other kinds
        raw: Source text of the opening line, or None for generated blocks
        lead: For a fence inside a list item or block quote, the text of its
              opening line before the fence marker (e.g., "- " or "> ")
        prefix: Line prefix that keeps continuation lines inside the same
                container (e.g., "  " or "> "); empty at top level

    Example:
        For the source line "```svgdx\\n":
        BlockStart(kind="code_block", tag="svgdx", raw="```svgdx\\n")

        For the second line of "- item\\n  ```svgdx\\n":
        BlockStart(kind="code_block", tag="svgdx", raw="  ```svgdx\\n",
                   lead="  ", prefix="  ")
    """
    kind: str
    tag: str = ""
    raw: Optional[str] = None
    lead: str = ""
    prefix: str = ""


@dataclass(frozen=True)
class BlockEnd:
    """
    Closing marker of a block

    Attributes:
        kind: Block kind, matching the BlockStart it closes
        raw: Source text of the closing fence line. Empty when the source
             fence was never closed; None for generated blocks.
    """
    kind: str
    raw: Optional[str] = None


@dataclass(frozen=True)
class Text:
    """
    A run of literal text inside a block

    Attributes:
        text: Text content as seen by the block (fence indentation removed)
        raw: Source slice the text came from, or None for generated text
    """
    text: str
    raw: Optional[str] = None


@dataclass(frozen=True)
class Html:
    """A run of raw HTML, written out verbatim"""
    html: str


@dataclass(frozen=True)
class Other:
    """
    Any other top-level source region, passed through untouched

    Attributes:
        kind: Region kind (e.g., "heading", "bullet_list", "gap")
        raw: Exact source text of the region
    """
    kind: str
    raw: str


Event = Union[BlockStart, BlockEnd, Text, Html, Other]
