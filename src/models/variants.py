"""
Block variant models

Defines the closed family of fence tags that mark svgdx blocks and the
behavior each one selects: whether the XML source is shown before or after
the rendered image, and whether the two sit side by side.
"""

from enum import Enum
from dataclasses import dataclass
from typing import Dict, Optional


class SourceOrder(Enum):
    """
    Where the raw source display goes relative to the rendered output
    """
    PLAIN = "plain"                  # rendered output only
    SOURCE_BEFORE = "source-before"  # source, then rendered output
    SOURCE_AFTER = "source-after"    # rendered output, then source


@dataclass(frozen=True)
class BlockVariant:
    """
    Behavior class of a recognized svgdx fence tag

    Attributes:
        order: Placement of the source display
        inline: Lay the container out side by side (flex-wrap) instead of
                stacked. Affects wrapping only, never content ordering.
    """
    order: SourceOrder
    inline: bool = False

    @property
    def source_before(self) -> bool:
        return self.order is SourceOrder.SOURCE_BEFORE

    @property
    def source_after(self) -> bool:
        return self.order is SourceOrder.SOURCE_AFTER


# Exact, case-sensitive spellings. Anything else is an ordinary code block.
VARIANT_TAGS: Dict[str, BlockVariant] = {
    "svgdx": BlockVariant(SourceOrder.PLAIN),
    "xml-svgdx": BlockVariant(SourceOrder.SOURCE_BEFORE),
    "svgdx-xml": BlockVariant(SourceOrder.SOURCE_AFTER),
    "xml-svgdx-inline": BlockVariant(SourceOrder.SOURCE_BEFORE, inline=True),
    "svgdx-xml-inline": BlockVariant(SourceOrder.SOURCE_AFTER, inline=True),
}

# Fence tag used for the literal source display
SOURCE_TAG = "xml"


def variant_classify(tag: str) -> Optional[BlockVariant]:
    """
    Map a fence language tag to its block variant

    Args:
        tag: Fence info string with surrounding whitespace removed

    Returns:
        The BlockVariant for a recognized tag, None otherwise

    Example:
        >>> variant_classify("xml-svgdx").source_before
        True
        >>> variant_classify("svgdx2") is None
        True
    """
    return VARIANT_TAGS.get(tag)
