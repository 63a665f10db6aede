"""
Markdown event source

Turns a markdown document into the flat event stream the rewriter walks.

markdown-it-py does the block parsing; this module only slices the original
text along the block boundaries it reports, so every region that
is not a fenced code block comes back byte-for-byte, line endings included.

Key features:
- Fenced code blocks become BlockStart / Text... / BlockEnd, at any depth:
  a fence inside a list item or block quote splits its container's text,
  and its BlockStart carries the line prefix the container needs
- One Text event per content line: consumers must not assume a block's
  text arrives in a single event
- Unterminated fences (end of document or container) still get their BlockEnd
- HTML blocks become Html events, anything else an Other event

Example:
    >>> events = events_parse("# Title\\n\\n```svgdx\\n<svg/>\\n```\\n")
    >>> [type(e).__name__ for e in events]
    ['Other', 'Other', 'BlockStart', 'Text', 'BlockEnd']
"""

import re
from typing import List, Optional

from markdown_it import MarkdownIt
from markdown_it.token import Token

from ..models.events import CODE_BLOCK, BlockEnd, BlockStart, Event, Html, Other, Text


# Same line breaks markdown-it normalizes, so line numbers in token.map
# index straight into this split
_LINE_RE = re.compile(r"[^\r\n]*(?:\r\n|\r|\n)|[^\r\n]+$")

# Anything but block quote markers and whitespace becomes a space, turning
# the first-line lead of a list item ("- ", "1. ") into its continuation indent
_MARKER_RE = re.compile(r"[^\s>]")


def create_parser() -> MarkdownIt:
    """Create configured markdown-it parser."""
    md = MarkdownIt("commonmark")
    md.enable("table")
    md.enable("strikethrough")
    return md


# Singleton parser instance
_parser: Optional[MarkdownIt] = None


def get_parser() -> MarkdownIt:
    """Get or create the singleton parser instance."""
    global _parser
    if _parser is None:
        _parser = create_parser()
    return _parser


def lines_split(text: str) -> List[str]:
    """
    Split text into lines, keeping each line's own terminator

    Unlike str.splitlines(), only \\n, \\r\\n and \\r end a line.

    Example:
        >>> lines_split("a\\r\\nb\\nc")
        ['a\\r\\n', 'b\\n', 'c']
    """
    return _LINE_RE.findall(text)


def region_append(events: List[Event], kind: str, lines: List[str], start: int, end: int) -> None:
    """Append lines[start:end] as one Other event, if non-empty"""
    if start < end:
        events.append(Other(kind, "".join(lines[start:end])))


def events_parse(text: str) -> List[Event]:
    """
    Parse a markdown document into an event stream

    A top-level list or block quote that holds fenced code blocks is cut
    around each of them: the container text before and after a fence
    travels as Other events of the container's kind.

    Args:
        text: Complete markdown source of one document

    Returns:
        Events whose raw slices, concatenated, reproduce `text` exactly
    """
    lines = lines_split(text)
    tokens = get_parser().parse(text)

    events: List[Event] = []
    cursor = 0
    # Top-level block whose remaining lines are not yet emitted
    container: Optional[str] = None
    container_end = 0

    for token in tokens:
        if token.nesting == -1 or token.map is None:
            continue
        start, end = token.map

        if token.level > 0:
            if token.type == "fence" and container is not None:
                region_append(events, container, lines, cursor, start)
                events.extend(fence_events(token, lines[start:end]))
                cursor = max(cursor, end)
            continue

        if container is not None:
            region_append(events, container, lines, cursor, container_end)
            cursor = max(cursor, container_end)
            container = None
        region_append(events, "gap", lines, cursor, start)
        cursor = max(cursor, start)

        block_lines = lines[start:end]
        if token.type == "fence":
            events.extend(fence_events(token, block_lines))
            cursor = max(cursor, end)
        elif token.type == "html_block":
            events.append(Html("".join(block_lines)))
            cursor = max(cursor, end)
        elif token.nesting == 1:
            container = token.type[: -len("_open")] if token.type.endswith("_open") else token.type
            container_end = end
        else:
            events.append(Other(token.type, "".join(block_lines)))
            cursor = max(cursor, end)

    if container is not None:
        region_append(events, container, lines, cursor, container_end)
        cursor = max(cursor, container_end)
    region_append(events, "gap", lines, cursor, len(lines))
    return events


def fence_events(token: Token, block_lines: List[str]) -> List[Event]:
    """
    Expand one fenced code block into start, per-line text and end events

    Args:
        token: markdown-it "fence" token
        block_lines: Source lines the token spans, opening fence included

    Returns:
        BlockStart, one Text per content line, BlockEnd. The BlockEnd raw
        text is empty when the fence runs to the end of its container.
    """
    opener, body = block_lines[0], block_lines[1:]
    content_lines = lines_split(token.content)

    # A closed fence spans exactly one line more than its content
    closer = ""
    if len(body) == len(content_lines) + 1:
        closer = body.pop()

    lead = prefix = ""
    if token.level > 0:
        marker = opener.find(token.markup)
        lead = opener[:marker] if marker >= 0 else ""
        prefix = _MARKER_RE.sub(" ", lead)

    start = BlockStart(kind=CODE_BLOCK, tag=token.info.strip(), raw=opener, lead=lead, prefix=prefix)
    end = BlockEnd(kind=CODE_BLOCK, raw=closer)

    if len(body) != len(content_lines):
        # Line accounting disagrees (e.g., exotic whitespace); keep the
        # text whole rather than guess at the pairing
        return [start, Text(token.content, raw="".join(body)), end]

    texts: List[Event] = [Text(text, raw=raw) for text, raw in zip(content_lines, body)]
    return [start, *texts, end]
