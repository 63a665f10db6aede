"""
Markdown re-serializer

Writes an event stream back out as markdown text.

Source events carry their raw slice and are written verbatim, so a stream
that was never rewritten reproduces its document exactly. Generated events
(raw is None) are rendered here:

- generated code blocks become fences, opened after a blank line so the
  fence is parsed as markdown even right after a raw HTML line
- generated paragraphs hold raw HTML and end on a fresh line, so whatever
  follows starts on a line of its own
- a generated prefixed block writes its lead, then puts the container prefix
  ("> ", list indent) in front of every further line, so its content stays
  inside the list item or block quote it replaces a fence of
"""

import re
from typing import Iterable, List, Optional

from ..models.events import CODE_BLOCK, PARAGRAPH, PREFIXED, BlockEnd, BlockStart, Event, Html, Other, Text
from .errors import SerializeError
from .events import lines_split


_BACKTICKS_RE = re.compile(r"`+")


def fence_make(content: str) -> str:
    """
    Pick a backtick fence longer than any backtick run in the content

    Example:
        >>> fence_make("a ```` b")
        '`````'
    """
    longest = max((len(run) for run in _BACKTICKS_RE.findall(content)), default=0)
    return "`" * max(3, longest + 1)


class Serializer:
    """
    Single-use writer turning events into markdown text

    Tracks the open block stack so unbalanced streams are reported instead
    of silently producing broken markdown.

    `tail` holds the end of the text as written before any line prefix is
    applied, so blank line checks see the same text inside a container as
    outside one.
    """

    def __init__(self) -> None:
        self.parts: List[str] = []
        self.tail = ""
        self.stack: List[BlockStart] = []
        self.pending: Optional[List[str]] = None  # text of a generated code block
        self.prefixes: List[str] = []
        self.at_line_start = True
        self.lead_pending = False  # nothing written yet after a prefixed block's lead

    def write(self, text: str) -> None:
        if self.prefixes:
            if self.lead_pending:
                # The lead already opened this line
                text = text.lstrip("\n")
                if text:
                    self.lead_pending = False
            physical = self.prefix_apply(text)
        else:
            physical = text
        if text:
            self.parts.append(physical)
            self.tail = (self.tail + text)[-2:]

    def prefix_apply(self, text: str) -> str:
        prefix = self.prefixes[-1]
        out: List[str] = []
        for line in lines_split(text):
            if self.at_line_start:
                # Blank lines get the prefix without trailing whitespace
                out.append(prefix + line if line.strip("\r\n") else prefix.rstrip() + line)
            else:
                out.append(line)
            self.at_line_start = line.endswith(("\n", "\r"))
        return "".join(out)

    def newline_ensure(self) -> None:
        if self.tail and not self.tail.endswith("\n"):
            self.write("\n")

    def blankline_ensure(self) -> None:
        if not self.tail:
            return
        self.newline_ensure()
        if not self.tail.endswith("\n\n"):
            self.write("\n")

    def event_write(self, event: Event) -> None:
        if isinstance(event, (Other, Html)):
            if self.pending is not None:
                raise SerializeError(f"{type(event).__name__} event inside a generated code block")
            self.write(event.raw if isinstance(event, Other) else event.html)
        elif isinstance(event, BlockStart):
            self.start_write(event)
        elif isinstance(event, BlockEnd):
            self.end_write(event)
        elif isinstance(event, Text):
            self.text_write(event)
        else:
            raise SerializeError(f"Unknown event type {type(event).__name__}")

    def start_write(self, event: BlockStart) -> None:
        if self.stack and self.stack[-1].kind == CODE_BLOCK:
            raise SerializeError(f"Block '{event.kind}' opened inside a code block")
        self.stack.append(event)
        if event.raw is not None:
            self.write(event.raw)
        elif event.kind == CODE_BLOCK:
            self.pending = []
        elif event.kind == PREFIXED:
            self.write(event.lead)
            self.prefixes.append(event.prefix)
            self.at_line_start = False
            self.lead_pending = True
            # Content after the lead starts a fresh block
            self.tail = "\n\n"
        elif event.kind != PARAGRAPH:
            raise SerializeError(f"Cannot generate a '{event.kind}' block")

    def end_write(self, event: BlockEnd) -> None:
        if not self.stack:
            raise SerializeError(f"Unmatched end of '{event.kind}' block")
        start = self.stack.pop()
        if start.kind != event.kind:
            raise SerializeError(f"Block '{start.kind}' closed as '{event.kind}'")

        if start.raw is not None:
            self.write(event.raw or "")
        elif start.kind == CODE_BLOCK:
            content = "".join(self.pending or [])
            self.pending = None
            fence = fence_make(content)
            self.blankline_ensure()
            self.write(f"{fence}{start.tag}\n")
            self.write(content)
            self.newline_ensure()
            self.write(f"{fence}\n")
        else:
            self.newline_ensure()
            if start.kind == PREFIXED:
                self.prefixes.pop()
                self.lead_pending = False
                self.at_line_start = True

    def text_write(self, event: Text) -> None:
        if not self.stack:
            raise SerializeError("Text outside of any block")
        if self.pending is not None:
            self.pending.append(event.text)
        else:
            self.write(event.raw if event.raw is not None else event.text)

    def finish(self) -> str:
        if self.stack:
            raise SerializeError(f"Unclosed '{self.stack[-1].kind}' block at end of document")
        return "".join(self.parts)


def events_serialize(events: Iterable[Event]) -> str:
    """
    Serialize an event stream to markdown

    Args:
        events: Source and/or generated events in document order

    Returns:
        Markdown text

    Raises:
        SerializeError: On unbalanced block markers, text outside a block,
                        or a block kind that cannot be generated
    """
    serializer = Serializer()
    for event in events:
        serializer.event_write(event)
    return serializer.finish()
