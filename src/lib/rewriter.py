"""
svgdx block rewriter

Walks a document's event stream and replaces every svgdx fenced code block
with a container holding the rendered SVG and, depending on the fence tag,
a literal display of its XML source.

The rewrite for one block:

    BlockStart(code_block, "xml-svgdx")        Html(<div class='xml-svgdx'>)
    Text("<svg>\\n")                            Html(<div ...>)  Source display
    Text("  <rect wh=\\"20 5\\"/>\\n")    ==>     code_block "xml" ...
    Text("</svg>\\n")                           Html(</div>)
    BlockEnd(code_block)                       paragraph: Html(<svg ...>...)
                                               Html(</div>)

Blank lines pad the outside of the container so markdown treats it as an
HTML block; the rendered SVG inside it never contains one, or markdown
would end the HTML block early.

A block inside a list item or block quote is wrapped in a generated
PREFIXED block, so every line emitted for it keeps the container's prefix.
"""

from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from ..models.document import DocumentResult, DocumentStatus
from ..models.events import CODE_BLOCK, PARAGRAPH, PREFIXED, BlockEnd, BlockStart, Event, Html, Text
from ..models.variants import SOURCE_TAG, BlockVariant, variant_classify
from .errors import RenderError, SerializeError
from .events import events_parse
from .log import LOG
from .options import RenderConfig
from .renderer import Renderer, errorMarkup_make, output_sanitize
from .serializer import events_serialize


INLINE_STYLE = (
    "style='display: flex; flex-wrap: wrap; justify-content: space-around; align-items: center;' "
)
SOURCE_STYLE = "style='overflow-x: auto; font-size: 0.9em;'"


@dataclass
class OpenBlock:
    """
    An svgdx block between its start marker and its end

    Attributes:
        tag: Fence tag as written, used as the container's CSS class
        variant: Behavior fixed when the block opened
        fragments: Text runs received so far, in arrival order
        lead: Opening line text before the fence marker, for a nested fence
        prefix: Container line prefix, for a nested fence
    """
    tag: str
    variant: BlockVariant
    fragments: List[str] = field(default_factory=list)
    lead: str = ""
    prefix: str = ""

    @property
    def nested(self) -> bool:
        return bool(self.lead or self.prefix)

    def content(self) -> str:
        return "".join(self.fragments)


class Rewriter:
    """
    Rewrites svgdx blocks in markdown documents

    One Rewriter serves a whole run: it holds only the immutable
    RenderConfig and the renderer, and keeps per-document state local to
    each call.
    """

    def __init__(self, config: RenderConfig, renderer: Renderer) -> None:
        """
        Args:
            config: Rendering options shared by every block
            renderer: Object turning svgdx source into SVG markup
        """
        self.config = config
        self.renderer = renderer

    def document_process(self, text: str) -> DocumentResult:
        """
        Rewrite all svgdx blocks in one markdown document

        Args:
            text: Markdown source

        Returns:
            DocumentResult. When the rewritten stream cannot be serialized
            the original text is returned with status FALLBACK.
        """
        events = events_parse(text)
        stats = {"blocks": 0, "render_errors": 0}
        rewritten = self.events_rewrite(events, stats)

        if not stats["blocks"]:
            return DocumentResult(content=text, status=DocumentStatus.UNCHANGED)

        try:
            content = events_serialize(rewritten)
        except SerializeError as e:
            return DocumentResult(
                content=text,
                status=DocumentStatus.FALLBACK,
                blocks=stats["blocks"],
                render_errors=stats["render_errors"],
                error=str(e),
            )
        return DocumentResult(
            content=content,
            status=DocumentStatus.REWRITTEN,
            blocks=stats["blocks"],
            render_errors=stats["render_errors"],
        )

    def events_rewrite(self, events: Iterable[Event], stats: Optional[dict] = None) -> List[Event]:
        """
        Replace svgdx blocks in an event stream

        Every event outside an svgdx block is passed through unchanged and
        in order. A block left open at the end of the stream is closed there,
        as CommonMark does for an unterminated fence.

        Args:
            events: Events of one document
            stats: Optional dict whose "blocks" and "render_errors" counters
                   are incremented

        Returns:
            New event list
        """
        if stats is None:
            stats = {}
        stats.setdefault("blocks", 0)
        stats.setdefault("render_errors", 0)

        output: List[Event] = []
        block: Optional[OpenBlock] = None

        for event in events:
            if block is None:
                if isinstance(event, BlockStart) and event.kind == CODE_BLOCK:
                    variant = variant_classify(event.tag)
                    if variant is not None:
                        LOG(f"svgdx block '{event.tag}' opened", level=3)
                        block = OpenBlock(tag=event.tag, variant=variant, lead=event.lead, prefix=event.prefix)
                        if block.nested:
                            output.append(BlockStart(kind=PREFIXED, lead=block.lead, prefix=block.prefix))
                        output.append(self.container_open(block))
                        continue
                output.append(event)
            elif isinstance(event, Text):
                block.fragments.append(event.text)
            elif isinstance(event, BlockEnd) and event.kind == CODE_BLOCK:
                output.extend(self.block_close(block, stats))
                block = None
            else:
                LOG(f"Unexpected {type(event).__name__} event inside svgdx block '{block.tag}'", level=2)
                output.append(event)

        if block is not None:
            LOG(f"svgdx block '{block.tag}' not terminated; closing at end of document", level=2)
            output.extend(self.block_close(block, stats))

        return output

    def block_close(self, block: OpenBlock, stats: dict) -> List[Event]:
        """Dispatch a finished block and close its container"""
        stats["blocks"] += 1
        events = self.content_dispatch(block.variant, block.content(), stats)
        events.append(self.container_close())
        if block.nested:
            events.append(BlockEnd(kind=PREFIXED))
        return events

    def content_dispatch(self, variant: BlockVariant, content: str, stats: Optional[dict] = None) -> List[Event]:
        """
        Produce the events for one block's content

        Order: source display (SOURCE_BEFORE), rendered output (always),
        source display (SOURCE_AFTER).

        Args:
            variant: Block variant
            content: Complete block text
            stats: Optional counters, "render_errors" incremented on failure

        Returns:
            Events to emit between the container markers
        """
        events: List[Event] = []
        if variant.source_before:
            events.extend(self.source_display(content))
        events.extend(self.rendered_display(content, stats))
        if variant.source_after:
            events.extend(self.source_display(content))
        return events

    def rendered_display(self, content: str, stats: Optional[dict] = None) -> List[Event]:
        try:
            markup = self.renderer.render(content, self.config)
        except RenderError as e:
            LOG(f"svgdx render failed: {e}", level=1)
            if stats is not None:
                stats["render_errors"] = stats.get("render_errors", 0) + 1
            markup = errorMarkup_make(str(e))
        return [
            BlockStart(kind=PARAGRAPH),
            Html(output_sanitize(markup)),
            BlockEnd(kind=PARAGRAPH),
        ]

    def source_display(self, content: str) -> List[Event]:
        # Blank line after the <div> so the fence inside is read as markdown
        return [
            Html(f"\n\n<div {SOURCE_STYLE}>\n"),
            BlockStart(kind=CODE_BLOCK, tag=SOURCE_TAG),
            Text(content),
            BlockEnd(kind=CODE_BLOCK),
            Html("\n</div>\n"),
        ]

    def container_open(self, block: OpenBlock) -> Html:
        style = INLINE_STYLE if block.variant.inline else ""
        return Html(f"\n\n<div {style}class='{block.tag}'>\n")

    def container_close(self) -> Html:
        return Html("</div>\n\n")
