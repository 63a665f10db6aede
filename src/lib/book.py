"""
mdbook preprocessor protocol

mdbook runs a preprocessor twice:

    mdbook-svgdx supports <renderer>    exit status 0 = supported
    mdbook-svgdx                        stdin: [context, book]  stdout: book

The book is JSON; chapters sit in a list under "sections" (mdbook 0.4) or
"items" (mdbook 0.5), each item being {"Chapter": {...}}, {"PartTitle": ...}
or "Separator". Chapters nest through "sub_items". Only chapter "content"
is rewritten; everything else is passed back untouched.
"""

import json
from typing import Any, Dict, Iterator, List, Tuple

from ..models.document import DocumentStatus
from .errors import ContextError
from .log import LOG
from .rewriter import Rewriter


PREPROCESSOR_NAME = "svgdx"


def renderer_supports(renderer: str) -> bool:
    """
    Report whether the preprocessor can run for an mdbook renderer

    The output is plain markdown with inline HTML, which both the html and
    markdown renderers accept.
    """
    return renderer != "not-supported"


def input_load(text: str) -> Tuple[Dict[str, Any], Dict[str, Any]]:
    """
    Decode the [context, book] pair mdbook writes to stdin

    Args:
        text: Raw stdin contents

    Returns:
        (context, book) dicts

    Raises:
        ContextError: If the input is not a two element JSON array of objects
    """
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as e:
        raise ContextError(f"Preprocessor input is not valid JSON: {e}") from e

    if not isinstance(payload, list) or len(payload) != 2:
        raise ContextError("Preprocessor input must be a [context, book] JSON array")
    context, book = payload
    if not isinstance(context, dict) or not isinstance(book, dict):
        raise ContextError("Preprocessor context and book must both be JSON objects")
    return context, book


def configTable_extract(context: Dict[str, Any]) -> Any:
    """
    Get the [preprocessor.svgdx] table from the mdbook context

    Returns:
        The table as given, or None when book.toml has no such table
    """
    config = context.get("config") or {}
    return (config.get("preprocessor") or {}).get(PREPROCESSOR_NAME)


def book_items(book: Dict[str, Any]) -> List[Any]:
    """Return the top-level item list of a book in either layout"""
    for key in ("sections", "items"):
        items = book.get(key)
        if isinstance(items, list):
            return items
    raise ContextError("Book has neither 'sections' nor 'items'")


def chapters_walk(items: List[Any]) -> Iterator[Dict[str, Any]]:
    """
    Yield every chapter dict, depth first, in reading order

    Separators and part titles are skipped.
    """
    for item in items:
        if isinstance(item, dict) and isinstance(item.get("Chapter"), dict):
            chapter = item["Chapter"]
            yield chapter
            yield from chapters_walk(chapter.get("sub_items") or [])


def book_process(book: Dict[str, Any], rewriter: Rewriter) -> Dict[str, int]:
    """
    Rewrite svgdx blocks in every chapter of a book, in place

    A chapter whose rewrite cannot be serialized keeps its original content
    and is reported in the log; the other chapters are unaffected.

    Args:
        book: Decoded mdbook Book
        rewriter: Rewriter shared by all chapters

    Returns:
        Counters: chapters, rewritten, fallbacks, blocks, render_errors
    """
    stats = {"chapters": 0, "rewritten": 0, "fallbacks": 0, "blocks": 0, "render_errors": 0}

    for chapter in chapters_walk(book_items(book)):
        stats["chapters"] += 1
        content = chapter.get("content")
        if not isinstance(content, str) or not content:
            continue

        name = chapter.get("name", "?")
        result = rewriter.document_process(content)
        stats["blocks"] += result.blocks
        stats["render_errors"] += result.render_errors

        if result.status is DocumentStatus.FALLBACK:
            stats["fallbacks"] += 1
            LOG(f"Chapter '{name}' left unchanged: {result.error}", level=1)
        elif result.changed:
            stats["rewritten"] += 1
            chapter["content"] = result.content
            LOG(f"Chapter '{name}': {result.blocks} svgdx block(s)", level=2)

    return stats
