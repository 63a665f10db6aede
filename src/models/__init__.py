"""
Models package for mdbook-svgdx

Contains data structures and type definitions for the processing pipeline.
"""

from .state import ProgramState, pipeline
from .events import Event, BlockStart, BlockEnd, Text, Html, Other, CODE_BLOCK, PARAGRAPH, PREFIXED
from .variants import BlockVariant, SourceOrder, VARIANT_TAGS, SOURCE_TAG, variant_classify
from .document import DocumentResult, DocumentStatus

__all__ = [
    "ProgramState",
    "pipeline",
    "Event",
    "BlockStart",
    "BlockEnd",
    "Text",
    "Html",
    "Other",
    "CODE_BLOCK",
    "PARAGRAPH",
    "PREFIXED",
    "BlockVariant",
    "SourceOrder",
    "VARIANT_TAGS",
    "SOURCE_TAG",
    "variant_classify",
    "DocumentResult",
    "DocumentStatus",
]
