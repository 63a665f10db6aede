"""
Document processing result model
"""

from enum import Enum
from dataclasses import dataclass
from typing import Optional


class DocumentStatus(Enum):
    """Outcome of rewriting one document"""
    REWRITTEN = "rewritten"    # serialized output replaces the source
    UNCHANGED = "unchanged"    # no svgdx blocks found, source kept as-is
    FALLBACK = "fallback"      # serialization failed, source kept as-is


@dataclass
class DocumentResult:
    """
    Result of processing a single markdown document

    Serialization failures are not raised; the original text is returned
    with status FALLBACK and the failure message in `error`, so callers that
    care can report it.

    Attributes:
        content: Text to use for the document
        status: What happened to the document
        blocks: Number of svgdx blocks found
        render_errors: Number of blocks whose rendering failed
        error: Serialization failure message when status is FALLBACK
    """
    content: str
    status: DocumentStatus
    blocks: int = 0
    render_errors: int = 0
    error: Optional[str] = None

    @property
    def changed(self) -> bool:
        return self.status is DocumentStatus.REWRITTEN
