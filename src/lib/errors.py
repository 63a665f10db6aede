"""mdbook-svgdx exception hierarchy.

Kept free of project imports: models, lib modules and tests all use it.
"""

from typing import Any


class SvgdxError(Exception):
    """Base exception for all mdbook-svgdx errors."""


class ConfigError(SvgdxError):
    """
    Raised for an unknown rendering option or a value of the wrong type.

    Fatal for the whole run: no document is processed under a broken
    configuration.
    """

    def __init__(self, message: str, key: str, value: Any = None) -> None:
        super().__init__(message)
        self.key = key
        self.value = value


class RenderError(SvgdxError):
    """Raised by a renderer when one block's source cannot be transformed."""


class SerializeError(SvgdxError):
    """Raised when a rewritten event stream cannot be turned back into markdown."""


class ContextError(SvgdxError):
    """Raised when the mdbook context/book input is malformed."""
