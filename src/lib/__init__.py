"""
mdbook-svgdx - svgdx diagrams for mdbook

Library layer: event source, rewriter, renderer and mdbook protocol.
"""

from .errors import SvgdxError, ConfigError, RenderError, SerializeError, ContextError
from .events import events_parse
from .serializer import events_serialize
from .options import RenderConfig, config_parse
from .renderer import Renderer, SvgdxRenderer, output_sanitize, errorMarkup_make
from .rewriter import Rewriter
from .book import PREPROCESSOR_NAME, renderer_supports, input_load, configTable_extract, book_process
from .log import LOG, state_connectToLogger

__all__ = [
    "SvgdxError",
    "ConfigError",
    "RenderError",
    "SerializeError",
    "ContextError",
    "events_parse",
    "events_serialize",
    "RenderConfig",
    "config_parse",
    "Renderer",
    "SvgdxRenderer",
    "output_sanitize",
    "errorMarkup_make",
    "Rewriter",
    "PREPROCESSOR_NAME",
    "renderer_supports",
    "input_load",
    "configTable_extract",
    "book_process",
    "LOG",
    "state_connectToLogger",
]
