"""
mdbook-svgdx - mdbook preprocessor for svgdx diagrams

Replaces ```svgdx fenced code blocks with inline SVG, optionally shown
alongside their XML source.
"""

__version__ = "0.1.0"

from .lib import Rewriter, SvgdxRenderer, RenderConfig, config_parse, LOG, state_connectToLogger

__all__ = ["Rewriter", "SvgdxRenderer", "RenderConfig", "config_parse", "LOG", "state_connectToLogger", "__version__"]
