"""
svgdx rendering

A renderer is anything with `render(source, config) -> str` that raises
RenderError when the source cannot be transformed. SvgdxRenderer runs the
svgdx executable; tests and embedders can pass their own.

This module also holds the two helpers that make renderer output safe to
drop into a markdown document: blank-line removal and the inline error box.
"""

import html
import re
import subprocess
from typing import List, Optional, Protocol

from .errors import RenderError
from .log import LOG
from .options import RenderConfig


class Renderer(Protocol):
    """Transforms svgdx source into SVG markup"""

    def render(self, source: str, config: RenderConfig) -> str:
        ...


def lines_text(text: str) -> List[str]:
    """
    Split on "\n" only, dropping a trailing "\r" from each line

    str.splitlines() would also break on characters such as U+2028 or
    form feed, which may legitimately appear inside SVG text.

    Example:
        >>> lines_text("a\\r\\nb\\u2028c\\n")
        ['a', 'b\\u2028c']
    """
    lines = text.split("\n")
    if lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


def output_sanitize(markup: str) -> str:
    """
    Drop every empty or whitespace-only line

    Inside an HTML block a blank line hands control back to the markdown
    parser, which then reads the rest of the SVG as markdown (indented lines
    turning into code blocks and so on). See
    https://spec.commonmark.org/0.31.2/#html-blocks

    Example:
        >>> output_sanitize("<svg>\\n\\n  <rect/>\\n   \\n</svg>\\n")
        '<svg>\\n  <rect/>\\n</svg>'
    """
    return "\n".join(line for line in lines_text(markup) if line.strip())


def errorMarkup_make(message: str) -> str:
    """
    Build the inline error box shown in place of a failed diagram

    The message is HTML-escaped and its line breaks become <br/> so the box
    stays on a single line.

    Example:
        >>> errorMarkup_make("bad <rect>\\nline 2")
        '<div style="color: red; border: 5px double red; padding: 1em;">bad &lt;rect&gt;<br/>line 2</div>'
    """
    body = "<br/>".join(html.escape(line) for line in lines_text(message))
    return f'<div style="color: red; border: 5px double red; padding: 1em;">{body}</div>'


_SVG_OPEN_RE = re.compile(r"<svg\b[^>]*>")


class SvgdxRenderer:
    """
    Renderer backed by the svgdx command line tool

    Source is fed on stdin and the SVG read from stdout; each RenderConfig
    option that is set becomes the matching command line flag.
    """

    def __init__(
        self,
        command: Optional[List[str]] = None,
        timeout: Optional[float] = None,
        svg_style: Optional[str] = None,
    ) -> None:
        """
        Args:
            command: svgdx argument vector (default: from appsettings)
            timeout: Seconds allowed per block (default: from appsettings)
            svg_style: Style for the root <svg> element (default: from appsettings)
        """
        from ..config import appsettings

        self.command = command if command is not None else appsettings.command_make()
        self.timeout = timeout if timeout is not None else appsettings.render_timeout
        self.svg_style = svg_style if svg_style is not None else appsettings.svg_style

    def args_build(self, config: RenderConfig) -> List[str]:
        """
        Build the full svgdx invocation for a configuration

        Example:
            >>> SvgdxRenderer(["svgdx"], svg_style="").args_build(config_parse({"seed": 3}))
            ['svgdx', '--scale', '1.5', '--seed', '3', '-']
        """
        args = list(self.command)
        args += ["--scale", str(config.scale)]
        if config.border is not None:
            args += ["--border", str(config.border)]
        if config.add_auto_styles is False:
            args.append("--no-auto-style")
        if config.background is not None:
            args += ["--background", config.background]
        if config.seed is not None:
            args += ["--seed", str(config.seed)]
        if config.loop_limit is not None:
            args += ["--loop-limit", str(config.loop_limit)]
        if config.var_limit is not None:
            args += ["--var-limit", str(config.var_limit)]
        if config.font_size is not None:
            args += ["--font-size", config.font_size]
        if config.font_family is not None:
            args += ["--font-family", config.font_family]
        if config.theme is not None:
            args += ["--theme", config.theme]
        args.append("-")
        return args

    def svgStyle_apply(self, svg: str) -> str:
        """Add the display style to the root <svg> element unless it has one"""
        if not self.svg_style:
            return svg
        match = _SVG_OPEN_RE.search(svg)
        if match is None or re.search(r"\sstyle\s*=", match.group(0)):
            return svg
        tag = match.group(0)
        close = "/>" if tag.endswith("/>") else ">"
        styled = f'{tag[: -len(close)].rstrip()} style="{html.escape(self.svg_style)}"{close}'
        return svg[: match.start()] + styled + svg[match.end():]

    def render(self, source: str, config: RenderConfig) -> str:
        args = self.args_build(config)
        LOG(f"Running {' '.join(args)}", level=3)
        try:
            result = subprocess.run(
                args,
                input=source,
                capture_output=True,
                text=True,
                encoding="utf-8",
                timeout=self.timeout,
            )
        except FileNotFoundError as e:
            raise RenderError(f"svgdx executable not found: {args[0]}") from e
        except UnicodeDecodeError as e:
            raise RenderError(f"svgdx output is not valid UTF-8: {e}") from e
        except subprocess.TimeoutExpired as e:
            raise RenderError(f"svgdx timed out after {self.timeout} seconds") from e
        except OSError as e:
            raise RenderError(f"Failed to run svgdx: {e}") from e

        if result.returncode != 0:
            message = result.stderr.strip() or f"svgdx exited with status {result.returncode}"
            raise RenderError(message)
        return self.svgStyle_apply(result.stdout)
