"""
Shared fixtures

FakeRenderer stands in for the svgdx executable: it resolves wh="W H"
shorthand into width/height the way svgdx does, emits a blank line after the
opening <svg> tag (so output sanitation has something to remove), and fails
with a two-line message on any <fail/> element.
"""

import re

import pytest

from mdbook_svgdx.lib.errors import RenderError
from mdbook_svgdx.lib.options import RenderConfig
from mdbook_svgdx.lib.rewriter import Rewriter


class FakeRenderer:
    """Records every call and returns svgdx-shaped output"""

    def __init__(self) -> None:
        self.calls = []

    def render(self, source: str, config: RenderConfig) -> str:
        self.calls.append((source, config))
        if "<fail" in source:
            raise RenderError("Invalid element 'fail'\nat line 1")
        svg = re.sub(r'wh="(\S+) (\S+)"', r'width="\1" height="\2"', source.strip())
        return svg.replace("<svg>", '<svg xmlns="http://www.w3.org/2000/svg">\n\n', 1) + "\n"


@pytest.fixture
def renderer():
    return FakeRenderer()


@pytest.fixture
def rewriter(renderer):
    return Rewriter(RenderConfig(), renderer)
