"""
Fence tag classification tests

The recognized tag set is closed and matched exactly.
"""

import pytest

from mdbook_svgdx.models.variants import (
    VARIANT_TAGS,
    BlockVariant,
    SourceOrder,
    variant_classify,
)


class TestRecognizedTags:
    """Each recognized spelling maps to exactly one variant"""

    def test_plain(self):
        variant = variant_classify("svgdx")
        assert variant == BlockVariant(SourceOrder.PLAIN)
        assert not variant.source_before
        assert not variant.source_after
        assert not variant.inline

    def test_source_before(self):
        variant = variant_classify("xml-svgdx")
        assert variant.source_before
        assert not variant.source_after
        assert not variant.inline

    def test_source_after(self):
        variant = variant_classify("svgdx-xml")
        assert variant.source_after
        assert not variant.source_before
        assert not variant.inline

    def test_inline_variants(self):
        """-inline changes layout only, not ordering"""
        assert variant_classify("xml-svgdx-inline") == BlockVariant(SourceOrder.SOURCE_BEFORE, inline=True)
        assert variant_classify("svgdx-xml-inline") == BlockVariant(SourceOrder.SOURCE_AFTER, inline=True)

    def test_tag_set_is_closed(self):
        assert set(VARIANT_TAGS) == {
            "svgdx",
            "xml-svgdx",
            "svgdx-xml",
            "xml-svgdx-inline",
            "svgdx-xml-inline",
        }


class TestUnrecognizedTags:
    """Anything outside the closed set is an ordinary code block"""

    @pytest.mark.parametrize(
        "tag",
        [
            "",
            "xml",
            "rust",
            "SVGDX",
            "Svgdx",
            "svgdx2",
            "svgdx-inline",
            "svgdx-xml-inline-extra",
            "xml-svgdx-",
            " svgdx",
            "svgdx title=diagram",
        ],
    )
    def test_not_special(self, tag):
        assert variant_classify(tag) is None
