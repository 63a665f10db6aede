"""
mdbook preprocessor tests

Covers the JSON protocol helpers, chapter walking, and the command line
entry point driven through stdin/stdout.
"""

import io
import json
import sys

import pytest

from mdbook_svgdx.__main__ import main
from mdbook_svgdx.lib.book import (
    book_process,
    chapters_walk,
    configTable_extract,
    input_load,
    renderer_supports,
)
from mdbook_svgdx.lib.errors import ContextError


BLOCK = '```svgdx\n<svg><rect wh="20 5"/></svg>\n```\n'


def chapter(name, content, sub_items=None):
    return {
        "Chapter": {
            "name": name,
            "content": content,
            "number": None,
            "sub_items": sub_items or [],
            "path": f"{name.lower()}.md",
            "source_path": f"{name.lower()}.md",
            "parent_names": [],
        }
    }


def sample_book(key="sections"):
    return {
        key: [
            chapter("Intro", "# Intro\n\nNo diagrams here.\n"),
            "Separator",
            {"PartTitle": "Diagrams"},
            chapter(
                "Shapes",
                "# Shapes\n\n" + BLOCK,
                sub_items=[chapter("Nested", "Nested\n\n" + BLOCK.replace("svgdx", "svgdx-xml", 1))],
            ),
        ],
        "__non_exhaustive": None,
    }


def sample_context(table=None):
    config = {"book": {"title": "Test"}, "preprocessor": {}}
    if table is not None:
        config["preprocessor"]["svgdx"] = table
    return {
        "root": "/book",
        "config": config,
        "renderer": "html",
        "mdbook_version": "0.4.40",
    }


class TestSupports:
    """Renderer compatibility check"""

    @pytest.mark.parametrize("name", ["html", "markdown", "epub"])
    def test_supported(self, name):
        assert renderer_supports(name)

    def test_not_supported(self):
        assert not renderer_supports("not-supported")

    def test_exit_status(self):
        with pytest.raises(SystemExit) as exc:
            main(["supports", "html"])
        assert exc.value.code == 0
        with pytest.raises(SystemExit) as exc:
            main(["supports", "not-supported"])
        assert exc.value.code == 1


class TestInput:
    """Decoding the [context, book] payload"""

    def test_valid(self):
        context, book = input_load(json.dumps([sample_context(), sample_book()]))
        assert context["renderer"] == "html"
        assert "sections" in book

    @pytest.mark.parametrize(
        "text",
        ["not json", "{}", "[1, 2, 3]", '[{"a": 1}]', '[[], {}]'],
    )
    def test_invalid(self, text):
        with pytest.raises(ContextError):
            input_load(text)

    def test_config_table(self):
        assert configTable_extract(sample_context({"scale": 2})) == {"scale": 2}

    def test_config_table_missing(self):
        assert configTable_extract(sample_context()) is None
        assert configTable_extract({}) is None


class TestBookProcess:
    """Rewriting every chapter of a book"""

    def test_walk_order(self):
        names = [c["name"] for c in chapters_walk(sample_book()["sections"])]
        assert names == ["Intro", "Shapes", "Nested"]

    @pytest.mark.parametrize("key", ["sections", "items"])
    def test_rewrites_nested_chapters(self, rewriter, renderer, key):
        book = sample_book(key)
        stats = book_process(book, rewriter)

        assert stats == {"chapters": 3, "rewritten": 2, "fallbacks": 0, "blocks": 2, "render_errors": 0}
        intro, separator, part, shapes = book[key]
        assert intro["Chapter"]["content"] == "# Intro\n\nNo diagrams here.\n"
        assert separator == "Separator"
        assert part == {"PartTitle": "Diagrams"}
        assert "<div class='svgdx'>" in shapes["Chapter"]["content"]
        nested = shapes["Chapter"]["sub_items"][0]["Chapter"]
        assert "<div class='svgdx-xml'>" in nested["content"]
        assert len(renderer.calls) == 2

    def test_render_errors_counted(self, rewriter):
        book = {"sections": [chapter("Bad", "```svgdx\n<svg><fail/></svg>\n```\n")]}
        stats = book_process(book, rewriter)
        assert stats["render_errors"] == 1
        assert "border: 5px double red" in book["sections"][0]["Chapter"]["content"]

    def test_draft_chapter_without_content(self, rewriter):
        draft = chapter("Draft", None)
        stats = book_process({"sections": [draft]}, rewriter)
        assert stats["chapters"] == 1
        assert draft["Chapter"]["content"] is None

    def test_unknown_layout(self, rewriter):
        with pytest.raises(ContextError):
            book_process({"chapters": []}, rewriter)


class TestPreprocessCommand:
    """`mdbook-svgdx` with the book on stdin"""

    def run(self, monkeypatch, payload, renderer, argv=None):
        monkeypatch.setattr(sys, "stdin", io.StringIO(payload))
        main(argv or [], renderer=renderer)

    def test_book_round_trip(self, monkeypatch, capsys, renderer):
        book = sample_book()
        self.run(monkeypatch, json.dumps([sample_context({"theme": "dark"}), book]), renderer)

        output = json.loads(capsys.readouterr().out)
        assert output["__non_exhaustive"] is None
        assert output["sections"][0] == book["sections"][0]
        assert "<div class='svgdx'>" in output["sections"][3]["Chapter"]["content"]
        assert renderer.calls[0][1].theme == "dark"

    def test_reserved_command_key(self, monkeypatch, capsys, renderer):
        table = {"command": "python -m mdbook_svgdx", "scale": 2}
        self.run(monkeypatch, json.dumps([sample_context(table), sample_book()]), renderer)
        assert json.loads(capsys.readouterr().out)["sections"]
        assert renderer.calls[0][1].scale == 2.0

    def test_unknown_option_stops_before_rendering(self, monkeypatch, capsys, renderer):
        payload = json.dumps([sample_context({"colour": "red"}), sample_book()])
        with pytest.raises(SystemExit) as exc:
            self.run(monkeypatch, payload, renderer)

        assert exc.value.code == 1
        captured = capsys.readouterr()
        assert "colour" in captured.err
        assert captured.out == ""
        assert renderer.calls == []

    def test_bad_value_names_key_and_value(self, monkeypatch, capsys, renderer):
        payload = json.dumps([sample_context({"loop-limit": "lots"}), sample_book()])
        with pytest.raises(SystemExit):
            self.run(monkeypatch, payload, renderer)
        err = capsys.readouterr().err
        assert "'loop-limit'" in err
        assert "'lots'" in err

    def test_malformed_input(self, monkeypatch, capsys, renderer):
        with pytest.raises(SystemExit) as exc:
            self.run(monkeypatch, "[not json", renderer)
        assert exc.value.code == 1
        assert "Error:" in capsys.readouterr().err


class TestProcessCommand:
    """`mdbook-svgdx process FILE` on a single document"""

    def test_to_stdout(self, tmp_path, capsys, renderer):
        source = tmp_path / "chapter.md"
        source.write_text("Intro\n\n" + BLOCK, encoding="utf-8")

        main(["process", str(source)], renderer=renderer)

        out = capsys.readouterr().out
        assert out.startswith("Intro\n\n")
        assert "<div class='svgdx'>" in out

    def test_yaml_config_and_output_file(self, tmp_path, renderer):
        source = tmp_path / "chapter.md"
        source.write_bytes(b"Intro\r\n\r\n```xml-svgdx\r\n<svg/>\r\n```\r\n\r\nAfter\r\n")
        config = tmp_path / "svgdx.yaml"
        config.write_text("scale: 3\nfont-family: serif\n", encoding="utf-8")
        target = tmp_path / "out.md"

        main(
            ["process", str(source), "--config", str(config), "--output", str(target)],
            renderer=renderer,
        )

        output = target.read_bytes().decode("utf-8")
        assert output.startswith("Intro\r\n\r\n")
        assert output.endswith("After\r\n")
        assert "```xml\n<svg/>\n```" in output
        assert renderer.calls[0][1].scale == 3.0
        assert renderer.calls[0][1].font_family == "serif"

    def test_bad_yaml_option(self, tmp_path, capsys, renderer):
        source = tmp_path / "chapter.md"
        source.write_text(BLOCK, encoding="utf-8")
        config = tmp_path / "svgdx.yaml"
        config.write_text("sclae: 3\n", encoding="utf-8")

        with pytest.raises(SystemExit) as exc:
            main(["process", str(source), "--config", str(config)], renderer=renderer)
        assert exc.value.code == 1
        assert "sclae" in capsys.readouterr().err
        assert renderer.calls == []

    def test_missing_file(self, tmp_path, capsys, renderer):
        with pytest.raises(SystemExit) as exc:
            main(["process", str(tmp_path / "absent.md")], renderer=renderer)
        assert exc.value.code == 1
        assert "Error reading input file" in capsys.readouterr().err
