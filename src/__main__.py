#!/usr/bin/env python3
"""
mdbook-svgdx - mdbook preprocessor for svgdx diagrams

Replaces fenced code blocks tagged svgdx (and its source-display variants)
with inline SVG rendered by svgdx.

Fence tags:
    svgdx               rendered SVG only
    xml-svgdx           XML source, then rendered SVG
    svgdx-xml           rendered SVG, then XML source
    xml-svgdx-inline    as xml-svgdx, side by side
    svgdx-xml-inline    as svgdx-xml, side by side

Usage:
    # As an mdbook preprocessor (book.toml)
    [preprocessor.svgdx]
    scale = 2.0

    # mdbook's renderer check
    mdbook-svgdx supports html

    # Standalone, on a single markdown file
    mdbook-svgdx process chapter.md --config svgdx.yaml --output out.md
"""

import json
import sys
from pathlib import Path
from typing import List, Optional
from argparse import ArgumentParser, Namespace, ArgumentDefaultsHelpFormatter

import yaml

from . import __version__
from .lib import (
    LOG,
    state_connectToLogger,
    ConfigError,
    ContextError,
    Renderer,
    Rewriter,
    SvgdxRenderer,
    book_process,
    config_parse,
    configTable_extract,
    input_load,
    renderer_supports,
)
from .models import ProgramState, pipeline


# Define CLI arguments
parser = ArgumentParser(
    prog="mdbook-svgdx",
    description="mdbook preprocessor rendering svgdx fenced code blocks to inline SVG",
    formatter_class=ArgumentDefaultsHelpFormatter,
)

parser.add_argument(
    "-v",
    "--verbosity",
    action="count",
    default=1,
    help="Increase output verbosity (can be repeated: -v, -vv)",
)

parser.add_argument("-V", "--version", action="version", version=f"%(prog)s {__version__}")

subparsers = parser.add_subparsers(dest="command")

supports_parser = subparsers.add_parser(
    "supports", help="Check whether a renderer is supported (exit status 0 if so)"
)
supports_parser.add_argument("targetRenderer", metavar="renderer", type=str, help="mdbook renderer name")

process_parser = subparsers.add_parser(
    "process",
    help="Rewrite svgdx blocks in a single markdown file",
    formatter_class=ArgumentDefaultsHelpFormatter,
)
process_parser.add_argument("inputFile", metavar="FILE", type=str, help="Markdown file to process")
process_parser.add_argument(
    "--config",
    dest="configFile",
    default=None,
    type=str,
    help="YAML file with svgdx options (same keys as [preprocessor.svgdx] in book.toml)",
)
process_parser.add_argument(
    "--output",
    dest="outputFile",
    default=None,
    type=str,
    help="Write the result here instead of stdout",
)


def input_read(inputstate: ProgramState) -> ProgramState:
    """
    Read and decode the [context, book] pair mdbook sends on stdin.

    Returns:
        ProgramState with added fields:
            - bookContext: mdbook PreprocessorContext
            - book: mdbook Book
            - configTable: [preprocessor.svgdx] table from book.toml

    Exits:
        1 if stdin is not a valid preprocessor payload
    """
    state = inputstate.copy()

    LOG("Reading book from stdin...", level=2)
    try:
        state.bookContext, state.book = input_load(sys.stdin.read())
    except ContextError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    LOG(f"mdbook version: {state.bookContext.get('mdbook_version', 'unknown')}", level=2)
    LOG(f"Renderer: {state.bookContext.get('renderer', 'unknown')}", level=2)
    state.configTable = configTable_extract(state.bookContext)
    return state


def source_read(inputstate: ProgramState) -> ProgramState:
    """
    Read the markdown file and optional YAML options for `process`.

    Returns:
        ProgramState with added fields:
            - source: Markdown text
            - configTable: Options mapping from the YAML file (or None)

    Exits:
        1 if a file cannot be read or the YAML is malformed
    """
    state = inputstate.copy()

    input_file = Path(state.inputFile or "")
    try:
        # newline="" keeps CRLF sources intact
        with open(input_file, encoding="utf-8", newline="") as f:
            state.source = f.read()
        LOG(f"Read {len(state.source)} characters from {input_file.name}", level=2)
    except OSError as e:
        print(f"Error reading input file: {e}", file=sys.stderr)
        sys.exit(1)

    state.configTable = None
    if state.configFile:
        try:
            with open(state.configFile, encoding="utf-8") as f:
                state.configTable = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            print(f"Error reading config file: {e}", file=sys.stderr)
            sys.exit(1)
    return state


def options_parse(inputstate: ProgramState) -> ProgramState:
    """
    Validate rendering options and build the shared Rewriter.

    Runs before any document is touched, so a bad option stops the whole
    run.

    Returns:
        ProgramState with added fields:
            - renderConfig: Frozen RenderConfig
            - rewriter: Rewriter used for every document

    Exits:
        1 on an unknown option or a badly typed value
    """
    state = inputstate.copy()

    try:
        state.renderConfig = config_parse(state.configTable)
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    LOG(f"Render options: {state.renderConfig.model_dump(exclude_none=True)}", level=2)

    renderer = state.svgRenderer if state.svgRenderer is not None else SvgdxRenderer()
    state.rewriter = Rewriter(state.renderConfig, renderer)
    return state


def chapters_rewrite(inputstate: ProgramState) -> ProgramState:
    """
    Rewrite every chapter of the book.

    Returns:
        ProgramState with added fields:
            - bookStats: Counters from book_process
            - output: Book serialized back to JSON

    Exits:
        1 if the book structure is not recognized
    """
    state = inputstate.copy()

    try:
        state.bookStats = book_process(state.book, state.rewriter)
    except ContextError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    stats = state.bookStats
    LOG(
        f"Processed {stats['chapters']} chapters: {stats['blocks']} svgdx blocks, "
        f"{stats['render_errors']} render errors, {stats['fallbacks']} unchanged on error",
        level=1,
    )
    state.output = json.dumps(state.book)
    return state


def document_render(inputstate: ProgramState) -> ProgramState:
    """
    Rewrite the single markdown document of `process`.

    Returns:
        ProgramState with added field:
            - output: Rewritten markdown (original text on serialization failure)
    """
    state = inputstate.copy()

    result = state.rewriter.document_process(state.source)
    if result.error:
        LOG(f"Document left unchanged: {result.error}", level=1)
    LOG(f"{result.blocks} svgdx blocks, {result.render_errors} render errors", level=1)
    state.output = result.content
    return state


def output_write(inputstate: ProgramState) -> ProgramState:
    """
    Write the result to stdout or the --output file.

    Exits:
        1 if the output file cannot be written
    """
    state = inputstate.copy()

    if state.outputFile:
        try:
            with open(state.outputFile, "w", encoding="utf-8", newline="") as f:
                f.write(state.output or "")
        except OSError as e:
            print(f"Error writing output file: {e}", file=sys.stderr)
            sys.exit(1)
        LOG(f"Wrote {state.outputFile}", level=2)
    else:
        sys.stdout.write(state.output or "")
        sys.stdout.flush()
    return state


def main(argv: Optional[List[str]] = None, renderer: Optional[Renderer] = None) -> None:
    """
    Main entry point.

    Without a sub-command, runs as an mdbook preprocessor:
        1. input_read: Decode [context, book] from stdin
        2. options_parse: Validate [preprocessor.svgdx] options
        3. chapters_rewrite: Rewrite every chapter
        4. output_write: Write the book JSON to stdout

    `process FILE` runs source_read, options_parse, document_render and
    output_write on a single file. `supports RENDERER` only sets the exit
    status.

    Args:
        argv: Command line arguments (default: sys.argv[1:])
        renderer: Renderer to use instead of the svgdx executable
    """
    options: Namespace = parser.parse_args(argv)

    if options.command == "supports":
        sys.exit(0 if renderer_supports(options.targetRenderer) else 1)

    state: ProgramState = ProgramState.state_createFromNamespace(options)
    state.command = options.command or "preprocess"
    state.svgRenderer = renderer

    # Connect state to logger for entire pipeline
    state_connectToLogger(state)

    if state.command == "process":
        pipeline(state, source_read, options_parse, document_render, output_write)
    else:
        pipeline(state, input_read, options_parse, chapters_rewrite, output_write)


if __name__ == "__main__":
    main()
