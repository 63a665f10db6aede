"""
Program state model and pipeline helper

Defines ProgramState dataclass for the functional pipeline pattern and
the pipeline() helper for composing processing stages.
"""

from argparse import Namespace
from typing import Any, Optional, Type, TypeVar, Dict, Callable
from dataclasses import dataclass, field, fields


PS = TypeVar("PS", bound="ProgramState")


@dataclass
class ProgramState:
    """
    Central state container for the processing pipeline (state bus pattern).

    Each stage receives the state produced by the previous one and returns
    a copy with its own fields filled in.

    Pipeline stages and their state additions:
        - Initial: verbosity, command, targetRenderer, inputFile, configFile, outputFile, svgRenderer
        - input_read / source_read: bookContext, book / source
        - options_parse: renderConfig, rewriter
        - chapters_rewrite / document_render: bookStats / output
        - output_write: (no additions, terminal stage)

    Attributes:
        verbosity: Logging verbosity level (1-3)
        command: Sub-command ("preprocess", "process" or "supports")
        targetRenderer: Renderer name for the "supports" check
        inputFile: Markdown file for the standalone "process" command
        configFile: Optional YAML file holding rendering options
        outputFile: Optional output path for "process" (stdout when unset)
        svgRenderer: Renderer to use instead of the svgdx executable
        bookContext: mdbook PreprocessorContext as decoded from stdin
        book: mdbook Book as decoded from stdin
        source: Markdown text for the standalone command
        configTable: Raw rendering options before validation
        renderConfig: Validated RenderConfig shared by every document
        rewriter: Rewriter built from renderConfig and svgRenderer
        bookStats: Counters gathered while rewriting the book
        output: Final text destined for stdout or outputFile
    """

    # CLI arguments
    verbosity: int = field(default=1)
    command: str = field(default="preprocess")
    targetRenderer: str = field(default="")
    inputFile: Optional[str] = field(default=None)
    configFile: Optional[str] = field(default=None)
    outputFile: Optional[str] = field(default=None)
    svgRenderer: Optional[Any] = field(default=None)  # Renderer at runtime

    # Pipeline state
    bookContext: Optional[Dict[str, Any]] = field(default=None)
    book: Optional[Dict[str, Any]] = field(default=None)
    source: Optional[str] = field(default=None)
    configTable: Optional[Any] = field(default=None)
    renderConfig: Optional[Any] = field(default=None)  # RenderConfig at runtime
    rewriter: Optional[Any] = field(default=None)  # Rewriter at runtime
    bookStats: Optional[Dict[str, int]] = field(default=None)
    output: Optional[str] = field(default=None)

    @classmethod
    def state_createFromNamespace(
        cls: Type["ProgramState"], options: Namespace
    ) -> "ProgramState":
        """
        Create ProgramState from an argparse Namespace.

        Options that have no matching field (e.g., argparse internals) are
        dropped; the rest override the dataclass defaults.

        Args:
            options: Parsed CLI arguments

        Returns:
            ProgramState instance with all CLI options as attributes
        """
        valid_fields = {f.name for f in fields(cls)}
        filtered_options = {
            k: v for k, v in vars(options).items() if k in valid_fields and v is not None
        }
        return cls(**filtered_options)

    def copy(self: PS) -> PS:
        """
        Creates a shallow copy of the ProgramState instance.

        Returns:
            A new ProgramState instance.
        """
        return type(self)(**self.__dict__)


def pipeline(
    initial_state: ProgramState, *stages: Callable[[ProgramState], ProgramState]
) -> ProgramState:
    """
    Execute a functional pipeline of state transformations.

    Each stage is a function (ProgramState) -> ProgramState that receives
    the output of the previous stage and returns a new state.

    Args:
        initial_state: Starting ProgramState
        *stages: Variable number of stage functions to execute in order

    Returns:
        Final ProgramState after all transformations

    Example:
        final_state = pipeline(
            initial_state,
            input_read,
            options_parse,
            chapters_rewrite,
            output_write
        )

    This is equivalent to:
        output_write(chapters_rewrite(options_parse(input_read(initial_state))))

    But reads left-to-right instead of inside-out.
    """
    from functools import reduce
    return reduce(lambda state, stage: stage(state), stages, initial_state)
