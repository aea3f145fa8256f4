"""
Program state model and pipeline helper

Defines ProgramState dataclass for the functional pipeline pattern and
the pipeline() helper for composing transformation stages.
"""

import dataclasses
from argparse import Namespace
from functools import reduce
from pathlib import Path
from typing import Any, Callable, List, Optional, Type, TypeVar, TYPE_CHECKING
from dataclasses import dataclass, field

# Forward references for type hints - avoid circular import
if TYPE_CHECKING:
    from ..config.settings import AppSettings
    from .directives import InjectReport
    from .tree import DocumentTree


PS = TypeVar("PS", bound="ProgramState")


@dataclass
class ProgramState:
    """
    Central state container for the injection pipeline (state bus pattern).

    This dataclass carries all program state through the functional pipeline,
    with each stage adding new fields as the run progresses.

    Pipeline stages and their state additions:
        - Initial: CLI options (target, stdin, injectDir, ...)
        - env_check: settings, envOK
        - source_read: sourceText, sourcePath
        - source_parse: documentTree
        - snippets_inject: injectReport
        - document_render: renderedText
        - output_write: outputPath
        - results_report: (no additions, terminal stage)

    Attributes:
        config: Optional YAML config file path
        target: Markdown file to inject into
        stdin: Read the markdown document from stdin
        injectDir: Directory searched for snippet files
        norecur: Do not search injectDir recursively
        output: Output file (default: overwrite target, or stdout with stdin)
        fileExt: Extension filter entries ("go", "sh:bash")
        notags: Leave directive paragraphs in the output
        quotes: Leave placeholder block quotes in the output
        strict: Abort on unreadable snippet files
        lexerTags: Resolve unmapped extensions through Pygments
        reformat: Normalize output with mdformat
        verbosity: Logging verbosity level (0-3)
    """

    # CLI arguments
    config: Optional[str] = field(default=None)
    target: Optional[str] = field(default=None)
    stdin: bool = field(default=False)
    injectDir: Optional[str] = field(default=None)
    norecur: Optional[bool] = field(default=None)
    output: Optional[str] = field(default=None)
    fileExt: Optional[List[str]] = field(default=None)
    notags: Optional[bool] = field(default=None)
    quotes: Optional[bool] = field(default=None)
    strict: Optional[bool] = field(default=None)
    lexerTags: Optional[bool] = field(default=None)
    reformat: Optional[bool] = field(default=None)
    verbosity: int = field(default=1)

    # Pipeline state
    envOK: bool = field(default=False)
    settings: Optional["AppSettings"] = field(default=None)
    sourcePath: Optional[Path] = field(default=None)
    sourceText: Optional[str] = field(default=None)
    documentTree: Optional["DocumentTree"] = field(default=None)
    injectReport: Optional["InjectReport"] = field(default=None)
    renderedText: Optional[str] = field(default=None)
    outputPath: Optional[Path] = field(default=None)

    @classmethod
    def state_createFromNamespace(
        cls: Type["ProgramState"], options: Namespace
    ) -> "ProgramState":
        """
        Create ProgramState from an argparse Namespace.

        Options that are not ProgramState fields are ignored.

        Args:
            options: Parsed CLI arguments

        Returns:
            ProgramState instance with all CLI options as attributes
        """
        valid_fields = {f.name for f in dataclasses.fields(cls)}
        filtered_options = {k: v for k, v in vars(options).items() if k in valid_fields}
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
            env_check,
            source_read,
            source_parse,
            snippets_inject,
            document_render,
            output_write,
            results_report,
        )
    """
    return reduce(lambda state, stage: stage(state), stages, initial_state)


def stages_describe(stages: List[Callable[..., Any]]) -> str:
    """Human-readable stage chain, e.g. 'env_check -> source_read'"""
    return " -> ".join(stage.__name__ for stage in stages)
