"""
Snippet directive models

Defines the parsed form of a {{snippet name [exts]}} marker, the scan result
that ties it to document nodes, and the candidate files it resolves to.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Tuple


@dataclass(frozen=True)
class Directive:
    """
    A parsed snippet directive

    Attributes:
        name: Snippet group identifier, resolved as a file stem
        extension_filter: Requested extensions/tags in author order
        has_explicit_filter: True when a bracket list was written, even if empty

    Example:
        {{snippet hello [sh,go]}} ->
        Directive(name="hello", extension_filter=("sh", "go"), has_explicit_filter=True)

        {{snippet hello}} ->
        Directive(name="hello", extension_filter=(), has_explicit_filter=False)
    """
    name: str
    extension_filter: Tuple[str, ...] = ()
    has_explicit_filter: bool = False


@dataclass
class DirectiveMatch:
    """
    A directive found in the document

    Attributes:
        literal: Matched marker text as written
        nodes: Text node indices that were joined to find the marker
        paragraph: Index of the paragraph containing the marker
        directive: Parsed directive
    """
    literal: str
    nodes: List[int]
    paragraph: int
    directive: Directive


@dataclass(frozen=True)
class SnippetFile:
    """
    A candidate source file for a directive

    Attributes:
        path: File path as produced by the glob
        extension: File extension without the leading dot
        tag: Display tag used as the code fence language hint
    """
    path: Path
    extension: str
    tag: str


@dataclass
class InjectReport:
    """
    Summary of one injection run

    Attributes:
        directives: Number of actionable directives found
        fragments: Number of fragments spliced into the document
        injected: Files that produced a fragment, in insertion order
        skipped: (path, reason) for candidate files that could not be read
        removed: Number of nodes detached (directive paragraphs, quotes)
    """
    directives: int = 0
    fragments: int = 0
    injected: List[Path] = field(default_factory=list)
    skipped: List[Tuple[Path, str]] = field(default_factory=list)
    removed: int = 0
