"""
Snippet file resolver

Turns a directive into the ordered list of files to inject.

Ordering policy:
    - No bracket list ({{snippet foo}}): every match, sorted by full path.
    - Bracket list ({{snippet foo [sh,go]}}, even []): one pass per requested
      extension in the order written; each pass emits the matching files in
      glob order. [sh,go] therefore always puts shell before Go, and a
      repeated entry ([go,go]) injects its files again.
"""

import glob
import os
from pathlib import Path
from typing import List

from ..models.directives import Directive, SnippetFile
from ..models.tags import TagAliasMap
from .errors import PatternError
from .log import LOG


class FileResolver:
    """
    Resolves directive names to candidate snippet files below inject_dir

    Attributes:
        inject_dir: Base directory of the glob
        recursive: Search subdirectories too
        tags: Tag alias map used for display tags and extension eligibility
    """

    def __init__(self, inject_dir: Path, recursive: bool, tags: TagAliasMap) -> None:
        self.inject_dir = Path(inject_dir)
        self.recursive = recursive
        self.tags = tags

    def pattern_build(self, name: str) -> str:
        """
        Glob pattern for a directive name

        Example:
            >>> FileResolver(Path("docs"), True, TagAliasMap()).pattern_build("hello")
            'docs/**/hello.*'
        """
        base = glob.escape(str(self.inject_dir).rstrip("/"))
        if self.recursive:
            base = f"{base}/**"
        return f"{base}/{name}.*"

    def matches_glob(self, pattern: str) -> List[str]:
        """Regular files matching pattern, sorted"""
        try:
            found = glob.glob(pattern, recursive=self.recursive)
        except (ValueError, OSError) as e:
            raise PatternError(f"Bad snippet pattern {pattern!r}: {e}") from e
        return sorted(path for path in found if os.path.isfile(path))

    def candidate_make(self, path: str) -> SnippetFile:
        extension = os.path.splitext(path)[1].lstrip(".")
        return SnippetFile(path=Path(path), extension=extension, tag=self.tags.tag_resolve(extension))

    def files_resolve(self, directive: Directive) -> List[SnippetFile]:
        """
        Ordered candidate files for a directive

        Args:
            directive: Parsed directive

        Returns:
            SnippetFile list in injection order

        Raises:
            PatternError: If the glob pattern cannot be evaluated
        """
        pattern = self.pattern_build(directive.name)
        candidates = [
            candidate
            for candidate in map(self.candidate_make, self.matches_glob(pattern))
            if self.tags.extension_allowed(candidate.extension)
        ]
        LOG(f"{pattern}: {len(candidates)} candidate files", level=2)

        if not directive.has_explicit_filter:
            return candidates

        return [
            candidate
            for requested in directive.extension_filter
            for candidate in candidates
            if requested in (candidate.extension, candidate.tag)
        ]
