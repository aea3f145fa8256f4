"""
Error types raised by the injection engine

Library code raises these; the CLI stages turn them into messages and a
non-zero exit status.
"""

from pathlib import Path
from typing import Union


class PulpError(Exception):
    """Base class for all pulpmd errors"""
    pass


class ConfigError(PulpError):
    """Invalid or contradictory configuration (e.g. both target and stdin)"""
    pass


class SourceReadError(PulpError):
    """A file could not be read or decoded"""

    def __init__(self, path: Union[str, Path], reason: str) -> None:
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"read {self.path}: {reason}")


class SnippetReadError(SourceReadError):
    """A candidate snippet file could not be read or decoded"""

    def __init__(self, path: Union[str, Path], reason: str) -> None:
        super().__init__(path, reason)
        self.args = (f"read code file {self.path}: {reason}",)


class OutputWriteError(PulpError):
    """The rendered document could not be written"""

    def __init__(self, path: Union[str, Path], reason: str) -> None:
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"write {self.path}: {reason}")


class PatternError(PulpError):
    """A snippet glob pattern could not be evaluated"""
    pass


class MarkdownParseError(PulpError):
    """The markdown engine rejected its input"""
    pass
