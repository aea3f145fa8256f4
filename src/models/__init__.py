"""
Models package for pulpmd

Contains data structures and type definitions for the injection pipeline.
"""

from .state import ProgramState, pipeline
from .tree import DocumentTree, Node, NodeKind, SourceBuffer, TreeError, WalkStatus, MAIN_BUFFER
from .directives import Directive, DirectiveMatch, SnippetFile, InjectReport
from .edits import EditBatch, EditError, InsertBefore, Detach
from .tags import TagAliasMap, DEFAULT_TAGS

__all__ = [
    "ProgramState",
    "pipeline",
    "DocumentTree",
    "Node",
    "NodeKind",
    "SourceBuffer",
    "TreeError",
    "WalkStatus",
    "MAIN_BUFFER",
    "Directive",
    "DirectiveMatch",
    "SnippetFile",
    "InjectReport",
    "EditBatch",
    "EditError",
    "InsertBefore",
    "Detach",
    "TagAliasMap",
    "DEFAULT_TAGS",
]
