"""
Render adapter

Serializes the edited tree back to markdown text. Each top-level block is
emitted from the buffer it was parsed from: the main document's buffer by
default, or the buffer of the injected file it came from. Blocks that were
neighbours in the same buffer keep the original text between them; blocks
brought together by an edit are separated by one blank line.
"""

from typing import List, Optional

import mdformat

from ..models.tree import DocumentTree, MAIN_BUFFER, WalkStatus
from .log import LOG


def separator_make(chunk: str) -> str:
    """Text to append to chunk so that a blank line follows it"""
    if chunk.endswith("\n\n"):
        return ""
    if chunk.endswith("\n"):
        return "\n"
    return "\n\n"


class RenderAdapter:
    """
    Walks a DocumentTree and produces its markdown text

    Attributes:
        tree: Edited document tree
        reformat: Normalize the result with mdformat
    """

    def __init__(self, tree: DocumentTree, reformat: bool = False) -> None:
        self.tree = tree
        self.reformat = reformat

    def originalNeighbours_are(self, first: int, second: int) -> bool:
        """True if second directly followed first in the same buffer"""
        return (
            self.tree.buffer_idOf(first) == self.tree.buffer_idOf(second)
            and self.tree[first].end == self.tree[second].start
        )

    def prefix_get(self) -> str:
        """Main-buffer text in front of the first parsed block"""
        root = self.tree.root
        if root is None or self.tree[root].start is None:
            return ""
        return self.tree.buffers[MAIN_BUFFER].slice(0, self.tree[root].start)

    def render(self) -> str:
        """
        Render the tree

        Returns:
            Markdown text with leading blank lines removed
        """
        blocks: List[int] = []

        def visit(index: int, entering: bool) -> WalkStatus:
            if not entering or index == self.tree.root:
                return WalkStatus.CONTINUE
            if self.tree[index].span_has():
                blocks.append(index)
            return WalkStatus.SKIP_CHILDREN

        self.tree.walk(visit)

        parts: List[str] = [self.prefix_get()]
        previous: Optional[int] = None
        for index in blocks:
            if previous is not None and not self.originalNeighbours_are(previous, index):
                parts.append(separator_make(parts[-1]))
            parts.append(self.tree.text_of(index))
            previous = index

        text = "".join(parts)
        if self.reformat:
            text = mdformat.text(text)
        LOG(f"Rendered {len(blocks)} blocks, {len(text)} characters", level=2)
        return text.lstrip("\n")
