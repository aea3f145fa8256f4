"""
Arena document tree

Nodes live in a flat list and address each other by stable integer indices,
so that splicing nodes in from other documents never invalidates a handle
held elsewhere. Every node can be associated with the source buffer its
ranges are measured against; nodes without an association resolve against
the main buffer (buffer 0).

Mutation is limited to two primitives, insert_before() and detach(). Callers
are expected to collect edits during a walk and apply them afterwards (see
models.edits.EditBatch).
"""

from enum import Enum
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterator, List, Optional


MAIN_BUFFER = 0


class NodeKind(Enum):
    """Node kinds the injector cares about; everything else is OTHER"""
    DOCUMENT = "document"
    PARAGRAPH = "paragraph"
    TEXT = "text"
    CODE_BLOCK = "code_block"
    BLOCKQUOTE = "blockquote"
    HEADING = "heading"
    LIST = "list"
    LIST_ITEM = "list_item"
    # Source text no token claims, i.e. link reference definitions
    REFERENCE = "reference"
    OTHER = "other"


class WalkStatus(Enum):
    """Return value of a walk callback"""
    CONTINUE = "continue"
    SKIP_CHILDREN = "skip_children"
    STOP = "stop"


@dataclass
class SourceBuffer:
    """
    Immutable text a set of node ranges refers to

    Attributes:
        text: Decoded buffer contents
        path: File the buffer was read from (None for stdin or synthesized text)
    """
    text: str
    path: Optional[str] = None

    def slice(self, start: int, end: int) -> str:
        return self.text[start:end]


@dataclass
class Node:
    """
    One node of the arena

    Attributes:
        index: Position of this node in DocumentTree.nodes
        kind: Node kind
        token_type: Markdown engine token name (e.g. "paragraph", "em", "hr")
        parent: Index of parent node, None when detached or root
        children: Ordered child indices
        start: Start offset into the origin buffer (block nodes only)
        end: End offset into the origin buffer (block nodes only)
        literal: Text content (text and code nodes)
        info: Fence info string (code blocks)
    """
    index: int
    kind: NodeKind
    token_type: str = ""
    parent: Optional[int] = None
    children: List[int] = field(default_factory=list)
    start: Optional[int] = None
    end: Optional[int] = None
    literal: str = ""
    info: str = ""

    def span_has(self) -> bool:
        return self.start is not None and self.end is not None


class TreeError(Exception):
    """Raised on structurally invalid tree mutation"""
    pass


class DocumentTree:
    """
    Arena of nodes plus the buffers their ranges point into

    The main document is always buffer 0. Injected markdown files register
    their own buffers and their nodes are mapped to them through origins.
    """

    def __init__(self) -> None:
        self.nodes: List[Node] = []
        self.buffers: List[SourceBuffer] = []
        self.origins: Dict[int, int] = {}
        self.root: Optional[int] = None

    def buffer_add(self, text: str, path: Optional[str] = None) -> int:
        """Register a source buffer and return its handle"""
        self.buffers.append(SourceBuffer(text=text, path=path))
        return len(self.buffers) - 1

    def node_create(self, kind: NodeKind, token_type: str = "", **attrs) -> int:
        """Allocate a detached node and return its index"""
        index = len(self.nodes)
        self.nodes.append(Node(index=index, kind=kind, token_type=token_type, **attrs))
        return index

    def __getitem__(self, index: int) -> Node:
        return self.nodes[index]

    # ------------------------------------------------------------------
    # Buffers

    def origin_set(self, index: int, buffer_id: int) -> None:
        self.origins[index] = buffer_id

    def buffer_idOf(self, index: int) -> int:
        """Buffer handle a node's ranges resolve against (main buffer by default)"""
        return self.origins.get(index, MAIN_BUFFER)

    def buffer_of(self, index: int) -> SourceBuffer:
        return self.buffers[self.buffer_idOf(index)]

    def text_of(self, index: int) -> str:
        """Source text covered by a node's range, read from its own buffer"""
        node = self.nodes[index]
        if not node.span_has():
            return node.literal
        return self.buffer_of(index).slice(node.start, node.end)  # type: ignore[arg-type]

    # ------------------------------------------------------------------
    # Navigation

    def parent_of(self, index: int) -> Optional[Node]:
        parent = self.nodes[index].parent
        return None if parent is None else self.nodes[parent]

    def sibling_offset(self, index: int, offset: int) -> Optional[int]:
        parent = self.nodes[index].parent
        if parent is None:
            return None
        siblings = self.nodes[parent].children
        position = siblings.index(index) + offset
        if 0 <= position < len(siblings):
            return siblings[position]
        return None

    def next_sibling(self, index: int) -> Optional[int]:
        return self.sibling_offset(index, 1)

    def prev_sibling(self, index: int) -> Optional[int]:
        return self.sibling_offset(index, -1)

    def descendants(self, index: int) -> Iterator[int]:
        """Yield a node and every node below it, in document order"""
        stack = [index]
        while stack:
            current = stack.pop()
            yield current
            stack.extend(reversed(self.nodes[current].children))

    # ------------------------------------------------------------------
    # Mutation

    def append_child(self, parent: int, child: int) -> None:
        if self.nodes[child].parent is not None:
            self.detach(child)
        self.nodes[parent].children.append(child)
        self.nodes[child].parent = parent

    def insert_before(self, parent: int, anchor: int, new: int) -> None:
        """
        Insert node `new` into `parent` immediately before `anchor`

        A node that already has a parent (e.g. a child of an injected
        document wrapper) is detached from it first.

        Raises:
            TreeError: If anchor is not a child of parent, or new is anchor
        """
        if new == anchor:
            raise TreeError(f"Cannot insert node {new} before itself")
        if self.nodes[anchor].parent != parent:
            raise TreeError(f"Node {anchor} is not a child of node {parent}")
        if self.nodes[new].parent is not None:
            self.detach(new)
        siblings = self.nodes[parent].children
        siblings.insert(siblings.index(anchor), new)
        self.nodes[new].parent = parent

    def detach(self, index: int) -> None:
        """
        Remove a node from its parent, keeping it (and its subtree) in the arena

        Raises:
            TreeError: If the node is not attached
        """
        node = self.nodes[index]
        if node.parent is None:
            raise TreeError(f"Node {index} is not attached to a parent")
        self.nodes[node.parent].children.remove(index)
        node.parent = None

    # ------------------------------------------------------------------
    # Traversal

    def walk(
        self,
        callback: Callable[[int, bool], WalkStatus],
        start: Optional[int] = None,
    ) -> WalkStatus:
        """
        Depth-first walk calling callback(index, entering) on enter and exit

        The callback returns SKIP_CHILDREN to avoid descending into the node
        it just entered, or STOP to end the walk. The tree must not be
        mutated from inside the callback.
        """
        index = self.root if start is None else start
        if index is None:
            return WalkStatus.CONTINUE
        return self._walk(index, callback)

    def _walk(self, index: int, callback: Callable[[int, bool], WalkStatus]) -> WalkStatus:
        status = callback(index, True)
        if status is WalkStatus.STOP:
            return status
        if status is not WalkStatus.SKIP_CHILDREN:
            for child in list(self.nodes[index].children):
                if self._walk(child, callback) is WalkStatus.STOP:
                    return WalkStatus.STOP
        return callback(index, False)
