"""
Deferred tree edits

The injector never mutates the document while walking it. Instead it records
InsertBefore and Detach actions into an EditBatch, and the batch is applied
once after the walk has finished:

    - inserts are applied first, in recording order
    - pending removals are applied next, in recording order

Recording after apply, or applying twice, raises EditError.
"""

from dataclasses import dataclass, field
from typing import List

from .tree import DocumentTree


class EditError(Exception):
    """Raised when an EditBatch is used outside its record-then-apply lifecycle"""
    pass


@dataclass(frozen=True)
class InsertBefore:
    """Insert `node` into `parent` immediately before `anchor`"""
    parent: int
    anchor: int
    node: int


@dataclass(frozen=True)
class Detach:
    """Remove `node` from its parent"""
    node: int


@dataclass
class EditBatch:
    """
    Ordered edit actions collected during a document walk

    Attributes:
        inserts: Splice actions in recording order
        removals: Pending deletion set in recording order
        applied: Set once apply() has run
    """
    inserts: List[InsertBefore] = field(default_factory=list)
    removals: List[Detach] = field(default_factory=list)
    applied: bool = False

    def insert_record(self, parent: int, anchor: int, node: int) -> None:
        self.applied_check("record an insert")
        self.inserts.append(InsertBefore(parent=parent, anchor=anchor, node=node))

    def removal_record(self, node: int) -> None:
        self.applied_check("record a removal")
        if any(pending.node == node for pending in self.removals):
            return
        self.removals.append(Detach(node=node))

    def applied_check(self, action: str) -> None:
        if self.applied:
            raise EditError(f"Cannot {action}: edit batch was already applied")

    def apply(self, tree: DocumentTree) -> int:
        """
        Apply all recorded edits to the tree

        Returns:
            Number of nodes detached
        """
        self.applied_check("apply")
        for insert in self.inserts:
            tree.insert_before(insert.parent, insert.anchor, insert.node)
        for removal in self.removals:
            tree.detach(removal.node)
        self.applied = True
        return len(self.removals)
