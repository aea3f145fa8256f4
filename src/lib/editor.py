"""
Tree editor

Plans the edits for one directive: splice each fragment in front of the
directive's paragraph, then queue the paragraph (and possibly the block
quote above it) for removal. Nothing is changed until the batch is applied
after the whole scan has finished.
"""

from typing import List

from ..models.directives import DirectiveMatch
from ..models.edits import EditBatch
from ..models.tree import DocumentTree, NodeKind


class TreeEditor:
    """
    Records splice and removal edits into an EditBatch

    Attributes:
        tree: Document being edited
        leave_tags: Keep directive paragraphs
        leave_quotes: Keep the block quote above a directive that injected nothing
        batch: Edits recorded so far
    """

    def __init__(self, tree: DocumentTree, leave_tags: bool = False, leave_quotes: bool = False) -> None:
        self.tree = tree
        self.leave_tags = leave_tags
        self.leave_quotes = leave_quotes
        self.batch = EditBatch()

    def directive_splice(self, match: DirectiveMatch, fragments: List[List[int]]) -> int:
        """
        Record the edits for one directive

        Args:
            match: Directive found by the scanner
            fragments: One node list per injected file, in injection order

        Returns:
            Number of fragments recorded for insertion (empty fragments
            are not counted)
        """
        paragraph = match.paragraph
        document = self.tree[paragraph].parent
        count = 0
        for fragment in fragments:
            if not fragment:
                continue
            for node in fragment:
                self.batch.insert_record(document, paragraph, node)  # type: ignore[arg-type]
            count += 1
        self.removals_record(paragraph, count)
        return count

    def removals_record(self, paragraph: int, count: int) -> None:
        """Queue the directive paragraph and an orphaned placeholder quote"""
        previous = self.tree.prev_sibling(paragraph)
        # link definitions are not blocks
        while previous is not None and self.tree[previous].kind is NodeKind.REFERENCE:
            previous = self.tree.prev_sibling(previous)
        if (
            not self.leave_quotes
            and count == 0
            and previous is not None
            and self.tree[previous].kind is NodeKind.BLOCKQUOTE
        ):
            self.batch.removal_record(previous)
        if not self.leave_tags:
            self.batch.removal_record(paragraph)

    def edits_apply(self) -> int:
        """
        Apply every recorded edit; call once, after the walk

        Returns:
            Number of nodes removed
        """
        return self.batch.apply(self.tree)
