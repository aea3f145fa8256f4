"""
Directive scanner

Finds {{snippet name [exts]}} markers in the document's text nodes.

The markdown grammar may split one line of text into several sibling text
nodes, so the scanner joins the literal of the current text node with those
of its following text siblings until the marker matches or a non-text
sibling (or the end of the paragraph) is reached.

Only markers in a paragraph that sits directly below the document root are
actionable; markers inside lists, block quotes or other containers are left
alone as plain text.
"""

import re
from typing import List, Optional, Set, Tuple

from ..models.directives import Directive, DirectiveMatch
from ..models.tree import DocumentTree, NodeKind, WalkStatus
from .log import LOG


SNIPPET_PATTERN = re.compile(
    r"\{\{\s*snippet\s+(?P<name>[^\s\[\]{}]+)\s*(?P<filter>\[(?P<exts>[^\]]*)\])?\s*\}\}"
)

# Names shorter than this are treated as accidental text, not directives
NAME_MIN_LENGTH = 2


def directive_parse(text: str) -> Optional[Tuple[str, Directive]]:
    """
    Parse the first snippet marker in text

    Args:
        text: Text possibly containing a marker

    Returns:
        (matched literal, Directive), or None if there is no usable marker

    Example:
        >>> directive_parse("{{ snippet hello [sh, go] }}")
        ('{{ snippet hello [sh, go] }}', Directive(name='hello', extension_filter=('sh', 'go'), has_explicit_filter=True))
        >>> directive_parse("{{snippet a}}") is None
        True
    """
    match = SNIPPET_PATTERN.search(text)
    if match is None:
        return None
    name = match.group("name")
    if len(name) < NAME_MIN_LENGTH:
        return None
    exts = match.group("exts") or ""
    extension_filter = tuple(
        ext.strip().lstrip(".") for ext in exts.split(",") if ext.strip().lstrip(".")
    )
    directive = Directive(
        name=name,
        extension_filter=extension_filter,
        has_explicit_filter=match.group("filter") is not None,
    )
    return match.group(0), directive


class DirectiveScanner:
    """
    Walks a DocumentTree and collects actionable directives

    The scan only reads the tree; it returns matches for the caller to act
    on once the walk is complete.
    """

    def __init__(self, tree: DocumentTree) -> None:
        self.tree = tree

    def directives_scan(self) -> List[DirectiveMatch]:
        """
        Collect every actionable directive in document order

        Every text run is consumed at most once, so a paragraph holding
        directives on several lines yields one match per line.

        Returns:
            List of DirectiveMatch
        """
        matches: List[DirectiveMatch] = []
        handled: Set[int] = set()

        def visit(index: int, entering: bool) -> WalkStatus:
            if not entering or self.tree[index].kind is not NodeKind.TEXT:
                return WalkStatus.CONTINUE
            if index in handled or not self.placement_isActionable(index):
                return WalkStatus.CONTINUE
            match = self.match_withSiblings(index)
            if match is not None:
                handled.update(match.nodes)
                matches.append(match)
                LOG(f"Found directive {match.literal!r}", level=3)
            return WalkStatus.CONTINUE

        self.tree.walk(visit)
        LOG(f"Found {len(matches)} snippet directives", level=2)
        return matches

    def placement_isActionable(self, index: int) -> bool:
        """True if the node's parent is a paragraph directly below the document root"""
        paragraph = self.tree.parent_of(index)
        if paragraph is None or paragraph.kind is not NodeKind.PARAGRAPH:
            return False
        document = self.tree.parent_of(paragraph.index)
        return document is not None and document.kind is NodeKind.DOCUMENT

    def match_withSiblings(self, index: int) -> Optional[DirectiveMatch]:
        """
        Join text from `index` forward, sibling by sibling, until a marker matches

        Args:
            index: Text node to start from

        Returns:
            DirectiveMatch, or None if siblings run out (or a non-text
            sibling is reached) without a match
        """
        joined = ""
        consumed: List[int] = []
        current: Optional[int] = index
        while current is not None and self.tree[current].kind is NodeKind.TEXT:
            joined += self.tree[current].literal
            consumed.append(current)
            if SNIPPET_PATTERN.search(joined):
                parsed = directive_parse(joined)
                if parsed is None:
                    return None
                literal, directive = parsed
                return DirectiveMatch(
                    literal=literal,
                    nodes=consumed,
                    paragraph=self.tree[index].parent,  # type: ignore[arg-type]
                    directive=directive,
                )
            current = self.tree.next_sibling(current)
        return None
