"""
Markdown parser adapter

Builds the arena DocumentTree from markdown-it-py's token stream.

The conversion works in one pass over the flat token list:
1. *_open tokens push a container node, *_close tokens pop it
2. inline tokens contribute their children directly to the enclosing block
3. every other token becomes a leaf node

Block nodes get a character range into their buffer from the engine's line
map. Top-level blocks are widened over the blank lines after them, and
unclaimed text between blocks (link reference definitions) gets a REFERENCE
node, so the top-level ranges of a document tile its buffer.

Example:
    >>> tree = DocumentTree()
    >>> buffer_id = tree.buffer_add("# Title\\n\\nHello *world*\\n")
    >>> root = Parser().parse_into(tree, buffer_id)
    >>> [tree[child].kind for child in tree[root].children]
    [<NodeKind.HEADING: 'heading'>, <NodeKind.PARAGRAPH: 'paragraph'>]
"""

import re
from typing import Dict, List, Optional, Sequence

from markdown_it import MarkdownIt
from markdown_it.token import Token

from ..models.tree import DocumentTree, NodeKind
from .errors import MarkdownParseError
from .log import LOG


# markdown-it normalizes all three line endings to \n before tokenizing
LINE_BREAK = re.compile(r"\r\n|\r|\n")

BLANK_LINES = re.compile(r"(?:[ \t]*(?:\r\n|\r|\n))*")

TOKEN_KINDS: Dict[str, NodeKind] = {
    "paragraph": NodeKind.PARAGRAPH,
    "text": NodeKind.TEXT,
    "fence": NodeKind.CODE_BLOCK,
    "code_block": NodeKind.CODE_BLOCK,
    "blockquote": NodeKind.BLOCKQUOTE,
    "heading": NodeKind.HEADING,
    "bullet_list": NodeKind.LIST,
    "ordered_list": NodeKind.LIST,
    "list_item": NodeKind.LIST_ITEM,
}


def lineOffsets_compute(text: str) -> List[int]:
    """
    Character offset of the start of every line, plus len(text)

    Index i is where line i starts, so a line map [a, b) covers
    text[offsets[a]:offsets[b]].
    """
    offsets = [0]
    offsets.extend(match.end() for match in LINE_BREAK.finditer(text))
    if offsets[-1] != len(text):
        offsets.append(len(text))
    return offsets


def tokenType_base(token_type: str) -> str:
    """'paragraph_open' -> 'paragraph'"""
    for suffix in ("_open", "_close"):
        if token_type.endswith(suffix):
            return token_type[: -len(suffix)]
    return token_type


class Parser:
    """
    Converts markdown text into DocumentTree nodes

    One Parser is shared for the main document and every injected markdown
    file, so that all nodes come from the same grammar.
    """

    def __init__(self, engine: Optional[MarkdownIt] = None) -> None:
        """
        Args:
            engine: Preconfigured markdown-it instance; defaults to CommonMark
                    with tables and strikethrough enabled
        """
        if engine is None:
            engine = MarkdownIt("commonmark").enable(["table", "strikethrough"])
        self.engine = engine

    def document_parse(self, text: str, path: Optional[str] = None) -> DocumentTree:
        """
        Parse the main document into a fresh tree

        Args:
            text: Main document text (becomes buffer 0)
            path: Source path, for diagnostics

        Returns:
            DocumentTree whose root is the parsed document
        """
        tree = DocumentTree()
        buffer_id = tree.buffer_add(text, path=path)
        tree.root = self.parse_into(tree, buffer_id)
        LOG(f"Parsed {len(tree[tree.root].children)} top-level blocks", level=2)
        return tree

    def parse_into(self, tree: DocumentTree, buffer_id: int) -> int:
        """
        Parse a registered buffer into detached nodes of `tree`

        Args:
            tree: Arena receiving the nodes
            buffer_id: Handle of the buffer to parse

        Returns:
            Index of the DOCUMENT wrapper node holding the parsed blocks

        Raises:
            MarkdownParseError: If the engine fails on the input
        """
        buffer = tree.buffers[buffer_id]
        try:
            tokens = self.engine.parse(buffer.text)
        except Exception as e:
            raise MarkdownParseError(f"Cannot parse {buffer.path or 'markdown'}: {e}") from e

        offsets = lineOffsets_compute(buffer.text)
        root = tree.node_create(NodeKind.DOCUMENT, "document", start=0, end=len(buffer.text))
        stack = [root]
        for token in tokens:
            if token.nesting == -1:
                stack.pop()
                continue
            if token.type == "inline":
                self.inline_build(tree, token.children or [], stack[-1])
                continue
            index = self.node_fromToken(tree, token, offsets)
            tree.append_child(stack[-1], index)
            if token.nesting == 1:
                stack.append(index)

        self.topLevel_widen(tree, root, buffer.text)
        return root

    def inline_build(self, tree: DocumentTree, tokens: Sequence[Token], parent: int) -> None:
        """Attach inline tokens below `parent`, nesting *_open/*_close pairs"""
        stack = [parent]
        for token in tokens:
            if token.nesting == -1:
                stack.pop()
                continue
            index = self.node_fromToken(tree, token, None)
            tree.append_child(stack[-1], index)
            if token.nesting == 1:
                stack.append(index)

    def node_fromToken(
        self, tree: DocumentTree, token: Token, offsets: Optional[List[int]]
    ) -> int:
        token_type = tokenType_base(token.type)
        kind = TOKEN_KINDS.get(token_type, NodeKind.OTHER)
        start = end = None
        if offsets is not None and token.map:
            start, end = offsets[token.map[0]], offsets[token.map[1]]
        return tree.node_create(
            kind,
            token_type,
            start=start,
            end=end,
            literal=token.content if token.nesting == 0 else "",
            info=token.info or "",
        )

    def topLevel_widen(self, tree: DocumentTree, root: int, text: str) -> None:
        """
        Extend each top-level block over the blank lines that follow it

        Text between two blocks that no token claims (link reference
        definitions) becomes a REFERENCE node of its own, so removing the
        block before it keeps the definitions. Together the top-level
        ranges tile the buffer.

        The root's range is narrowed to start at the first block, so that
        the text in front of it (blank lines, link definitions) stays
        addressable as the document prefix.
        """
        text_end = len(text)
        blocks = [child for child in tree[root].children if tree[child].span_has()]
        for current, following in zip(blocks, blocks[1:] + [None]):
            gap_end = text_end if following is None else tree[following].start
            split = BLANK_LINES.match(text, tree[current].end, gap_end).end()
            if not text[split:gap_end].strip():
                tree[current].end = gap_end
                continue
            tree[current].end = split
            reference = tree.node_create(
                NodeKind.REFERENCE, "reference", start=split, end=gap_end
            )
            if following is None:
                tree.append_child(root, reference)
            else:
                tree.insert_before(root, following, reference)
        tree[root].start = tree[blocks[0]].start if blocks else text_end
