"""
Markdown parser adapter tests

Tests that markdown-it tokens become the expected node kinds, that inline
children hang directly off their block, and that top-level ranges tile the
source buffer.
"""

import pytest

from pulpmd.lib.parser import Parser, lineOffsets_compute, tokenType_base
from pulpmd.models.tree import DocumentTree, NodeKind


def kinds(tree, index):
    return [tree[child].kind for child in tree[index].children]


class TestLineOffsets:
    """Test line offset table"""

    def test_trailing_newline(self):
        """Every line start plus the end of text"""
        assert lineOffsets_compute("a\nbb\n") == [0, 2, 5]

    def test_no_trailing_newline(self):
        """Last line without newline still ends at len(text)"""
        assert lineOffsets_compute("a\nbb") == [0, 2, 4]

    def test_mixed_line_endings(self):
        """CRLF and lone CR count as one line break each"""
        assert lineOffsets_compute("a\r\nb\rc\n") == [0, 3, 5, 7]

    def test_token_type_base(self):
        """Open/close suffixes are stripped"""
        assert tokenType_base("paragraph_open") == "paragraph"
        assert tokenType_base("bullet_list_close") == "bullet_list"
        assert tokenType_base("fence") == "fence"


class TestTreeShape:
    """Test node kinds and nesting"""

    def test_heading_and_paragraph(self):
        """Top-level blocks become children of the document"""
        tree = Parser().document_parse("# Title\n\nHello *world*\n")
        assert kinds(tree, tree.root) == [NodeKind.HEADING, NodeKind.PARAGRAPH]

    def test_inline_children_attach_to_block(self):
        """Text runs sit directly below the paragraph, emphasis nests"""
        tree = Parser().document_parse("Hello *world*\n")
        paragraph = tree[tree.root].children[0]
        children = tree[paragraph].children
        assert tree[children[0]].kind is NodeKind.TEXT
        assert tree[children[0]].literal == "Hello "
        emphasis = tree[children[1]]
        assert emphasis.token_type == "em"
        assert emphasis.kind is NodeKind.OTHER
        assert tree[emphasis.children[0]].literal == "world"

    def test_blockquote_contains_paragraph(self):
        """Block quotes are containers"""
        tree = Parser().document_parse("> quoted\n")
        quote = tree[tree.root].children[0]
        assert tree[quote].kind is NodeKind.BLOCKQUOTE
        assert kinds(tree, quote) == [NodeKind.PARAGRAPH]

    def test_list_items(self):
        """Lists contain list items"""
        tree = Parser().document_parse("- one\n- two\n")
        listing = tree[tree.root].children[0]
        assert tree[listing].kind is NodeKind.LIST
        assert kinds(tree, listing) == [NodeKind.LIST_ITEM, NodeKind.LIST_ITEM]

    def test_fenced_code(self):
        """Fences become code blocks carrying info and literal"""
        tree = Parser().document_parse("```go\npackage main\n```\n")
        code = tree[tree[tree.root].children[0]]
        assert code.kind is NodeKind.CODE_BLOCK
        assert code.info == "go"
        assert code.literal == "package main\n"

    def test_tables_enabled(self):
        """The table extension is on"""
        tree = Parser().document_parse("| a | b |\n|---|---|\n| 1 | 2 |\n")
        assert tree[tree[tree.root].children[0]].token_type == "table"


class TestRanges:
    """Test block ranges into the source buffer"""

    def test_top_level_ranges_tile_buffer(self):
        """Prefix plus every top-level range reproduces the source"""
        source = "\n\n# Title\n\nSome text\nmore text\n\n\n[x]: /x\n\n- a\n- b\n\n> quote\n"
        tree = Parser().document_parse(source)
        root = tree[tree.root]
        prefix = source[: root.start]
        assert prefix == "\n\n"
        assert prefix + "".join(tree.text_of(child) for child in root.children) == source

    def test_block_owns_following_blank_lines(self):
        """A top-level block's range ends where the next block starts"""
        tree = Parser().document_parse("# Title\n\n\nText\n")
        heading, paragraph = tree[tree.root].children
        assert tree.text_of(heading) == "# Title\n\n\n"
        assert tree.text_of(paragraph) == "Text\n"

    def test_reference_definitions_get_own_node(self):
        """Link definitions between blocks are not part of the block above"""
        source = "Text [a].\n\n[a]: https://example.com\n\nMore\n"
        tree = Parser().document_parse(source)
        first, reference, last = tree[tree.root].children
        assert tree[reference].kind is NodeKind.REFERENCE
        assert tree.text_of(first) == "Text [a].\n\n"
        assert tree.text_of(reference) == "[a]: https://example.com\n\n"
        assert tree.text_of(last) == "More\n"

    def test_trailing_reference_definitions(self):
        """Definitions after the last block get a node too"""
        source = "# Title\n[a]: https://example.com\n[b]: https://example.org\n"
        tree = Parser().document_parse(source)
        assert kinds(tree, tree.root) == [NodeKind.HEADING, NodeKind.REFERENCE]
        assert "".join(tree.text_of(child) for child in tree[tree.root].children) == source

    def test_missing_final_newline(self):
        """Last block ends at the end of the buffer"""
        tree = Parser().document_parse("Text")
        assert tree.text_of(tree[tree.root].children[0]) == "Text"

    def test_empty_document(self):
        """Empty input has no blocks"""
        tree = Parser().document_parse("")
        assert tree[tree.root].children == []

    def test_parse_into_second_buffer(self):
        """parse_into builds a detached wrapper over another buffer"""
        tree = Parser().document_parse("# Main\n")
        buffer_id = tree.buffer_add("## Other\n", path="other.md")
        wrapper = Parser().parse_into(tree, buffer_id)
        assert tree[wrapper].parent is None
        assert wrapper != tree.root
        assert kinds(tree, wrapper) == [NodeKind.HEADING]
