"""
Tree editor tests

Tests splice placement, the directive paragraph and placeholder quote
removal rules, and the record-then-apply discipline of EditBatch.
"""

import pytest

from pulpmd.lib.editor import TreeEditor
from pulpmd.lib.parser import Parser
from pulpmd.lib.scanner import DirectiveScanner
from pulpmd.models.edits import EditBatch, EditError
from pulpmd.models.tree import NodeKind


def prepared(source, **options):
    """Parsed tree, its single directive match, and an editor"""
    tree = Parser().document_parse(source)
    (match,) = DirectiveScanner(tree).directives_scan()
    return tree, match, TreeEditor(tree, **options)


def code_fragment(tree):
    """A detached code node standing in for a built fragment"""
    return [tree.node_create(NodeKind.CODE_BLOCK, "fence")]


def top_kinds(tree):
    return [tree[child].kind for child in tree[tree.root].children]


class TestSplice:
    """Test fragment placement"""

    def test_fragments_before_paragraph(self):
        """Fragments land where the directive was, in order"""
        tree, match, editor = prepared("# Doc\n\n{{snippet hello}}\n\nEnd\n", leave_tags=True)
        first, second = code_fragment(tree), code_fragment(tree)
        assert editor.directive_splice(match, [first, second]) == 2
        editor.edits_apply()
        children = tree[tree.root].children
        assert children[1:4] == [first[0], second[0], match.paragraph]

    def test_multi_node_fragment(self):
        """All nodes of one fragment are spliced and counted once"""
        tree, match, editor = prepared("{{snippet hello}}\n")
        fragment = code_fragment(tree) + code_fragment(tree)
        assert editor.directive_splice(match, [fragment]) == 1
        editor.edits_apply()
        assert tree[tree.root].children == fragment

    def test_empty_fragments_not_counted(self):
        """Empty fragments insert nothing"""
        tree, match, editor = prepared("{{snippet hello}}\n")
        assert editor.directive_splice(match, [[], []]) == 0

    def test_nothing_applied_before_apply(self):
        """Recording edits leaves the tree untouched"""
        tree, match, editor = prepared("# Doc\n\n{{snippet hello}}\n")
        before = list(tree[tree.root].children)
        editor.directive_splice(match, [code_fragment(tree)])
        assert tree[tree.root].children == before


class TestRemovals:
    """Test directive and placeholder quote removal"""

    def test_directive_paragraph_removed(self):
        """The directive paragraph goes by default"""
        tree, match, editor = prepared("# Doc\n\n{{snippet hello}}\n")
        editor.directive_splice(match, [code_fragment(tree)])
        assert editor.edits_apply() == 1
        assert top_kinds(tree) == [NodeKind.HEADING, NodeKind.CODE_BLOCK]

    def test_leave_tags(self):
        """leave_tags keeps the directive paragraph"""
        tree, match, editor = prepared("{{snippet hello}}\n", leave_tags=True)
        editor.directive_splice(match, [])
        assert editor.edits_apply() == 0
        assert top_kinds(tree) == [NodeKind.PARAGRAPH]

    def test_quote_removed_when_nothing_injected(self):
        """A placeholder quote above an empty directive goes"""
        tree, match, editor = prepared("> No example yet\n\n{{snippet hello}}\n\nEnd\n")
        editor.directive_splice(match, [])
        assert editor.edits_apply() == 2
        assert top_kinds(tree) == [NodeKind.PARAGRAPH]

    def test_quote_kept_when_code_injected(self):
        """The quote stays if the directive produced fragments"""
        tree, match, editor = prepared("> Note\n\n{{snippet hello}}\n")
        editor.directive_splice(match, [code_fragment(tree)])
        editor.edits_apply()
        assert top_kinds(tree) == [NodeKind.BLOCKQUOTE, NodeKind.CODE_BLOCK]

    def test_leave_quotes(self):
        """leave_quotes keeps the quote even with nothing injected"""
        tree, match, editor = prepared("> No example yet\n\n{{snippet hello}}\n", leave_quotes=True)
        editor.directive_splice(match, [])
        editor.edits_apply()
        assert top_kinds(tree) == [NodeKind.BLOCKQUOTE]

    def test_quote_removed_with_leave_tags(self):
        """Quote removal does not depend on leave_tags"""
        tree, match, editor = prepared("> No example yet\n\n{{snippet hello}}\n", leave_tags=True)
        editor.directive_splice(match, [])
        editor.edits_apply()
        assert top_kinds(tree) == [NodeKind.PARAGRAPH]

    def test_quote_found_across_definitions(self):
        """Link definitions between quote and directive do not hide the quote"""
        tree, match, editor = prepared("> No example yet\n\n[a]: /a\n\n{{snippet hello}}\n")
        editor.directive_splice(match, [])
        assert editor.edits_apply() == 2
        assert top_kinds(tree) == [NodeKind.REFERENCE]

    def test_second_directive_in_paragraph(self):
        """A paragraph queued by two directives is removed once"""
        tree = Parser().document_parse("{{snippet hello}}\n{{snippet other}}\n")
        editor = TreeEditor(tree)
        first, second = DirectiveScanner(tree).directives_scan()
        editor.directive_splice(first, [code_fragment(tree)])
        editor.directive_splice(second, [code_fragment(tree)])
        assert editor.edits_apply() == 1
        assert top_kinds(tree) == [NodeKind.CODE_BLOCK, NodeKind.CODE_BLOCK]

    def test_only_immediate_sibling(self):
        """A quote further up is not touched"""
        tree, match, editor = prepared("> Quote\n\nText\n\n{{snippet hello}}\n")
        editor.directive_splice(match, [])
        editor.edits_apply()
        assert top_kinds(tree) == [NodeKind.BLOCKQUOTE, NodeKind.PARAGRAPH]


class TestEditBatch:
    """Test the two-phase edit lifecycle"""

    def test_apply_once(self):
        """A batch cannot be applied twice"""
        tree = Parser().document_parse("Text\n")
        batch = EditBatch()
        batch.apply(tree)
        with pytest.raises(EditError):
            batch.apply(tree)

    def test_no_recording_after_apply(self):
        """Edits cannot be recorded into an applied batch"""
        tree = Parser().document_parse("Text\n")
        batch = EditBatch()
        batch.apply(tree)
        with pytest.raises(EditError):
            batch.removal_record(tree[tree.root].children[0])

    def test_removals_in_collection_order(self):
        """Removals keep their order and are not duplicated"""
        tree = Parser().document_parse("A\n\nB\n\nC\n")
        a, b, c = tree[tree.root].children
        batch = EditBatch()
        batch.removal_record(c)
        batch.removal_record(a)
        batch.removal_record(c)
        assert [removal.node for removal in batch.removals] == [c, a]
        assert batch.apply(tree) == 2
        assert tree[tree.root].children == [b]
