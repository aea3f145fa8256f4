"""
Node builder tests

Tests fence synthesis, code block fragments, markdown fragments with their
own buffers, and read failures.
"""

from pathlib import Path

import pytest

from pulpmd.lib.builder import NodeBuilder, fence_make, fencedSource_synthesize
from pulpmd.lib.errors import SnippetReadError
from pulpmd.lib.parser import Parser
from pulpmd.models.directives import SnippetFile
from pulpmd.models.tree import MAIN_BUFFER, NodeKind


@pytest.fixture
def builder():
    parser = Parser()
    tree = parser.document_parse("# Host\n")
    return NodeBuilder(tree, parser)


def snippet_write(directory: Path, name: str, content, tag: str) -> SnippetFile:
    path = directory / name
    if isinstance(content, bytes):
        path.write_bytes(content)
    else:
        path.write_text(content)
    return SnippetFile(path=path, extension=path.suffix.lstrip("."), tag=tag)


class TestFenceSynthesis:
    """Test synthesized fenced source"""

    def test_basic(self):
        """Content is wrapped verbatim with the tag as info string"""
        assert fencedSource_synthesize("echo hi\n", "shell") == "```shell\necho hi\n```\n"

    def test_adds_missing_final_newline(self):
        """A body without final newline gets one"""
        assert fencedSource_synthesize("x = 1", "py") == "```py\nx = 1\n```\n"

    def test_empty_content(self):
        """Empty files make an empty code block"""
        assert fencedSource_synthesize("", "go") == "```go\n```\n"

    def test_fence_outgrows_content(self):
        """The fence is longer than any backtick run in the content"""
        assert fence_make("no fences here", "`") == "```"
        assert fence_make("````\nnested\n````\n", "`") == "`````"

    def test_tilde_fence(self):
        """Tilde fences are supported"""
        assert fencedSource_synthesize("a\n", "txt", "~") == "~~~txt\na\n~~~\n"


class TestCodeFragment:
    """Test non-markdown snippets"""

    def test_single_code_block(self, builder, tmp_path):
        """A code file becomes one code block with its tag"""
        snippet = snippet_write(tmp_path, "hello.sh", "echo hi\n", "shell")
        fragment = builder.fragment_build(snippet)
        assert len(fragment) == 1
        node = builder.tree[fragment[0]]
        assert node.kind is NodeKind.CODE_BLOCK
        assert node.info == "shell"
        assert node.literal == "echo hi\n"

    def test_body_is_exact_content(self, builder, tmp_path):
        """Fence-like lines in the snippet stay inside the block"""
        content = "```\ninner\n```\n"
        snippet = snippet_write(tmp_path, "doc.txt", content, "txt")
        fragment = builder.fragment_build(snippet)
        assert len(fragment) == 1
        assert builder.tree[fragment[0]].literal == content

    def test_own_buffer(self, builder, tmp_path):
        """The code block renders from its synthesized buffer"""
        snippet = snippet_write(tmp_path, "hello.go", "package main\n", "go")
        fragment = builder.fragment_build(snippet)
        tree = builder.tree
        assert tree.buffer_idOf(fragment[0]) != MAIN_BUFFER
        assert tree.buffer_of(fragment[0]).path == str(snippet.path)
        assert tree.text_of(fragment[0]) == "```go\npackage main\n```\n"


class TestMarkdownFragment:
    """Test markdown snippets"""

    def test_top_level_blocks(self, builder, tmp_path):
        """Markdown files contribute their top-level blocks"""
        snippet = snippet_write(tmp_path, "intro.md", "## Intro\n\nSome *text*.\n", "md")
        fragment = builder.fragment_build(snippet)
        tree = builder.tree
        assert [tree[i].kind for i in fragment] == [NodeKind.HEADING, NodeKind.PARAGRAPH]

    def test_every_node_mapped_to_file_buffer(self, builder, tmp_path):
        """All fragment nodes, nested ones included, use the file's buffer"""
        snippet = snippet_write(tmp_path, "intro.md", "Some *text*.\n", "md")
        fragment = builder.fragment_build(snippet)
        tree = builder.tree
        buffer_id = tree.buffer_idOf(fragment[0])
        assert buffer_id != MAIN_BUFFER
        for top in fragment:
            for index in tree.descendants(top):
                assert tree.buffer_idOf(index) == buffer_id
        assert tree.text_of(fragment[0]) == "Some *text*.\n"

    def test_empty_markdown(self, builder, tmp_path):
        """An empty markdown file yields an empty fragment"""
        snippet = snippet_write(tmp_path, "empty.md", "\n\n", "md")
        assert builder.fragment_build(snippet) == []

    def test_custom_markdown_tag(self, tmp_path):
        """The markdown tag is configurable"""
        parser = Parser()
        builder = NodeBuilder(parser.document_parse(""), parser, markdown_tag="markdown")
        snippet = snippet_write(tmp_path, "intro.md", "# Hi\n", "md")
        fragment = builder.fragment_build(snippet)
        assert builder.tree[fragment[0]].kind is NodeKind.CODE_BLOCK


class TestReadFailures:
    """Test unreadable snippet files"""

    def test_missing_file(self, builder, tmp_path):
        """A vanished file raises SnippetReadError tagged with its path"""
        snippet = SnippetFile(path=tmp_path / "gone.go", extension="go", tag="go")
        with pytest.raises(SnippetReadError) as excinfo:
            builder.fragment_build(snippet)
        assert excinfo.value.path == tmp_path / "gone.go"
        assert "gone.go" in str(excinfo.value)

    def test_invalid_utf8(self, builder, tmp_path):
        """Undecodable content raises SnippetReadError"""
        snippet = snippet_write(tmp_path, "blob.bin", b"\xff\xfe\xfa", "bin")
        with pytest.raises(SnippetReadError):
            builder.fragment_build(snippet)
