"""
Node builder

Turns one resolved snippet file into a fragment: the list of top-level nodes
to splice into the host document.

- Markdown files (tag == markdown_tag) are parsed with the host's grammar
  and contribute all of their top-level blocks.
- Any other file becomes a single fenced code block. The block is produced
  by synthesizing fenced source text and parsing it, so its ranges come from
  the same parser as the rest of the document.

Every node of a fragment is mapped to the fragment's own buffer.
"""

import re
from pathlib import Path
from typing import List

from ..models.directives import SnippetFile
from ..models.tree import DocumentTree
from .errors import SnippetReadError
from .log import LOG
from .parser import Parser


FENCE_MIN_LENGTH = 3


def text_read(path: Path) -> str:
    """
    Read a snippet file as UTF-8 text

    Raises:
        SnippetReadError: If the file cannot be read or decoded
    """
    try:
        return path.read_bytes().decode("utf-8")
    except OSError as e:
        raise SnippetReadError(path, e.strerror or str(e)) from e
    except UnicodeDecodeError as e:
        raise SnippetReadError(path, f"not valid UTF-8 ({e.reason})") from e


def fence_make(content: str, fence_char: str) -> str:
    """
    Fence marker longer than any run of fence_char in content

    Example:
        >>> fence_make("print('hi')", "`")
        '```'
        >>> fence_make("````\\nnested\\n````", "`")
        '`````'
    """
    runs = re.findall(re.escape(fence_char) + "+", content)
    longest = max((len(run) for run in runs), default=0)
    return fence_char * max(FENCE_MIN_LENGTH, longest + 1)


def fencedSource_synthesize(content: str, tag: str, fence_char: str = "`") -> str:
    """
    Markdown source for a fenced code block holding content verbatim

    A trailing newline is added to the body only if content lacks one.

    Example:
        >>> fencedSource_synthesize("echo hi\\n", "shell")
        '```shell\\necho hi\\n```\\n'
    """
    fence = fence_make(content, fence_char)
    body = content if not content or content.endswith("\n") else content + "\n"
    return f"{fence}{tag}\n{body}{fence}\n"


class NodeBuilder:
    """
    Builds fragments for snippet files into a DocumentTree's arena

    Attributes:
        tree: Arena receiving the fragment nodes
        parser: Parser shared with the host document
        markdown_tag: Tag whose files are spliced as markdown
        fence_char: Fence character for synthesized code blocks
    """

    def __init__(
        self,
        tree: DocumentTree,
        parser: Parser,
        markdown_tag: str = "md",
        fence_char: str = "`",
    ) -> None:
        self.tree = tree
        self.parser = parser
        self.markdown_tag = markdown_tag
        self.fence_char = fence_char

    def fragment_build(self, snippet: SnippetFile) -> List[int]:
        """
        Build the fragment for one snippet file

        Args:
            snippet: Resolved candidate file

        Returns:
            Top-level node indices of the fragment, in order (empty for an
            empty markdown file). The nodes are still children of a detached
            DOCUMENT wrapper until spliced.

        Raises:
            SnippetReadError: If the file cannot be read
        """
        content = text_read(snippet.path)
        if snippet.tag == self.markdown_tag:
            source = content
        else:
            source = fencedSource_synthesize(content, snippet.tag, self.fence_char)

        buffer_id = self.tree.buffer_add(source, path=str(snippet.path))
        wrapper = self.parser.parse_into(self.tree, buffer_id)
        for index in self.tree.descendants(wrapper):
            self.tree.origin_set(index, buffer_id)

        fragment = list(self.tree[wrapper].children)
        LOG(f"Built {len(fragment)} nodes from {snippet.path} ({snippet.tag})", level=3)
        return fragment
