"""
Snippet injector

Runs one injection over a parsed document:

1. Scan: collect every actionable directive (read-only walk)
2. Resolve + build: list candidate files per directive and build a
   fragment for each readable one
3. Plan: record splices and pending removals
4. Apply: execute all recorded edits in one pass

Fragments are never scanned, so directives inside an injected markdown file
stay as they are.
"""

from typing import List, Optional

from ..config.settings import AppSettings
from ..models.directives import DirectiveMatch, InjectReport
from ..models.tags import TagAliasMap
from ..models.tree import DocumentTree
from .builder import NodeBuilder
from .editor import TreeEditor
from .errors import SnippetReadError
from .log import LOG, WARN
from .parser import Parser
from .renderer import RenderAdapter
from .resolver import FileResolver
from .scanner import DirectiveScanner


class Injector:
    """
    Injects snippet files into markdown documents

    Attributes:
        settings: Run configuration
        tags: Tag alias map, fixed for the lifetime of the injector
        parser: Markdown parser shared by host document and fragments
        resolver: Directive -> candidate file resolver

    Example:
        >>> injector = Injector(AppSettings(inject_dir="examples"))
        >>> markdown = injector.run("# Hello\\n\\n{{snippet hello}}\\n")
    """

    def __init__(
        self,
        settings: AppSettings,
        tags: Optional[TagAliasMap] = None,
        parser: Optional[Parser] = None,
    ) -> None:
        self.settings = settings
        self.tags = tags or TagAliasMap.from_extensions(
            settings.extensions, lexer_fallback=settings.lexer_tags
        )
        self.parser = parser or Parser()
        self.resolver = FileResolver(settings.inject_dir, settings.recursive, self.tags)

    def inject(self, tree: DocumentTree) -> InjectReport:
        """
        Inject snippets into tree in place

        Args:
            tree: Parsed document

        Returns:
            InjectReport summarizing the run

        Raises:
            PatternError: If a directive's glob pattern cannot be evaluated
            SnippetReadError: In strict mode, if a snippet file is unreadable
        """
        report = InjectReport()
        builder = NodeBuilder(
            tree,
            self.parser,
            markdown_tag=self.settings.markdown_tag,
            fence_char=self.settings.fence_char,
        )
        editor = TreeEditor(
            tree,
            leave_tags=self.settings.leave_tags,
            leave_quotes=self.settings.leave_quotes,
        )

        matches = DirectiveScanner(tree).directives_scan()
        report.directives = len(matches)
        for match in matches:
            fragments = self.fragments_collect(match, builder, report)
            report.fragments += editor.directive_splice(match, fragments)

        report.removed = editor.edits_apply()
        LOG(
            f"Injected {report.fragments} fragments for {report.directives} directives, "
            f"removed {report.removed} nodes",
            level=2,
        )
        return report

    def fragments_collect(
        self, match: DirectiveMatch, builder: NodeBuilder, report: InjectReport
    ) -> List[List[int]]:
        """Build fragments for every candidate file of a directive"""
        fragments: List[List[int]] = []
        for snippet in self.resolver.files_resolve(match.directive):
            try:
                fragment = builder.fragment_build(snippet)
            except SnippetReadError as e:
                if self.settings.strict_mode:
                    raise
                WARN(f"Skipping snippet: {e}")
                report.skipped.append((snippet.path, e.reason))
                continue
            if fragment:
                report.injected.append(snippet.path)
            fragments.append(fragment)
        LOG(f"{match.literal!r}: {len(fragments)} files", level=2)
        return fragments

    def document_parse(self, text: str, path: Optional[str] = None) -> DocumentTree:
        return self.parser.document_parse(text, path=path)

    def render(self, tree: DocumentTree) -> str:
        return RenderAdapter(tree, reformat=self.settings.reformat).render()

    def run(self, text: str, path: Optional[str] = None) -> str:
        """
        Parse, inject and render a document

        Args:
            text: Markdown source
            path: Source path, for diagnostics

        Returns:
            Rendered markdown
        """
        tree = self.document_parse(text, path=path)
        self.inject(tree)
        return self.render(tree)
