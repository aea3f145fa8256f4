"""
Tag alias map: file extension -> code fence language hint

Built once from configuration before a run starts and read-only afterwards.
"""

from dataclasses import dataclass, field
from functools import lru_cache
from types import MappingProxyType
from typing import FrozenSet, Iterable, Mapping, Optional

from pygments.lexers import find_lexer_class_for_filename


DEFAULT_TAGS: Mapping[str, str] = MappingProxyType({
    "sh": "shell",
    "cpp": "c++",
})


@lru_cache(maxsize=None)
def lexer_aliasFind(extension: str) -> Optional[str]:
    """First alias of the Pygments lexer registered for *.extension, if any"""
    lexer_cls = find_lexer_class_for_filename(f"snippet.{extension}")
    if lexer_cls is None or not lexer_cls.aliases:
        return None
    return lexer_cls.aliases[0]


def extension_normalize(extension: str) -> str:
    return extension.strip().lstrip(".")


@dataclass(frozen=True)
class TagAliasMap:
    """
    Extension to display tag lookup

    Attributes:
        aliases: Read-only extension -> tag mapping
        allowed: Extensions (or tags) eligible for injection; None means all
        lexer_fallback: Resolve unmapped extensions through Pygments
    """
    aliases: Mapping[str, str] = field(default_factory=lambda: DEFAULT_TAGS)
    allowed: Optional[FrozenSet[str]] = None
    lexer_fallback: bool = False

    @classmethod
    def from_extensions(
        cls,
        entries: Iterable[str],
        lexer_fallback: bool = False,
        defaults: Mapping[str, str] = DEFAULT_TAGS,
    ) -> "TagAliasMap":
        """
        Build the map from configured extension entries

        Entries are plain extensions ("go") or override pairs ("ts:typescript");
        comma-separated entries are split. Plain entries restrict the default
        aliases and the eligible extensions; if every entry is a pair there is
        no restriction.

        Example:
            >>> tags = TagAliasMap.from_extensions(["sh,go", "ts:typescript"])
            >>> tags.tag_resolve("sh"), tags.tag_resolve("ts")
            ('shell', 'typescript')
            >>> tags.extension_allowed("py")
            False
        """
        plain = []
        pairs = {}
        for entry in entries:
            for item in entry.split(","):
                if not item.strip():
                    continue
                if ":" in item:
                    extension, tag = item.split(":", 1)
                    pairs[extension_normalize(extension)] = tag.strip()
                else:
                    plain.append(extension_normalize(item))

        aliases = dict(defaults)
        allowed: Optional[FrozenSet[str]] = None
        if plain:
            aliases = {
                extension: tag
                for extension, tag in aliases.items()
                if extension in plain or tag in plain
            }
            allowed = frozenset(plain) | frozenset(pairs)
        aliases.update(pairs)
        return cls(
            aliases=MappingProxyType(aliases),
            allowed=allowed,
            lexer_fallback=lexer_fallback,
        )

    def tag_resolve(self, extension: str) -> str:
        """Display tag for an extension, falling back to the bare extension"""
        if extension in self.aliases:
            return self.aliases[extension]
        if self.lexer_fallback and extension:
            alias = lexer_aliasFind(extension)
            if alias:
                return alias
        return extension

    def extension_allowed(self, extension: str) -> bool:
        if self.allowed is None:
            return True
        return extension in self.allowed or self.tag_resolve(extension) in self.allowed
