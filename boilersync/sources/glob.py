"""Glob expansion against a remote repository tree.

Patterns are matched one path segment at a time. ``*`` and ``?`` stay
inside a segment, ``**`` spans zero or more segments, ``[...]`` is a
character class (``[!...]`` or ``[^...]`` negated) and ``{a,b}``
alternation is expanded before matching.
Wildcards do not match a leading ``.`` unless the pattern segment itself
starts with ``.``, and ``**`` does not descend into dot-directories.
"""

from __future__ import annotations

import logging
import re
from fnmatch import fnmatchcase

from boilersync.sources.base import SourceResolver

logger = logging.getLogger(__name__)

_PATTERN_CHARS = re.compile(r"[*?\[\]{}]")
_CARET_CLASS = re.compile(r"\[\^")


def is_pattern(path: str) -> bool:
    """Check if a path contains glob pattern characters."""
    return bool(_PATTERN_CHARS.search(path))


def _split_alternatives(body: str) -> list[str]:
    """Split a brace body on commas that are not nested in inner braces."""
    parts: list[str] = []
    depth = 0
    start = 0
    for i, ch in enumerate(body):
        if ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
        elif ch == "," and depth == 0:
            parts.append(body[start:i])
            start = i + 1
    parts.append(body[start:])
    return parts


def expand_braces(pattern: str) -> list[str]:
    """Expand ``{a,b}`` alternation into a list of plain glob patterns.

    A brace group without a top-level comma (``{a}``) is left as literal
    text. Order follows the alternatives as written; duplicates are dropped.
    """
    depth = 0
    start = -1
    for i, ch in enumerate(pattern):
        if ch == "{":
            if depth == 0:
                start = i
            depth += 1
        elif ch == "}" and depth > 0:
            depth -= 1
            if depth:
                continue
            alternatives = _split_alternatives(pattern[start + 1:i])
            if len(alternatives) < 2:
                continue
            prefix, suffix = pattern[:start], pattern[i + 1:]
            expanded: list[str] = []
            for alt in alternatives:
                for candidate in expand_braces(prefix + alt + suffix):
                    if candidate not in expanded:
                        expanded.append(candidate)
            return expanded
    return [pattern]


def _match_segment(pattern: str, name: str) -> bool:
    if name.startswith(".") and not pattern.startswith("."):
        return False
    # fnmatch only knows [!...] for negated classes
    return fnmatchcase(name, _CARET_CLASS.sub("[!", pattern))


def _match_segments(pattern: list[str], parts: list[str]) -> bool:
    if not pattern:
        return not parts
    head, rest = pattern[0], pattern[1:]
    if head == "**":
        # Zero segments, then one more at a time
        if _match_segments(rest, parts):
            return True
        for i, part in enumerate(parts):
            if part.startswith("."):
                return False
            if _match_segments(rest, parts[i + 1:]):
                return True
        return False
    if not parts:
        return False
    return _match_segment(head, parts[0]) and _match_segments(rest, parts[1:])


def match_path(pattern: str, path: str) -> bool:
    """Return True if a repository path matches a glob pattern."""
    path_parts = path.strip("/").split("/")
    for alternative in expand_braces(pattern):
        alternative = alternative.strip("/")
        if alternative.startswith("./"):
            alternative = alternative[2:]
        if _match_segments(alternative.split("/"), path_parts):
            return True
    return False


class GlobExpander:
    """Lists the files in a remote repository that match a glob pattern."""

    def __init__(self, resolver: SourceResolver) -> None:
        self.resolver = resolver

    async def expand(
        self,
        repository: str,
        pattern: str,
        ref: str | None = None,
        credential: str | None = None,
    ) -> list[str]:
        """Return the sorted file paths in repository matching pattern.

        Directories are never returned. A pattern that matches nothing
        yields an empty list rather than an error.
        """
        resolved = await self.resolver.resolve_ref(repository, ref, credential)
        entries = await self.resolver.list_files(repository, resolved, credential)

        matches = sorted(
            {e.path for e in entries if e.type == "blob" and match_path(pattern, e.path)}
        )
        logger.debug(
            "pattern %s matched %d file(s) in %s@%s", pattern, len(matches), repository, resolved
        )
        return matches
