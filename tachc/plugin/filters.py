"""
Фильтрация путей модулей для плагина и сканера проекта.

Include-записи вида ".tsx" (начинаются с точки, без wildcard) трактуются
как суффиксы имени файла; всё остальное компилируется в gitwildmatch
PathSpec. Сопоставление идёт по всем «хвостам» пути, поэтому
`node_modules/**` срабатывает и для абсолютного id модуля.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import PurePosixPath
from typing import Iterable, List, Optional, Sequence, Tuple

import pathspec

_BRACE_RE = re.compile(r"\{([^{}]*)\}")
_WILDCARD_CHARS = frozenset("*?[")


def expand_braces(pattern: str) -> List[str]:
    """
    Раскрывает альтернативы в фигурных скобках.

    "**/*.{ts,tsx}" → ["**/*.ts", "**/*.tsx"]; вложенные группы раскрываются
    по очереди слева направо.
    """
    m = _BRACE_RE.search(pattern)
    if not m:
        return [pattern]
    head, tail = pattern[:m.start()], pattern[m.end():]
    out: List[str] = []
    for alt in m.group(1).split(","):
        out.extend(expand_braces(head + alt + tail))
    return out


def compile_globs(patterns: Iterable[str]) -> Optional[pathspec.PathSpec]:
    lines: List[str] = []
    for pat in patterns:
        lines.extend(expand_braces(pat))
    if not lines:
        return None
    return pathspec.PathSpec.from_lines("gitwildmatch", lines)


def is_suffix_entry(entry: str) -> bool:
    return entry.startswith(".") and not (_WILDCARD_CHARS & set(entry))


def path_tails(path: str) -> List[str]:
    """Все хвосты POSIX-пути: 'a/b/c.ts' → ['a/b/c.ts', 'b/c.ts', 'c.ts']."""
    parts = [p for p in PurePosixPath(path.replace("\\", "/")).parts if p not in ("/", "")]
    # Windows-диск ("C:") не участвует в сопоставлении
    if parts and parts[0].endswith(":"):
        parts = parts[1:]
    return ["/".join(parts[i:]) for i in range(len(parts))]


@dataclass(frozen=True)
class PathFilter:
    """Скомпилированные include/exclude правила."""
    suffixes: Tuple[str, ...]
    include_spec: Optional[pathspec.PathSpec]
    exclude_spec: Optional[pathspec.PathSpec]

    @classmethod
    def compile(cls, include: Sequence[str], exclude: Sequence[str]) -> PathFilter:
        suffixes = tuple(e.lower() for e in include if is_suffix_entry(e))
        globs = [e for e in include if not is_suffix_entry(e)]
        return cls(
            suffixes=suffixes,
            include_spec=compile_globs(globs),
            exclude_spec=compile_globs(exclude),
        )

    def is_included(self, path: str) -> bool:
        if path.lower().endswith(self.suffixes):
            return True
        return self.include_spec is not None and _matches_any_tail(self.include_spec, path)

    def is_excluded(self, path: str) -> bool:
        return self.exclude_spec is not None and _matches_any_tail(self.exclude_spec, path)

    def accepts(self, path: str) -> bool:
        return self.is_included(path) and not self.is_excluded(path)


def _matches_any_tail(spec: pathspec.PathSpec, path: str) -> bool:
    return any(spec.match_file(tail) for tail in path_tails(path))


__all__ = [
    "PathFilter",
    "compile_globs",
    "expand_braces",
    "is_suffix_entry",
    "path_tails",
]
