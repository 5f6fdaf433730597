"""
Project-wide concatenation scan.

Walks a directory, analyzes every matching file and aggregates one report.
A file that cannot be read becomes a warning; the scan keeps going.
"""

from __future__ import annotations

import logging
import os
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from ..plugin.filters import compile_globs
from .concatenation import ConcatenationPattern, analyze_patterns_with_diagnostics
from .report import ConcatenationReport, build_report

logger = logging.getLogger(__name__)

DEFAULT_PATTERN = "**/*.{ts,tsx,js,jsx}"
DEFAULT_EXCLUDE = ("node_modules/**",)


@dataclass
class FileAnalysis:
    path: str
    patterns: List[ConcatenationPattern]
    duration_ms: float

    def to_dict(self, *, timings: bool = False) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "path": self.path,
            "patterns": [p.to_dict() for p in self.patterns],
        }
        if timings:
            data["durationMs"] = round(self.duration_ms, 3)
        return data


@dataclass
class ProjectAnalysis:
    files: List[FileAnalysis] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    report: ConcatenationReport = field(default_factory=ConcatenationReport)

    @property
    def patterns(self) -> List[ConcatenationPattern]:
        return [p for f in self.files for p in f.patterns]


def iter_source_files(root: Path, pattern: str, exclude: Sequence[str]) -> List[Path]:
    """Files under root matching pattern and not excluded, in sorted order."""
    root = root.resolve()
    include_spec = compile_globs([pattern])
    exclude_spec = compile_globs(exclude)
    found: List[Path] = []

    for dirpath, dirnames, filenames in os.walk(root):
        if ".git" in dirnames:
            dirnames.remove(".git")

        # Ранний отсев исключённых директорий
        if exclude_spec is not None:
            keep: List[str] = []
            for d in dirnames:
                rel_dir = Path(dirpath, d).relative_to(root).as_posix()
                if not exclude_spec.match_file(rel_dir + "/"):
                    keep.append(d)
            dirnames[:] = keep

        for fn in filenames:
            p = Path(dirpath, fn)
            rel_posix = p.relative_to(root).as_posix()
            if include_spec is not None and not include_spec.match_file(rel_posix):
                continue
            if exclude_spec is not None and exclude_spec.match_file(rel_posix):
                continue
            found.append(p)

    found.sort(key=lambda p: p.relative_to(root).as_posix())
    return found


def scan_project(
    root: Path | str,
    pattern: str = DEFAULT_PATTERN,
    exclude: Optional[Sequence[str]] = None,
) -> ProjectAnalysis:
    """
    Analyzes every matching file under root.

    Paths in the result are relative to root, POSIX-style.
    """
    root_path = Path(root)
    if not root_path.is_dir():
        raise FileNotFoundError(f"Not a directory: {root_path}")
    excludes = list(DEFAULT_EXCLUDE if exclude is None else exclude)

    analysis = ProjectAnalysis()
    resolved_root = root_path.resolve()
    for path in iter_source_files(root_path, pattern, excludes):
        rel = path.relative_to(resolved_root).as_posix()
        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            message = f"{rel}: {e}"
            logger.warning("Skipping unreadable file %s", message)
            analysis.warnings.append(message)
            continue

        started = time.perf_counter()
        patterns, error = analyze_patterns_with_diagnostics(text, rel)
        elapsed_ms = (time.perf_counter() - started) * 1000.0
        if error is not None:
            analysis.warnings.append(f"{rel}: {error}")
        analysis.files.append(FileAnalysis(path=rel, patterns=patterns, duration_ms=elapsed_ms))

    analysis.report = build_report(analysis.patterns)
    return analysis


__all__ = [
    "DEFAULT_PATTERN",
    "DEFAULT_EXCLUDE",
    "FileAnalysis",
    "ProjectAnalysis",
    "iter_source_files",
    "scan_project",
]
