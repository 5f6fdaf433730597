"""
Статический анализ шаблонов `.build().concat()` в исходниках TypeScript/TSX.
"""

from .concatenation import ConcatenationPattern, analyze_patterns, analyze_patterns_with_diagnostics
from .report import AccessibilityBreakdown, ConcatenationReport, build_report
from .scan import FileAnalysis, ProjectAnalysis, scan_project

__all__ = [
    "AccessibilityBreakdown",
    "ConcatenationPattern",
    "ConcatenationReport",
    "FileAnalysis",
    "ProjectAnalysis",
    "analyze_patterns",
    "analyze_patterns_with_diagnostics",
    "build_report",
    "scan_project",
]
