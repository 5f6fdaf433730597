"""
tachc: compiler for the TachUI declarative markup, build plugin and
concatenation analyzer.
"""

from __future__ import annotations

from .compiler import compile_source, generate, parse, parse_with_diagnostics
from .plugin import create_plugin
from .version import tool_version

__all__ = [
    "compile_source",
    "create_plugin",
    "generate",
    "parse",
    "parse_with_diagnostics",
    "tool_version",
]
