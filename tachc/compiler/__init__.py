"""
Компилятор декларативной разметки: lexer → parser → AST → codegen.
"""

from __future__ import annotations

import logging
from typing import Optional

from .codegen import CodegenOptions, DOMCodeGenerator, generate
from .lexer import MarkupLexer, Token, tokenize
from .model import (
    ComponentNode,
    GeneratedCodeResult,
    IdentifierNode,
    LiteralNode,
    ModifierCall,
    ParseDiagnostic,
    ParseResult,
)
from .parser import parse, parse_with_diagnostics
from .tables import ModifierRegistry

logger = logging.getLogger(__name__)


def compile_source(
    source: str,
    filename: str = "",
    options: Optional[CodegenOptions] = None,
) -> Optional[GeneratedCodeResult]:
    """
    Полный проход: разбор и генерация.

    Returns:
        Результат генерации по уцелевшим компонентам или None, если
        компонентов не найдено
    """
    result = parse_with_diagnostics(source, filename)
    for diagnostic in result.diagnostics:
        logger.debug("%s:%s", filename or "<source>", diagnostic)
    if not result.nodes:
        return None
    return generate(result.nodes, options)


__all__ = [
    "CodegenOptions",
    "ComponentNode",
    "DOMCodeGenerator",
    "GeneratedCodeResult",
    "IdentifierNode",
    "LiteralNode",
    "MarkupLexer",
    "ModifierCall",
    "ModifierRegistry",
    "ParseDiagnostic",
    "ParseResult",
    "Token",
    "compile_source",
    "generate",
    "parse",
    "parse_with_diagnostics",
    "tokenize",
]
