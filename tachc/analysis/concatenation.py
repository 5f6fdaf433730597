"""
Detection of `expr.build().concat(arg)` call shapes in TypeScript/TSX sources.

Each match is classified as static or dynamic by looking at the syntax
of both spans, and scored with an accessibility tier:

* full    - the file mentions a layout container or carries ARIA markers;
* aria    - one of the spans mentions an interactive component;
* minimal - everything else.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from .tree_sitter_support import Node, TreeSitterDocument, create_document

logger = logging.getLogger(__name__)

STATIC = "static"
DYNAMIC = "dynamic"

MINIMAL = "minimal"
ARIA = "aria"
FULL = "full"

# Узлы, делающие участок выражения динамическим
_DYNAMIC_NODE_TYPES = frozenset({"template_substitution", "subscript_expression"})
# Типичные имена переменных цикла
LOOP_VARIABLES = frozenset({"entry", "item", "index", "variable"})

_LAYOUT_RE = re.compile(r"\b(?:VStack|HStack|ZStack|Form)\b")
_ARIA_RE = re.compile(r"\baria[A-Z][A-Za-z]*|\brole\s*:")
_INTERACTIVE_RE = re.compile(r"\b(?:Button|Link|onTapGesture|onClick)\b")


@dataclass(frozen=True)
class ConcatenationPattern:
    """Одно найденное выражение `left.build().concat(right)`."""
    type: str
    location: Tuple[int, int]
    left_component: str
    right_component: str
    optimizable: bool
    accessibility_needs: str

    @property
    def is_static(self) -> bool:
        return self.type == STATIC

    def to_dict(self) -> Dict[str, Any]:
        start, end = self.location
        return {
            "type": self.type,
            "location": {"start": start, "end": end},
            "leftComponent": self.left_component,
            "rightComponent": self.right_component,
            "optimizable": self.optimizable,
            "accessibilityNeeds": self.accessibility_needs,
        }


class ConcatenationAnalyzer:
    """
    Обходит дерево tree-sitter и собирает шаблоны конкатенации.

    Один экземпляр на документ; состояние между файлами не хранится.
    """

    def __init__(self, doc: TreeSitterDocument):
        self.doc = doc
        self._file_tier = FULL if self._needs_full_accessibility(doc.text) else None

    def analyze(self) -> List[ConcatenationPattern]:
        patterns: List[ConcatenationPattern] = []
        for node in self.doc.walk_tree():
            if node.type != "call_expression":
                continue
            pattern = self._match(node)
            if pattern is not None:
                patterns.append(pattern)
        return patterns

    def _match(self, call: Node) -> Optional[ConcatenationPattern]:
        receiver = _member_call_receiver(call, "concat")
        if receiver is None or receiver.type != "call_expression":
            return None
        left = _member_call_receiver(receiver, "build")
        if left is None:
            return None
        right = _first_argument(call)
        if right is None:
            return None

        left_text = self.doc.get_node_text(left).strip()
        right_text = self.doc.get_node_text(right).strip()
        if not left_text or not right_text:
            return None

        kind = DYNAMIC if self._is_dynamic(left) or self._is_dynamic(right) else STATIC
        return ConcatenationPattern(
            type=kind,
            location=self.doc.get_node_range(call),
            left_component=left_text,
            right_component=right_text,
            optimizable=kind == STATIC,
            accessibility_needs=self._tier(left_text, right_text),
        )

    def _is_dynamic(self, span: Node) -> bool:
        for node in self.doc.walk_tree(span):
            if node.type in _DYNAMIC_NODE_TYPES:
                return True
            if node.type == "identifier" and self.doc.get_node_text(node) in LOOP_VARIABLES:
                return True
        return False

    def _tier(self, left_text: str, right_text: str) -> str:
        if self._file_tier is not None:
            return self._file_tier
        if _INTERACTIVE_RE.search(left_text) or _INTERACTIVE_RE.search(right_text):
            return ARIA
        return MINIMAL

    @staticmethod
    def _needs_full_accessibility(text: str) -> bool:
        return bool(_LAYOUT_RE.search(text) or _ARIA_RE.search(text))


def _member_call_receiver(call: Node, method: str) -> Optional[Node]:
    """Для `obj.method(...)` возвращает obj; для прочих вызовов: None."""
    function = call.child_by_field_name("function")
    if function is None or function.type != "member_expression":
        return None
    prop = function.child_by_field_name("property")
    if prop is None or prop.text is None or prop.text.decode("utf-8") != method:
        return None
    return function.child_by_field_name("object")


def _first_argument(call: Node) -> Optional[Node]:
    arguments = call.child_by_field_name("arguments")
    if arguments is None:
        return None
    for child in arguments.named_children:
        if child.type != "comment":
            return child
    return None


def analyze_patterns_with_diagnostics(
    source_code: str, filename: str
) -> Tuple[List[ConcatenationPattern], Optional[str]]:
    """
    Находит шаблоны и сообщает, почему файл не удалось разобрать.

    Returns:
        (шаблоны, None) при успехе или ([], текст ошибки), если файл
        содержит синтаксические ошибки либо обход завершился сбоем
    """
    try:
        doc = create_document(source_code or "", filename)
        if doc.has_error():
            error = f"{max(1, len(doc.get_errors()))} syntax error(s)"
            logger.warning("Skipping concatenation analysis of %s: %s", filename, error)
            return [], error
        return ConcatenationAnalyzer(doc).analyze(), None
    except Exception as e:
        logger.warning("Failed to analyze %s for concatenation patterns: %s", filename, e)
        return [], f"analysis failed: {e}"


def analyze_patterns(source_code: str, filename: str) -> List[ConcatenationPattern]:
    """
    Находит шаблоны `.build().concat()` в исходнике.

    Никогда не бросает исключений: файл с синтаксическими ошибками или
    сбой обхода дают предупреждение в лог и пустой список.
    """
    patterns, _ = analyze_patterns_with_diagnostics(source_code, filename)
    return patterns


__all__ = [
    "ConcatenationPattern",
    "ConcatenationAnalyzer",
    "analyze_patterns",
    "analyze_patterns_with_diagnostics",
    "LOOP_VARIABLES",
    "STATIC",
    "DYNAMIC",
    "MINIMAL",
    "ARIA",
    "FULL",
]
