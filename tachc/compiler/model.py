"""
Модели данных компилятора разметки.

Содержит узлы AST (компоненты, модификаторы, выражения-аргументы),
диагностику парсера и результат генерации кода.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union


@dataclass
class LiteralNode:
    """
    Литерал в позиции аргумента: "строка" или число.

    Тип значения повторяет лексическую форму: кавычки → str,
    число без точки → int, с точкой → float.
    """
    value: Union[str, int, float]
    type: str = field(default="Literal", init=False)

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type, "value": self.value}


@dataclass
class IdentifierNode:
    """
    Ссылка на имя хост-кода: обработчик события, сигнал, `store.count`.
    """
    name: str
    type: str = field(default="Identifier", init=False)

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type, "name": self.name}


Expression = Union[LiteralNode, IdentifierNode]


@dataclass
class ModifierCall:
    """
    Вызов модификатора в цепочке: .name(args)

    Порядок модификаторов в узле значим: они применяются слева направо.
    """
    name: str
    arguments: List[Expression] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "arguments": [a.to_dict() for a in self.arguments],
        }


@dataclass
class ComponentNode:
    """
    Один декларативный вызов компонента с его цепочкой модификаторов.

    children хранит в порядке исходника сначала аргументы из (...),
    затем компоненты из блока {...}. Порядок детей становится
    порядком вставки в DOM.
    """
    name: str
    children: List[Union["ComponentNode", Expression]] = field(default_factory=list)
    modifiers: List[ModifierCall] = field(default_factory=list)
    line: int = 1
    column: int = 1
    type: str = field(default="Component", init=False)

    @property
    def arguments(self) -> List[Expression]:
        """Дети-выражения (аргументы вызова)."""
        return [c for c in self.children if not isinstance(c, ComponentNode)]

    @property
    def components(self) -> List["ComponentNode"]:
        """Дети-компоненты (содержимое блока)."""
        return [c for c in self.children if isinstance(c, ComponentNode)]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type,
            "name": self.name,
            "children": [c.to_dict() for c in self.children],
            "modifiers": [m.to_dict() for m in self.modifiers],
            "line": self.line,
            "column": self.column,
        }


@dataclass(frozen=True)
class ParseDiagnostic:
    """Ошибка разбора с позицией в исходном тексте (1-based line/column)."""
    message: str
    position: int
    line: int
    column: int

    def __str__(self) -> str:
        return f"{self.line}:{self.column}: {self.message}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "message": self.message,
            "position": self.position,
            "line": self.line,
            "column": self.column,
        }


@dataclass(frozen=True)
class ParseResult:
    """
    Результат разбора с диагностикой.

    Позволяет отличить «пусто, потому что вход пустой» от
    «пусто, потому что разбор упал».
    """
    nodes: List[ComponentNode]
    diagnostics: List[ParseDiagnostic] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.diagnostics


@dataclass(frozen=True)
class GeneratedCodeResult:
    """Результат одного вызова генератора: код и (опционально) source map."""
    code: str
    map: Optional[Dict[str, Any]] = None


__all__ = [
    "LiteralNode",
    "IdentifierNode",
    "Expression",
    "ModifierCall",
    "ComponentNode",
    "ParseDiagnostic",
    "ParseResult",
    "GeneratedCodeResult",
]
