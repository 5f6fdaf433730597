"""
Lookup tables for code generation.

Two closed, table-driven dispatches replace string switches:

* component name -> ComponentDescriptor (DOM tag, CSS classes, variable prefix);
* modifier name -> pure handler ``(args) -> [StyleEffect | EventEffect]``.

Handlers return JS expression *text*; the generator only assembles statements.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Callable, Dict, List, Mapping, Optional, Sequence, Union

from .model import Expression, IdentifierNode, LiteralNode, ModifierCall

logger = logging.getLogger(__name__)


# ---- Components ----

@dataclass(frozen=True)
class ComponentDescriptor:
    tag: str
    classes: str
    var_prefix: str
    text_content: bool = False  # first argument becomes textContent
    spacing_arg: bool = False   # numeric first argument becomes gap


COMPONENTS: Mapping[str, ComponentDescriptor] = MappingProxyType({
    "Text": ComponentDescriptor("span", "tachui-text", "textElement", text_content=True),
    "Button": ComponentDescriptor("button", "tachui-button", "buttonElement", text_content=True),
    "VStack": ComponentDescriptor("div", "tachui-v flex flex-col", "container", spacing_arg=True),
    "HStack": ComponentDescriptor("div", "tachui-h flex flex-row", "container", spacing_arg=True),
    "ZStack": ComponentDescriptor("div", "tachui-z relative", "container"),
    "List": ComponentDescriptor("div", "tachui-list", "listElement"),
})


def describe_component(name: str) -> ComponentDescriptor:
    """Descriptor for a component; unknown names fall back to a generic container."""
    descriptor = COMPONENTS.get(name)
    if descriptor is not None:
        return descriptor
    return ComponentDescriptor("div", f"tachui-{name.lower()}", "element")


# ---- JS expression helpers ----

def js_string(value: str) -> str:
    """Double-quoted JS string literal."""
    return json.dumps(value, ensure_ascii=False)


def format_number(value: Union[int, float]) -> str:
    return str(value) if isinstance(value, int) else repr(value)


def js_expr(expr: Expression) -> str:
    """JS source for an argument expression."""
    if isinstance(expr, IdentifierNode):
        return expr.name
    if isinstance(expr.value, str):
        return js_string(expr.value)
    return format_number(expr.value)


def js_length(expr: Expression) -> str:
    """CSS length: numbers get a px suffix, strings pass through, references become a template."""
    if isinstance(expr, IdentifierNode):
        return "`${" + expr.name + "}px`"
    if isinstance(expr.value, str):
        return js_string(expr.value)
    return js_string(f"{format_number(expr.value)}px")


def js_text(expr: Optional[Expression]) -> str:
    """JS string for static text content."""
    if expr is None:
        return '""'
    if isinstance(expr, LiteralNode):
        value = expr.value
        return js_string(value if isinstance(value, str) else format_number(value))
    return js_expr(expr)


# ---- Modifiers ----

@dataclass(frozen=True)
class StyleEffect:
    key: str
    value: str


@dataclass(frozen=True)
class EventEffect:
    event: str
    handler: str


ModifierEffect = Union[StyleEffect, EventEffect]
ModifierHandler = Callable[[Sequence[Expression]], List[ModifierEffect]]


def _style(key: str, render: Callable[[Expression], str]) -> ModifierHandler:
    def handler(args: Sequence[Expression]) -> List[ModifierEffect]:
        if not args:
            return []
        return [StyleEffect(key, render(args[0]))]
    return handler


def _padding(args: Sequence[Expression]) -> List[ModifierEffect]:
    if not args:
        return [StyleEffect("padding", '"8px"')]
    return [StyleEffect("padding", js_length(args[0]))]


def _frame(args: Sequence[Expression]) -> List[ModifierEffect]:
    effects: List[ModifierEffect] = []
    for key, arg in zip(("width", "height"), args):
        effects.append(StyleEffect(key, js_length(arg)))
    return effects


def _on_tap_gesture(args: Sequence[Expression]) -> List[ModifierEffect]:
    if not args or not isinstance(args[0], IdentifierNode):
        return []
    return [EventEffect("click", args[0].name)]


BUILTIN_MODIFIERS: Mapping[str, ModifierHandler] = MappingProxyType({
    "padding": _padding,
    "background": _style("backgroundColor", js_expr),
    "foregroundColor": _style("color", js_expr),
    "font": _style("fontSize", js_length),
    "cornerRadius": _style("borderRadius", js_length),
    "opacity": _style("opacity", js_expr),
    "frame": _frame,
    "onTapGesture": _on_tap_gesture,
})


class ModifierRegistry:
    """
    Name -> handler lookup for modifiers.

    Starts from the built-in table; extra modifiers can be registered per
    instance, so one generator's additions never leak into another.
    """

    def __init__(self, extra: Optional[Mapping[str, ModifierHandler]] = None):
        self._handlers: Dict[str, ModifierHandler] = dict(BUILTIN_MODIFIERS)
        if extra:
            self._handlers.update(extra)

    def register(self, name: str, handler: ModifierHandler) -> None:
        self._handlers[name] = handler

    def __contains__(self, name: str) -> bool:
        return name in self._handlers

    def effects(self, modifier: ModifierCall) -> List[ModifierEffect]:
        """Effects of one modifier call; unknown or unusable calls yield nothing."""
        handler = self._handlers.get(modifier.name)
        if handler is None:
            logger.debug("Skipping unknown modifier '.%s()'", modifier.name)
            return []
        effects = handler(modifier.arguments)
        if not effects:
            logger.debug("Modifier '.%s()' has no usable arguments; skipped", modifier.name)
        return effects


__all__ = [
    "ComponentDescriptor",
    "COMPONENTS",
    "describe_component",
    "StyleEffect",
    "EventEffect",
    "ModifierEffect",
    "ModifierHandler",
    "BUILTIN_MODIFIERS",
    "ModifierRegistry",
    "js_string",
    "js_expr",
    "js_length",
    "js_text",
    "format_number",
]
