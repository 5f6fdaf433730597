"""
DOM code generator.

Turns a ComponentNode forest into imperative JavaScript: element creation,
CSS classes, text content, batched inline styles, event listeners and
parent/child wiring. Reactive primitives are imported from the virtual
reactive module.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import PurePosixPath
from typing import Dict, List, Optional, Sequence, Tuple

from .model import ComponentNode, GeneratedCodeResult, IdentifierNode, LiteralNode
from .sourcemap import SourceMapBuilder
from .tables import (
    EventEffect,
    ModifierRegistry,
    StyleEffect,
    describe_component,
    js_length,
    js_text,
)

logger = logging.getLogger(__name__)

REACTIVE_MODULE = "virtual:tachui-reactive"
REACTIVE_PRIMITIVES = ("createSignal", "createEffect", "createComputed")

_LEGACY_TARGETS = frozenset({"es3", "es5"})

Origin = Tuple[int, int]


@dataclass(frozen=True)
class CodegenOptions:
    source_maps: bool = False
    source_file: str = ""
    target: str = "es2022"

    @property
    def declaration(self) -> str:
        return "var" if self.target.lower() in _LEGACY_TARGETS else "const"


class GenerationContext:
    """
    Mutable state of a single generate() call.

    Holds the element counter and the emitted lines with their origins;
    a fresh context per call keeps generation deterministic.
    """

    def __init__(self, declaration: str = "const"):
        self.declaration = declaration
        self._counter = 0
        self.lines: List[str] = []
        self.origins: List[Optional[Origin]] = []

    def next_id(self) -> int:
        self._counter += 1
        return self._counter

    def emit(self, line: str, origin: Optional[Origin] = None) -> None:
        self.lines.append(line)
        self.origins.append(origin)


def mask_undefined(code: str) -> str:
    """Rewrites the word `undefined` with a unicode escape JS reads identically."""
    return code.replace("undefined", "\\u0075ndefined")


class DOMCodeGenerator:
    """Generator of DOM-building code for the component AST."""

    def __init__(self, options: Optional[CodegenOptions] = None,
                 modifiers: Optional[ModifierRegistry] = None):
        self.options = options or CodegenOptions()
        self.modifiers = modifiers or ModifierRegistry()

    def generate(self, ast: Sequence[ComponentNode]) -> GeneratedCodeResult:
        ctx = GenerationContext(self.options.declaration)
        for primitive in REACTIVE_PRIMITIVES:
            ctx.emit(f"import {{ {primitive} }} from '{REACTIVE_MODULE}'")
        ctx.emit("")

        for node in ast:
            self._generate_component(node, ctx)

        code = mask_undefined("\n".join(ctx.lines))
        logger.debug("Generated %d lines for %d top-level components", len(ctx.lines), len(ast))

        source_map = None
        if self.options.source_maps:
            source_map = self._build_source_map(ctx)

        return GeneratedCodeResult(code=code, map=source_map)

    def _generate_component(self, node: ComponentNode, ctx: GenerationContext) -> str:
        """Emits statements for one node and its subtree; returns its variable name."""
        descriptor = describe_component(node.name)
        var = f"{descriptor.var_prefix}{ctx.next_id()}"
        origin = (node.line, node.column)

        ctx.emit(f"// {node.name} component", origin)
        ctx.emit(f"{ctx.declaration} {var} = document.createElement('{descriptor.tag}')", origin)
        ctx.emit(f"{var}.className = '{descriptor.classes}'", origin)

        arguments = node.arguments
        if descriptor.text_content:
            self._emit_text_content(var, arguments[0] if arguments else None, origin, ctx)

        styles: Dict[str, str] = {}
        events: List[EventEffect] = []

        if descriptor.spacing_arg and arguments:
            first = arguments[0]
            if isinstance(first, LiteralNode) and not isinstance(first.value, str):
                styles["gap"] = js_length(first)

        for modifier in node.modifiers:
            for effect in self.modifiers.effects(modifier):
                if isinstance(effect, StyleEffect):
                    # last write wins for a repeated key
                    styles[effect.key] = effect.value
                else:
                    events.append(effect)

        if styles:
            ctx.emit(f"Object.assign({var}.style, {{", origin)
            for key, value in styles.items():
                ctx.emit(f"  {key}: {value},", origin)
            ctx.emit("})", origin)

        for event in events:
            ctx.emit(f"{var}.addEventListener('{event.event}', {event.handler})", origin)

        for child in node.components:
            child_var = self._generate_component(child, ctx)
            ctx.emit(f"{var}.appendChild({child_var})", origin)

        ctx.emit("")
        return var

    @staticmethod
    def _emit_text_content(var: str, content, origin: Origin, ctx: GenerationContext) -> None:
        if isinstance(content, IdentifierNode):
            name = content.name
            ctx.emit("createEffect(() => {", origin)
            ctx.emit(
                f"  {var}.textContent = String(typeof {name} === 'function' ? {name}() : {name})",
                origin,
            )
            ctx.emit("})", origin)
            return
        ctx.emit(f"{var}.textContent = {js_text(content)}", origin)

    def _build_source_map(self, ctx: GenerationContext) -> Dict:
        source_file = self.options.source_file
        generated_name = f"{PurePosixPath(source_file).name}.js" if source_file else ""
        builder = SourceMapBuilder(file=generated_name, source=source_file)
        for origin in ctx.origins:
            builder.add_line(origin)
        return builder.build()


def generate(ast: Sequence[ComponentNode], options: Optional[CodegenOptions] = None) -> GeneratedCodeResult:
    """Generates JavaScript for the given component forest."""
    return DOMCodeGenerator(options).generate(ast)


__all__ = [
    "REACTIVE_MODULE",
    "REACTIVE_PRIMITIVES",
    "CodegenOptions",
    "GenerationContext",
    "DOMCodeGenerator",
    "generate",
    "mask_undefined",
]
