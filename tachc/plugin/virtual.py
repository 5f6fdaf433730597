"""
Виртуальные модули, которые плагин отдаёт сборщику.

Реестр неизменяем и строится один раз при импорте.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping, Optional

from ..compiler.codegen import REACTIVE_MODULE, REACTIVE_PRIMITIVES

RUNTIME_MODULE = "virtual:tachui-runtime"
REACTIVE_SOURCE = "@tachui/core/reactive"

_PRIMITIVES = ", ".join(REACTIVE_PRIMITIVES)

_RUNTIME_CODE = f"""\
// tachui runtime module: helpers for transformed components

import {{ {_PRIMITIVES} }} from '{REACTIVE_SOURCE}'

export {{ {_PRIMITIVES} }}

export function createElement(tag, className) {{
  const element = document.createElement(tag)
  if (className) {{
    element.className = className
  }}
  return element
}}

export function mountComponent(element, render) {{
  const dispose = render()
  element._tachui_dispose = dispose
  return dispose
}}

export function unmountComponent(element) {{
  if (element._tachui_dispose) {{
    element._tachui_dispose()
    delete element._tachui_dispose
  }}
}}

if (import.meta.hot) {{
  import.meta.hot.accept()
  import.meta.hot.dispose(() => {{
    document.querySelectorAll('[data-tachui-component]').forEach(unmountComponent)
  }})
}}
"""

_REACTIVE_CODE = f"""\
// tachui reactive module: primitives imported by generated code

export {{ {_PRIMITIVES} }} from '{REACTIVE_SOURCE}'
"""

VIRTUAL_MODULES: Mapping[str, str] = MappingProxyType({
    RUNTIME_MODULE: _RUNTIME_CODE,
    REACTIVE_MODULE: _REACTIVE_CODE,
})


def is_virtual(module_id: str) -> bool:
    return module_id in VIRTUAL_MODULES


def virtual_source(module_id: str) -> Optional[str]:
    return VIRTUAL_MODULES.get(module_id)


__all__ = [
    "RUNTIME_MODULE",
    "REACTIVE_MODULE",
    "VIRTUAL_MODULES",
    "is_virtual",
    "virtual_source",
]
