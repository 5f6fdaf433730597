"""
Build-plugin facade: transform hook, virtual-module resolution and lifecycle seams.

Every hook returns None for input it does not handle, which is the host's
"not mine" convention. Hooks are also reachable under their JS names
(resolveId, buildStart, configResolved, handleHotUpdate).
"""

from __future__ import annotations

import logging
from pathlib import PurePosixPath
from typing import Any, Dict, Mapping, Optional, Union

from ..analysis.concatenation import analyze_patterns
from ..analysis.report import build_report
from ..compiler.codegen import CodegenOptions, generate
from ..compiler.parser import parse_with_diagnostics
from .filters import PathFilter
from .options import PluginOptions, coerce_options
from .virtual import is_virtual, virtual_source

logger = logging.getLogger(__name__)

PLUGIN_NAME = "tachui-transform"
SUPPORTED_EXTENSIONS = frozenset({".ts", ".tsx", ".js", ".jsx"})
_COMPONENT_SUFFIXES = (".tui.ts", ".tui.tsx")


def strip_query(module_id: str) -> str:
    """'/src/App.tsx?v=123' → '/src/App.tsx'"""
    return module_id.split("?", 1)[0]


class TachPlugin:
    """
    Plugin instance created by create_plugin().

    Holds only the resolved options and the compiled path filter.
    """

    name = PLUGIN_NAME
    enforce = "pre"

    def __init__(self, options: PluginOptions):
        self.options = options
        self.path_filter = PathFilter.compile(options.include, options.exclude)

    # ---- lifecycle ----

    def config_resolved(self, config: Any = None) -> None:
        if self.options.dev:
            logger.debug("tachui plugin loaded in development mode")

    def build_start(self) -> None:
        logger.debug("tachui build started (include=%s)", self.options.include)

    def handle_hot_update(self, file: str) -> Optional[Dict[str, str]]:
        """Component-variant sources need a full reload; everything else goes to the host."""
        if strip_query(file).lower().endswith(_COMPONENT_SUFFIXES):
            return {"type": "full-reload"}
        return None

    # ---- virtual modules ----

    def resolve_id(self, module_id: str) -> Optional[str]:
        if is_virtual(module_id):
            return module_id
        return None

    def load(self, module_id: str) -> Optional[str]:
        return virtual_source(module_id)

    # ---- transform ----

    def should_transform(self, module_id: str) -> bool:
        path = strip_query(module_id)
        if PurePosixPath(path.replace("\\", "/")).suffix.lower() not in SUPPORTED_EXTENSIONS:
            return False
        return self.path_filter.accepts(path)

    def transform(self, code: str, module_id: str) -> Optional[Dict[str, Any]]:
        if not self.should_transform(module_id):
            return None
        path = strip_query(module_id)

        if self.options.dev:
            self._report_concatenation(code, path)

        result = parse_with_diagnostics(code, path)
        for diagnostic in result.diagnostics:
            logger.warning("tachui: skipped markup in %s: %s", path, diagnostic)
        if not result.nodes:
            return None

        codegen_options = CodegenOptions(
            source_maps=self.options.source_maps,
            source_file=path,
            target=self.options.transform.target,
        )
        generated = generate(result.nodes, codegen_options)

        out: Dict[str, Any] = {"code": generated.code, "map": generated.map}
        if self.options.transform.tree_shaking:
            out["moduleSideEffects"] = False
        return out

    def _report_concatenation(self, code: str, path: str) -> None:
        patterns = analyze_patterns(code, path)
        if not patterns:
            return
        report = build_report(patterns)
        logger.info(
            "tachui concatenation report for %s: %d patterns (%d static, %d dynamic), ~%.1fKB savings",
            path,
            report.total_patterns,
            report.static_patterns,
            report.dynamic_patterns,
            report.bundle_savings_kb,
        )
        for tip in report.recommendations:
            logger.info("  - %s", tip)

    # JS-style hook names
    resolveId = resolve_id
    buildStart = build_start
    configResolved = config_resolved
    handleHotUpdate = handle_hot_update


def create_plugin(options: Union[PluginOptions, Mapping[str, Any], None] = None) -> TachPlugin:
    """Creates a plugin instance from options or a camelCase mapping."""
    return TachPlugin(coerce_options(options))


__all__ = [
    "PLUGIN_NAME",
    "SUPPORTED_EXTENSIONS",
    "TachPlugin",
    "create_plugin",
    "strip_query",
]
