from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import Any, Dict, List

from .analysis.scan import DEFAULT_EXCLUDE, DEFAULT_PATTERN, scan_project
from .compiler.codegen import CodegenOptions, generate
from .compiler.parser import parse_with_diagnostics
from .errors import TachUserError
from .jsonic import dumps as jdumps
from .version import tool_version


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="tachc",
        description="TachUI markup compiler and concatenation analyzer",
        add_help=True,
    )
    p.add_argument("-v", "--version", action="version", version=f"%(prog)s {tool_version()}")
    sub = p.add_subparsers(dest="cmd", required=True)

    sp_parse = sub.add_parser("parse", help="AST и диагностика разбора (JSON)")
    sp_parse.add_argument("file", help="исходный файл с разметкой")

    sp_compile = sub.add_parser("compile", help="Сгенерированный JavaScript в stdout")
    sp_compile.add_argument("file", help="исходный файл с разметкой")
    sp_compile.add_argument(
        "--source-map",
        action="store_true",
        help="построить source map рядом с исходником (или по пути --map-out)",
    )
    sp_compile.add_argument(
        "--map-out",
        metavar="PATH",
        help="куда записать source map (по умолчанию <file>.map)",
    )
    sp_compile.add_argument(
        "--target",
        default="es2022",
        help="целевой уровень JS: es5 даёт var-объявления, иначе const",
    )

    sp_analyze = sub.add_parser("analyze", help="Отчёт по шаблонам .build().concat() в проекте (JSON)")
    sp_analyze.add_argument("--root", default=".", help="корень проекта (по умолчанию текущий каталог)")
    sp_analyze.add_argument(
        "--pattern",
        default=DEFAULT_PATTERN,
        help=f"glob файлов для анализа (по умолчанию {DEFAULT_PATTERN})",
    )
    sp_analyze.add_argument(
        "--exclude",
        action="append",
        metavar="GLOB",
        help="исключаемый glob (можно указать несколько; по умолчанию node_modules/**)",
    )
    sp_analyze.add_argument("--output", metavar="FILE", help="записать JSON в файл вместо stdout")
    sp_analyze.add_argument("--detailed", action="store_true", help="добавить найденные шаблоны по файлам")
    sp_analyze.add_argument("--performance", action="store_true", help="добавить время анализа по файлам")
    sp_analyze.add_argument(
        "--concatenation",
        action="store_true",
        help="вывести только раздел отчёта о конкатенации",
    )

    return p


def _setup_logging() -> None:
    level = logging.DEBUG if os.environ.get("TACHC_DEBUG") else logging.WARNING
    root = logging.getLogger()
    root.setLevel(level)
    if not root.handlers:
        h = logging.StreamHandler(sys.stderr)
        h.setFormatter(logging.Formatter("[%(levelname)s] %(message)s"))
        root.addHandler(h)


def _read_source(path_str: str) -> str:
    path = Path(path_str)
    if not path.is_file():
        raise TachUserError(f"File not found: {path}")
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise TachUserError(f"Failed to read {path}: {e}") from e


def _cmd_parse(ns: argparse.Namespace) -> int:
    result = parse_with_diagnostics(_read_source(ns.file), ns.file)
    data = {
        "file": ns.file,
        "nodes": [n.to_dict() for n in result.nodes],
        "diagnostics": [d.to_dict() for d in result.diagnostics],
    }
    sys.stdout.write(jdumps(data))
    return 0


def _cmd_compile(ns: argparse.Namespace) -> int:
    result = parse_with_diagnostics(_read_source(ns.file), ns.file)
    if not result.ok:
        for diagnostic in result.diagnostics:
            sys.stderr.write(f"{ns.file}:{diagnostic}\n")
        return 2

    options = CodegenOptions(
        source_maps=bool(ns.source_map),
        source_file=ns.file,
        target=ns.target,
    )
    generated = generate(result.nodes, options)
    sys.stdout.write(generated.code)
    if not generated.code.endswith("\n"):
        sys.stdout.write("\n")

    if generated.map is not None:
        map_path = Path(ns.map_out or f"{ns.file}.map")
        map_path.parent.mkdir(parents=True, exist_ok=True)
        map_path.write_text(jdumps(generated.map), encoding="utf-8")
    return 0


def _cmd_analyze(ns: argparse.Namespace) -> int:
    root = Path(ns.root)
    if not root.is_dir():
        raise TachUserError(f"Not a directory: {root}")
    exclude = ns.exclude if ns.exclude else list(DEFAULT_EXCLUDE)
    analysis = scan_project(root, pattern=ns.pattern, exclude=exclude)
    report = analysis.report.model_dump(by_alias=True)

    data: Dict[str, Any]
    if ns.concatenation:
        data = {"concatenation": report}
    else:
        data = {
            "root": root.resolve().as_posix(),
            "filesAnalyzed": len(analysis.files),
            "concatenation": report,
            "warnings": list(analysis.warnings),
        }
        if ns.detailed or ns.performance:
            files: List[Dict[str, Any]] = []
            for f in analysis.files:
                entry = f.to_dict(timings=bool(ns.performance))
                if not ns.detailed:
                    entry.pop("patterns")
                files.append(entry)
            data["files"] = files
        if ns.performance:
            data["totalDurationMs"] = round(sum(f.duration_ms for f in analysis.files), 3)

    text = jdumps(data, indent=2)
    if ns.output:
        Path(ns.output).write_text(text + "\n", encoding="utf-8")
        sys.stderr.write(f"Report written to: {ns.output}\n")
    else:
        sys.stdout.write(text)
    return 0


_COMMANDS = {
    "parse": _cmd_parse,
    "compile": _cmd_compile,
    "analyze": _cmd_analyze,
}


def main(argv: list[str] | None = None) -> int:
    ns = _build_parser().parse_args(argv)
    _setup_logging()

    try:
        return _COMMANDS[ns.cmd](ns)
    except TachUserError as e:
        sys.stderr.write(str(e).rstrip() + "\n")
        return 2
    except ValueError as e:
        sys.stderr.write(str(e).rstrip() + "\n")
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
