"""
End-to-end tests for the tachc command line.
"""

from pathlib import Path

from tests.infrastructure.cli_utils import jload, run_cli
from tests.infrastructure.file_utils import write


def test_version(tmp_path: Path):
    cp = run_cli(tmp_path, "--version")
    assert cp.returncode == 0
    assert cp.stdout.startswith("tachc ")


def test_parse_outputs_ast(tmp_path: Path):
    write(tmp_path / "App.tsx", 'VStack { Text("Hello").padding(8) }\n')
    cp = run_cli(tmp_path, "parse", "App.tsx")
    assert cp.returncode == 0, cp.stderr

    data = jload(cp.stdout)
    assert data["file"] == "App.tsx"
    assert data["diagnostics"] == []
    root = data["nodes"][0]
    assert root["name"] == "VStack"
    text = root["children"][0]
    assert text["children"] == [{"type": "Literal", "value": "Hello"}]
    assert text["modifiers"] == [{"name": "padding", "arguments": [{"type": "Literal", "value": 8}]}]


def test_parse_reports_diagnostics(tmp_path: Path):
    write(tmp_path / "Broken.tsx", 'VStack { Text("a")\n')
    cp = run_cli(tmp_path, "parse", "Broken.tsx")
    assert cp.returncode == 0

    data = jload(cp.stdout)
    assert data["nodes"] == []
    assert len(data["diagnostics"]) == 1
    assert data["diagnostics"][0]["line"] == 2


def test_compile_prints_code(tmp_path: Path):
    write(tmp_path / "App.tsx", 'Button("Go").onTapGesture(go)\n')
    cp = run_cli(tmp_path, "compile", "App.tsx")
    assert cp.returncode == 0, cp.stderr
    assert cp.stdout.startswith("import { createSignal } from 'virtual:tachui-reactive'\n")
    assert "buttonElement1.addEventListener('click', go)" in cp.stdout
    assert not (tmp_path / "App.tsx.map").exists()


def test_compile_with_source_map(tmp_path: Path):
    write(tmp_path / "App.tsx", 'Text("a")\n')
    cp = run_cli(tmp_path, "compile", "App.tsx", "--source-map", "--map-out", "out/app.map", "--target", "es5")
    assert cp.returncode == 0, cp.stderr
    assert "var textElement1" in cp.stdout

    data = jload((tmp_path / "out" / "app.map").read_text(encoding="utf-8"))
    assert data["version"] == 3
    assert data["file"] == "App.tsx.js"


def test_compile_source_map_default_path(tmp_path: Path):
    write(tmp_path / "App.tsx", 'Text("a")\n')
    cp = run_cli(tmp_path, "compile", "App.tsx", "--source-map")
    assert cp.returncode == 0, cp.stderr

    data = jload((tmp_path / "App.tsx.map").read_text(encoding="utf-8"))
    assert data["version"] == 3
    assert data["sources"] == ["App.tsx"]


def test_compile_parse_error_exit_code(tmp_path: Path):
    write(tmp_path / "Broken.tsx", 'Text("a"\n')
    cp = run_cli(tmp_path, "compile", "Broken.tsx")
    assert cp.returncode == 2
    assert "Broken.tsx:" in cp.stderr
    assert cp.stdout == ""


def test_missing_file_is_user_error(tmp_path: Path):
    cp = run_cli(tmp_path, "compile", "nope.tsx")
    assert cp.returncode == 2
    assert "File not found" in cp.stderr
    assert "Traceback" not in cp.stderr


def test_analyze_project(tsproject: Path):
    cp = run_cli(tsproject, "analyze")
    assert cp.returncode == 0, cp.stderr

    data = jload(cp.stdout)
    assert data["filesAnalyzed"] == 3
    assert data["warnings"] == []
    assert data["concatenation"]["totalPatterns"] == 2
    assert data["concatenation"]["staticPatterns"] == 1
    assert data["concatenation"]["dynamicPatterns"] == 1
    assert "files" not in data


def test_analyze_detailed_and_performance(tsproject: Path):
    cp = run_cli(tsproject, "analyze", "--detailed", "--performance")
    assert cp.returncode == 0, cp.stderr

    data = jload(cp.stdout)
    files = {f["path"]: f for f in data["files"]}
    assert files["src/greeting.ts"]["patterns"][0]["leftComponent"] == 'Text("Hello")'
    assert "durationMs" in files["src/greeting.ts"]
    assert "totalDurationMs" in data


def test_analyze_performance_only_omits_patterns(tsproject: Path):
    cp = run_cli(tsproject, "analyze", "--performance")
    data = jload(cp.stdout)
    assert all("patterns" not in f for f in data["files"])
    assert all("durationMs" in f for f in data["files"])


def test_analyze_concatenation_only(tsproject: Path):
    cp = run_cli(tsproject, "analyze", "--concatenation")
    data = jload(cp.stdout)
    assert list(data) == ["concatenation"]


def test_analyze_pattern_and_output(tsproject: Path):
    cp = run_cli(tsproject, "analyze", "--pattern", "**/*.tsx", "--output", "report.json")
    assert cp.returncode == 0, cp.stderr
    assert cp.stdout == ""
    assert "report.json" in cp.stderr

    data = jload((tsproject / "report.json").read_text(encoding="utf-8"))
    assert data["filesAnalyzed"] == 1
    assert data["concatenation"]["dynamicPatterns"] == 1


def test_analyze_with_explicit_root(tsproject: Path, tmp_path_factory):
    elsewhere = tmp_path_factory.mktemp("cwd")
    cp = run_cli(elsewhere, "analyze", "--root", str(tsproject))
    assert cp.returncode == 0, cp.stderr
    assert jload(cp.stdout)["filesAnalyzed"] == 3


def test_analyze_missing_root(tmp_path: Path):
    cp = run_cli(tmp_path, "analyze", "--root", "missing")
    assert cp.returncode == 2
    assert "Not a directory" in cp.stderr


def test_analyze_reports_broken_file_as_warning(tsproject: Path):
    write(tsproject / "src" / "broken.ts", 'const x = Text("a").build().concat(\n')
    cp = run_cli(tsproject, "analyze")
    assert cp.returncode == 0, cp.stderr

    data = jload(cp.stdout)
    assert data["warnings"] == ["src/broken.ts: 1 syntax error(s)"]
    assert data["filesAnalyzed"] == 4
