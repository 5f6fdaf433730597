"""
Utilities for working with CLI in tests.
"""

import json
import os
import subprocess
import sys
from pathlib import Path

# Repository root, so the subprocess can import tachc without installation
_REPO_ROOT = Path(__file__).resolve().parents[2]


def run_cli(root: Path, *args: str) -> subprocess.CompletedProcess:
    """
    Runs tachc.cli with specified arguments in the given directory.

    Args:
        root: Working directory for command execution
        *args: Command line arguments for tachc.cli

    Returns:
        CompletedProcess with execution results
    """
    env = os.environ.copy()
    env["PYTHONPATH"] = os.pathsep.join(filter(None, [str(_REPO_ROOT), env.get("PYTHONPATH")]))
    env.pop("TACHC_DEBUG", None)
    return subprocess.run(
        [sys.executable, "-m", "tachc.cli", *args],
        cwd=root, env=env, capture_output=True, text=True, encoding="utf-8"
    )


def jload(s: str):
    """Parses JSON output of the CLI."""
    return json.loads(s)


__all__ = ["run_cli", "jload"]
