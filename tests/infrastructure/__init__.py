"""
Unified test infrastructure for tachc.

Modules:
- file_utils: Utilities for creating files and directories
- cli_utils: Running the CLI in a subprocess and decoding its JSON
"""

from .file_utils import write, write_source
from .cli_utils import run_cli, jload

__all__ = ["write", "write_source", "run_cli", "jload"]
