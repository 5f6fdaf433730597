from pathlib import Path

import pytest

from tests.infrastructure.file_utils import write, write_source


@pytest.fixture
def tsproject(tmp_path: Path):
    """Небольшой TS-проект: два файла с шаблонами, один без, node_modules и тесты."""
    root = tmp_path
    write_source(root / "src" / "greeting.ts", """
        const greeting = Text("Hello").build().concat(Text("World").build())
        export default greeting
    """)
    write_source(root / "src" / "list.tsx", """
        export function render(entries: string[][]) {
          return entries.map(entry => Text(entry[0]).build().concat(Text(entry[1]).build()))
        }
    """)
    write_source(root / "src" / "plain.ts", """
        export const numbers = [1, 2, 3].concat([4])
    """)
    write_source(root / "node_modules" / "dep" / "index.ts", """
        export const x = Text("a").build().concat(Text("b").build())
    """)
    write(root / "README.md", "# demo\n")
    return root
