"""
Tests for source map generation.
"""

import pytest

from tachc.compiler import parse
from tachc.compiler.codegen import CodegenOptions, generate
from tachc.compiler.sourcemap import SourceMapBuilder, decode_vlq, encode_vlq


@pytest.mark.parametrize("value,encoded", [
    (0, "A"),
    (1, "C"),
    (-1, "D"),
    (15, "e"),
    (16, "gB"),
    (-16, "hB"),
    (1000, "w+B"),
])
def test_encode_vlq_known_values(value, encoded):
    assert encode_vlq(value) == encoded


def test_decode_vlq_segment():
    assert decode_vlq("AACA") == [0, 0, 1, 0]
    assert decode_vlq("gBhBA") == [16, -16, 0]


def test_decode_vlq_truncated():
    with pytest.raises(ValueError):
        decode_vlq("g")


class TestSourceMapBuilder:

    def test_unmapped_lines_are_empty_groups(self):
        builder = SourceMapBuilder("out.js", "in.tsx")
        builder.add_line()
        builder.add_line()
        builder.add_line((1, 1))
        assert builder.mappings() == ";;AAAA"

    def test_relative_deltas(self):
        """Test line and column deltas are relative to the previous segment"""
        builder = SourceMapBuilder("out.js", "in.tsx")
        builder.add_line((3, 5))
        builder.add_line((3, 5))
        builder.add_line((1, 1))
        groups = builder.mappings().split(";")
        assert [decode_vlq(g) for g in groups] == [[0, 0, 2, 4], [0, 0, 0, 0], [0, 0, -2, -4]]

    def test_build_shape(self):
        data = SourceMapBuilder("App.tsx.js", "src/App.tsx").build()
        assert data == {
            "version": 3,
            "file": "App.tsx.js",
            "sources": ["src/App.tsx"],
            "names": [],
            "mappings": "",
        }


class TestGeneratedSourceMap:

    def test_map_for_two_components(self):
        """Test one segment per emitted component line"""
        ast = parse('Text("a")\nButton("b")')
        result = generate(ast, CodegenOptions(source_maps=True, source_file="src/App.tsx"))

        source_map = result.map
        assert source_map["version"] == 3
        assert source_map["sources"] == ["src/App.tsx"]
        assert source_map["file"] == "App.tsx.js"
        assert source_map["mappings"] == ";;;;AAAA;AAAA;AAAA;AAAA;;AACA;AAAA;AAAA;AAAA;"

    def test_one_group_per_generated_line(self):
        ast = parse('VStack { Text("a").padding() }')
        result = generate(ast, CodegenOptions(source_maps=True, source_file="a.tsx"))

        groups = result.map["mappings"].split(";")
        assert len(groups) == len(result.code.split("\n"))
        mapped = [g for g in groups if g]
        code_lines = [ln for ln in result.code.split("\n")[4:] if ln]
        assert len(mapped) == len(code_lines)

    def test_nested_component_points_at_its_own_line(self):
        ast = parse('VStack {\n  Text("a")\n}')
        result = generate(ast, CodegenOptions(source_maps=True, source_file="a.tsx"))

        lines = result.code.split("\n")
        groups = result.map["mappings"].split(";")
        text_line = lines.index("// Text component")

        line = column = 0
        for group in groups[:text_line + 1]:
            if group:
                _, _, dl, dc = decode_vlq(group)
                line += dl
                column += dc
        assert (line, column) == (1, 2)
