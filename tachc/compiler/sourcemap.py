"""
Source map v3 support: base64 VLQ encoding and a line-oriented builder.

The generator maps whole lines: each emitted line either points at the
component it was produced for or carries no mapping at all.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple

_BASE64 = "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789+/"
_BASE64_INDEX = {ch: i for i, ch in enumerate(_BASE64)}

_VLQ_SHIFT = 5
_VLQ_MASK = (1 << _VLQ_SHIFT) - 1
_VLQ_CONTINUATION = 1 << _VLQ_SHIFT


def encode_vlq(value: int) -> str:
    """Base64 VLQ for a single signed integer (0 → "A", -1 → "D", 16 → "gB")."""
    vlq = ((-value) << 1) | 1 if value < 0 else value << 1
    out: List[str] = []
    while True:
        digit = vlq & _VLQ_MASK
        vlq >>= _VLQ_SHIFT
        if vlq:
            digit |= _VLQ_CONTINUATION
        out.append(_BASE64[digit])
        if not vlq:
            return "".join(out)


def decode_vlq(segment: str) -> List[int]:
    """Decodes every value packed into one mapping segment."""
    values: List[int] = []
    shift = 0
    accum = 0
    for ch in segment:
        digit = _BASE64_INDEX[ch]
        accum |= (digit & _VLQ_MASK) << shift
        if digit & _VLQ_CONTINUATION:
            shift += _VLQ_SHIFT
            continue
        negative = accum & 1
        accum >>= 1
        values.append(-accum if negative else accum)
        shift = 0
        accum = 0
    if shift:
        raise ValueError(f"Truncated VLQ segment: {segment!r}")
    return values


class SourceMapBuilder:
    """
    Accumulates per-line origins and renders a v3 source map.

    Origins are 1-based (line, column) pairs as stored on AST nodes;
    the map itself uses 0-based positions with relative deltas.
    """

    def __init__(self, file: str, source: str):
        self.file = file
        self.source = source
        self._lines: List[Optional[Tuple[int, int]]] = []

    def add_line(self, origin: Optional[Tuple[int, int]] = None) -> None:
        self._lines.append(origin)

    def mappings(self) -> str:
        groups: List[str] = []
        prev_line = 0
        prev_column = 0
        for origin in self._lines:
            if origin is None:
                groups.append("")
                continue
            line, column = origin[0] - 1, origin[1] - 1
            # [generated column, source index, source line, source column]
            groups.append(
                encode_vlq(0)
                + encode_vlq(0)
                + encode_vlq(line - prev_line)
                + encode_vlq(column - prev_column)
            )
            prev_line, prev_column = line, column
        return ";".join(groups)

    def build(self) -> Dict[str, Any]:
        return {
            "version": 3,
            "file": self.file,
            "sources": [self.source],
            "names": [],
            "mappings": self.mappings(),
        }


__all__ = ["encode_vlq", "decode_vlq", "SourceMapBuilder"]
