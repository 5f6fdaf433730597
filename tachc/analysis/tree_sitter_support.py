"""
Tree-sitter infrastructure for the source analyzer.
Provides grammar selection, parsing, traversal and text utilities.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import PurePosixPath
from typing import Iterator, List, Optional, Tuple

import tree_sitter_typescript as tsts
from tree_sitter import Language, Node, Parser, Tree

# Both grammars ship in one package; build them once per process
TS_LANGUAGE = Language(tsts.language_typescript())
TSX_LANGUAGE = Language(tsts.language_tsx())

_TS_EXTENSIONS = frozenset({"ts", "mts", "cts"})


class TreeSitterDocument(ABC):
    """
    Wrapper for a Tree-sitter parsed document.
    """

    def __init__(self, text: str, ext: str):
        self.text = text
        self.ext = ext
        self.tree: Optional[Tree] = None
        self._text_bytes = text.encode('utf-8')
        self._parse()

    @abstractmethod
    def get_language(self) -> Language:
        """
        Get Language instance for this document.

        Returns:
            Language instance
        """
        pass

    def get_parser(self) -> Parser:
        return Parser(self.get_language())

    def _parse(self):
        """Parse the document with Tree-sitter."""
        parser = self.get_parser()
        self.tree = parser.parse(self._text_bytes)

    @property
    def root_node(self) -> Node:
        """Get the root node of the parsed tree."""
        if not self.tree:
            raise RuntimeError("Document not parsed")
        return self.tree.root_node

    def walk_tree(self, start_node: Optional[Node] = None) -> Iterator[Node]:
        """
        Walk the tree using TreeCursor for efficient traversal.

        Args:
            start_node: Node to start from (default: root)

        Yields:
            Node objects in depth-first order
        """
        if start_node is None:
            start_node = self.root_node

        cursor = start_node.walk()
        visited_children = False

        while True:
            if not visited_children:
                yield cursor.node

                if not cursor.goto_first_child():
                    visited_children = True
            elif cursor.goto_next_sibling():
                visited_children = False
            elif not cursor.goto_parent():
                break
            else:
                visited_children = True

    def find_nodes_by_type(self, node_type: str, start_node: Optional[Node] = None) -> List[Node]:
        """All nodes of a specific type under start_node (default: root)."""
        return [node for node in self.walk_tree(start_node) if node.type == node_type]

    def get_node_text(self, node: Node) -> str:
        """Get text content for a node."""
        return self._text_bytes[node.start_byte:node.end_byte].decode('utf-8')

    def get_node_range(self, node: Node) -> Tuple[int, int]:
        """Get char range for a node."""
        start_char = self.byte_to_char_position(node.start_byte)
        end_char = self.byte_to_char_position(node.end_byte)
        return start_char, end_char

    def has_error(self) -> bool:
        """Check if the tree has any syntax errors."""
        if not self.tree:
            return True
        return self.root_node.has_error

    def get_errors(self) -> List[Node]:
        """Get all error nodes in the tree."""
        return self.find_nodes_by_type("ERROR")

    def byte_to_char_position(self, byte_pos: int) -> int:
        """
        Correctly convert byte position to character position in Unicode text.
        Guarantees that if position points to the middle of a multi-byte character,
        returns position before that character.
        """
        if byte_pos <= 0:
            return 0
        if byte_pos >= len(self._text_bytes):
            return len(self.text)

        # UTF-8 guarantees maximum 4 bytes per character
        start = max(0, byte_pos - 4)
        for end in range(byte_pos, start - 1, -1):
            try:
                return len(self._text_bytes[:end].decode('utf-8'))
            except UnicodeDecodeError:
                continue
        return 0


class TypeScriptDocument(TreeSitterDocument):
    """TypeScript/TSX document; `.ts`-family files use the plain TS grammar."""

    def get_language(self) -> Language:
        if self.ext in _TS_EXTENSIONS:
            return TS_LANGUAGE
        return TSX_LANGUAGE


def extension_of(filename: str) -> str:
    """Lowercased extension without the dot ('' when absent)."""
    return PurePosixPath(filename or "").suffix.lstrip(".").lower()


def create_document(text: str, filename: str) -> TypeScriptDocument:
    return TypeScriptDocument(text, extension_of(filename))


__all__ = [
    "TreeSitterDocument",
    "TypeScriptDocument",
    "TS_LANGUAGE",
    "TSX_LANGUAGE",
    "create_document",
    "extension_of",
    "Node",
]
