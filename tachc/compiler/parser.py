"""
Парсер декларативной разметки с рекурсивным спуском.

Строит лес узлов ComponentNode из последовательности токенов.

Грамматика:
program    → (component | skipped_token)*
component  → IDENTIFIER ("(" args? ")")? ("{" component* "}")? modifier*
             (обязательна хотя бы одна из частей: аргументы или блок)
modifier   → "." IDENTIFIER "(" args? ")"
args       → arg ("," arg)* ","?
arg        → STRING | "-"? NUMBER | IDENTIFIER ("." IDENTIFIER)*

Точечные ссылки (store.count) принимаются только в extended-профиле.
На верхнем уровне всё, что не начинает компонент, считается хост-кодом
и пропускается. Ошибка в компоненте верхнего уровня отбрасывает только
этот компонент.
"""

from __future__ import annotations

import logging
from typing import FrozenSet, List, Union

from .lexer import EXTENDED, MarkupLexer, Token, profile_for
from .model import (
    ComponentNode,
    Expression,
    IdentifierNode,
    LiteralNode,
    ModifierCall,
    ParseDiagnostic,
    ParseResult,
)

logger = logging.getLogger(__name__)

# Компоненты, которые распознаются на верхнем уровне обычных исходников
KNOWN_COMPONENTS: FrozenSet[str] = frozenset({
    "VStack", "HStack", "ZStack", "List", "Form",
    "Text", "Button", "Image", "TextField", "Toggle",
})

# Перед этими словами идентификатор с "(" не является вызовом компонента
_DECLARATION_KEYWORDS: FrozenSet[str] = frozenset({
    "new", "function", "class", "interface", "type", "enum", "extends", "implements",
})

_ESCAPES = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "\\": "\\",
    '"': '"',
    "'": "'",
}


class ParseError(Exception):
    """Ошибка разбора разметки."""

    def __init__(self, message: str, position: int):
        self.message = message
        self.position = position
        super().__init__(f"Parse error at position {position}: {message}")


class MarkupParser:
    """
    Парсер разметки с рекурсивным спуском.

    Экземпляр одноразовый по состоянию: каждый вызов parse() заново
    токенизирует вход и не хранит ничего между вызовами.
    """

    def __init__(self, filename: str = ""):
        self.filename = filename
        self.profile = profile_for(filename)
        self.lexer = MarkupLexer(self.profile)
        self._source = ""
        self._tokens: List[Token] = []
        self._position = 0
        self._diagnostics: List[ParseDiagnostic] = []

    def parse(self, source: str) -> ParseResult:
        """
        Разбирает исходник в лес компонентов.

        Ошибки разбора не пробрасываются: результат содержит уцелевшие
        компоненты и по диагностике на каждый отброшенный.
        """
        self._source = source or ""
        self._tokens = self.lexer.tokenize(self._source)
        self._position = 0
        self._diagnostics = []

        try:
            nodes = self._parse_program()
        except RecursionError:
            diagnostic = self._diagnostic("Component nesting is too deep", self._current_position())
            logger.debug("Markup parse failed in %s: %s", self.filename or "<source>", diagnostic)
            return ParseResult(nodes=[], diagnostics=[diagnostic])

        return ParseResult(nodes=nodes, diagnostics=list(self._diagnostics))

    def _parse_program(self) -> List[ComponentNode]:
        """
        Разбирает верхний уровень.

        Ошибка внутри компонента верхнего уровня отбрасывает только этот
        компонент: разбор продолжается с токена, на котором она произошла,
        как с хост-кода. Так `Text(x) { return x }` в теле класса не
        мешает найти разметку ниже по файлу.
        """
        nodes: List[ComponentNode] = []
        while not self._is_at_end():
            if not self._is_top_level_component_start():
                # Хост-код: пропускаем токен
                self._advance()
                continue

            start = self._position
            try:
                nodes.append(self._parse_component())
            except ParseError as e:
                diagnostic = self._diagnostic(e.message, e.position)
                logger.debug("Markup parse failed in %s: %s", self.filename or "<source>", diagnostic)
                self._diagnostics.append(diagnostic)
                self._position = max(self._position, start + 1)
        return nodes

    def _parse_component(self) -> ComponentNode:
        """Разбирает вызов компонента вместе с блоком и цепочкой модификаторов."""
        name_token = self._consume_identifier("Expected component name")
        line, column = self._line_col(name_token.position)
        children: List[Union[ComponentNode, Expression]] = []

        has_arguments = self._match_symbol("(")
        if has_arguments:
            children.extend(self._parse_arguments())

        has_block = self._match_symbol("{")
        if has_block:
            children.extend(self._parse_block(name_token.text))

        if not has_arguments and not has_block:
            raise ParseError(
                f"Expected '(' or '{{' after component '{name_token.text}'",
                self._current_position(),
            )

        modifiers: List[ModifierCall] = []
        while self._check_symbol("."):
            modifiers.append(self._parse_modifier())

        return ComponentNode(
            name=name_token.text,
            children=children,
            modifiers=modifiers,
            line=line,
            column=column,
        )

    def _parse_block(self, owner: str) -> List[ComponentNode]:
        """Разбирает содержимое {...}; открывающая скобка уже поглощена."""
        components: List[ComponentNode] = []
        while not self._match_symbol("}"):
            if self._is_at_end():
                raise ParseError(f"Expected '}}' to close '{owner}' block", self._current_position())
            if not self._is_block_component_start():
                current = self._current_token()
                raise ParseError(f"Expected component call, got '{current.text}'", current.position)
            components.append(self._parse_component())
        return components

    def _parse_modifier(self) -> ModifierCall:
        """Разбирает .name(args); точка ещё не поглощена."""
        self._advance()  # '.'
        name_token = self._consume_identifier("Expected modifier name after '.'")
        if not self._match_symbol("("):
            raise ParseError(
                f"Expected '(' after modifier '{name_token.text}'",
                self._current_position(),
            )
        return ModifierCall(name=name_token.text, arguments=self._parse_arguments())

    def _parse_arguments(self) -> List[Expression]:
        """Разбирает список аргументов; '(' уже поглощена, ')' поглощается здесь."""
        args: List[Expression] = []
        if self._match_symbol(")"):
            return args

        while True:
            args.append(self._parse_argument())
            if self._match_symbol(","):
                # Допускаем висячую запятую
                if self._match_symbol(")"):
                    return args
                continue
            if self._match_symbol(")"):
                return args
            current = self._current_token()
            if current.kind == 'EOF':
                raise ParseError("Expected ')' to close argument list", current.position)
            raise ParseError(f"Expected ',' or ')', got '{current.text}'", current.position)

    def _parse_argument(self) -> Expression:
        current = self._current_token()

        if current.kind == 'STRING':
            self._advance()
            return LiteralNode(value=self._decode_string(current))

        negative = current.kind == 'UNKNOWN' and current.text == "-" and self._peek(1).kind == 'NUMBER'
        if negative:
            self._advance()
            current = self._current_token()

        if current.kind == 'NUMBER':
            self._advance()
            text = current.text
            value = float(text) if "." in text else int(text)
            return LiteralNode(value=-value if negative else value)

        if current.kind == 'IDENTIFIER':
            self._advance()
            parts = [current.text]
            if self.profile == EXTENDED:
                while self._check_symbol(".") and self._peek(1).kind == 'IDENTIFIER':
                    self._advance()
                    parts.append(self._advance().text)
            return IdentifierNode(name=".".join(parts))

        if current.kind == 'TEMPLATE':
            raise ParseError("Template literals are not supported as arguments", current.position)
        if current.kind == 'EOF':
            raise ParseError("Unexpected end of input in argument list", current.position)
        raise ParseError(f"Unexpected token '{current.text}' in argument list", current.position)

    @staticmethod
    def _decode_string(token: Token) -> str:
        raw = token.text
        quote = raw[0]
        if len(raw) < 2 or raw[-1] != quote or _ends_with_escape(raw[1:-1]):
            raise ParseError("Unterminated string literal", token.position)

        body = raw[1:-1]
        out: List[str] = []
        i = 0
        while i < len(body):
            ch = body[i]
            if ch == "\\" and i + 1 < len(body):
                nxt = body[i + 1]
                out.append(_ESCAPES.get(nxt, nxt))
                i += 2
            else:
                out.append(ch)
                i += 1
        return "".join(out)

    # Распознавание начала компонента

    def _is_top_level_component_start(self) -> bool:
        current = self._current_token()
        if current.kind != 'IDENTIFIER':
            return False
        if self.profile == EXTENDED:
            if not current.text[:1].isupper():
                return False
        elif current.text not in KNOWN_COMPONENTS:
            return False

        previous = self._peek(-1)
        if previous.kind == 'SYMBOL' and previous.text == ".":
            return False
        if previous.kind == 'IDENTIFIER' and previous.text in _DECLARATION_KEYWORDS:
            return False

        return self._opens_call(self._peek(1))

    def _is_block_component_start(self) -> bool:
        current = self._current_token()
        return (
            current.kind == 'IDENTIFIER'
            and current.text[:1].isupper()
            and self._opens_call(self._peek(1))
        )

    @staticmethod
    def _opens_call(token: Token) -> bool:
        return token.kind == 'SYMBOL' and token.text in ("(", "{")

    # Вспомогательные методы для работы с токенами

    def _current_token(self) -> Token:
        return self._peek(0)

    def _peek(self, offset: int) -> Token:
        """Токен со смещением от текущего; за границами: EOF (вперёд) или пустой SYMBOL (назад)."""
        index = self._position + offset
        if index < 0:
            return Token(kind='SYMBOL', text='', position=0)
        if index >= len(self._tokens):
            return self._tokens[-1]
        return self._tokens[index]

    def _current_position(self) -> int:
        return self._current_token().position

    def _is_at_end(self) -> bool:
        return self._current_token().kind == 'EOF'

    def _advance(self) -> Token:
        token = self._current_token()
        if not self._is_at_end():
            self._position += 1
        return token

    def _check_symbol(self, symbol: str) -> bool:
        current = self._current_token()
        return current.kind == 'SYMBOL' and current.text == symbol

    def _match_symbol(self, symbol: str) -> bool:
        if self._check_symbol(symbol):
            self._advance()
            return True
        return False

    def _consume_identifier(self, error_message: str) -> Token:
        current = self._current_token()
        if current.kind == 'IDENTIFIER':
            return self._advance()
        raise ParseError(error_message, current.position)

    def _line_col(self, position: int) -> tuple[int, int]:
        line = self._source.count("\n", 0, position) + 1
        last_newline = self._source.rfind("\n", 0, position)
        return line, position - last_newline

    def _diagnostic(self, message: str, position: int) -> ParseDiagnostic:
        line, column = self._line_col(position)
        return ParseDiagnostic(message=message, position=position, line=line, column=column)


def _ends_with_escape(body: str) -> bool:
    """True, если строка оканчивается неспаренным обратным слэшем (закрывающая кавычка экранирована)."""
    trailing = len(body) - len(body.rstrip("\\"))
    return trailing % 2 == 1


def parse_with_diagnostics(source: str, filename: str = "") -> ParseResult:
    """Разбор с диагностикой ошибок."""
    return MarkupParser(filename).parse(source)


def parse(source: str, filename: str = "") -> List[ComponentNode]:
    """
    Разбор исходника в лес компонентов (fail-soft).

    Возвращает компоненты, разобранные без ошибок; отброшенные участки
    видны только через parse_with_diagnostics().
    """
    return parse_with_diagnostics(source, filename).nodes


__all__ = [
    "KNOWN_COMPONENTS",
    "MarkupParser",
    "ParseError",
    "parse",
    "parse_with_diagnostics",
]
