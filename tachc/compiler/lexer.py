"""
Лексер декларативной разметки.

Разбивает исходный текст на значимые элементы:
- Идентификаторы (имена компонентов, модификаторов, ссылок)
- Строковые и числовые литералы
- Символы (скобки, фигурные скобки, точка, запятая)
- Пробелы и комментарии (игнорируются)

Лексер никогда не бросает исключений: неизвестный символ становится
токеном UNKNOWN, а решение об ошибке принимает парсер.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Pattern, Tuple

# Расширения «компонентного» варианта исходников (*.tui.tsx и т.п.)
_EXTENDED_NAME_RE = re.compile(r"\.tui\.[jt]sx?$", re.IGNORECASE)

PLAIN = "plain"
EXTENDED = "extended"


def profile_for(filename: str) -> str:
    """Профиль грамматики по имени файла: extended для *.tui.*, иначе plain."""
    return EXTENDED if _EXTENDED_NAME_RE.search(filename or "") else PLAIN


@dataclass
class Token:
    """
    Токен разметки.

    Attributes:
        kind: Тип токена (IDENTIFIER, STRING, NUMBER, SYMBOL, TEMPLATE, UNKNOWN, EOF)
        text: Исходный текст токена
        position: Смещение в исходной строке
    """
    kind: str
    text: str
    position: int

    def __repr__(self):
        return f"Token({self.kind}, {self.text!r}, pos={self.position})"


class MarkupLexer:
    """
    Лексер для разбиения исходника на токены.

    Поддерживаемые токены:
    - IDENTIFIER: Text, VStack, padding, handleClick ($count в extended-профиле)
    - STRING: "..." и '...' (с escape-последовательностями)
    - TEMPLATE: `...` (распознаётся, чтобы не ломать разбор хост-кода)
    - NUMBER: 8, 0.5
    - SYMBOL: ( ) { } . ,
    - UNKNOWN: любой другой символ
    - EOF: конец строки
    """

    # Спецификация токенов: (regex_pattern, token_kind, ignore_flag)
    _COMMON_HEAD = [
        # Пробелы и комментарии (игнорируем)
        (r'\s+', 'WHITESPACE', True),
        (r'//[^\n]*', 'COMMENT', True),
        (r'/\*[\s\S]*?(?:\*/|\Z)', 'COMMENT', True),

        # Литералы; незакрытая строка тянется до конца строки исходника,
        # шаблон и блочный комментарий: до конца входа
        (r'"(?:[^"\\\n]|\\[\s\S])*"?', 'STRING', False),
        (r"'(?:[^'\\\n]|\\[\s\S])*'?", 'STRING', False),
        (r'`(?:[^`\\]|\\[\s\S])*`?', 'TEMPLATE', False),
        (r'\d+(?:\.\d+)?', 'NUMBER', False),

        # Символы
        (r'[(){}.,]', 'SYMBOL', False),
    ]

    _IDENTIFIER = {
        PLAIN: r'[A-Za-z_][A-Za-z0-9_]*',
        EXTENDED: r'[A-Za-z_$][A-Za-z0-9_$]*',
    }

    def __init__(self, profile: str = PLAIN):
        if profile not in self._IDENTIFIER:
            raise ValueError(f"Unknown lexer profile: {profile}")
        self.profile = profile
        specs = list(self._COMMON_HEAD)
        specs.append((self._IDENTIFIER[profile], 'IDENTIFIER', False))
        # Неизвестный символ: отдаём парсеру как есть
        specs.append((r'[\s\S]', 'UNKNOWN', False))
        self._compiled_patterns: List[Tuple[Pattern[str], str, bool]] = [
            (re.compile(pattern), kind, ignore)
            for pattern, kind, ignore in specs
        ]

    def tokenize(self, text: str) -> List[Token]:
        """
        Разбивает строку на токены.

        Args:
            text: Исходный текст

        Returns:
            Список токенов, включая EOF в конце
        """
        tokens: List[Token] = []
        position = 0

        while position < len(text):
            for pattern, kind, ignore in self._compiled_patterns:
                match = pattern.match(text, position)
                if match and match.end() > position:
                    if not ignore:
                        tokens.append(Token(kind=kind, text=match.group(0), position=position))
                    position = match.end()
                    break

        tokens.append(Token(kind='EOF', text='', position=position))
        return tokens


def tokenize(source: str, filename: str = "") -> List[Token]:
    """Токенизация с профилем, выбранным по имени файла."""
    return MarkupLexer(profile_for(filename)).tokenize(source or "")


__all__ = ["Token", "MarkupLexer", "tokenize", "profile_for", "PLAIN", "EXTENDED"]
