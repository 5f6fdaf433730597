"""
Tests for the markup lexer.
"""

from tachc.compiler.lexer import EXTENDED, PLAIN, MarkupLexer, profile_for, tokenize


def kinds(tokens):
    return [t.kind for t in tokens]


class TestMarkupLexer:

    def setup_method(self):
        self.lexer = MarkupLexer()

    def test_empty_string(self):
        """Test tokenization of empty string"""
        tokens = self.lexer.tokenize("")
        assert len(tokens) == 1
        assert tokens[0].kind == 'EOF'

    def test_whitespace_and_comments_ignored(self):
        """Test whitespace and both comment forms are skipped"""
        tokens = self.lexer.tokenize("  // line comment\n /* block\ncomment */ \t")
        assert kinds(tokens) == ['EOF']

    def test_component_call(self):
        """Test tokens of a simple component call"""
        tokens = self.lexer.tokenize('Text("Hello")')
        assert kinds(tokens) == ['IDENTIFIER', 'SYMBOL', 'STRING', 'SYMBOL', 'EOF']
        assert tokens[0].text == "Text"
        assert tokens[2].text == '"Hello"'

    def test_symbols(self):
        """Test recognition of all symbols"""
        tokens = self.lexer.tokenize("(){}.,")
        assert kinds(tokens) == ['SYMBOL'] * 6 + ['EOF']
        assert [t.text for t in tokens[:-1]] == ["(", ")", "{", "}", ".", ","]

    def test_numbers(self):
        """Test integer and decimal numbers"""
        tokens = self.lexer.tokenize("8 0.5 42")
        assert kinds(tokens) == ['NUMBER', 'NUMBER', 'NUMBER', 'EOF']
        assert [t.text for t in tokens[:-1]] == ["8", "0.5", "42"]

    def test_strings_with_escapes(self):
        """Test both quote styles and escaped quotes"""
        tokens = self.lexer.tokenize(r'"say \"hi\"" ' + r"'it\'s'")
        assert kinds(tokens) == ['STRING', 'STRING', 'EOF']
        assert tokens[0].text == r'"say \"hi\""'
        assert tokens[1].text == r"'it\'s'"

    def test_template_literal(self):
        """Test backtick strings are a single TEMPLATE token"""
        tokens = self.lexer.tokenize("`a ${b} c`")
        assert kinds(tokens) == ['TEMPLATE', 'EOF']

    def test_positions(self):
        """Test token positions are offsets into the source"""
        tokens = self.lexer.tokenize("  Text(1)")
        assert [t.position for t in tokens] == [2, 6, 7, 8, 9]

    def test_unknown_characters(self):
        """Test unknown characters become UNKNOWN tokens instead of raising"""
        tokens = self.lexer.tokenize("a = b;")
        assert kinds(tokens) == ['IDENTIFIER', 'UNKNOWN', 'IDENTIFIER', 'UNKNOWN', 'EOF']

    def test_unterminated_string_runs_to_end(self):
        """Test unterminated string consumes the rest of input"""
        tokens = self.lexer.tokenize('Text("abc')
        assert kinds(tokens) == ['IDENTIFIER', 'SYMBOL', 'STRING', 'EOF']
        assert tokens[2].text == '"abc'

    def test_unterminated_string_stops_at_newline(self):
        """Test a stray quote in host code does not swallow the following lines"""
        tokens = self.lexer.tokenize("const re = /'/g\nVStack")
        strings = [t for t in tokens if t.kind == 'STRING']
        assert [t.text for t in strings] == ["'/g"]
        assert tokens[-2].kind == 'IDENTIFIER'
        assert tokens[-2].text == "VStack"

    def test_escaped_newline_continues_string(self):
        """Test backslash-newline keeps the string open"""
        tokens = self.lexer.tokenize('"a\\\nb"')
        assert kinds(tokens) == ['STRING', 'EOF']

    def test_unterminated_comment_runs_to_end(self):
        """Test unterminated block comment is skipped to the end"""
        tokens = self.lexer.tokenize("Text /* never closed")
        assert kinds(tokens) == ['IDENTIFIER', 'EOF']

    def test_dollar_identifier_only_in_extended_profile(self):
        """Test $-prefixed bindings are identifiers only in the extended profile"""
        plain = MarkupLexer(PLAIN).tokenize("$count")
        assert kinds(plain) == ['UNKNOWN', 'IDENTIFIER', 'EOF']

        extended = MarkupLexer(EXTENDED).tokenize("$count")
        assert kinds(extended) == ['IDENTIFIER', 'EOF']
        assert extended[0].text == "$count"


def test_profile_for_filename():
    assert profile_for("App.tui.tsx") == EXTENDED
    assert profile_for("src/Counter.tui.ts") == EXTENDED
    assert profile_for("widget.tui.jsx") == EXTENDED
    assert profile_for("App.tsx") == PLAIN
    assert profile_for("tui.ts") == PLAIN
    assert profile_for("") == PLAIN


def test_module_tokenize_uses_filename_profile():
    assert kinds(tokenize("$x", "a.tui.ts")) == ['IDENTIFIER', 'EOF']
    assert kinds(tokenize("$x", "a.ts")) == ['UNKNOWN', 'IDENTIFIER', 'EOF']
