"""Tests for prompt highlighting."""

from __future__ import annotations

from prompt_toolkit.document import Document

from polarysdb_cli import commands
from polarysdb_cli.lexer import UNKNOWN_STYLE, CommandLexer


def _tokens(text: str) -> list[tuple[str, str]]:
    lexer = CommandLexer(commands.names())
    return lexer.lex_document(Document(text))(0)


class TestCommandLexer:
    def test_highlights_command(self) -> None:
        tokens = _tokens("init secret ./db.dat")
        assert tokens[0][1] == "init"
        assert tokens[0][0].startswith("fg:#")
        assert tokens[1] == ("", " secret ./db.dat")

    def test_hyphenated_command_is_one_word(self) -> None:
        tokens = _tokens("export-encrypted k p")
        assert tokens[0][1] == "export-encrypted"
        assert tokens[0][0] != UNKNOWN_STYLE

    def test_colors_are_stable(self) -> None:
        assert _tokens("help")[0][0] == _tokens("HELP")[0][0]

    def test_unknown_command(self) -> None:
        assert _tokens("reinit x") == [(UNKNOWN_STYLE, "reinit"), ("", " x")]

    def test_only_the_command_word_is_colored(self) -> None:
        assert _tokens("key-from help")[1] == ("", " help")

    def test_leading_space_and_blank_lines(self) -> None:
        tokens = _tokens("  version")
        assert tokens[0] == ("", "  ")
        assert tokens[1][1] == "version"
        assert _tokens("") == []
        assert _tokens("   ") == [("", "   ")]
