import re

from prompt_toolkit.lexers import Lexer

# colors handed out to command names in registry order
PALETTE = ("#56b6c2", "#98c379", "#e5c07b", "#c678dd", "#61afef", "#d19a66")
UNKNOWN_STYLE = "fg:#e06c75"
ARG_STYLE = ""

_COMMAND_LINE = re.compile(r"^(\s*)(\S+)(.*)$", re.DOTALL)


class CommandLexer(Lexer):
    """Color the command word of a line: its own color if known, red if not."""

    def __init__(self, words):
        self.styles = {
            word.lower(): f"fg:{PALETTE[i % len(PALETTE)]} bold"
            for i, word in enumerate(words)
        }

    def style_for(self, word: str) -> str:
        return self.styles.get(word.lower(), UNKNOWN_STYLE)

    def lex_document(self, document):
        lines = document.lines

        def get_line(lineno):
            m = _COMMAND_LINE.match(lines[lineno])
            if m is None:
                return [(ARG_STYLE, lines[lineno])] if lines[lineno] else []
            indent, word, rest = m.groups()
            fragments = [(ARG_STYLE, indent)] if indent else []
            fragments.append((self.style_for(word), word))
            if rest:
                fragments.append((ARG_STYLE, rest))
            return fragments

        return get_line
