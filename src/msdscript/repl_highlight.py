"""prompt_toolkit lexer for live MSDScript syntax highlighting in the REPL."""

from __future__ import annotations

import re
from typing import Callable

from prompt_toolkit.document import Document
from prompt_toolkit.formatted_text import StyleAndTextTuples
from prompt_toolkit.lexers import Lexer

# Map highlight groups → prompt_toolkit style strings.
GROUP_STYLE = {
    "keyword": "bold ansicyan",
    "boolean": "ansicyan",
    "number": "ansimagenta",
    "identifier": "",
    "operator": "",
    "punctuation": "",
    "error": "bold ansired",
}

KEYWORDS = frozenset(("_let", "_in", "_if", "_then", "_else", "_fun"))
BOOLEANS = frozenset(("_true", "_false"))

# Order matters: `==` must win over a lone `=`.
_TOKEN_RE = re.compile(
    r"""
    (?P<space>[ \t\r\n\v\f]+)
  | (?P<number>-?[0-9]+)
  | (?P<word>_[A-Za-z_]*)
  | (?P<identifier>[A-Za-z]+)
  | (?P<operator>==|\+|\*|=)
  | (?P<punctuation>[()])
    """,
    re.VERBOSE,
)


def _word_group(word: str) -> str:
    if word in KEYWORDS:
        return "keyword"
    if word in BOOLEANS:
        return "boolean"
    return "error"


def scan(text: str) -> list[tuple[str, str]]:
    """Split text into (group, chunk) pairs; whitespace has group ''."""
    chunks: list[tuple[str, str]] = []
    pos = 0

    while pos < len(text):
        m = _TOKEN_RE.match(text, pos)
        if m is None:
            # Unknown character: extend a preceding run of them.
            if chunks and chunks[-1][0] == "error" and not chunks[-1][1].startswith("_"):
                chunks[-1] = ("error", chunks[-1][1] + text[pos])
            else:
                chunks.append(("error", text[pos]))
            pos += 1
            continue

        kind = m.lastgroup or ""
        chunk = m.group()
        match kind:
            case "space":
                group = ""
            case "word":
                group = _word_group(chunk)
            case _:
                group = kind

        chunks.append((group, chunk))
        pos = m.end()

    return chunks


def _highlight_line(text: str) -> StyleAndTextTuples:
    """Scan a single line and return styled fragments."""
    if not text:
        return [("", "")]

    return [(GROUP_STYLE.get(group, ""), chunk) for group, chunk in scan(text)]


class MsdLexer(Lexer):
    """prompt_toolkit Lexer that highlights MSDScript source line by line."""

    def lex_document(self, document: Document) -> Callable[[int], StyleAndTextTuples]:
        lines = document.lines
        cache: dict[int, StyleAndTextTuples] = {}

        def get_line(lineno: int) -> StyleAndTextTuples:
            if lineno not in cache:
                if lineno < len(lines):
                    cache[lineno] = _highlight_line(lines[lineno])
                else:
                    cache[lineno] = [("", "")]

            return cache[lineno]

        return get_line
