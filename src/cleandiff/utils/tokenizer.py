# src/cleandiff/utils/tokenizer.py
import string
from typing import List

from cleandiff.config import CLOSING_BRACKETS


class UnterminatedTokenError(ValueError):
    """A string, template literal or block comment does not close."""

    def __init__(self, kind: str, position: int):
        super().__init__(f"unterminated {kind} starting at offset {position}")
        self.kind = kind
        self.position = position


IDENT_START = frozenset(string.ascii_letters + "_$")
IDENT_PART = IDENT_START | frozenset(string.digits)
DIGITS = frozenset(string.digits)
NUMBER_PART = DIGITS | frozenset("._")


def _scan_quoted(text: str, start: int, quote: str, multiline: bool) -> int:
    """Returns the offset just past the closing quote."""
    i = start + 1
    escaped = False
    while i < len(text):
        ch = text[i]
        if not multiline and ch in "\r\n":
            # Plain string literals can't span lines unescaped
            break
        if escaped:
            escaped = False
        elif ch == "\\":
            escaped = True
        elif ch == quote:
            return i + 1
        i += 1
    kind = "template literal" if multiline else "string"
    raise UnterminatedTokenError(kind, start)


def tokenize(text: str, keep_whitespace: bool = False) -> List[str]:
    """
    Splits source text into tokens: whitespace runs, string and template
    literals, line and block comments, identifiers, numbers, and single
    punctuation characters.

    Raises UnterminatedTokenError for a literal or comment that never closes.
    """
    tokens: List[str] = []
    i = 0
    n = len(text)
    while i < n:
        ch = text[i]

        if ch.isspace():
            j = i + 1
            while j < n and text[j].isspace():
                j += 1
            if keep_whitespace:
                tokens.append(text[i:j])
            i = j
            continue

        if ch == "`":
            j = _scan_quoted(text, i, ch, multiline=True)
        elif ch in "'\"":
            j = _scan_quoted(text, i, ch, multiline=False)
        elif text.startswith("//", i):
            j = i + 2
            while j < n and text[j] not in "\r\n":
                j += 1
        elif text.startswith("/*", i):
            end = text.find("*/", i + 2)
            if end == -1:
                raise UnterminatedTokenError("block comment", i)
            j = end + 2
        elif ch in IDENT_START:
            j = i + 1
            while j < n and text[j] in IDENT_PART:
                j += 1
        elif ch in DIGITS:
            j = i + 1
            while j < n and text[j] in NUMBER_PART:
                j += 1
        else:
            j = i + 1

        tokens.append(text[i:j])
        i = j
    return tokens


def is_comment(token: str) -> bool:
    return token.startswith("//") or token.startswith("/*")


def is_significant(token: str) -> bool:
    """Whitespace and comment tokens carry no meaning for the compiler."""
    return not token.isspace() and not is_comment(token)


def normalize_wrap_commas(tokens: List[str]) -> List[str]:
    """Drops commas that directly precede a closing bracket (`a, b,)` -> `a, b)`)."""
    normalized = []
    for i, token in enumerate(tokens):
        if token == "," and i + 1 < len(tokens) and tokens[i + 1] in CLOSING_BRACKETS:
            continue
        normalized.append(token)
    return normalized
