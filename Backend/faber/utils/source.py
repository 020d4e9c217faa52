# faber/utils/source.py
"""
Lightweight helpers for scanning JS/TS source text without a parser.

Masking functions replace characters with spaces but keep newlines, so
offsets into the masked text map 1:1 onto the original.
"""
import re
from typing import Optional, Tuple

SCRIPT_EXTENSIONS = (".js", ".jsx", ".ts", ".tsx", ".mjs", ".cjs")

_BLOCK_COMMENT = re.compile(r"/\*.*?\*/", re.DOTALL)
# `//` after ':' or a quote is a URL or string, not a comment
_LINE_COMMENT = re.compile(r"(?<![:\"'\w\\])//[^\n]*")
_STRING_LITERAL = re.compile(
    r"'(?:\\.|[^'\\\n])*'"
    r"|\"(?:\\.|[^\"\\\n])*\""
    r"|`(?:\\.|[^`\\])*`"
)


def _blank(match: "re.Match") -> str:
    return _blank_text(match.group(0))


def mask_comments(text: str) -> str:
    return _LINE_COMMENT.sub(_blank, _BLOCK_COMMENT.sub(_blank, text))


def mask_strings(text: str) -> str:
    """Blank out the inside of string literals, keeping the quotes."""
    def inner(match: "re.Match") -> str:
        value = match.group(0)
        return value[0] + _blank_text(value[1:-1]) + value[-1]
    return _STRING_LITERAL.sub(inner, text)


def _blank_text(text: str) -> str:
    return re.sub(r"[^\n]", " ", text)


def position(text: str, offset: int) -> Tuple[int, int]:
    """1-based (line, column) of an offset."""
    line = text.count("\n", 0, offset) + 1
    last_newline = text.rfind("\n", 0, offset)
    return line, offset - last_newline


def is_script(path: str) -> bool:
    name = path.rsplit("/", 1)[-1]
    return "." not in name or name.lower().endswith(SCRIPT_EXTENSIONS)


def is_typescript(path: str) -> bool:
    return path.lower().endswith((".ts", ".tsx"))


def balanced_end(text: str, open_idx: int) -> Optional[int]:
    """
    Index just past the bracket that closes the one at `open_idx`.

    Skips over quoted strings. Returns None when the text ends first.
    """
    pairs = {"{": "}", "(": ")", "[": "]"}
    opener = text[open_idx]
    closer = pairs[opener]
    depth = 0
    quote = None
    i = open_idx
    while i < len(text):
        ch = text[i]
        if quote:
            if ch == "\\":
                i += 2
                continue
            if ch == quote:
                quote = None
        elif ch in "\"'`":
            quote = ch
        elif ch == opener:
            depth += 1
        elif ch == closer:
            depth -= 1
            if depth == 0:
                return i + 1
        i += 1
    return None
