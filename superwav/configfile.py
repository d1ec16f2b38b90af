"""Reader for structured configuration files in the libconfig text format.

Groups become dicts, lists ``( ... )`` and arrays ``[ ... ]`` become Python
lists, and scalars keep their type (int, float, bool or str).
"""

from __future__ import annotations

import re
import sys
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any

DEFAULT_FILE = "example.cfg"


class ConfigError(Exception):
    """A configuration could not be read, parsed or interpreted."""

    def __init__(self, text: str, line: int | None = None, file: str | None = None) -> None:
        super().__init__(text)
        self.text = text
        self.line = line
        self.file = file

    def __str__(self) -> str:
        if self.line is None:
            return self.text if self.file is None else f"{self.file} - {self.text}"
        return f"{self.file or '<string>'}:{self.line} - {self.text}"


_LEXEME = re.compile(
    r"""
     (?P<ws>[ \t\r\n]+)
    |(?P<comment>\#[^\n]*|//[^\n]*|/\*.*?\*/)
    |(?P<float>[-+]?(?:[0-9]+\.[0-9]*|\.[0-9]+)(?:[eE][-+]?[0-9]+)?|[-+]?[0-9]+[eE][-+]?[0-9]+)
    |(?P<hex>0[xX][0-9A-Fa-f]+L{0,2})
    |(?P<int>[-+]?[0-9]+L{0,2})
    |(?P<string>"(?:[^"\\]|\\.)*")
    |(?P<name>[A-Za-z*][-A-Za-z0-9_*]*)
    |(?P<punct>[=:;,{}\[\]()])
    """,
    re.VERBOSE | re.DOTALL,
)

_ESCAPE = re.compile(r"\\(x[0-9A-Fa-f]{2}|.)", re.DOTALL)
_ESCAPES = {"n": "\n", "t": "\t", "r": "\r", "f": "\f", "\\": "\\", '"': '"'}

_SCALARS = ("int", "hex", "float", "bool", "string")


@dataclass(frozen=True)
class _Lexeme:
    kind: str
    text: str
    line: int


def _unescape(match: re.Match) -> str:
    code = match.group(1)
    if code.startswith("x") and len(code) == 3:
        return chr(int(code[1:], 16))
    return _ESCAPES.get(code, code)


def _tokenize(text: str) -> list[_Lexeme]:
    lexemes: list[_Lexeme] = []
    line = 1
    pos = 0
    while pos < len(text):
        match = _LEXEME.match(text, pos)
        if match is None:
            raise ConfigError("syntax error", line)
        kind, raw = match.lastgroup, match.group()
        if kind == "name" and raw.lower() in ("true", "false"):
            kind = "bool"
        if kind not in ("ws", "comment"):
            lexemes.append(_Lexeme(kind, raw, line))
        line += raw.count("\n")
        pos = match.end()
    lexemes.append(_Lexeme("eof", "", line))
    return lexemes


class _Parser:
    def __init__(self, lexemes: list[_Lexeme]) -> None:
        self._lexemes = lexemes
        self._pos = 0

    def _peek(self) -> _Lexeme:
        return self._lexemes[self._pos]

    def _next(self) -> _Lexeme:
        lexeme = self._lexemes[self._pos]
        if lexeme.kind != "eof":
            self._pos += 1
        return lexeme

    def _at(self, punct: str) -> bool:
        lexeme = self._peek()
        return lexeme.kind == "punct" and lexeme.text == punct

    def _expect(self, punct: str) -> None:
        lexeme = self._next()
        if lexeme.kind != "punct" or lexeme.text != punct:
            raise ConfigError("syntax error", lexeme.line)

    def parse(self) -> dict[str, Any]:
        root = self._settings(None)
        lexeme = self._peek()
        if lexeme.kind != "eof":
            raise ConfigError("syntax error", lexeme.line)
        return root

    def _settings(self, closing: str | None) -> dict[str, Any]:
        group: dict[str, Any] = {}
        while True:
            lexeme = self._peek()
            if lexeme.kind == "eof" or (closing is not None and self._at(closing)):
                return group
            name = self._next()
            if name.kind != "name":
                raise ConfigError("syntax error", name.line)
            separator = self._next()
            if separator.kind != "punct" or separator.text not in ("=", ":"):
                raise ConfigError("syntax error", separator.line)
            value = self._value()
            if name.text in group:
                raise ConfigError("duplicate setting name", name.line)
            group[name.text] = value
            if self._at(";") or self._at(","):
                self._next()

    def _value(self) -> Any:
        lexeme = self._peek()
        if self._at("{"):
            self._next()
            group = self._settings("}")
            self._expect("}")
            return group
        if self._at("["):
            return self._array()
        if self._at("("):
            return self._list()
        if lexeme.kind in _SCALARS:
            return self._scalar()
        raise ConfigError("syntax error", lexeme.line)

    def _array(self) -> list[Any]:
        self._expect("[")
        items: list[Any] = []
        while not self._at("]"):
            lexeme = self._peek()
            if lexeme.kind not in _SCALARS:
                raise ConfigError("syntax error", lexeme.line)
            value = self._scalar()
            if items and _scalar_kind(items[0]) != _scalar_kind(value):
                raise ConfigError("mismatched element type in array", lexeme.line)
            items.append(value)
            if not self._at(","):
                break
            self._next()
        self._expect("]")
        return items

    def _list(self) -> list[Any]:
        self._expect("(")
        items: list[Any] = []
        while not self._at(")"):
            items.append(self._value())
            if not self._at(","):
                break
            self._next()
        self._expect(")")
        return items

    def _scalar(self) -> Any:
        lexeme = self._next()
        if lexeme.kind == "string":
            parts = [_ESCAPE.sub(_unescape, lexeme.text[1:-1])]
            while self._peek().kind == "string":
                parts.append(_ESCAPE.sub(_unescape, self._next().text[1:-1]))
            return "".join(parts)
        if lexeme.kind == "bool":
            return lexeme.text.lower() == "true"
        if lexeme.kind == "float":
            return float(lexeme.text)
        if lexeme.kind == "hex":
            return int(lexeme.text.rstrip("L"), 16)
        return int(lexeme.text.rstrip("L"))


def _scalar_kind(value: Any) -> type:
    return type(value)


def parse(text: str) -> dict[str, Any]:
    """Parse configuration text into nested dicts and lists."""
    return _Parser(_tokenize(text)).parse()


def load(path: str | Path) -> dict[str, Any]:
    """Read and parse a configuration file."""
    try:
        text = Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigError("file I/O error", file=str(path)) from exc
    try:
        return parse(text)
    except ConfigError as exc:
        raise ConfigError(exc.text, exc.line, str(path)) from exc


def lookup(config: Any, path: str) -> Any:
    """Value at a dotted (or slash separated) path, or None if it is absent."""
    node = config
    for part in re.split(r"[./]", path):
        if isinstance(node, dict):
            if part not in node:
                return None
            node = node[part]
        elif isinstance(node, list) and part.isdigit():
            index = int(part)
            if index >= len(node):
                return None
            node = node[index]
        else:
            return None
    return node


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _section(items: Any, second: str, width: int) -> str:
    if isinstance(items, dict):
        items = list(items.values())
    if not isinstance(items, list):
        return ""
    lines = [f"{'TITLE':<30}  {second.upper():<{width}}   {'PRICE':<6}  QTY\n"]
    for record in items:
        if not isinstance(record, dict):
            continue
        title = record.get("title")
        other = record.get(second)
        price = record.get("price")
        qty = record.get("qty")
        if not (
            isinstance(title, str)
            and isinstance(other, str)
            and isinstance(price, float)
            and _is_int(qty)
        ):
            continue
        lines.append(f"{title:<30}  {other:<{width}}  ${price:6.2f}  {qty:3d}\n")
    lines.append("\n")
    return "".join(lines)


def format_inventory(config: dict[str, Any]) -> str:
    """Tables of the complete book and movie records under ``inventory``."""
    books = lookup(config, "inventory.books")
    movies = lookup(config, "inventory.movies")
    text = ""
    if books is not None:
        text += _section(books, "author", 30)
    if movies is not None:
        text += _section(movies, "media", 10)
    return text


def main(argv: Sequence[str] | None = None) -> int:
    """Print the store name and inventory of a configuration file."""
    args = list(sys.argv[1:] if argv is None else argv)
    path = args[0] if args else DEFAULT_FILE
    try:
        config = load(path)
    except ConfigError as exc:
        print(exc, file=sys.stderr)
        return 1

    name = lookup(config, "name")
    if isinstance(name, str):
        print(f"Store name: {name}\n")
    else:
        print("No 'name' setting in configuration file.", file=sys.stderr)

    sys.stdout.write(format_inventory(config))
    return 0


if __name__ == "__main__":
    sys.exit(main())