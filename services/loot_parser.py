"""Parser for loot table documents.

A loot table is a RON sequence of ``(weight, spec)`` tuples::

    #![enable(implicit_some)]
    [
        (3.0, Item("common.items.food.apple")),
        (1, ItemQuantity("common.items.utility.coins", 10, 50)),
        (0.5, LootTable("common.loot_tables.dungeon.tier-0.boss")),
        (2.0, Nothing),   // trailing commas and comments are allowed
    ]

Only the four tags shown above are accepted.  Anything else raises
:class:`~core.errors.MalformedDocument`.
"""

from __future__ import annotations

import math
import re
from typing import List, Union

from core.errors import MalformedDocument
from core.outcome import Outcome
from models import Empty, Item, ItemWithQuantity, LootEntry, LootSpec, LootTableReference

_WS = re.compile(r"(?:\s+|//[^\n]*|/\*.*?\*/)+", re.S)
_ATTRIBUTE = re.compile(r"#!\[[^\]]*\]")
_IDENT = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")
_NUMBER = re.compile(r"[+-]?(?:\d[\d_]*(?:\.[\d_]*)?|\.\d[\d_]*)(?:[eE][+-]?\d+)?")
_UINT = re.compile(r"\d[\d_]*")
_ESCAPES = {'"': '"', "\\": "\\", "/": "/", "n": "\n", "t": "\t", "r": "\r", "0": "\0"}


class _Scanner:
    def __init__(self, text: str):
        self.text = text
        self.pos = 0

    def skip(self) -> None:
        while True:
            m = _WS.match(self.text, self.pos) or _ATTRIBUTE.match(self.text, self.pos)
            if not m or m.end() == self.pos:
                return
            self.pos = m.end()

    def peek(self) -> str:
        self.skip()
        return self.text[self.pos:self.pos + 1]

    def accept(self, ch: str) -> bool:
        if self.peek() == ch:
            self.pos += 1
            return True
        return False

    def expect(self, ch: str) -> None:
        if not self.accept(ch):
            found = self.peek() or "end of document"
            raise MalformedDocument(f"expected {ch!r}, found {found!r}", self.pos)

    def match(self, pattern: "re.Pattern[str]", what: str) -> str:
        self.skip()
        m = pattern.match(self.text, self.pos)
        if not m:
            raise MalformedDocument(f"expected {what}", self.pos)
        self.pos = m.end()
        return m.group(0)

    def ident(self) -> str:
        return self.match(_IDENT, "tag name")

    def number(self) -> float:
        start = self.pos
        raw = self.match(_NUMBER, "weight").replace("_", "")
        value = float(raw)
        if not math.isfinite(value):
            raise MalformedDocument("weight is not finite", start)
        return value

    def uint(self) -> int:
        return int(self.match(_UINT, "unsigned integer").replace("_", ""))

    def string(self) -> str:
        self.skip()
        start = self.pos
        if self.text.startswith("r", self.pos):
            return self._raw_string()
        self.expect('"')
        out: List[str] = []
        text = self.text
        i = self.pos
        while i < len(text):
            ch = text[i]
            if ch == '"':
                self.pos = i + 1
                return "".join(out)
            if ch == "\\":
                esc = text[i + 1:i + 2]
                if esc == "u" and text.startswith("{", i + 2):
                    end = text.find("}", i + 3)
                    if end < 0:
                        break
                    try:
                        out.append(chr(int(text[i + 3:end], 16)))
                    except (ValueError, OverflowError):
                        raise MalformedDocument("bad unicode escape", i) from None
                    i = end + 1
                    continue
                if esc not in _ESCAPES:
                    raise MalformedDocument(f"bad escape \\{esc}", i)
                out.append(_ESCAPES[esc])
                i += 2
                continue
            out.append(ch)
            i += 1
        raise MalformedDocument("unterminated string", start)

    def _raw_string(self) -> str:
        m = re.compile(r'r(#*)"').match(self.text, self.pos)
        if not m:
            raise MalformedDocument("expected string", self.pos)
        closing = '"' + m.group(1)
        end = self.text.find(closing, m.end())
        if end < 0:
            raise MalformedDocument("unterminated raw string", self.pos)
        self.pos = end + len(closing)
        return self.text[m.end():end]

    def at_end(self) -> bool:
        self.skip()
        return self.pos >= len(self.text)


def _parse_spec(sc: _Scanner) -> LootSpec:
    at = sc.pos
    tag = sc.ident()
    if tag == "Nothing":
        return Empty()
    if tag not in ("Item", "ItemQuantity", "LootTable"):
        raise MalformedDocument(f"unknown loot tag {tag!r}", at)
    sc.expect("(")
    ident = sc.string()
    if tag == "ItemQuantity":
        sc.expect(",")
        low = sc.uint()
        sc.expect(",")
        high = sc.uint()
        if low > high:
            raise MalformedDocument(f"quantity range {low}..{high} is inverted", at)
        spec: LootSpec = ItemWithQuantity(ident, low, high)
    elif tag == "Item":
        spec = Item(ident)
    else:
        spec = LootTableReference(ident)
    sc.accept(",")
    sc.expect(")")
    return spec


def _parse_entry(sc: _Scanner) -> LootEntry:
    sc.expect("(")
    at = sc.pos
    weight = sc.number()
    if weight < 0:
        raise MalformedDocument(f"negative weight {weight}", at)
    sc.expect(",")
    spec = _parse_spec(sc)
    sc.accept(",")
    sc.expect(")")
    return LootEntry(weight, spec)


def parse_loot_table(raw: Union[bytes, str]) -> List[LootEntry]:
    """Decode a loot table document into its weighted entries, in order."""
    if isinstance(raw, bytes):
        try:
            raw = raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise MalformedDocument(f"document is not UTF-8 ({e.reason})", e.start) from e
    sc = _Scanner(raw.lstrip("\ufeff"))
    sc.expect("[")
    entries: List[LootEntry] = []
    while not sc.accept("]"):
        entries.append(_parse_entry(sc))
        if not sc.accept(","):
            sc.expect("]")
            break
    if not sc.at_end():
        raise MalformedDocument("trailing data after loot table", sc.pos)
    return entries


def try_parse_loot_table(raw: Union[bytes, str]) -> Outcome[List[LootEntry]]:
    return Outcome.capture(lambda: parse_loot_table(raw))


__all__ = ["parse_loot_table", "try_parse_loot_table"]
