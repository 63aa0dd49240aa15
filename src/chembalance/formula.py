"""Chemical formula parser.

Formulas are read left to right by a small recursive-descent parser::

    formula := part (('·' | '*') count? part)*
    part    := term*
    term    := element count? | '(' part ')' count? | '[' part ']' count?
    element := uppercase letter, optionally followed by one lowercase letter
    count   := one or more decimal digits

Group counts multiply everything inside the group before it is merged into
the enclosing scope; merging is additive, so ``H2O2`` gives ``{H: 2, O: 2}``.
Every symbol is checked against an element registry.
"""

from __future__ import annotations

import re
import string
from types import MappingProxyType
from typing import Dict, Optional

from chembalance.constants import ADDUCT_TOKENS, GROUP_CLOSERS
from chembalance.elements import ElementRegistry, resolve_registry
from chembalance.errors import (
    EmptyFormulaError,
    FormulaSyntaxError,
    UnknownElementError,
)
from chembalance.models import ElementCount

_WHITESPACE = re.compile(r"\s+")


class _Cursor:
    """Position-tracking reader over a whitespace-free formula."""

    def __init__(self, text: str):
        self.text = text
        self.pos = 0

    def at_end(self) -> bool:
        return self.pos >= len(self.text)

    def peek(self) -> str:
        return self.text[self.pos]

    def advance(self) -> str:
        char = self.text[self.pos]
        self.pos += 1
        return char

    def read_count(self) -> Optional[int]:
        start = self.pos
        while not self.at_end() and self.peek() in string.digits:
            self.pos += 1
        if start == self.pos:
            return None
        value = int(self.text[start:self.pos])
        if value == 0:
            raise FormulaSyntaxError("Zero count", start, self.text[start:])
        return value

    def error(self, reason: str, position: Optional[int] = None) -> FormulaSyntaxError:
        position = self.pos if position is None else position
        return FormulaSyntaxError(reason, position, self.text[position:])


def parse_formula(
    formula: str, registry: Optional[ElementRegistry] = None
) -> ElementCount:
    """Parse ``formula`` into a read-only mapping of element symbol to count.

    Raises:
        EmptyFormulaError: The formula is empty or only whitespace.
        FormulaSyntaxError: A token is malformed or groups are unbalanced.
        UnknownElementError: A symbol is not present in the registry.
    """
    text = _WHITESPACE.sub("", formula)
    if not text:
        raise EmptyFormulaError()

    registry = resolve_registry(registry)
    cursor = _Cursor(text)
    counts = _parse_part(cursor, registry, closing=None)
    if not counts:
        raise cursor.error("No elements", 0)

    while not cursor.at_end():
        # Only adduct joiners can stop a top-level part early.
        cursor.advance()
        multiplier = cursor.read_count() or 1
        start = cursor.pos
        addend = _parse_part(cursor, registry, closing=None)
        if not addend:
            raise cursor.error("Empty addend", start)
        _merge(counts, addend, multiplier)

    return MappingProxyType(counts)


def _parse_part(
    cursor: _Cursor, registry: ElementRegistry, closing: Optional[str]
) -> Dict[str, int]:
    counts: Dict[str, int] = {}
    group_start = cursor.pos - 1

    while not cursor.at_end():
        char = cursor.peek()

        if char in GROUP_CLOSERS:
            open_pos = cursor.pos
            cursor.advance()
            inner = _parse_part(cursor, registry, closing=GROUP_CLOSERS[char])
            if not inner:
                raise cursor.error("Empty group", open_pos)
            _merge(counts, inner, cursor.read_count() or 1)
        elif char in GROUP_CLOSERS.values():
            if char != closing:
                raise cursor.error("Unmatched closing bracket")
            cursor.advance()
            return counts
        elif char in string.ascii_uppercase:
            symbol = cursor.advance()
            if not cursor.at_end() and cursor.peek() in string.ascii_lowercase:
                symbol += cursor.advance()
            if registry.lookup(symbol) is None:
                raise UnknownElementError(symbol)
            count = cursor.read_count() or 1
            counts[symbol] = counts.get(symbol, 0) + count
        elif char in ADDUCT_TOKENS and closing is None:
            return counts
        else:
            raise cursor.error("Unexpected character")

    if closing is not None:
        raise cursor.error("Unmatched opening bracket", group_start)
    return counts


def _merge(target: Dict[str, int], source: ElementCount, multiplier: int) -> None:
    for symbol, count in source.items():
        target[symbol] = target.get(symbol, 0) + count * multiplier
