"""Reaction equation parser."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Optional, Tuple

from chembalance.constants import SEPARATOR_TOKENS
from chembalance.elements import ElementRegistry, resolve_registry
from chembalance.errors import (
    ChemistryError,
    EmptyFormulaError,
    EquationFormatError,
    FormulaSyntaxError,
)
from chembalance.formula import parse_formula
from chembalance.models import Compound, ElementCount, Reaction

REACTANTS = "reactants"
PRODUCTS = "products"

_SEPARATOR = re.compile("|".join(re.escape(token) for token in SEPARATOR_TOKENS))
_WHITESPACE = re.compile(r"\s+")
_TERM = re.compile(r"^([0-9]*)(.*)$")


@dataclass(frozen=True)
class CompoundTerm:
    """One ``+``-separated term of an equation side.

    ``coefficient`` is the multiplier written in the text (1 when absent);
    ``explicit_coefficient`` records whether one was written at all.
    """

    text: str
    formula: str
    element_counts: ElementCount
    coefficient: int = 1
    explicit_coefficient: bool = False

    def to_compound(self, coefficient: Optional[int] = None) -> Compound:
        return Compound(
            formula=self.formula,
            element_counts=self.element_counts,
            coefficient=self.coefficient if coefficient is None else coefficient,
        )


@dataclass(frozen=True)
class ParsedEquation:
    reactants: Tuple[CompoundTerm, ...]
    products: Tuple[CompoundTerm, ...]

    @property
    def terms(self) -> Tuple[CompoundTerm, ...]:
        return self.reactants + self.products

    @property
    def reactant_formulas(self) -> List[str]:
        return [t.formula for t in self.reactants]

    @property
    def product_formulas(self) -> List[str]:
        return [t.formula for t in self.products]

    def to_reaction(self) -> Reaction:
        """Reaction using the coefficients as written in the text."""
        return Reaction(
            reactants=tuple(t.to_compound() for t in self.reactants),
            products=tuple(t.to_compound() for t in self.products),
        )


def count_separators(equation: str) -> int:
    return len(_SEPARATOR.findall(equation))


def parse_equation(
    equation: str, registry: Optional[ElementRegistry] = None
) -> ParsedEquation:
    """Split ``equation`` into reactant and product terms.

    Exactly one of ``->``, ``→`` or ``=`` must separate the two sides. Errors
    from individual compounds keep their type and are tagged with the side and
    term index they came from.
    """
    separators = count_separators(equation)
    if separators != 1:
        raise EquationFormatError(separators)

    registry = resolve_registry(registry)
    left, right = _SEPARATOR.split(equation)
    return ParsedEquation(
        reactants=_parse_side(left, REACTANTS, registry),
        products=_parse_side(right, PRODUCTS, registry),
    )


def _parse_side(
    text: str, side: str, registry: ElementRegistry
) -> Tuple[CompoundTerm, ...]:
    terms = []
    for index, raw in enumerate(text.split("+")):
        try:
            terms.append(_parse_term(raw, registry))
        except ChemistryError as exc:
            exc.locate(side, index)
            raise
    return tuple(terms)


def _parse_term(raw: str, registry: ElementRegistry) -> CompoundTerm:
    text = _WHITESPACE.sub("", raw)
    if not text:
        raise EmptyFormulaError("Empty compound term")

    digits, body = _TERM.match(text).groups()
    if not body:
        raise EmptyFormulaError(f"Compound term {text!r} has no formula")
    coefficient = int(digits) if digits else 1
    if coefficient == 0:
        raise FormulaSyntaxError("Zero coefficient", 0, text)

    return CompoundTerm(
        text=raw.strip(),
        formula=body,
        element_counts=parse_formula(body, registry),
        coefficient=coefficient,
        explicit_coefficient=bool(digits),
    )
