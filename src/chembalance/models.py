"""Data structures for compounds and reactions."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Mapping, Tuple

from chembalance.constants import ARROW_GLYPH

ElementCount = Mapping[str, int]


@dataclass(frozen=True)
class Compound:
    formula: str
    element_counts: ElementCount
    coefficient: int = 1

    def __post_init__(self) -> None:
        if self.coefficient < 1:
            raise ValueError(f"Coefficient must be >= 1, got {self.coefficient}")

    def atoms(self, symbol: str) -> int:
        """Atoms of ``symbol`` contributed by this compound, coefficient included."""
        return self.coefficient * self.element_counts.get(symbol, 0)

    def render(self) -> str:
        if self.coefficient == 1:
            return self.formula
        return f"{self.coefficient}{self.formula}"


@dataclass(frozen=True)
class Reaction:
    reactants: Tuple[Compound, ...]
    products: Tuple[Compound, ...]

    @property
    def compounds(self) -> Tuple[Compound, ...]:
        return self.reactants + self.products

    @property
    def coefficients(self) -> Tuple[int, ...]:
        return tuple(c.coefficient for c in self.compounds)

    def elements(self) -> List[str]:
        """Distinct element symbols in order of first appearance."""
        seen: Dict[str, None] = {}
        for compound in self.compounds:
            for symbol in compound.element_counts:
                seen.setdefault(symbol, None)
        return list(seen)

    def atom_balance(self) -> Dict[str, int]:
        """Net atoms per element: reactant side minus product side."""
        balance = {}
        for symbol in self.elements():
            left = sum(c.atoms(symbol) for c in self.reactants)
            right = sum(c.atoms(symbol) for c in self.products)
            balance[symbol] = left - right
        return balance

    def is_balanced(self) -> bool:
        return all(net == 0 for net in self.atom_balance().values())

    def render(self) -> str:
        left = " + ".join(c.render() for c in self.reactants)
        right = " + ".join(c.render() for c in self.products)
        return f"{left} {ARROW_GLYPH} {right}"
