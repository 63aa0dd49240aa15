"""Molar mass evaluation on top of the formula parser."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from chembalance.elements import ElementRegistry, resolve_registry
from chembalance.formula import parse_formula


@dataclass(frozen=True)
class MassComponent:
    symbol: str
    count: int
    atomic_mass: float  # g/mol
    contribution: float  # g/mol, atomic_mass * count

    def mass_fraction(self, total_mass: float) -> float:
        return self.contribution / total_mass if total_mass else 0.0


@dataclass(frozen=True)
class MolarMassResult:
    """Total molar mass and its per-element breakdown.

    Components are ordered by ascending atomic number.
    """

    formula: str
    total_mass: float
    components: Tuple[MassComponent, ...]

    def mass_percentages(self) -> Dict[str, float]:
        return {
            c.symbol: 100.0 * c.mass_fraction(self.total_mass) for c in self.components
        }


def calculate_molar_mass(
    formula: str, registry: Optional[ElementRegistry] = None
) -> MolarMassResult:
    """Evaluate the molar mass of ``formula`` in g/mol.

    Formula parser errors propagate unchanged.
    """
    registry = resolve_registry(registry)
    counts = parse_formula(formula, registry)

    ranked = []
    for symbol, count in counts.items():
        element = registry.lookup(symbol)
        component = MassComponent(
            symbol=symbol,
            count=count,
            atomic_mass=element.atomic_mass,
            contribution=element.atomic_mass * count,
        )
        ranked.append((element.atomic_number, component))

    ranked.sort(key=lambda item: item[0])
    components = tuple(component for _, component in ranked)
    total_mass = sum(c.contribution for c in components)
    return MolarMassResult(
        formula=formula.strip(), total_mass=total_mass, components=components
    )
