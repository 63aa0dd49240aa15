"""Mass/mole conversions, limiting reagents and reaction yields.

These helpers use the coefficients as written in an equation. Balance the
equation first when the written coefficients cannot be trusted.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Mapping, Optional, Sequence

from chembalance.elements import ElementRegistry
from chembalance.equation import parse_equation
from chembalance.errors import StoichiometryError
from chembalance.models import Compound, Reaction
from chembalance.molar_mass import calculate_molar_mass

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Reagent:
    formula: str
    coefficient: int
    mass: float  # g


@dataclass(frozen=True)
class ReactionAmounts:
    """Amounts implied by the limiting reactant of a balanced reaction."""

    limiting_formula: str
    extent: float  # mol of reaction events
    moles: Mapping[str, float]
    masses: Mapping[str, float]


def moles_from_mass(
    formula: str, mass: float, registry: Optional[ElementRegistry] = None
) -> float:
    if mass < 0:
        raise StoichiometryError(f"Mass must be >= 0, got {mass}")
    return mass / calculate_molar_mass(formula, registry).total_mass


def mass_from_moles(
    formula: str, moles: float, registry: Optional[ElementRegistry] = None
) -> float:
    if moles < 0:
        raise StoichiometryError(f"Amount must be >= 0, got {moles}")
    return moles * calculate_molar_mass(formula, registry).total_mass


def find_limiting_reagent(
    reagents: Sequence[Reagent], registry: Optional[ElementRegistry] = None
) -> str:
    """Return the formula of the reagent with the smallest moles per coefficient."""
    if not reagents:
        raise StoichiometryError("At least one reagent is required")

    limiting = None
    lowest = float("inf")
    for reagent in reagents:
        if reagent.coefficient < 1:
            raise StoichiometryError(
                f"Coefficient of {reagent.formula} must be >= 1"
            )
        ratio = moles_from_mass(reagent.formula, reagent.mass, registry) / reagent.coefficient
        if ratio < lowest:
            lowest = ratio
            limiting = reagent.formula
    return limiting


def theoretical_yield(
    equation: str,
    limiting_formula: str,
    limiting_mass: float,
    product_formula: str,
    registry: Optional[ElementRegistry] = None,
) -> float:
    """Mass of ``product_formula`` formed when ``limiting_mass`` grams react completely."""
    reaction = parse_equation(equation, registry).to_reaction()
    reactant = _find(reaction.reactants, limiting_formula, "Limiting reagent")
    product = _find(reaction.products, product_formula, "Product")

    limiting_moles = moles_from_mass(reactant.formula, limiting_mass, registry)
    product_moles = product.coefficient / reactant.coefficient * limiting_moles
    return mass_from_moles(product.formula, product_moles, registry)


def percent_yield(theoretical: float, actual: float) -> float:
    if theoretical <= 0:
        raise StoichiometryError("Theoretical yield must be positive")
    return actual / theoretical * 100.0


def reaction_amounts(
    reaction: Reaction,
    reactant_masses: Mapping[str, float],
    registry: Optional[ElementRegistry] = None,
) -> ReactionAmounts:
    """Work out the limiting reactant and every amount it implies.

    ``reactant_masses`` maps reactant formulas to grams available; reactants
    missing from it are assumed to be in excess.
    """
    if not reaction.is_balanced():
        raise StoichiometryError(f"Reaction is not balanced: {reaction.render()}")

    reagents = []
    for formula, mass in reactant_masses.items():
        compound = _find(reaction.reactants, formula, "Reactant")
        reagents.append(Reagent(formula, compound.coefficient, mass))

    limiting_formula = find_limiting_reagent(reagents, registry)
    limiting = _find(reaction.reactants, limiting_formula, "Reactant")
    extent = (
        moles_from_mass(limiting_formula, reactant_masses[limiting_formula], registry)
        / limiting.coefficient
    )

    moles: Dict[str, float] = {}
    masses: Dict[str, float] = {}
    for compound in reaction.compounds:
        amount = compound.coefficient * extent
        moles[compound.formula] = amount
        masses[compound.formula] = mass_from_moles(compound.formula, amount, registry)
    logger.debug("Limiting reactant %s, extent %.6g mol", limiting_formula, extent)

    return ReactionAmounts(
        limiting_formula=limiting_formula, extent=extent, moles=moles, masses=masses
    )


def _find(compounds: Sequence[Compound], formula: str, role: str) -> Compound:
    wanted = "".join(formula.split())
    for compound in compounds:
        if compound.formula == wanted:
            return compound
    raise StoichiometryError(f"{role} not found in equation: {formula}")
