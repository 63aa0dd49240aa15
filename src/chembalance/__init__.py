"""chembalance core package."""

from chembalance.balancer import BalancedEquation, balance_equation
from chembalance.constants import BalancerSettings
from chembalance.elements import DEFAULT_TABLE, ElementData, ElementRegistry, PeriodicTable
from chembalance.equation import ParsedEquation, parse_equation
from chembalance.errors import (
    ChemistryError,
    EmptyFormulaError,
    EquationFormatError,
    FormulaSyntaxError,
    NonIntegerConvergenceError,
    SingularSystemError,
    StoichiometryError,
    UnknownElementError,
)
from chembalance.formula import parse_formula
from chembalance.models import Compound, Reaction
from chembalance.molar_mass import MolarMassResult, calculate_molar_mass

__all__ = [
    "BalancedEquation",
    "balance_equation",
    "BalancerSettings",
    "DEFAULT_TABLE",
    "ElementData",
    "ElementRegistry",
    "PeriodicTable",
    "ParsedEquation",
    "parse_equation",
    "ChemistryError",
    "EmptyFormulaError",
    "EquationFormatError",
    "FormulaSyntaxError",
    "NonIntegerConvergenceError",
    "SingularSystemError",
    "StoichiometryError",
    "UnknownElementError",
    "parse_formula",
    "Compound",
    "Reaction",
    "MolarMassResult",
    "calculate_molar_mass",
]
