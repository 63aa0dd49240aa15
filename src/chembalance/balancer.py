"""Equation balancing by solving the stoichiometric linear system.

Each element contributes one conservation equation: the atoms it has on the
reactant side minus those on the product side must be zero. With one unknown
coefficient per compound this is a homogeneous system ``M @ x = 0`` whose
solutions form a ray. Appending the row ``x[0] = 1`` pins a single point on
that ray, which is found by Gaussian elimination with partial pivoting and then
scaled to the smallest positive integer vector.

The pipeline is parse -> build matrix -> eliminate -> rationalize -> render;
any stage failing aborts the whole call.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from functools import reduce
from typing import List, Optional, Sequence, Tuple

import numpy as np

from chembalance.constants import DEFAULT_SETTINGS, BalancerSettings
from chembalance.elements import ElementRegistry
from chembalance.equation import ParsedEquation, parse_equation
from chembalance.errors import NonIntegerConvergenceError, SingularSystemError
from chembalance.models import Reaction

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BalancedEquation:
    balanced_text: str
    coefficients: Tuple[int, ...]  # reactants first, then products
    reaction: Reaction


def build_stoichiometric_matrix(parsed: ParsedEquation) -> Tuple[np.ndarray, List[str]]:
    """Build the element-by-compound matrix.

    Row ``i`` belongs to element ``elements[i]``; reactant columns hold
    positive atom counts and product columns negative ones.
    """
    elements: List[str] = []
    for term in parsed.terms:
        for symbol in term.element_counts:
            if symbol not in elements:
                elements.append(symbol)

    matrix = np.zeros((len(elements), len(parsed.terms)))
    n_reactants = len(parsed.reactants)
    for col, term in enumerate(parsed.terms):
        sign = 1.0 if col < n_reactants else -1.0
        for symbol, count in term.element_counts.items():
            matrix[elements.index(symbol), col] = sign * count
    return matrix, elements


def pin_first_coefficient(matrix: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """Append the row fixing the first unknown to 1.

    Returns the extended matrix and its right-hand side.
    """
    pin = np.zeros((1, matrix.shape[1]))
    pin[0, 0] = 1.0
    extended = np.vstack([matrix, pin])
    rhs = np.zeros(extended.shape[0])
    rhs[-1] = 1.0
    return extended, rhs


def gaussian_eliminate(
    matrix: np.ndarray, rhs: np.ndarray, epsilon: float
) -> Tuple[np.ndarray, List[int]]:
    """Solve ``matrix @ x = rhs`` by elimination with partial pivoting.

    Columns without a usable pivot are reported as free and resolved to zero.

    Returns:
        Tuple of the solution vector and the indices of free columns.

    Raises:
        SingularSystemError: The reduced system is inconsistent or the
            back-substitution produced non-finite values.
    """
    rows, cols = matrix.shape
    augmented = np.column_stack([matrix, rhs]).astype(float)

    pivot_columns: List[int] = []
    free_columns: List[int] = []
    row = 0
    for col in range(cols):
        if row >= rows:
            free_columns.append(col)
            continue
        candidate = row + int(np.argmax(np.abs(augmented[row:, col])))
        if abs(augmented[candidate, col]) < epsilon:
            free_columns.append(col)
            continue
        if candidate != row:
            augmented[[row, candidate]] = augmented[[candidate, row]]
        for below in range(row + 1, rows):
            factor = augmented[below, col] / augmented[row, col]
            if factor != 0.0:
                augmented[below, col:] -= factor * augmented[row, col:]
        pivot_columns.append(col)
        row += 1

    # Rows past the last pivot have vanished on the left-hand side.
    leftover = augmented[row:, -1]
    if np.any(np.abs(leftover) > epsilon):
        raise SingularSystemError(
            "eliminate", "conservation equations are inconsistent"
        )

    solution = np.zeros(cols)
    for r in reversed(range(row)):
        col = pivot_columns[r]
        known = augmented[r, col + 1:cols] @ solution[col + 1:]
        solution[col] = (augmented[r, -1] - known) / augmented[r, col]

    if not np.all(np.isfinite(solution)):
        raise SingularSystemError("back-substitute", "solution is not finite")
    return solution, free_columns


def to_fraction(
    value: float, tolerance: float, max_iterations: int
) -> Tuple[int, int]:
    """Approximate ``value`` as ``(numerator, denominator)`` by continued fractions."""
    if value == 0.0:
        return 0, 1
    sign = -1 if value < 0 else 1
    target = abs(value)

    h_prev, h = 0, 1
    k_prev, k = 1, 0
    remainder = target
    for _ in range(max_iterations):
        term = math.floor(remainder)
        h, h_prev = term * h + h_prev, h
        k, k_prev = term * k + k_prev, k
        if abs(target - h / k) <= target * tolerance:
            return sign * h, k
        fractional = remainder - term
        if fractional == 0.0:
            break
        remainder = 1.0 / fractional
        if not math.isfinite(remainder):
            break
    raise NonIntegerConvergenceError(value, max_iterations)


def reduce_coefficients(coefficients: Sequence[int]) -> List[int]:
    """Divide out the greatest common divisor shared by all coefficients."""
    divisor = reduce(math.gcd, coefficients, 0)
    if divisor <= 1:
        return list(coefficients)
    return [c // divisor for c in coefficients]


def integer_coefficients(
    solution: np.ndarray, settings: BalancerSettings = DEFAULT_SETTINGS
) -> List[int]:
    """Scale a rational solution vector to the smallest integer vector."""
    fractions = [
        to_fraction(float(v), settings.fraction_tolerance, settings.max_fraction_iterations)
        for v in solution
    ]
    multiple = reduce(math.lcm, (den for _, den in fractions), 1)
    scaled = [int(round(float(v) * multiple)) for v in solution]
    return reduce_coefficients(scaled)


def balance_parsed(
    parsed: ParsedEquation, settings: Optional[BalancerSettings] = None
) -> BalancedEquation:
    """Balance an already parsed equation, ignoring any written coefficients."""
    settings = settings or DEFAULT_SETTINGS

    matrix, elements = build_stoichiometric_matrix(parsed)
    logger.debug(
        "Balancing %d compounds over elements %s", matrix.shape[1], elements
    )
    extended, rhs = pin_first_coefficient(matrix)
    solution, free_columns = gaussian_eliminate(extended, rhs, settings.pivot_epsilon)

    if free_columns:
        names = ", ".join(parsed.terms[c].formula for c in free_columns)
        logger.warning("Underdetermined system, free compounds: %s", names)
        raise SingularSystemError(
            "eliminate", f"coefficients of {names} are not determined uniquely"
        )
    if np.any(solution <= settings.pivot_epsilon):
        logger.warning("Non-positive solution %s", solution.tolist())
        raise SingularSystemError(
            "back-substitute", "no solution with all coefficients positive"
        )
    logger.debug("Pinned solution %s", solution.tolist())

    coefficients = integer_coefficients(solution, settings)
    logger.debug("Integer coefficients %s", coefficients)

    n_reactants = len(parsed.reactants)
    reaction = Reaction(
        reactants=tuple(
            term.to_compound(coefficient)
            for term, coefficient in zip(parsed.reactants, coefficients[:n_reactants])
        ),
        products=tuple(
            term.to_compound(coefficient)
            for term, coefficient in zip(parsed.products, coefficients[n_reactants:])
        ),
    )
    if not reaction.is_balanced():
        logger.warning("Rounded coefficients %s do not conserve atoms", coefficients)
        raise SingularSystemError(
            "verify", f"integer coefficients {coefficients} do not conserve atoms"
        )

    return BalancedEquation(
        balanced_text=reaction.render(),
        coefficients=tuple(coefficients),
        reaction=reaction,
    )


def balance_equation(
    equation: str,
    registry: Optional[ElementRegistry] = None,
    settings: Optional[BalancerSettings] = None,
) -> BalancedEquation:
    """Balance ``equation`` and render it with integer coefficients.

    Coefficients written in ``equation`` are ignored; the result is the
    smallest positive integer solution of the conservation equations.

    Raises:
        EquationFormatError: The equation does not have exactly one separator.
        EmptyFormulaError, FormulaSyntaxError, UnknownElementError: A compound
            could not be parsed.
        SingularSystemError: No unique positive solution exists.
        NonIntegerConvergenceError: A coefficient could not be rationalized.
    """
    return balance_parsed(parse_equation(equation, registry), settings)
