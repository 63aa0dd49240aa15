"""Shared constants and numeric settings."""

from __future__ import annotations

from dataclasses import dataclass

# Reaction separators accepted by the equation parser.
ARROW_TOKEN = "->"
ARROW_GLYPH = "→"
EQUALS_TOKEN = "="
SEPARATOR_TOKENS = (ARROW_TOKEN, ARROW_GLYPH, EQUALS_TOKEN)

# Hydrate / adduct joiners, e.g. CuSO4·5H2O.
ADDUCT_TOKENS = ("·", "*")

GROUP_CLOSERS = {"(": ")", "[": "]"}

PIVOT_EPSILON = 1e-10
FRACTION_TOLERANCE = 1e-10
MAX_FRACTION_ITERATIONS = 64


@dataclass(frozen=True)
class BalancerSettings:
    """Numeric limits for the linear balancer.

    Attributes:
        pivot_epsilon: Magnitude below which a pivot candidate is treated as zero.
        fraction_tolerance: Relative error accepted by the continued-fraction expansion.
        max_fraction_iterations: Upper bound on continued-fraction terms per coefficient.
    """

    pivot_epsilon: float = PIVOT_EPSILON
    fraction_tolerance: float = FRACTION_TOLERANCE
    max_fraction_iterations: int = MAX_FRACTION_ITERATIONS

    def __post_init__(self) -> None:
        if self.pivot_epsilon <= 0.0:
            raise ValueError("pivot_epsilon must be positive")
        if self.fraction_tolerance <= 0.0:
            raise ValueError("fraction_tolerance must be positive")
        if self.max_fraction_iterations < 1:
            raise ValueError("max_fraction_iterations must be at least 1")


DEFAULT_SETTINGS = BalancerSettings()
