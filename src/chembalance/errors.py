"""Exception hierarchy for formula parsing and equation balancing."""

from __future__ import annotations


class ChemistryError(ValueError):
    """Base class for every error raised by chembalance.

    ``side`` and ``term_index`` are filled in by the equation parser when the
    failure comes from a single compound term of an equation.
    """

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message
        self.side: str | None = None
        self.term_index: int | None = None

    def locate(self, side: str, term_index: int) -> "ChemistryError":
        self.side = side
        self.term_index = term_index
        return self

    def __str__(self) -> str:
        if self.side is None:
            return self.message
        return f"{self.message} ({self.side} term {self.term_index + 1})"


class EmptyFormulaError(ChemistryError):
    def __init__(self, message: str = "Empty formula") -> None:
        super().__init__(message)


class FormulaSyntaxError(ChemistryError):
    """Malformed formula text.

    ``position`` is the offset into the whitespace-stripped formula and
    ``remaining`` the unparsed text starting there.
    """

    def __init__(self, reason: str, position: int, remaining: str) -> None:
        super().__init__(f"{reason} at position {position} near {remaining!r}")
        self.reason = reason
        self.position = position
        self.remaining = remaining


class UnknownElementError(ChemistryError):
    def __init__(self, symbol: str) -> None:
        super().__init__(f"Unknown element symbol: {symbol}")
        self.symbol = symbol


class EquationFormatError(ChemistryError):
    def __init__(self, separator_count: int) -> None:
        if separator_count == 0:
            detail = "no separator found"
        else:
            detail = f"found {separator_count} separators"
        super().__init__(
            "Invalid equation format: use exactly one '->', '→' or '=' "
            f"between reactants and products ({detail})"
        )
        self.separator_count = separator_count


class SingularSystemError(ChemistryError):
    """The stoichiometric system has no unique positive solution."""

    def __init__(self, stage: str, detail: str) -> None:
        super().__init__(f"Equation cannot be balanced ({stage}): {detail}")
        self.stage = stage
        self.detail = detail


class NonIntegerConvergenceError(ChemistryError):
    def __init__(self, value: float, iterations: int) -> None:
        super().__init__(
            f"Could not express coefficient {value!r} as a fraction "
            f"within {iterations} iterations"
        )
        self.value = value
        self.iterations = iterations


class StoichiometryError(ChemistryError):
    pass
