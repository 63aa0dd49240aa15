"""Command-line entrypoints for chembalance."""

from __future__ import annotations

import json
import logging
from typing import Annotated, Any, Dict, Optional

import typer

from chembalance.balancer import balance_equation
from chembalance.errors import ChemistryError
from chembalance.formula import parse_formula
from chembalance.molar_mass import calculate_molar_mass
from chembalance.stoichiometry import percent_yield, theoretical_yield

app = typer.Typer(add_completion=False)


@app.callback()
def main(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging.")] = False,
) -> None:
    """Chemical formula and equation tools."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _emit(payload: Dict[str, Any]) -> None:
    typer.echo(json.dumps(payload, indent=2, ensure_ascii=False))


def _fail(error: ChemistryError) -> typer.Exit:
    typer.echo(f"Error: {error}", err=True)
    return typer.Exit(code=1)


@app.command()
def formula(
    text: Annotated[str, typer.Argument(help="Chemical formula, e.g. Ca3(PO4)2.")],
) -> None:
    """Print the element counts of a formula."""
    try:
        counts = parse_formula(text)
    except ChemistryError as exc:
        raise _fail(exc)
    _emit({"formula": text, "elements": dict(counts)})


@app.command("molar-mass")
def molar_mass(
    text: Annotated[str, typer.Argument(help="Chemical formula.")],
) -> None:
    """Print the molar mass and per-element breakdown of a formula."""
    try:
        result = calculate_molar_mass(text)
    except ChemistryError as exc:
        raise _fail(exc)

    percentages = result.mass_percentages()
    _emit({
        "formula": result.formula,
        "molar_mass": result.total_mass,
        "components": [
            {
                "symbol": c.symbol,
                "count": c.count,
                "atomic_mass": c.atomic_mass,
                "contribution": c.contribution,
                "percent": percentages[c.symbol],
            }
            for c in result.components
        ],
    })


@app.command()
def balance(
    equation: Annotated[str, typer.Argument(help="Equation, e.g. 'H2 + O2 -> H2O'.")],
) -> None:
    """Balance a chemical equation."""
    try:
        result = balance_equation(equation)
    except ChemistryError as exc:
        raise _fail(exc)
    _emit({"balanced": result.balanced_text, "coefficients": list(result.coefficients)})


@app.command("yield")
def yield_(
    equation: Annotated[str, typer.Argument(help="Equation with its coefficients written out.")],
    limiting: Annotated[str, typer.Option(help="Formula of the limiting reagent.")],
    mass: Annotated[float, typer.Option(help="Mass of the limiting reagent (g).")],
    product: Annotated[str, typer.Option(help="Formula of the product.")],
    actual: Annotated[
        Optional[float], typer.Option(help="Actual product mass (g) for percent yield.")
    ] = None,
) -> None:
    """Compute theoretical (and optionally percent) yield."""
    try:
        theoretical = theoretical_yield(equation, limiting, mass, product)
        payload: Dict[str, Any] = {"product": product, "theoretical_yield": theoretical}
        if actual is not None:
            payload["percent_yield"] = percent_yield(theoretical, actual)
    except ChemistryError as exc:
        raise _fail(exc)
    _emit(payload)
