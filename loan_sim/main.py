"""Command‑line interface for the loan simulator.

This module uses the ``click`` library to expose the two simulators from the
web page on the terminal: ``quote`` prints the estimated monthly payment and
total, ``schedule`` prints (or exports to CSV) the full amortization table.
Amounts may be typed the way people write them, e.g. ``"$1,250,000"``.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import click

from .data_models import AmortizationResult
from .engine import InsufficientPaymentError, calculate
from .formatter import (
    CSV_HEADERS,
    PLACEHOLDER_MESSAGE,
    estimate_line,
    export_to_csv,
    print_schedule,
    print_summary,
)
from .utils import DEFAULT_DECIMAL, DEFAULT_GROUPING, check_separators, parse_currency_number, parse_rate, parse_term


def build_result_from_options(
    price: str,
    down_payment: Optional[str],
    term: str,
    rate: str,
    grouping: str = DEFAULT_GROUPING,
    decimal: str = DEFAULT_DECIMAL,
    strict: bool = False,
) -> AmortizationResult:
    """Parse raw option text and run the engine.

    Raises ``click.ClickException`` when the inputs are insufficient or, in
    strict mode, when the payment never covers the interest.
    """
    try:
        check_separators(grouping, decimal)
    except ValueError as exc:
        raise click.BadParameter(str(exc))
    try:
        result = calculate(
            parse_currency_number(price, grouping, decimal),
            parse_currency_number(down_payment, grouping, decimal),
            parse_term(term),
            parse_rate(rate),
            strict=strict,
        )
    except InsufficientPaymentError as exc:
        raise click.ClickException(str(exc))
    if result is None:
        raise click.ClickException(PLACEHOLDER_MESSAGE)
    return result


def _loan_options(func):
    options = [
        click.option("--price", "-p", "price", required=True, help="Price of the item, e.g. '$350,000'"),
        click.option("--down-payment", "-d", "down_payment", default="0", help="Down payment amount"),
        click.option("--term", "-t", "term", required=True, help="Number of monthly payments"),
        click.option("--rate", "-r", "rate", required=True, help="Monthly interest rate (percent)"),
        click.option("--grouping", "grouping", default=DEFAULT_GROUPING, show_default=True, help="Thousands separator"),
        click.option("--decimal", "decimal", default=DEFAULT_DECIMAL, show_default=True, help="Decimal separator"),
    ]
    for option in reversed(options):
        func = option(func)
    return func


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Log calculation details")
def cli(verbose: bool) -> None:
    """A command‑line loan simulator (fixed-payment amortization)."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@cli.command()
@_loan_options
def quote(
    price: str,
    down_payment: str,
    term: str,
    rate: str,
    grouping: str,
    decimal: str,
) -> None:
    """Print the estimated monthly payment and total paid."""
    result = build_result_from_options(price, down_payment, term, rate, grouping, decimal)
    click.echo(estimate_line(result))


@cli.command()
@_loan_options
@click.option("--strict", is_flag=True, help="Fail if a payment does not cover the interest due")
@click.option("--labels", type=click.Choice(sorted(CSV_HEADERS)), default="es", help="CSV header language")
@click.option("--output", "output", type=str, help="Output file path (.csv)")
def schedule(
    price: str,
    down_payment: str,
    term: str,
    rate: str,
    grouping: str,
    decimal: str,
    strict: bool,
    labels: str,
    output: Optional[str],
) -> None:
    """Compute and print the full amortization schedule."""
    result = build_result_from_options(price, down_payment, term, rate, grouping, decimal, strict)
    if output:
        path = Path(output)
        if path.suffix.lower() != ".csv":
            raise click.BadParameter("Unsupported output format; use .csv")
        export_to_csv(path, result, labels=labels)
        click.echo(f"Schedule exported to {path}")
    else:
        print_summary(result)
        print_schedule(result.schedule)


if __name__ == "__main__":
    cli()
