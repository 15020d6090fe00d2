"""Output helpers for the loan simulator.

This module renders amortization results for people and for spreadsheets:
currency strings for display, a plain tabular text format for the terminal,
and the comma-separated export offered by the detailed simulator. Numbers are
rounded here and only here; the engine hands over unrounded floats.
"""

from __future__ import annotations

import csv
import io
from decimal import Decimal
from pathlib import Path
from typing import Iterable, List, Sequence, Tuple, Union

from .data_models import AmortizationResult, PaymentScheduleRow

CSV_HEADERS = {
    "es": ["#", "Pago", "Interés", "Capital", "Saldo"],
    "en": ["#", "Payment", "Interest", "Principal", "Balance"],
}
CSV_FILENAME = "tabla_amortizacion.csv"
CSV_CONTENT_TYPE = "text/csv; charset=utf-8"

PLACEHOLDER_MESSAGE = "Completa los datos para calcular."

ScheduleSource = Union[AmortizationResult, Sequence[PaymentScheduleRow]]


def format_currency(value: float, prefix: str = "$", suffix: str = "") -> str:
    """Format a number as money, e.g. ``1234.5`` -> ``"$1,234.50"``."""
    sign = "-" if value < 0 else ""
    return f"{sign}{prefix}{abs(value):,.2f}{suffix}"


def format_rate(value: float) -> str:
    """Show a rate the way it was typed: ``1.0`` -> ``"1"``, ``1e-05`` -> ``"0.00001"``."""
    value = float(value)
    if value.is_integer():
        return str(int(value))
    return f"{Decimal(repr(value)):f}"


def _rows(source: ScheduleSource) -> Sequence[PaymentScheduleRow]:
    if isinstance(source, AmortizationResult):
        return source.schedule
    return source


def schedule_to_csv(source: ScheduleSource, labels: str = "es") -> str:
    """Return the schedule as comma-separated text.

    The first line is the header, then one line per period with every amount
    printed with two decimals. Lines are joined with ``\\n`` and there is no
    trailing newline. An empty schedule gives an empty string.
    """
    if labels not in CSV_HEADERS:
        raise ValueError(f"Unknown CSV labels {labels!r}; use one of {sorted(CSV_HEADERS)}")
    rows = _rows(source)
    if not rows:
        return ""
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(CSV_HEADERS[labels])
    for row in rows:
        writer.writerow(
            [
                row.period,
                f"{row.payment:.2f}",
                f"{row.interest:.2f}",
                f"{row.principal:.2f}",
                f"{row.balance:.2f}",
            ]
        )
    return buffer.getvalue().rstrip("\n")


def parse_schedule_csv(text: str) -> List[Tuple[int, float, float, float, float]]:
    """Read back text produced by :func:`schedule_to_csv`.

    The header line is skipped; each remaining line becomes a
    ``(period, payment, interest, principal, balance)`` tuple.
    """
    if not text:
        return []
    reader = csv.reader(io.StringIO(text))
    next(reader, None)
    parsed = []
    for record in reader:
        if not record:
            continue
        period, payment, interest, principal, balance = record
        parsed.append(
            (int(period), float(payment), float(interest), float(principal), float(balance))
        )
    return parsed


def export_to_csv(path: Path, source: ScheduleSource, labels: str = "es") -> None:
    """Write the schedule CSV to ``path`` (UTF-8)."""
    with path.open("w", newline="", encoding="utf-8") as f:
        f.write(schedule_to_csv(source, labels=labels))


def estimate_line(result: AmortizationResult, with_total: bool = True) -> str:
    """One-line summary used by both simulators."""
    line = f"Mensualidad estimada: {format_currency(result.monthly_payment)}"
    if with_total:
        return f"{line} · Total aprox: {format_currency(result.total_paid)}"
    return f"{line} · Monto: {format_currency(result.principal)}"


def summary_line(result: AmortizationResult) -> str:
    loan = result.loan
    return (
        f"Monto {format_currency(result.principal)} · "
        f"Tasa {format_rate(loan.monthly_rate_percent)}% · Plazo {loan.term_periods}m"
    )


def print_summary(result: AmortizationResult) -> None:
    """Print the headline figures of a calculation."""
    print("Summary")
    print("-" * 60)
    print(f"Principal financed : {format_currency(result.principal)}")
    print(f"Monthly payment    : {format_currency(result.monthly_payment)}")
    print(f"Total interest     : {format_currency(result.total_interest)}")
    print(f"Total paid         : {format_currency(result.total_paid)}")
    if result.negative_amortization:
        print("Warning            : payment does not cover the interest due")
    print("-" * 60)


def print_schedule(schedule: Iterable[PaymentScheduleRow]) -> None:
    """Print the amortization schedule as a simple tab-separated table."""
    print("\t".join(["Period", "Payment", "Interest", "Principal", "Balance"]))
    for row in schedule:
        print(
            "\t".join(
                [
                    str(row.period),
                    f"{row.payment:.2f}",
                    f"{row.interest:.2f}",
                    f"{row.principal:.2f}",
                    f"{row.balance:.2f}",
                ]
            )
        )
