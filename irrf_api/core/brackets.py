from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Sequence

from irrf_api.core.constants import round_cents

D = Decimal


@dataclass(frozen=True)
class IrrfBracket:
    """One row of the monthly progressive table.

    ``upper`` is the inclusive upper limit of the bracket; ``None`` marks the
    top bracket, which has no limit. ``rate`` is a percentage (7.5 means 7.5%).
    """

    upper: D | None
    rate: D
    deduction: D


# Monthly table in force from 05/2025
IRRF_TABLE_052025: tuple[IrrfBracket, ...] = (
    IrrfBracket(D("2428.80"), D("0.0"), D("0.00")),
    IrrfBracket(D("2826.65"), D("7.5"), D("182.16")),
    IrrfBracket(D("3751.05"), D("15.0"), D("394.16")),
    IrrfBracket(D("4664.68"), D("22.5"), D("675.49")),
    IrrfBracket(None, D("27.5"), D("908.73")),
)


def select_bracket(base: D, table: Sequence[IrrfBracket] = IRRF_TABLE_052025) -> IrrfBracket:
    for bracket in table:
        if bracket.upper is None or base <= bracket.upper:
            return bracket
    return table[-1]


def format_brl(value: D) -> str:
    """Format an amount the pt-BR way, e.g. ``2.428,80``."""
    text = f"{round_cents(value):,.2f}"
    return text.replace(",", "_").replace(".", ",").replace("_", ".")


def _range_label(lower: D | None, upper: D | None) -> str:
    if lower is None and upper is not None:
        return f"Até R$ {format_brl(upper)}"
    if upper is None and lower is not None:
        return f"Acima de R$ {format_brl(lower)}"
    if lower is None or upper is None:
        return "Qualquer valor"
    return f"De R$ {format_brl(lower + D('0.01'))} até R$ {format_brl(upper)}"


def describe_table(table: Sequence[IrrfBracket] = IRRF_TABLE_052025) -> list[dict[str, object]]:
    rows: list[dict[str, object]] = []
    previous: D | None = None
    for index, bracket in enumerate(table, start=1):
        rows.append(
            {
                "faixa": f"Faixa {index}",
                "base": _range_label(previous, bracket.upper),
                "limite": float(bracket.upper) if bracket.upper is not None else None,
                "aliquota": float(bracket.rate),
                "deducao": float(round_cents(bracket.deduction)),
            }
        )
        previous = bracket.upper
    return rows


__all__ = [
    "IrrfBracket",
    "IRRF_TABLE_052025",
    "select_bracket",
    "describe_table",
    "format_brl",
]
