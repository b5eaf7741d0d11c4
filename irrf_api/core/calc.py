from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal, localcontext
from typing import Literal

from irrf_api.core.brackets import IRRF_TABLE_052025, IrrfBracket, select_bracket
from irrf_api.core.constants import (
    DEPENDENT_DEDUCTION,
    PL_1087_FULL_REDUCTION_CEILING,
    PL_1087_MAX_REDUCTION,
    PL_1087_NOT_APPLICABLE_MESSAGE,
    PL_1087_PHASE_OUT_BASE,
    PL_1087_PHASE_OUT_CEILING,
    PL_1087_PHASE_OUT_FACTOR,
    SIMPLIFIED_MINIMUM_DEDUCTION,
    ZERO,
    round_cents,
)
from irrf_api.core.models import (
    IrrfInput,
    IrrfResult,
    ItemizedDeduction,
    SimplifiedDeduction,
)
from irrf_api.core.trace import build_trace

D = Decimal

ReductionRule = Literal["full", "phase_out", "not_applicable"]

logger = logging.getLogger("irrf_app.core")

_BASE_PRECISION = 28
# integer digits of the largest input plus cents, rate and phase-out factor digits
_PRECISION_MARGIN = 12


@dataclass(frozen=True)
class IrrfBreakdown:
    dependents_deduction: D
    alimony: D
    legal_deductions_total: D
    applied_deduction: D
    simplified_minimum_used: bool
    net_taxable_base: D
    bracket: IrrfBracket
    tax: D
    reduction_rule: ReductionRule
    reduction: D
    tax_after_reduction: D


def reduction_rule_for(taxable_income: D) -> ReductionRule:
    if taxable_income <= PL_1087_FULL_REDUCTION_CEILING:
        return "full"
    if taxable_income <= PL_1087_PHASE_OUT_CEILING:
        return "phase_out"
    return "not_applicable"


def pl_1087_reduction(taxable_income: D, tax: D) -> D:
    """Transitional reduction of PL 1087/25, capped at the tax due."""
    rule = reduction_rule_for(taxable_income)
    if rule == "full":
        candidate = round_cents(min(tax, PL_1087_MAX_REDUCTION))
    elif rule == "phase_out":
        candidate = round_cents(PL_1087_PHASE_OUT_BASE - PL_1087_PHASE_OUT_FACTOR * taxable_income)
    else:
        candidate = ZERO
    if tax == 0:
        candidate = ZERO
    return round_cents(max(ZERO, min(candidate, tax)))


def tax_from_bracket(base: D, bracket: IrrfBracket) -> D:
    raw = base * (bracket.rate / D("100")) - bracket.deduction
    if not raw.is_finite() or raw < 0:
        raw = ZERO
    return round_cents(raw)


def working_precision(in_: IrrfInput) -> int:
    """Digits needed to keep every intermediate exact down to the cent."""
    magnitudes = (
        in_.taxable_income,
        in_.official_pension_contribution,
        in_.alimony,
        D(in_.dependent_count),
    )
    largest = max((value.adjusted() for value in magnitudes if value), default=0)
    return max(_BASE_PRECISION, largest + _PRECISION_MARGIN)


def compute_breakdown(
    in_: IrrfInput,
    table: tuple[IrrfBracket, ...] = IRRF_TABLE_052025,
) -> IrrfBreakdown:
    with localcontext() as ctx:
        ctx.prec = working_precision(in_)
        return _compute_breakdown(in_, table)


def _compute_breakdown(in_: IrrfInput, table: tuple[IrrfBracket, ...]) -> IrrfBreakdown:
    dependents_deduction = round_cents(in_.dependent_count * DEPENDENT_DEDUCTION)
    alimony = round_cents(in_.alimony)
    legal_total = round_cents(in_.official_pension_contribution + dependents_deduction + alimony)
    applied = round_cents(max(legal_total, SIMPLIFIED_MINIMUM_DEDUCTION))
    simplified_used = SIMPLIFIED_MINIMUM_DEDUCTION > legal_total

    base = round_cents(in_.taxable_income - applied)
    bracket = select_bracket(base, table)
    tax = tax_from_bracket(base, bracket)

    reduction = pl_1087_reduction(in_.taxable_income, tax)
    after = round_cents(tax - max(ZERO, min(reduction, tax)))

    return IrrfBreakdown(
        dependents_deduction=dependents_deduction,
        alimony=alimony,
        legal_deductions_total=legal_total,
        applied_deduction=applied,
        simplified_minimum_used=simplified_used,
        net_taxable_base=base,
        bracket=bracket,
        tax=tax,
        reduction_rule=reduction_rule_for(in_.taxable_income),
        reduction=reduction,
        tax_after_reduction=after,
    )


def compute_irrf(in_: IrrfInput, include_trace: bool = True) -> IrrfResult:
    breakdown = compute_breakdown(in_)

    if breakdown.simplified_minimum_used:
        deduction: ItemizedDeduction | SimplifiedDeduction = SimplifiedDeduction(
            applied_minimum=SIMPLIFIED_MINIMUM_DEDUCTION,
        )
    else:
        deduction = ItemizedDeduction(
            official_pension_contribution=in_.official_pension_contribution,
            dependent_count=in_.dependent_count,
            alimony=breakdown.alimony,
            dependents_deduction=breakdown.dependents_deduction,
        )

    not_applicable = breakdown.reduction_rule == "not_applicable"
    trace = None
    if include_trace:
        with localcontext() as ctx:
            ctx.prec = working_precision(in_)
            trace = build_trace(in_, breakdown)

    logger.debug(
        "IRRF computed: base=%s rate=%s tax=%s reduction=%s simplified=%s",
        breakdown.net_taxable_base,
        breakdown.bracket.rate,
        breakdown.tax,
        breakdown.reduction,
        breakdown.simplified_minimum_used,
    )

    return IrrfResult(
        taxable_income=in_.taxable_income,
        deduction=deduction,
        legal_deductions_total=breakdown.legal_deductions_total,
        applied_deduction=breakdown.applied_deduction,
        simplified_minimum_used=breakdown.simplified_minimum_used,
        net_taxable_base=breakdown.net_taxable_base,
        rate=breakdown.bracket.rate,
        table_deduction=round_cents(breakdown.bracket.deduction),
        tax=breakdown.tax,
        reduction=breakdown.reduction,
        tax_after_reduction=None if not_applicable else breakdown.tax_after_reduction,
        message=PL_1087_NOT_APPLICABLE_MESSAGE if not_applicable else None,
        trace=trace,
    )


__all__ = [
    "IrrfBreakdown",
    "compute_breakdown",
    "compute_irrf",
    "pl_1087_reduction",
    "reduction_rule_for",
    "tax_from_bracket",
    "working_precision",
]
