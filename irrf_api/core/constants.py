from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, getcontext

D = Decimal

_CENT = D("0.01")

DEPENDENT_DEDUCTION = D("189.59")
SIMPLIFIED_MINIMUM_DEDUCTION = D("607.20")

# PL 1087/25 transitional reduction
PL_1087_FULL_REDUCTION_CEILING = D("5000.00")
PL_1087_MAX_REDUCTION = D("312.89")
PL_1087_PHASE_OUT_CEILING = D("7350.00")
PL_1087_PHASE_OUT_BASE = D("978.62")
PL_1087_PHASE_OUT_FACTOR = D("0.133145")

PL_1087_NOT_APPLICABLE_MESSAGE = (
    "A dedução prevista na PL 1087/25 não se aplica porque o rendimento "
    "tributável ultrapassa R$ 7.350,00."
)

ZERO = D("0.00")


def round_cents(value: D) -> D:
    context = getcontext().copy()
    # quantize needs room for every integer digit plus the two cents digits
    context.prec = max(context.prec, value.adjusted() + 3)
    return value.quantize(_CENT, rounding=ROUND_HALF_UP, context=context)


__all__ = [
    "DEPENDENT_DEDUCTION",
    "SIMPLIFIED_MINIMUM_DEDUCTION",
    "PL_1087_FULL_REDUCTION_CEILING",
    "PL_1087_MAX_REDUCTION",
    "PL_1087_PHASE_OUT_CEILING",
    "PL_1087_PHASE_OUT_BASE",
    "PL_1087_PHASE_OUT_FACTOR",
    "PL_1087_NOT_APPLICABLE_MESSAGE",
    "ZERO",
    "round_cents",
]
