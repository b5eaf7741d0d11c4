from decimal import Decimal
from typing import Any

from irrf_api.core.models import IrrfInput


def make_payload(
  income: Any = 5000.0,
  contribution: Any = 750.0,
  dependents: Any = 2,
  alimony: Any = 0,
) -> dict[str, Any]:
  return {
    "rendimento_tributavel": income,
    "previdencia_oficial": contribution,
    "quantidade_dependentes": dependents,
    "pensao_alimenticia": alimony,
  }


def make_input(
  income: str = "5000.00",
  contribution: str = "750.00",
  dependents: int = 2,
  alimony: str = "0",
) -> IrrfInput:
  return IrrfInput(
    taxable_income=Decimal(income),
    official_pension_contribution=Decimal(contribution),
    dependent_count=dependents,
    alimony=Decimal(alimony),
  )


# income, contribution, dependents, alimony -> expected tax, reduction, tax after reduction
SCENARIOS: dict[str, dict[str, Any]] = {
  "itemized_full_reduction": {
    "input": ("5000.00", "750.00", 2, "0"),
    "base": Decimal("3870.82"),
    "tax": Decimal("195.44"),
    "reduction": Decimal("195.44"),
    "after": Decimal("0.00"),
  },
  "simplified_exempt": {
    "input": ("2000.00", "0", 0, "0"),
    "base": Decimal("1392.80"),
    "tax": Decimal("0.00"),
    "reduction": Decimal("0.00"),
    "after": Decimal("0.00"),
  },
  "phase_out": {
    "input": ("6000.00", "0", 0, "0"),
    "base": Decimal("5392.80"),
    "tax": Decimal("574.29"),
    "reduction": Decimal("179.75"),
    "after": Decimal("394.54"),
  },
  "above_threshold": {
    "input": ("8000.00", "0", 0, "0"),
    "base": Decimal("7392.80"),
    "tax": Decimal("1124.29"),
    "reduction": Decimal("0.00"),
    "after": None,
  },
}
