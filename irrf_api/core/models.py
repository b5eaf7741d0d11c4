from __future__ import annotations

import math
from decimal import Decimal
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer


def _money_to_json(value: Decimal) -> float | str:
    number = float(value)
    if math.isfinite(number):
        return number
    # sums of near-float-max inputs; keep the exact amount instead of Infinity
    return str(value)


# Monetary amounts stay Decimal in Python and go out as JSON numbers.
Money = Annotated[Decimal, PlainSerializer(_money_to_json, when_used="json")]

StepValue = Union[bool, int, Money]


class _Record(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)


class IrrfInput(_Record):
    taxable_income: Money = Field(..., ge=0, alias="rendimento_tributavel")
    official_pension_contribution: Money = Field(..., ge=0, alias="previdencia_oficial")
    dependent_count: int = Field(..., ge=0, alias="quantidade_dependentes")
    alimony: Money = Field(Decimal("0"), ge=0, alias="pensao_alimenticia")


class ItemizedDeduction(_Record):
    kind: Literal["itemized"] = Field("itemized", alias="tipo")
    official_pension_contribution: Money = Field(..., alias="previdencia_oficial")
    dependent_count: int = Field(..., alias="quantidade_dependentes")
    alimony: Money = Field(..., alias="pensao_alimenticia")
    dependents_deduction: Money = Field(..., alias="valor_deducoes_dependentes")


class SimplifiedDeduction(_Record):
    kind: Literal["simplified"] = Field("simplified", alias="tipo")
    applied_minimum: Money = Field(..., alias="desconto_simplificado_aplicado")


DeductionBasis = Annotated[
    Union[ItemizedDeduction, SimplifiedDeduction],
    Field(discriminator="kind"),
]


class BracketResult(_Record):
    rate: Money = Field(..., alias="aliquota")
    deduction: Money = Field(..., alias="deducao")


class TraceStep(_Record):
    order: int = Field(..., alias="ordem")
    title: str = Field(..., alias="titulo")
    description: str = Field(..., alias="descricao")
    formula: str
    values: dict[str, StepValue] = Field(default_factory=dict, alias="valores")
    result: Union[BracketResult, Money] = Field(..., alias="resultado")


class TraceInputs(_Record):
    taxable_income: Money = Field(..., alias="rendimento_tributavel")
    official_pension_contribution: Money = Field(..., alias="previdencia_oficial")
    dependent_count: int = Field(..., alias="quantidade_dependentes")
    alimony: Money = Field(..., alias="pensao_alimenticia")


class CalculationTrace(_Record):
    inputs: TraceInputs = Field(..., alias="entradas")
    steps: tuple[TraceStep, ...] = Field(..., alias="etapas")


class IrrfResult(_Record):
    taxable_income: Money = Field(..., alias="rendimento_tributavel")
    deduction: DeductionBasis = Field(..., alias="deducao")
    legal_deductions_total: Money = Field(..., alias="soma_deducoes_legais")
    applied_deduction: Money = Field(..., alias="deducao_total_aplicada")
    simplified_minimum_used: bool = Field(..., alias="simplificado_minimo_usado")
    net_taxable_base: Money = Field(..., alias="base_liquida_irrf")
    rate: Money = Field(..., alias="aliquota_irrf")
    table_deduction: Money = Field(..., alias="deducao_conforme_tabela")
    tax: Money = Field(..., alias="valor_irrf")
    reduction: Money = Field(..., alias="reducao_pl_1087_25")
    tax_after_reduction: Money | None = Field(None, alias="valor_irrf_apos_pl_1087_25")
    message: str | None = Field(None, alias="mensagem")
    trace: CalculationTrace | None = Field(None, alias="memoria_calculo")

    def to_payload(self) -> dict[str, Any]:
        """Flatten into the public JSON contract.

        The deduction basis is merged into the top level, so an itemized
        result carries contribution, dependents, alimony and dependents
        deduction while a simplified one only carries
        ``desconto_simplificado_aplicado``.
        """
        data = self.model_dump(mode="json", by_alias=True, exclude_none=True)
        deduction = data.pop("deducao")
        deduction.pop("tipo", None)
        payload: dict[str, Any] = {"rendimento_tributavel": data.pop("rendimento_tributavel")}
        payload.update(deduction)
        payload.update(data)
        return payload


__all__ = [
    "Money",
    "IrrfInput",
    "ItemizedDeduction",
    "SimplifiedDeduction",
    "DeductionBasis",
    "BracketResult",
    "TraceStep",
    "TraceInputs",
    "CalculationTrace",
    "IrrfResult",
]
