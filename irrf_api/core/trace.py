from __future__ import annotations

from typing import TYPE_CHECKING

from irrf_api.core.constants import (
    DEPENDENT_DEDUCTION,
    PL_1087_PHASE_OUT_CEILING,
    SIMPLIFIED_MINIMUM_DEDUCTION,
    round_cents,
)
from irrf_api.core.models import (
    BracketResult,
    CalculationTrace,
    IrrfInput,
    TraceInputs,
    TraceStep,
)

if TYPE_CHECKING:  # pragma: no cover - typing helper
    from irrf_api.core.calc import IrrfBreakdown


_REDUCTION_FORMULAS = {
    "full": "min(valor_irrf, 312,89)",
    "phase_out": "max(0, min(978,62 - 0,133145 * rendimento_tributavel, valor_irrf))",
    "not_applicable": "0",
}


def build_trace(in_: IrrfInput, breakdown: "IrrfBreakdown") -> CalculationTrace:
    """Build the "memória de cálculo": nine ordered, auditable steps.

    Every step records the values it consumed and its result, so each
    arithmetic step can be re-checked on its own. Step 5 reports the
    selected bracket as a (rate, deduction) pair instead of an amount.
    """
    b = breakdown
    income = round_cents(in_.taxable_income)
    contribution = round_cents(in_.official_pension_contribution)
    table_deduction = round_cents(b.bracket.deduction)

    steps = (
        TraceStep(
            order=1,
            title="Cálculo da dedução por dependentes",
            description="Quantidade de dependentes multiplicada pelo valor de dedução por dependente.",
            formula="quantidade_dependentes * 189,59",
            values={
                "quantidade_dependentes": in_.dependent_count,
                "valor_por_dependente": DEPENDENT_DEDUCTION,
            },
            result=b.dependents_deduction,
        ),
        TraceStep(
            order=2,
            title="Cálculo das deduções legais",
            description="Soma da Previdência Oficial, pensão alimentícia e a dedução por dependentes.",
            formula="previdencia_oficial + pensao_alimenticia + deducao_dependentes",
            values={
                "previdencia_oficial": contribution,
                "pensao_alimenticia": b.alimony,
                "deducao_dependentes": b.dependents_deduction,
            },
            result=b.legal_deductions_total,
        ),
        TraceStep(
            order=3,
            title="Escolha da dedução aplicada",
            description="Maior valor entre soma das deduções legais e o desconto simplificado mínimo.",
            formula="max(soma_deducoes, 607,20)",
            values={
                "soma_deducoes": b.legal_deductions_total,
                "desconto_simplificado_minimo": SIMPLIFIED_MINIMUM_DEDUCTION,
                "utilizou_simplificado_minimo": b.simplified_minimum_used,
            },
            result=b.applied_deduction,
        ),
        TraceStep(
            order=4,
            title="Base líquida do IRRF",
            description="Rendimento tributável menos a dedução aplicada.",
            formula="rendimento_tributavel - deducao_total_aplicada",
            values={
                "rendimento_tributavel": income,
                "deducao_total_aplicada": b.applied_deduction,
            },
            result=b.net_taxable_base,
        ),
        TraceStep(
            order=5,
            title="Faixa da tabela progressiva",
            description="Determinação da alíquota e parcela a deduzir conforme a base líquida.",
            formula="tabela progressiva mensal 05/2025",
            values={
                "base_liquida_irrf": b.net_taxable_base,
                "aliquota": b.bracket.rate,
                "deducao_conforme_tabela": table_deduction,
            },
            result=BracketResult(rate=b.bracket.rate, deduction=table_deduction),
        ),
        TraceStep(
            order=6,
            title="Imposto pela tabela progressiva",
            description="Cálculo do IR pela base líquida.",
            formula="base_liquida_irrf * (aliquota/100) - deducao_conforme_tabela",
            values={
                "base_liquida_irrf": b.net_taxable_base,
                "aliquota": b.bracket.rate,
                "deducao_conforme_tabela": table_deduction,
            },
            result=b.tax,
        ),
        TraceStep(
            order=7,
            title="Redução PL 1087/25 (regra aplicada)",
            description=(
                "Cálculo da redução conforme a faixa de rendimento e limitações legais, "
                "limitada ao imposto devido."
            ),
            formula=_REDUCTION_FORMULAS[b.reduction_rule],
            values={
                "rendimento_tributavel": income,
                "valor_irrf": b.tax,
                "limite_superior": PL_1087_PHASE_OUT_CEILING,
            },
            result=b.reduction,
        ),
        TraceStep(
            order=8,
            title="Redução aplicada ao imposto",
            description="Limitação da redução ao imposto devido (não negativa).",
            formula="min(max(reducao_pl, 0), valor_irrf)",
            values={
                "reducao_pl_calculada": b.reduction,
                "valor_irrf": b.tax,
            },
            result=b.reduction,
        ),
        TraceStep(
            order=9,
            title="IRRF após PL 1087/25",
            description="Imposto final após aplicar a redução da PL, quando aplicável.",
            formula="valor_irrf - reducao_pl_aplicada",
            values={
                "valor_irrf": b.tax,
                "reducao_pl_aplicada": b.reduction,
            },
            result=b.tax_after_reduction,
        ),
    )

    return CalculationTrace(
        inputs=TraceInputs(
            taxable_income=income,
            official_pension_contribution=contribution,
            dependent_count=in_.dependent_count,
            alimony=b.alimony,
        ),
        steps=steps,
    )


__all__ = ["build_trace"]
