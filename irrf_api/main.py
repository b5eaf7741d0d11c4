import argparse
import json
import os
import sys
from decimal import Decimal
from typing import Any, Literal

from rich.console import Console
from rich.table import Table

from irrf_api.config import get_settings
from irrf_api.core.brackets import IRRF_TABLE_052025, describe_table, format_brl
from irrf_api.core.calc import compute_irrf
from irrf_api.core.models import IrrfResult, ItemizedDeduction
from irrf_api.core.validate import IrrfValidationError, validate_irrf_payload

ColorPreference = Literal["auto", "always", "never"]

EXIT_INVALID_INPUT = 2


def _resolve_color_preference(pref: ColorPreference) -> ColorPreference:
    if pref == "auto" and os.getenv("NO_COLOR"):
        return "never"
    return pref


def _get_console(pref: ColorPreference) -> Console:
    resolved = _resolve_color_preference(pref)
    if resolved == "never":
        return Console(no_color=True, highlight=False)
    return Console(force_terminal=resolved == "always" or None)


def _build_table(title: str, columns: list[str]) -> Table:
    table = Table(title=title, expand=False)
    for column in columns:
        table.add_column(column)
    return table


def _format_currency(value: Decimal) -> str:
    return f"R$ {format_brl(value)}"


def _format_rate(value: Decimal) -> str:
    return f"{value:.1f}%".replace(".", ",")


def _summary_rows(result: IrrfResult) -> list[tuple[str, str]]:
    rows = [("Rendimento tributável", _format_currency(result.taxable_income))]
    deduction = result.deduction
    if isinstance(deduction, ItemizedDeduction):
        rows.extend(
            [
                ("Previdência oficial", _format_currency(deduction.official_pension_contribution)),
                ("Qtd. dependentes", str(deduction.dependent_count)),
                ("Pensão alimentícia", _format_currency(deduction.alimony)),
                ("Deduções por dependentes", _format_currency(deduction.dependents_deduction)),
            ]
        )
    else:
        rows.append(("Desconto simplificado aplicado", _format_currency(deduction.applied_minimum)))
    rows.extend(
        [
            ("Base líquida IRRF", _format_currency(result.net_taxable_base)),
            ("Alíquota IRRF", _format_rate(result.rate)),
            ("Dedução conforme tabela", _format_currency(result.table_deduction)),
            ("Valor do IRRF", _format_currency(result.tax)),
            ("Redução PL 1087/25", _format_currency(result.reduction)),
        ]
    )
    if result.tax_after_reduction is not None:
        rows.append(("IRRF após PL 1087/25", _format_currency(result.tax_after_reduction)))
    return rows


def _print_summary(result: IrrfResult, console: Console) -> None:
    table = _build_table("IRRF", ["Item", "Valor"])
    for label, value in _summary_rows(result):
        table.add_row(label, value)
    console.print(table)
    if result.message:
        console.print(result.message)


def _print_trace(result: IrrfResult, console: Console) -> None:
    if result.trace is None:
        return
    table = _build_table("Memória de cálculo", ["#", "Etapa", "Fórmula", "Resultado"])
    for step in result.trace.steps:
        outcome = step.result
        if isinstance(outcome, Decimal):
            shown = _format_currency(outcome)
        else:
            shown = f"{_format_rate(outcome.rate)} / {_format_currency(outcome.deduction)}"
        table.add_row(str(step.order), step.title, step.formula, shown)
    console.print(table)


def _print_bracket_table(console: Console) -> None:
    table = _build_table("Tabela de IRRF (a partir de 05/2025)", ["Faixa", "Base (R$)", "Alíquota", "Dedução (R$)"])
    for row, bracket in zip(describe_table(), IRRF_TABLE_052025):
        table.add_row(
            str(row["faixa"]),
            str(row["base"]),
            _format_rate(bracket.rate),
            _format_currency(bracket.deduction),
        )
    console.print(table)


def _payload_from_args(args: argparse.Namespace) -> dict[str, Any]:
    return {
        "rendimento_tributavel": args.income,
        "previdencia_oficial": args.contribution,
        "quantidade_dependentes": args.dependents,
        "pensao_alimenticia": args.alimony,
    }


def _run_calc(args: argparse.Namespace, console: Console) -> int:
    try:
        in_ = validate_irrf_payload(_payload_from_args(args))
    except IrrfValidationError as exc:
        console.print(f"Erro: {exc.message}")
        return EXIT_INVALID_INPUT
    result = compute_irrf(in_, include_trace=args.trace)
    if args.json:
        print(json.dumps(result.to_payload(), ensure_ascii=False, indent=2))
        return 0
    _print_summary(result, console)
    if args.trace:
        _print_trace(result, console)
    return 0


def _run_serve(args: argparse.Namespace) -> int:
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "irrf_api.api.http:app",
        host=args.host or settings.host,
        port=args.port or settings.port,
    )
    return 0


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="irrf",
        description="Monthly IRRF calculator (table from 05/2025, PL 1087/25 reduction).",
    )
    parser.add_argument(
        "command",
        nargs="?",
        default="calc",
        choices=["calc", "table", "serve"],
        help="Action to perform.",
    )
    parser.add_argument("--income", type=float, help="Taxable income (rendimento tributável).")
    parser.add_argument(
        "--contribution", type=float, default=0.0, help="Official pension contribution (previdência oficial)."
    )
    parser.add_argument("--dependents", type=float, default=0, help="Number of dependents.")
    parser.add_argument("--alimony", type=float, default=0.0, help="Alimony paid (pensão alimentícia).")
    parser.add_argument("--trace", action="store_true", help="Show the step-by-step calculation.")
    parser.add_argument("--json", action="store_true", help="Print the API JSON payload instead of a table.")
    parser.add_argument("--host", help="Host to bind when serving (default: HOST or 0.0.0.0).")
    parser.add_argument("--port", type=int, help="Port to bind when serving (default: PORT or 3000).")
    parser.add_argument(
        "--color",
        choices=["auto", "always", "never"],
        default="auto",
        help="Color output preference (default: auto).",
    )
    parser.add_argument(
        "--no-color",
        dest="color",
        action="store_const",
        const="never",
        help="Alias for --color never.",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    console = _get_console(args.color)
    if args.command == "table":
        _print_bracket_table(console)
        return 0
    if args.command == "serve":
        return _run_serve(args)
    if args.income is None:
        console.print("Erro: informe --income (rendimento tributável).")
        return EXIT_INVALID_INPUT
    return _run_calc(args, console)


if __name__ == "__main__":
    sys.exit(main())
