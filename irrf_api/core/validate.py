from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import asdict, dataclass
from decimal import Decimal
from typing import Any, Optional

from irrf_api.core.models import IrrfInput

ALIMONY_KEY = "pensao_alimenticia"
# Older clients send the alimony key with a trailing space.
ALIMONY_FALLBACK_KEY = "pensao_alimenticia "

_MONEY_FIELDS = (
    ("taxable_income", "rendimento_tributavel"),
    ("official_pension_contribution", "previdencia_oficial"),
    ("alimony", ALIMONY_KEY),
)
_DEPENDENTS_FIELD = ("dependent_count", "quantidade_dependentes")


@dataclass
class ValidationIssue:
    code: str
    message: str
    field: Optional[str] = None
    severity: str = "error"


@dataclass(frozen=True)
class IssueTemplate:
    code: str
    message: str


ISSUE_PAYLOAD_NOT_OBJECT = IssueTemplate(
    "invalid_payload",
    "O corpo da requisição deve ser um objeto JSON.",
)
ISSUE_NOT_A_NUMBER = IssueTemplate(
    "not_a_number",
    "Campos inválidos: envie números em rendimento_tributavel, previdencia_oficial, "
    "quantidade_dependentes e pensao_alimenticia.",
)
ISSUE_NEGATIVE_AMOUNT = IssueTemplate(
    "negative_amount",
    "rendimento_tributavel, previdencia_oficial e pensao_alimenticia não podem ser negativos.",
)
ISSUE_INVALID_DEPENDENTS = IssueTemplate(
    "invalid_dependent_count",
    "quantidade_dependentes deve ser inteiro não negativo.",
)


class IrrfValidationError(ValueError):
    def __init__(self, template: IssueTemplate, issues: list[ValidationIssue]):
        super().__init__(template.message)
        self.code = template.code
        self.message = template.message
        self.issues = issues

    def as_dict(self) -> dict[str, Any]:
        return {"erro": self.message, "issues": [asdict(issue) for issue in self.issues]}


def _is_finite_number(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        # JSON integers beyond the double range parse to Infinity in browsers
        try:
            return math.isfinite(float(value))
        except OverflowError:
            return False
    if isinstance(value, float):
        return math.isfinite(value)
    if isinstance(value, Decimal):
        return value.is_finite() and math.isfinite(float(value))
    return False


def _to_decimal(value: Any) -> Decimal:
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        # repr gives the shortest decimal string that round-trips, so 0.1 stays 0.1
        return Decimal(repr(value))
    return Decimal(value)


def _is_whole(value: Any) -> bool:
    if isinstance(value, int):
        return True
    if isinstance(value, float):
        return value.is_integer()
    return value == value.to_integral_value()


def read_alimony(payload: Mapping[str, Any]) -> Any:
    value = payload.get(ALIMONY_KEY)
    if value is None:
        value = payload.get(ALIMONY_FALLBACK_KEY)
    return 0 if value is None else value


def _issue(template: IssueTemplate, field: str) -> ValidationIssue:
    return ValidationIssue(code=template.code, message=template.message, field=field)


def validate_irrf_payload(payload: Mapping[str, Any] | None) -> IrrfInput:
    """Turn a decoded request body into an :class:`IrrfInput`.

    Checks run in three stages (numeric, non-negative, whole dependent count)
    and the first stage with a failure raises :class:`IrrfValidationError`
    listing every offending field of that stage.
    """
    if payload is None:
        payload = {}
    if not isinstance(payload, Mapping):
        raise IrrfValidationError(
            ISSUE_PAYLOAD_NOT_OBJECT, [_issue(ISSUE_PAYLOAD_NOT_OBJECT, "body")]
        )

    raw = {
        "taxable_income": payload.get("rendimento_tributavel"),
        "official_pension_contribution": payload.get("previdencia_oficial"),
        "dependent_count": payload.get("quantidade_dependentes"),
        "alimony": read_alimony(payload),
    }

    wire_names = dict(_MONEY_FIELDS + (_DEPENDENTS_FIELD,))
    not_numbers = [
        _issue(ISSUE_NOT_A_NUMBER, wire_names[name])
        for name, value in raw.items()
        if not _is_finite_number(value)
    ]
    if not_numbers:
        raise IrrfValidationError(ISSUE_NOT_A_NUMBER, not_numbers)

    negatives = [
        _issue(ISSUE_NEGATIVE_AMOUNT, wire)
        for name, wire in _MONEY_FIELDS
        if raw[name] < 0
    ]
    if negatives:
        raise IrrfValidationError(ISSUE_NEGATIVE_AMOUNT, negatives)

    dependents = raw["dependent_count"]
    if not _is_whole(dependents) or dependents < 0:
        raise IrrfValidationError(
            ISSUE_INVALID_DEPENDENTS, [_issue(ISSUE_INVALID_DEPENDENTS, _DEPENDENTS_FIELD[1])]
        )

    return IrrfInput(
        taxable_income=_to_decimal(raw["taxable_income"]),
        official_pension_contribution=_to_decimal(raw["official_pension_contribution"]),
        dependent_count=int(dependents),
        alimony=_to_decimal(raw["alimony"]),
    )


__all__ = [
    "ALIMONY_KEY",
    "ALIMONY_FALLBACK_KEY",
    "IrrfValidationError",
    "IssueTemplate",
    "ValidationIssue",
    "read_alimony",
    "validate_irrf_payload",
]
