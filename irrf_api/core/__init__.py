from irrf_api.core.brackets import IRRF_TABLE_052025, IrrfBracket, describe_table, select_bracket
from irrf_api.core.calc import IrrfBreakdown, compute_breakdown, compute_irrf
from irrf_api.core.models import IrrfInput, IrrfResult
from irrf_api.core.validate import IrrfValidationError, ValidationIssue, validate_irrf_payload

__all__ = [
    "IRRF_TABLE_052025",
    "IrrfBracket",
    "IrrfBreakdown",
    "IrrfInput",
    "IrrfResult",
    "IrrfValidationError",
    "ValidationIssue",
    "compute_breakdown",
    "compute_irrf",
    "describe_table",
    "select_bracket",
    "validate_irrf_payload",
]
