"""Statutory scales and the pure functions evaluating them."""

from .brackets import (
    INCOME_TAX_SCALE,
    Bracket,
    compute_fiscal_parts,
    income_tax,
    marginal_rate,
    marginal_tax_rate,
    progressive_tax,
)
from .succession import (
    ALLOWANCE_757B,
    ALLOWANCE_990I,
    KINSHIP_TAX_TABLE,
    USUFRUCT_SCALE,
    KinshipTaxRule,
    bare_ownership_percentage,
    get_rule,
    is_fully_exempt,
    succession_tax,
    tax_757b,
    tax_990i,
    usufruct_percentage,
)

__all__ = [
    "INCOME_TAX_SCALE",
    "Bracket",
    "compute_fiscal_parts",
    "income_tax",
    "marginal_rate",
    "marginal_tax_rate",
    "progressive_tax",
    "ALLOWANCE_757B",
    "ALLOWANCE_990I",
    "KINSHIP_TAX_TABLE",
    "USUFRUCT_SCALE",
    "KinshipTaxRule",
    "bare_ownership_percentage",
    "get_rule",
    "is_fully_exempt",
    "succession_tax",
    "tax_757b",
    "tax_990i",
    "usufruct_percentage",
]
