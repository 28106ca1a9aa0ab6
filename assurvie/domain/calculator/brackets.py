"""Progressive bracket arithmetic and the income-tax scale.

Contains the 2024 progressive income-tax scale (barème IR), the family
quotient parts used by the automatic TMI mode, and the generic bracket
evaluator shared with the succession scales.
"""

from __future__ import annotations

from typing import NamedTuple

from assurvie.core.exceptions import ValidationError
from assurvie.domain.models.rachat import HouseholdStatus


class Bracket(NamedTuple):
    """One slice of a progressive scale, applying from `threshold` upwards."""

    threshold: float
    rate: float


# Barème IR 2024 (revenus 2023), per fiscal part
INCOME_TAX_SCALE: tuple[Bracket, ...] = (
    Bracket(0.0, 0.0),
    Bracket(11_294.0, 0.11),
    Bracket(28_797.0, 0.30),
    Bracket(82_341.0, 0.41),
    Bracket(177_106.0, 0.45),
)


def progressive_tax(amount: float, brackets: tuple[Bracket, ...]) -> float:
    """Apply a progressive scale to an amount.

    Each bracket's rate applies to the slice between its threshold and the
    next bracket's threshold; the last bracket is open-ended.

    Args:
        amount: Taxable amount in €
        brackets: Scale ordered by ascending threshold, first threshold 0

    Returns:
        Tax due in €
    """
    if amount <= 0:
        return 0.0

    tax = 0.0
    for i, bracket in enumerate(brackets):
        if amount <= bracket.threshold:
            break
        upper = brackets[i + 1].threshold if i + 1 < len(brackets) else amount
        tax += (min(amount, upper) - bracket.threshold) * bracket.rate
    return tax


def marginal_rate(amount: float, brackets: tuple[Bracket, ...]) -> float:
    """Rate of the bracket the last euro of `amount` falls into."""
    rate = brackets[0].rate
    for bracket in brackets:
        if amount > bracket.threshold:
            rate = bracket.rate
    return rate


def compute_fiscal_parts(status: HouseholdStatus | str, dependent_children: int = 0) -> float:
    """Number of family-quotient parts.

    One part for a single person, two for a couple, plus half a part for each
    of the first two children and a full part from the third child on.

    Args:
        status: Household situation
        dependent_children: Number of dependent children

    Returns:
        Number of fiscal parts
    """
    if dependent_children < 0:
        raise ValidationError("dependent_children", dependent_children, "must be >= 0")

    parts = 2.0 if HouseholdStatus(status) is HouseholdStatus.COUPLE else 1.0
    if dependent_children <= 2:
        parts += 0.5 * dependent_children
    else:
        parts += 1.0 + (dependent_children - 2)
    return parts


def income_tax(net_taxable_income: float, fiscal_parts: float) -> float:
    """Income tax of a household using the family quotient (no ceiling)."""
    if fiscal_parts < 1:
        raise ValidationError("fiscal_parts", fiscal_parts, "must be >= 1")
    quotient = max(0.0, net_taxable_income) / fiscal_parts
    return progressive_tax(quotient, INCOME_TAX_SCALE) * fiscal_parts


def marginal_tax_rate(net_taxable_income: float, fiscal_parts: float) -> float:
    """Marginal tax rate (TMI) in % for a household.

    Args:
        net_taxable_income: Household net taxable income in €
        fiscal_parts: Number of family-quotient parts

    Returns:
        TMI as percentage (e.g., 30.0)
    """
    if net_taxable_income < 0:
        raise ValidationError("net_taxable_income", net_taxable_income, "must be >= 0")
    if fiscal_parts < 1:
        raise ValidationError("fiscal_parts", fiscal_parts, "must be >= 1")
    return round(marginal_rate(net_taxable_income / fiscal_parts, INCOME_TAX_SCALE) * 100.0, 2)
