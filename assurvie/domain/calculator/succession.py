"""Transmission tax scales: succession duties, articles 990 I and 757 B, usufruct.

Static lookup tables keyed by kinship plus the pure functions that read them.
Amounts are those in force for 2024.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping

from assurvie.core.exceptions import ValidationError
from assurvie.domain.calculator.brackets import Bracket, marginal_rate, progressive_tax
from assurvie.domain.models.deces import Kinship

# Article 990 I (premiums paid before age 70)
ALLOWANCE_990I = 152_500.0
SCALE_990I: tuple[Bracket, ...] = (
    Bracket(0.0, 0.20),
    Bracket(700_000.0, 0.3125),
)

# Article 757 B (premiums paid after age 70), one allowance for all beneficiaries
ALLOWANCE_757B = 30_500.0

_DIRECT_LINE_SCALE: tuple[Bracket, ...] = (
    Bracket(0.0, 0.05),
    Bracket(8_072.0, 0.10),
    Bracket(12_109.0, 0.15),
    Bracket(15_932.0, 0.20),
    Bracket(552_324.0, 0.30),
    Bracket(902_838.0, 0.40),
    Bracket(1_805_677.0, 0.45),
)
_SIBLING_SCALE: tuple[Bracket, ...] = (
    Bracket(0.0, 0.35),
    Bracket(24_430.0, 0.45),
)
_FLAT_60: tuple[Bracket, ...] = (Bracket(0.0, 0.60),)


@dataclass(frozen=True)
class KinshipTaxRule:
    """Tax treatment attached to one kinship value."""

    allowance: float
    brackets: tuple[Bracket, ...]
    fully_exempt: bool
    brackets_757b: tuple[Bracket, ...]


KINSHIP_TAX_TABLE: Mapping[Kinship, KinshipTaxRule] = MappingProxyType({
    # Loi Tepa: spouse / PACS partner exempt whatever the amount
    Kinship.SPOUSE: KinshipTaxRule(
        allowance=80_724.0,
        brackets=(Bracket(0.0, 0.0),),
        fully_exempt=True,
        brackets_757b=(Bracket(0.0, 0.0),),
    ),
    Kinship.CHILD: KinshipTaxRule(
        allowance=100_000.0,
        brackets=_DIRECT_LINE_SCALE,
        fully_exempt=False,
        brackets_757b=(Bracket(0.0, 0.20),),
    ),
    Kinship.GRANDCHILD: KinshipTaxRule(
        allowance=1_594.0,
        brackets=_DIRECT_LINE_SCALE,
        fully_exempt=False,
        brackets_757b=_FLAT_60,
    ),
    Kinship.SIBLING: KinshipTaxRule(
        allowance=15_932.0,
        brackets=_SIBLING_SCALE,
        fully_exempt=False,
        brackets_757b=_SIBLING_SCALE,
    ),
    Kinship.NEPHEW_NIECE: KinshipTaxRule(
        allowance=7_967.0,
        brackets=(Bracket(0.0, 0.55),),
        fully_exempt=False,
        brackets_757b=_FLAT_60,
    ),
    Kinship.OTHER: KinshipTaxRule(
        allowance=1_594.0,
        brackets=_FLAT_60,
        fully_exempt=False,
        brackets_757b=_FLAT_60,
    ),
})

# Article 669 CGI: (age strictly below, usufruct %)
USUFRUCT_SCALE: tuple[tuple[int, float], ...] = (
    (21, 90.0),
    (31, 80.0),
    (41, 70.0),
    (51, 60.0),
    (61, 50.0),
    (71, 40.0),
    (81, 30.0),
    (91, 20.0),
)
USUFRUCT_FLOOR_PCT = 10.0


def get_rule(kinship: Kinship | str) -> KinshipTaxRule:
    """Look up the tax rule for a kinship value."""
    return KINSHIP_TAX_TABLE[Kinship(kinship)]


def is_fully_exempt(kinship: Kinship | str) -> bool:
    return get_rule(kinship).fully_exempt


def usufruct_percentage(age: int) -> float:
    """Statutory usufruct value in % of full ownership for a usufructuary age.

    Args:
        age: Age of the usufructuary in years

    Returns:
        Usufruct percentage (10 to 90)
    """
    if age < 0:
        raise ValidationError("usufructuary.age", age, "must be >= 0")
    for upper, pct in USUFRUCT_SCALE:
        if age < upper:
            return pct
    return USUFRUCT_FLOOR_PCT


def bare_ownership_percentage(age: int) -> float:
    """Bare-ownership value in %, complement of the usufruct percentage."""
    return 100.0 - usufruct_percentage(age)


def tax_990i(taxable_amount: float) -> float:
    """Article 990 I levy: 20% up to 700 000 €, 31.25% beyond."""
    return progressive_tax(taxable_amount, SCALE_990I)


def tax_757b(taxable_amount: float, kinship: Kinship | str) -> float:
    """Article 757 B duties on the taxable remainder of post-70 premiums.

    The whole remainder is taxed at the rate of the bracket it falls into:
    a sibling pays 35% on a remainder up to 24 430 €, 45% on all of it above.
    """
    rule = get_rule(kinship)
    if rule.fully_exempt or taxable_amount <= 0:
        return 0.0
    return taxable_amount * marginal_rate(taxable_amount, rule.brackets_757b)


def succession_tax(amount: float, kinship: Kinship | str) -> float:
    """Classic inheritance duties on an amount received outside life insurance.

    Applies the kinship allowance then the kinship succession scale.
    """
    rule = get_rule(kinship)
    if rule.fully_exempt:
        return 0.0
    return progressive_tax(max(0.0, amount - rule.allowance), rule.brackets)
