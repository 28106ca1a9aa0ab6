"""Withdrawal (rachat) data models.

Range and cross-field checks are performed by the engine so that every
violation surfaces as assurvie's ValidationError.
"""

from __future__ import annotations

from enum import Enum

from pydantic import Field

from assurvie.domain.models.base import EngineModel


class HouseholdStatus(str, Enum):
    """Household situation used to derive fiscal parts."""

    SINGLE = "single"
    COUPLE = "couple"


class ContractAge(str, Enum):
    """Contract seniority relative to the 8-year threshold."""

    UNDER_8_YEARS = "under8years"
    OVER_8_YEARS = "over8years"


class TmiMode(str, Enum):
    """How the marginal tax rate is obtained."""

    MANUAL = "manual"
    AUTOMATIC = "automatic"


class OptionChoice(str, Enum):
    PFU = "pfu"
    IR = "ir"
    EQUAL = "equal"


class RachatInput(EngineModel):
    """Partial or total withdrawal request."""

    contract_value: float = Field(..., description="Current contract value in €")
    total_premiums_paid: float = Field(..., description="Sum of premiums paid in €")
    withdrawal_amount: float = Field(..., description="Withdrawal amount in €")
    contract_age: ContractAge = Field(..., description="Seniority relative to 8 years")
    # Required in manual TMI mode, derived in automatic mode
    marginal_tax_rate_percent: float | None = Field(None, description="TMI in %")
    fiscal_parts_count: float | None = Field(None, description="Family-quotient parts")

    # Automatic TMI
    tmi_mode: TmiMode = Field(default=TmiMode.MANUAL)
    net_taxable_income: float | None = Field(None, description="Household net taxable income in €")
    household_status: HouseholdStatus = Field(default=HouseholdStatus.SINGLE)
    dependent_children: int = Field(default=0)

    allowance_override: float | None = Field(
        None, description="Replaces the 4 600 / 9 200 € allowance, 0 or None keeps the default"
    )


class RachatResult(EngineModel):
    """PFU versus progressive income-tax comparison for one withdrawal."""

    withdrawal_amount: float
    taxable_interest_share: float
    social_levies: float

    # PFU path
    tax_pfu: float
    net_pfu: float
    effective_rate_pfu_pct: float

    # Progressive IR path
    allowance: float
    taxable_base_ir: float
    tax_ir: float
    net_ir: float
    effective_rate_ir_pct: float

    # Comparison
    savings_pfu: float = Field(..., description="Cost saved by PFU versus IR")
    savings_ir: float = Field(..., description="Cost saved by IR versus PFU")
    best_option: OptionChoice

    # Rate actually applied
    marginal_tax_rate_percent: float
    fiscal_parts_count: float

    message: str
    warnings: list[str] = Field(default_factory=list)
    advice: list[str] = Field(default_factory=list)
