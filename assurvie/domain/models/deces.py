"""Death-benefit (décès) data models.

A beneficiary either receives full ownership of its share or one side of a
dismembered share (usufruct or bare ownership). Both sides of a dismembered
pair reference the same usufructuary, whose age drives the split.
"""

from __future__ import annotations

from enum import Enum

from pydantic import Field

from assurvie.domain.models.base import EngineModel


class Kinship(str, Enum):
    """Relationship between the insured and the beneficiary."""

    SPOUSE = "spouse"
    CHILD = "child"
    GRANDCHILD = "grandchild"
    SIBLING = "sibling"
    NEPHEW_NIECE = "nephew_niece"
    OTHER = "other"


class ClauseKind(str, Enum):
    FULL_OWNERSHIP = "full_ownership"
    USUFRUCT = "usufruct"
    BARE_OWNERSHIP = "bare_ownership"


class ClauseType(str, Enum):
    STANDARD = "standard"
    CUSTOM = "custom"
    DISMEMBERED = "dismembered"


class Usufructuary(EngineModel):
    """Holder of the usufruct in a dismembered clause."""

    name: str
    age: int
    kinship: Kinship


class Beneficiary(EngineModel):
    """One line of the beneficiary clause."""

    name: str
    kinship: Kinship
    age: int
    share_of_contract_percent: float = Field(..., description="Share of the contract in %")
    clause_kind: ClauseKind
    usufructuary: Usufructuary | None = Field(None)

    @property
    def is_dismembered(self) -> bool:
        return self.clause_kind is not ClauseKind.FULL_OWNERSHIP


class DecesInput(EngineModel):
    """Contract state at death and the beneficiary clause."""

    contract_value_at_death: float = Field(..., description="Contract value at death in €")
    premiums_before_age_70: float = Field(..., description="Premiums paid before age 70 in €")
    # A blank form field means no premium after 70
    premiums_after_age_70: float = Field(default=0.0, description="Premiums paid after age 70 in €")
    clause_type: ClauseType
    beneficiaries: list[Beneficiary]


class BeneficiaryResult(EngineModel):
    """Tax breakdown for one position (full owner, usufructuary or bare owner)."""

    name: str
    kinship: Kinship
    clause_kind: ClauseKind
    effective_share: float = Field(..., description="Fraction of the contract (0-1)")
    gross_amount: float

    # Article 990 I
    share_990i: float
    allowance_990i: float
    taxable_990i: float
    tax_990i: float

    # Article 757 B
    share_757b: float
    premiums_757b: float
    exempt_growth_757b: float
    allowance_757b: float
    taxable_757b: float
    tax_757b: float

    total_tax: float
    net_amount: float
    effective_rate_pct: float
    is_fully_exempt: bool
    succession_tax_equivalent: float = Field(..., description="Duties outside life insurance")

    # Dismemberment details
    usufruct_pct: float | None = None
    bare_ownership_pct: float | None = None
    usufructuary_name: str | None = None


class DecesResult(EngineModel):
    """Aggregated death-benefit taxation."""

    beneficiaries: list[BeneficiaryResult] = Field(default_factory=list)
    total_transmitted: float
    total_tax: float
    total_net: float
    global_effective_rate_pct: float
    ratio_after_70_pct: float
    base_990i: float
    base_757b: float
    savings_vs_succession: float
    optimisations: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
