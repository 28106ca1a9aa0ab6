"""Data models for assurvie."""

from .deces import (
    Beneficiary,
    BeneficiaryResult,
    ClauseKind,
    ClauseType,
    DecesInput,
    DecesResult,
    Kinship,
    Usufructuary,
)
from .frais import BucketRates, FeeScenario, FeeSimParams, FeeSimulationResult, FeeTotals, MonthPoint
from .rachat import ContractAge, HouseholdStatus, OptionChoice, RachatInput, RachatResult, TmiMode

__all__ = [
    "Beneficiary",
    "BeneficiaryResult",
    "ClauseKind",
    "ClauseType",
    "DecesInput",
    "DecesResult",
    "Kinship",
    "Usufructuary",
    "BucketRates",
    "FeeScenario",
    "FeeSimParams",
    "FeeSimulationResult",
    "FeeTotals",
    "MonthPoint",
    "ContractAge",
    "HouseholdStatus",
    "OptionChoice",
    "RachatInput",
    "RachatResult",
    "TmiMode",
]
