"""
assurvie - French life-insurance ("assurance vie") tax engines

Pure calculation engines over the 2024 French tax rules.

Modules:
    - domain.models: Pydantic input and result models
    - domain.calculator: Statutory scales (IR, 990 I, 757 B, succession, usufruct)
    - application.services: Withdrawal, death-benefit and fee-erosion engines
    - cli: JSON command-line harness, one subcommand per engine
"""

__version__ = "1.4.0"

from assurvie.application.services import (
    compute_death_benefit_tax,
    compute_withdrawal_tax,
    simulate_fee_erosion,
)
from assurvie.core.exceptions import AssurVieError, ValidationError

__all__ = [
    "compute_death_benefit_tax",
    "compute_withdrawal_tax",
    "simulate_fee_erosion",
    "AssurVieError",
    "ValidationError",
]
