"""Engine services for assurvie."""

from .deces import compute_death_benefit_tax
from .exporter import ResultExporter
from .frais import FeeSimulationEngine, simulate_fee_erosion
from .rachat import compute_withdrawal_tax

__all__ = [
    "compute_death_benefit_tax",
    "compute_withdrawal_tax",
    "simulate_fee_erosion",
    "FeeSimulationEngine",
    "ResultExporter",
]
