"""Fee-erosion simulator data models."""

from __future__ import annotations

import pandas as pd
from pydantic import Field, computed_field

from assurvie.domain.models.base import EngineModel


class BucketRates(EngineModel):
    """Annual percentage per fund bucket."""

    guaranteed: float = Field(..., description="Fonds euros %")
    uc: float = Field(..., alias="UC", description="Unités de compte %")
    managed: float = Field(..., description="Gestion sous mandat %")


class FeeSimParams(EngineModel):
    """Parameters of a fee-erosion simulation."""

    duration_years: int = Field(..., description="Simulation horizon in years")
    initial_deposit: float = Field(..., description="Initial deposit in €")
    monthly_deposit: float = Field(..., description="Monthly deposit in €")

    # Allocation (guaranteed fund gets the remainder)
    fund_allocation_percent_uc: float = Field(..., alias="fundAllocationPercentUC")
    fund_allocation_percent_managed: float = Field(...)

    annual_return_by_bucket: BucketRates = Field(..., description="Annual return % per bucket")
    annual_management_fee_by_bucket: BucketRates = Field(
        ..., description="Annual management fee % per bucket"
    )
    entry_fee_percent: float = Field(..., description="Fee on every deposit %")
    arbitrage_fee_percent: float = Field(..., description="Fee per arbitrage %")
    arbitrage_count_per_year: int = Field(...)

    @computed_field
    @property
    def fund_allocation_percent_guaranteed(self) -> float:
        return 100.0 - self.fund_allocation_percent_uc - self.fund_allocation_percent_managed

    @computed_field
    @property
    def total_contributions(self) -> float:
        """Initial deposit plus every monthly deposit, before fees."""
        return self.initial_deposit + self.monthly_deposit * self.duration_years * 12


class FeeTotals(EngineModel):
    """Cumulative fees per category in €."""

    entry: float = 0.0
    management: float = 0.0
    arbitrage: float = 0.0

    @computed_field
    @property
    def total(self) -> float:
        return self.entry + self.management + self.arbitrage


class MonthPoint(EngineModel):
    """Capital at the end of one month."""

    month: int
    total: float
    guaranteed: float
    uc: float
    managed: float
    cumulative_entry_fees: float = 0.0
    cumulative_management_fees: float = 0.0
    cumulative_arbitrage_fees: float = 0.0


class FeeScenario(EngineModel):
    """Monthly series for one fee scenario (with or without fees)."""

    with_fees: bool
    points: list[MonthPoint] = Field(default_factory=list)
    fee_totals: FeeTotals = Field(default_factory=FeeTotals)
    annualized_return_pct: float = 0.0
    irr_pct: float | None = Field(None, description="Money-weighted annual return %")

    @computed_field
    @property
    def final_capital(self) -> float:
        return self.points[-1].total if self.points else 0.0

    def to_dataframe(self) -> pd.DataFrame:
        """Monthly series as a DataFrame indexed by month."""
        df = pd.DataFrame([p.model_dump() for p in self.points])
        if df.empty:
            return df
        return df.set_index("month")


class FeeSimulationResult(EngineModel):
    """Comparison of the two fee scenarios."""

    with_fees: FeeScenario
    without_fees: FeeScenario
    totals_by_fee_category: FeeTotals
    total_contributions: float
    final_capital_with_fees: float
    final_capital_without_fees: float
    capital_difference: float
    gain_with_fees: float
    gain_without_fees: float
    return_erosion_pct: float = Field(..., description="Share of the fee-free gain lost to fees")
    annualized_return_with_fees_pct: float
    annualized_return_without_fees_pct: float

    def comparison_dataframe(self) -> pd.DataFrame:
        """Side-by-side total capital per month for both scenarios."""
        return pd.DataFrame({
            "Sans frais": self.without_fees.to_dataframe()["total"],
            "Avec frais": self.with_fees.to_dataframe()["total"],
        })
