"""Fee-erosion simulation.

Projects a contract month by month across three fund buckets (fonds euros,
unités de compte, gestion sous mandat), once with every fee applied and once
without, so that the erosion caused by fees can be measured.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from math import isfinite

import numpy_financial as npf

from assurvie.core.exceptions import ValidationError
from assurvie.core.logging import get_logger
from assurvie.core.settings import get_settings
from assurvie.domain.models.frais import (
    FeeScenario,
    FeeSimParams,
    FeeSimulationResult,
    FeeTotals,
    MonthPoint,
)

log = get_logger(__name__)

BUCKETS = ("guaranteed", "uc", "managed")


@dataclass
class BucketState:
    """Capital held in each bucket plus the running fee totals."""

    capital: dict[str, float] = field(default_factory=lambda: {b: 0.0 for b in BUCKETS})
    frais_versement: float = 0.0
    frais_gestion: float = 0.0
    frais_arbitrage: float = 0.0

    @property
    def total(self) -> float:
        return sum(self.capital.values())

    def snapshot(self, month: int) -> MonthPoint:
        return MonthPoint(
            month=month,
            total=self.total,
            guaranteed=self.capital["guaranteed"],
            uc=self.capital["uc"],
            managed=self.capital["managed"],
            cumulative_entry_fees=self.frais_versement,
            cumulative_management_fees=self.frais_gestion,
            cumulative_arbitrage_fees=self.frais_arbitrage,
        )


def validate_params(params: FeeSimParams, max_duration_years: int | None = None) -> None:
    """Reject parameters the simulator cannot run with.

    Raises:
        ValidationError: On the first violated constraint
    """
    max_years = max_duration_years
    if max_years is None:
        max_years = get_settings().max_duration_years

    if params.duration_years <= 0:
        raise ValidationError("duration_years", params.duration_years, "must be > 0")
    if params.duration_years > max_years:
        raise ValidationError("duration_years", params.duration_years, f"must be <= {max_years}")
    if params.initial_deposit < 0:
        raise ValidationError("initial_deposit", params.initial_deposit, "must be >= 0")
    if params.monthly_deposit < 0:
        raise ValidationError("monthly_deposit", params.monthly_deposit, "must be >= 0")
    if params.initial_deposit == 0 and params.monthly_deposit == 0:
        raise ValidationError("initial_deposit", 0, "at least one deposit must be positive")

    for name in ("fund_allocation_percent_uc", "fund_allocation_percent_managed"):
        value = getattr(params, name)
        if not 0 <= value <= 100:
            raise ValidationError(name, value, "must be between 0 and 100")
    allocation = params.fund_allocation_percent_uc + params.fund_allocation_percent_managed
    if allocation > 100:
        raise ValidationError(
            "allocation", allocation, "UC + managed allocation cannot exceed 100%"
        )

    for bucket in BUCKETS:
        rendement = getattr(params.annual_return_by_bucket, bucket)
        if rendement <= -100:
            raise ValidationError(f"annual_return_by_bucket.{bucket}", rendement, "must be > -100")
        frais = getattr(params.annual_management_fee_by_bucket, bucket)
        if frais < 0:
            raise ValidationError(f"annual_management_fee_by_bucket.{bucket}", frais, "must be >= 0")

    for name in ("entry_fee_percent", "arbitrage_fee_percent"):
        value = getattr(params, name)
        if not 0 <= value <= 100:
            raise ValidationError(name, value, "must be between 0 and 100")
    if params.arbitrage_count_per_year < 0:
        raise ValidationError(
            "arbitrage_count_per_year", params.arbitrage_count_per_year, "must be >= 0"
        )


def annualized_return(final_capital: float, contributions: float, years: int) -> float:
    """Annualized net return in %: (final / contributions)^(1/years) - 1."""
    if contributions <= 0 or years <= 0 or final_capital <= 0:
        return 0.0
    return ((final_capital / contributions) ** (1.0 / years) - 1.0) * 100.0


def money_weighted_return(params: FeeSimParams, final_capital: float) -> float | None:
    """Annual IRR of the deposit schedule against the final capital, in %.

    Deposits of month m are credited at the start of that month, so the first
    monthly deposit shares period 0 with the initial deposit.

    Returns:
        IRR in %, or None when no finite solution exists
    """
    n_months = params.duration_years * 12
    flux = [-params.monthly_deposit] * (n_months + 1)
    flux[0] -= params.initial_deposit
    flux[-1] = final_capital

    monthly_irr = float(npf.irr(flux))
    if not isfinite(monthly_irr):
        return None
    return ((1.0 + monthly_irr) ** 12 - 1.0) * 100.0


class FeeSimulationEngine:
    """Month-by-month projection of a multi-bucket contract.

    Runs one scenario at a time; compare() runs both and derives the erosion
    metrics.
    """

    def __init__(self, params: FeeSimParams):
        self.params = params
        total_uc = params.fund_allocation_percent_uc / 100.0
        total_managed = params.fund_allocation_percent_managed / 100.0
        self.allocation = {
            "guaranteed": max(0.0, 1.0 - total_uc - total_managed),
            "uc": total_uc,
            "managed": total_managed,
        }
        self.monthly_return = {
            b: getattr(params.annual_return_by_bucket, b) / 100.0 / 12.0 for b in BUCKETS
        }
        self.monthly_fee = {
            b: getattr(params.annual_management_fee_by_bucket, b) / 100.0 / 12.0 for b in BUCKETS
        }

    def _credit(self, state: BucketState, amount: float, with_fees: bool) -> None:
        """Deduct the entry fee then split a deposit across buckets."""
        if amount <= 0:
            return
        if with_fees:
            frais = amount * self.params.entry_fee_percent / 100.0
            amount -= frais
            state.frais_versement += frais
        for b in BUCKETS:
            state.capital[b] += amount * self.allocation[b]

    def _simulate_month(self, state: BucketState, month: int, with_fees: bool) -> None:
        # 1-2. Deposit, net of entry fee
        self._credit(state, self.params.monthly_deposit, with_fees)

        # 3. Returns
        for b in BUCKETS:
            state.capital[b] *= 1.0 + self.monthly_return[b]

        if not with_fees:
            return

        # 4. Management fees on each bucket's balance
        for b in BUCKETS:
            frais = state.capital[b] * self.monthly_fee[b]
            state.capital[b] -= frais
            state.frais_gestion += frais

        # 5. Yearly arbitrage fees, taken pro rata from every bucket
        if month % 12 == 0 and self.params.arbitrage_count_per_year > 0:
            taux = self.params.arbitrage_fee_percent / 100.0 * self.params.arbitrage_count_per_year
            taux = min(taux, 1.0)
            for b in BUCKETS:
                frais = state.capital[b] * taux
                state.capital[b] -= frais
                state.frais_arbitrage += frais

    def simulate(self, with_fees: bool) -> FeeScenario:
        """Run one scenario.

        Args:
            with_fees: Apply entry, management and arbitrage fees

        Returns:
            FeeScenario with one point per month, month 0 included
        """
        state = BucketState()
        self._credit(state, self.params.initial_deposit, with_fees)
        points = [state.snapshot(0)]

        for month in range(1, self.params.duration_years * 12 + 1):
            self._simulate_month(state, month, with_fees)
            points.append(state.snapshot(month))

        final = state.total
        return FeeScenario(
            with_fees=with_fees,
            points=points,
            fee_totals=FeeTotals(
                entry=state.frais_versement,
                management=state.frais_gestion,
                arbitrage=state.frais_arbitrage,
            ),
            annualized_return_pct=annualized_return(
                final, self.params.total_contributions, self.params.duration_years
            ),
            irr_pct=money_weighted_return(self.params, final),
        )

    def compare(self) -> FeeSimulationResult:
        """Run both scenarios and derive the erosion metrics."""
        sans_frais = self.simulate(with_fees=False)
        avec_frais = self.simulate(with_fees=True)

        total_versements = self.params.total_contributions
        capital_sans = sans_frais.final_capital
        capital_avec = avec_frais.final_capital
        difference = capital_sans - capital_avec
        gain_sans = capital_sans - total_versements
        gain_avec = capital_avec - total_versements
        impact = difference / gain_sans * 100.0 if gain_sans > 0 else 0.0

        return FeeSimulationResult(
            with_fees=avec_frais,
            without_fees=sans_frais,
            totals_by_fee_category=avec_frais.fee_totals,
            total_contributions=total_versements,
            final_capital_with_fees=capital_avec,
            final_capital_without_fees=capital_sans,
            capital_difference=difference,
            gain_with_fees=gain_avec,
            gain_without_fees=gain_sans,
            return_erosion_pct=impact,
            annualized_return_with_fees_pct=avec_frais.annualized_return_pct,
            annualized_return_without_fees_pct=sans_frais.annualized_return_pct,
        )


def simulate_fee_erosion(params: FeeSimParams) -> FeeSimulationResult:
    """Simulate a contract with and without fees.

    This is a convenience wrapper around FeeSimulationEngine.

    Raises:
        ValidationError: If durations, deposits, allocations or fees are out of range
    """
    try:
        validate_params(params)
    except ValidationError as e:
        log.warning("fee_simulation_input_rejected", param=e.param_name, reason=e.reason)
        raise

    result = FeeSimulationEngine(params).compare()

    log.info(
        "fee_simulation_completed",
        months=params.duration_years * 12,
        final_with_fees=round(result.final_capital_with_fees, 2),
        final_without_fees=round(result.final_capital_without_fees, 2),
        total_fees=round(result.totals_by_fee_category.total, 2),
    )
    return result
