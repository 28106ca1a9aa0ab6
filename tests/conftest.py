"""Pytest fixtures for assurvie tests."""

import os
import sys

import pytest

# Add project root to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from assurvie.domain.models import (  # noqa: E402
    Beneficiary,
    BucketRates,
    ClauseKind,
    ClauseType,
    DecesInput,
    FeeSimParams,
    Kinship,
    RachatInput,
    Usufructuary,
)


@pytest.fixture
def rachat_scenario_a():
    """Withdrawal of 10 000 € on a 50 000 € contract holding 15 000 € of gains."""
    return RachatInput(
        contract_value=50_000,
        total_premiums_paid=35_000,
        withdrawal_amount=10_000,
        contract_age="over8years",
        marginal_tax_rate_percent=30,
        fiscal_parts_count=1,
    )


@pytest.fixture
def deces_contract():
    """Factory for a 500 000 € contract with 200 000 € of pre-70 premiums."""

    def _make(beneficiaries, premiums_after_70=0.0, clause_type=ClauseType.STANDARD):
        return DecesInput(
            contract_value_at_death=500_000,
            premiums_before_age_70=200_000,
            premiums_after_age_70=premiums_after_70,
            clause_type=clause_type,
            beneficiaries=beneficiaries,
        )

    return _make


@pytest.fixture
def two_children():
    return [
        Beneficiary(
            name="Alice", kinship=Kinship.CHILD, age=35, share_of_contract_percent=50,
            clause_kind=ClauseKind.FULL_OWNERSHIP,
        ),
        Beneficiary(
            name="Bruno", kinship=Kinship.CHILD, age=32, share_of_contract_percent=50,
            clause_kind=ClauseKind.FULL_OWNERSHIP,
        ),
    ]


@pytest.fixture
def dismembered_pair():
    """Spouse aged 65 holds the usufruct, the child holds the bare ownership."""
    conjoint = Usufructuary(name="Claire", age=65, kinship=Kinship.SPOUSE)
    return [
        Beneficiary(
            name="Claire",
            kinship=Kinship.SPOUSE,
            age=65,
            share_of_contract_percent=100,
            clause_kind=ClauseKind.USUFRUCT,
            usufructuary=conjoint,
        ),
        Beneficiary(
            name="David",
            kinship=Kinship.CHILD,
            age=38,
            share_of_contract_percent=100,
            clause_kind=ClauseKind.BARE_OWNERSHIP,
            usufructuary=conjoint,
        ),
    ]


@pytest.fixture
def fee_params():
    """Reference 15-year contract: 10 000 € upfront plus 300 € a month."""
    return FeeSimParams(
        duration_years=15,
        initial_deposit=10_000,
        monthly_deposit=300,
        fund_allocation_percent_uc=30,
        fund_allocation_percent_managed=0,
        annual_return_by_bucket=BucketRates(guaranteed=2.2, uc=5.0, managed=7.0),
        annual_management_fee_by_bucket=BucketRates(guaranteed=0.6, uc=0.8, managed=1.9),
        entry_fee_percent=2.0,
        arbitrage_fee_percent=0.5,
        arbitrage_count_per_year=1,
    )
