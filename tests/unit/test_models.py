"""Unit tests for domain models."""

import pytest
from pydantic import ValidationError as PydanticValidationError

from assurvie.domain.models import (
    Beneficiary,
    BucketRates,
    ClauseKind,
    ContractAge,
    DecesInput,
    FeeScenario,
    FeeSimParams,
    FeeTotals,
    Kinship,
    RachatInput,
    TmiMode,
    Usufructuary,
)


def fee_document(**overrides):
    document = {
        "durationYears": 2,
        "initialDeposit": 1_000,
        "monthlyDeposit": 50,
        "fundAllocationPercentUC": 30,
        "fundAllocationPercentManaged": 20,
        "annualReturnByBucket": {"guaranteed": 2.2, "UC": 5, "managed": 7},
        "annualManagementFeeByBucket": {"guaranteed": 0.6, "UC": 0.8, "managed": 1.9},
        "entryFeePercent": 2,
        "arbitrageFeePercent": 0.5,
        "arbitrageCountPerYear": 1,
    }
    document.update(overrides)
    return document


class TestRachatInput:
    """Tests for RachatInput parsing."""

    def test_snake_case(self):
        data = RachatInput(
            contract_value=1_000,
            total_premiums_paid=800,
            withdrawal_amount=100,
            contract_age="over8years",
            marginal_tax_rate_percent=30,
            fiscal_parts_count=1,
        )
        assert data.contract_age is ContractAge.OVER_8_YEARS
        assert data.tmi_mode is TmiMode.MANUAL
        assert data.marginal_tax_rate_percent == 30.0
        assert data.allowance_override is None

    def test_camel_case(self):
        data = RachatInput.model_validate({
            "contractValue": 50_000,
            "totalPremiumsPaid": 35_000,
            "withdrawalAmount": 10_000,
            "contractAge": "under8years",
            "marginalTaxRatePercent": 11,
            "fiscalPartsCount": 2,
        })
        assert data.contract_value == 50_000
        assert data.contract_age is ContractAge.UNDER_8_YEARS
        assert data.marginal_tax_rate_percent == 11
        assert data.fiscal_parts_count == 2

    def test_unknown_key_rejected(self):
        """A misspelt key fails loudly instead of being dropped."""
        with pytest.raises(PydanticValidationError) as exc:
            RachatInput.model_validate({
                "contractValue": 50_000,
                "totalPremiumsPaid": 35_000,
                "withdrawalAmount": 10_000,
                "contractAge": "under8years",
                "marginalTaxRatePct": 45,
            })
        assert "marginalTaxRatePct" in str(exc.value)

    def test_tmi_optional_at_parse_time(self):
        """Automatic mode derives TMI and parts, so the model does not require them."""
        data = RachatInput.model_validate({
            "contractValue": 50_000,
            "totalPremiumsPaid": 35_000,
            "withdrawalAmount": 10_000,
            "contractAge": "over8years",
            "tmiMode": "automatic",
            "netTaxableIncome": 40_000,
        })
        assert data.marginal_tax_rate_percent is None
        assert data.fiscal_parts_count is None

    def test_unknown_contract_age(self):
        with pytest.raises(PydanticValidationError):
            RachatInput(
                contract_value=1_000,
                total_premiums_paid=800,
                withdrawal_amount=100,
                contract_age="twelve years",
            )

    @pytest.mark.parametrize("missing", ["withdrawalAmount", "contractAge"])
    def test_missing_required(self, missing):
        document = {
            "contractValue": 1_000,
            "totalPremiumsPaid": 800,
            "withdrawalAmount": 100,
            "contractAge": "over8years",
        }
        del document[missing]
        with pytest.raises(PydanticValidationError):
            RachatInput.model_validate(document)

    def test_dump_by_alias(self):
        data = RachatInput(
            contract_value=1_000,
            total_premiums_paid=800,
            withdrawal_amount=100,
            contract_age="over8years",
            marginal_tax_rate_percent=30,
        )
        dumped = data.model_dump(by_alias=True)
        assert "contractValue" in dumped
        assert "marginalTaxRatePercent" in dumped


class TestDecesModels:
    """Tests for beneficiary and contract models."""

    def test_post_70_premiums_default_to_zero(self):
        data = DecesInput(
            contract_value_at_death=100_000,
            premiums_before_age_70=50_000,
            clause_type="standard",
            beneficiaries=[],
        )
        assert data.premiums_after_age_70 == 0.0

    @pytest.mark.parametrize("missing", ["premiumsBeforeAge70", "clauseType", "beneficiaries"])
    def test_required_contract_fields(self, missing):
        document = {
            "contractValueAtDeath": 100_000,
            "premiumsBeforeAge70": 50_000,
            "clauseType": "standard",
            "beneficiaries": [],
        }
        del document[missing]
        with pytest.raises(PydanticValidationError):
            DecesInput.model_validate(document)

    def test_nested_camel_case(self):
        data = DecesInput.model_validate({
            "contractValueAtDeath": 300_000,
            "premiumsBeforeAge70": 100_000,
            "clauseType": "dismembered",
            "beneficiaries": [
                {
                    "name": "Léa",
                    "kinship": "child",
                    "age": 40,
                    "shareOfContractPercent": 100,
                    "clauseKind": "bare_ownership",
                    "usufructuary": {"name": "Marc", "age": 72, "kinship": "spouse"},
                }
            ],
        })
        ligne = data.beneficiaries[0]
        assert data.premiums_before_age_70 == 100_000
        assert ligne.share_of_contract_percent == 100
        assert ligne.clause_kind is ClauseKind.BARE_OWNERSHIP
        assert ligne.usufructuary.kinship is Kinship.SPOUSE
        assert ligne.is_dismembered

    def test_usufructuary_kinship_required(self):
        """A usufructuary never silently becomes a tax-exempt spouse."""
        with pytest.raises(PydanticValidationError):
            Usufructuary(name="Marc", age=72)

    def test_old_share_key_rejected(self):
        with pytest.raises(PydanticValidationError):
            Beneficiary.model_validate({
                "name": "Léa",
                "kinship": "child",
                "age": 40,
                "shareOfContractPct": 100,
                "clauseKind": "full_ownership",
            })

    def test_full_ownership_not_dismembered(self):
        ligne = Beneficiary(
            name="Léa",
            kinship="child",
            age=40,
            share_of_contract_percent=50,
            clause_kind="full_ownership",
        )
        assert not ligne.is_dismembered

    def test_unknown_kinship(self):
        with pytest.raises(PydanticValidationError):
            Beneficiary(
                name="X",
                kinship="cousin",
                age=40,
                share_of_contract_percent=50,
                clause_kind="full_ownership",
            )


class TestFeeModels:
    """Tests for fee simulator models."""

    def test_documented_keys(self):
        params = FeeSimParams.model_validate(fee_document())
        assert params.fund_allocation_percent_uc == 30
        assert params.annual_return_by_bucket.uc == 5
        assert params.annual_management_fee_by_bucket.managed == 1.9

    def test_bucket_uc_key_is_upper_case(self):
        with pytest.raises(PydanticValidationError):
            BucketRates.model_validate({"guaranteed": 1, "Uc": 2, "managed": 3})

    @pytest.mark.parametrize("missing", ["durationYears", "annualReturnByBucket", "entryFeePercent"])
    def test_no_silent_defaults(self, missing):
        document = fee_document()
        del document[missing]
        with pytest.raises(PydanticValidationError):
            FeeSimParams.model_validate(document)

    def test_guaranteed_allocation_is_remainder(self):
        params = FeeSimParams.model_validate(fee_document())
        assert params.fund_allocation_percent_guaranteed == 50.0

    def test_total_contributions(self):
        params = FeeSimParams.model_validate(fee_document())
        assert params.total_contributions == 2_200.0

    def test_computed_fields_dumped(self):
        params = FeeSimParams.model_validate(fee_document())
        dumped = params.model_dump()
        assert "fund_allocation_percent_guaranteed" in dumped
        assert "total_contributions" in dumped
        assert "fundAllocationPercentUC" in params.model_dump(by_alias=True)

    def test_fee_totals(self):
        assert FeeTotals(entry=1, management=2, arbitrage=3).total == 6

    def test_empty_scenario(self):
        scenario = FeeScenario(with_fees=True)
        assert scenario.final_capital == 0.0
        assert scenario.to_dataframe().empty
