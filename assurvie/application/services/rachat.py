"""Withdrawal (rachat) taxation.

Computes the taxable interest embedded in a withdrawal and compares the
flat tax (PFU) with the progressive income-tax option (barème IR).
"""

from __future__ import annotations

from assurvie.application.services.messages import eur
from assurvie.core.exceptions import ValidationError
from assurvie.core.logging import get_logger
from assurvie.domain.calculator.brackets import compute_fiscal_parts, marginal_tax_rate
from assurvie.domain.models.rachat import (
    ContractAge,
    OptionChoice,
    RachatInput,
    RachatResult,
    TmiMode,
)

log = get_logger(__name__)

# Tax constants
TAUX_PFU = 12.8
TAUX_PRELEVEMENTS_SOCIAUX = 17.2
ABATTEMENT_SEUL = 4_600.0
ABATTEMENT_COUPLE = 9_200.0

# Nets closer than this are reported as equal
_EQUALITY_TOLERANCE = 0.005


def _validate(data: RachatInput) -> None:
    if data.contract_value <= 0:
        raise ValidationError("contract_value", data.contract_value, "must be > 0")
    if data.total_premiums_paid < 0:
        raise ValidationError("total_premiums_paid", data.total_premiums_paid, "must be >= 0")
    if data.total_premiums_paid > data.contract_value:
        raise ValidationError(
            "total_premiums_paid", data.total_premiums_paid, "cannot exceed the contract value"
        )
    if data.withdrawal_amount < 0:
        raise ValidationError("withdrawal_amount", data.withdrawal_amount, "must be >= 0")
    if data.withdrawal_amount > data.contract_value:
        raise ValidationError(
            "withdrawal_amount", data.withdrawal_amount, "cannot exceed the contract value"
        )
    if data.allowance_override is not None and data.allowance_override < 0:
        raise ValidationError("allowance_override", data.allowance_override, "must be >= 0")

    if data.tmi_mode is TmiMode.AUTOMATIC:
        if data.net_taxable_income is None:
            raise ValidationError("net_taxable_income", None, "required in automatic TMI mode")
        if data.net_taxable_income < 0:
            raise ValidationError("net_taxable_income", data.net_taxable_income, "must be >= 0")
        if data.dependent_children < 0:
            raise ValidationError("dependent_children", data.dependent_children, "must be >= 0")
    else:
        if data.marginal_tax_rate_percent is None:
            raise ValidationError("marginal_tax_rate_percent", None, "required in manual TMI mode")
        if not 0 <= data.marginal_tax_rate_percent <= 100:
            raise ValidationError(
                "marginal_tax_rate_percent", data.marginal_tax_rate_percent, "must be between 0 and 100"
            )
        if data.fiscal_parts_count is None:
            raise ValidationError("fiscal_parts_count", None, "required in manual TMI mode")
        if data.fiscal_parts_count < 1:
            raise ValidationError("fiscal_parts_count", data.fiscal_parts_count, "must be >= 1")


def resolve_tax_profile(data: RachatInput) -> tuple[float, float]:
    """Return (TMI %, fiscal parts) for the request.

    In automatic mode both are derived from the household situation and its
    net taxable income; otherwise the declared values are used.
    """
    if data.tmi_mode is TmiMode.AUTOMATIC:
        parts = compute_fiscal_parts(data.household_status, data.dependent_children)
        return marginal_tax_rate(data.net_taxable_income or 0.0, parts), parts
    return data.marginal_tax_rate_percent, data.fiscal_parts_count


def compute_withdrawal_tax(data: RachatInput) -> RachatResult:
    """Compute the taxation of a withdrawal under both options.

    After 8 years the IR allowance is `allowance_override` when it is
    positive; an override of 0 or None falls back to 4 600 € (9 200 € from
    two fiscal parts). The allowance never exceeds the interest share.

    Args:
        data: Validated withdrawal request

    Returns:
        RachatResult with the PFU and IR breakdowns and advisory messages

    Raises:
        ValidationError: If any amount or rate is out of range
    """
    try:
        _validate(data)
    except ValidationError as e:
        log.warning("withdrawal_input_rejected", param=e.param_name, reason=e.reason)
        raise

    tmi_pct, parts = resolve_tax_profile(data)
    over_8 = data.contract_age is ContractAge.OVER_8_YEARS
    montant = data.withdrawal_amount

    # 1. Pro-rata share of gains embedded in the withdrawal
    total_interets = max(0.0, data.contract_value - data.total_premiums_paid)
    part_interets = total_interets * (montant / data.contract_value)

    # 2. Social levies, whatever the option
    pso = part_interets * TAUX_PRELEVEMENTS_SOCIAUX / 100.0

    # 3. PFU: flat rate, never any allowance
    impot_pfu = part_interets * TAUX_PFU / 100.0
    net_pfu = montant - impot_pfu - pso

    # 4. Progressive IR: allowance only after 8 years
    abattement = 0.0
    if over_8:
        plafond = data.allowance_override
        if not plafond:
            plafond = ABATTEMENT_COUPLE if parts >= 2 else ABATTEMENT_SEUL
        abattement = min(plafond, part_interets)
    base_ir = max(0.0, part_interets - abattement)
    impot_ir = base_ir * tmi_pct / 100.0
    net_ir = montant - impot_ir - pso

    taux_pfu = (impot_pfu + pso) / montant * 100.0 if montant > 0 else 0.0
    taux_ir = (impot_ir + pso) / montant * 100.0 if montant > 0 else 0.0

    # 5. Comparison
    cout_pfu = impot_pfu + pso
    cout_ir = impot_ir + pso
    economie_pfu = max(0.0, cout_ir - cout_pfu)
    economie_ir = max(0.0, cout_pfu - cout_ir)

    warnings: list[str] = []
    advice: list[str] = []
    ecart = net_pfu - net_ir

    if abs(ecart) < _EQUALITY_TOLERANCE:
        best = OptionChoice.EQUAL
    elif ecart > 0:
        best = OptionChoice.PFU
    else:
        best = OptionChoice.IR

    if part_interets == 0:
        message = (
            "Aucun intérêt à déclarer : le montant des versements est égal ou "
            "supérieur à la valeur du contrat."
        )
    elif base_ir == 0 and over_8:
        message = (
            "Le barème IR est optimal : aucun impôt sur le revenu grâce à l'abattement "
            "(seuls les prélèvements sociaux de 17,2 % sont dus)."
        )
        advice.append(f"Économie de {eur(economie_ir)} par rapport au PFU.")
    elif best is OptionChoice.PFU:
        message = f"Le PFU est plus avantageux : +{eur(ecart)} net."
    elif best is OptionChoice.IR:
        message = f"Le barème IR est plus avantageux : +{eur(-ecart)} net."
    else:
        message = "Les deux options donnent le même résultat net."

    if not over_8 and part_interets > ABATTEMENT_SEUL:
        warnings.append(
            "Contrat de moins de 8 ans : aucun abattement applicable. "
            "Considérez attendre l'ancienneté de 8 ans."
        )

    if over_8 and part_interets > abattement:
        advice.append(
            f"Avec {eur(part_interets)} d'intérêts et un abattement de {eur(abattement)}, "
            "une partie reste imposable."
        )

    if tmi_pct >= 30 and over_8:
        advice.append(
            "TMI élevée : le barème IR sera souvent plus favorable que le PFU "
            "grâce à l'abattement après 8 ans."
        )

    advice.append(
        f"Impact RFR : les {eur(part_interets)} d'intérêts s'ajoutent à votre revenu fiscal "
        "de référence, quel que soit le mode d'imposition choisi."
    )

    log.info(
        "withdrawal_tax_computed",
        withdrawal=montant,
        interest_share=round(part_interets, 2),
        tmi_pct=tmi_pct,
        best_option=best.value,
    )

    return RachatResult(
        withdrawal_amount=montant,
        taxable_interest_share=part_interets,
        social_levies=pso,
        tax_pfu=impot_pfu,
        net_pfu=net_pfu,
        effective_rate_pfu_pct=taux_pfu,
        allowance=abattement,
        taxable_base_ir=base_ir,
        tax_ir=impot_ir,
        net_ir=net_ir,
        effective_rate_ir_pct=taux_ir,
        savings_pfu=economie_pfu,
        savings_ir=economie_ir,
        best_option=best,
        marginal_tax_rate_percent=tmi_pct,
        fiscal_parts_count=parts,
        message=message,
        warnings=warnings,
        advice=advice,
    )
