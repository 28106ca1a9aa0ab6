"""Death-benefit (décès) taxation.

Splits the contract value between the article 990 I regime (premiums paid
before age 70) and the article 757 B regime (premiums paid after age 70),
then taxes every beneficiary position, including usufruct / bare-ownership
positions of a dismembered clause.

The split is proportional: the whole contract value, growth included, is
allocated between the two regimes by the ratio of post-70 premiums to total
premiums. Premiums and gains are not traced individually.
"""

from __future__ import annotations

from dataclasses import dataclass

from assurvie.application.services.messages import eur
from assurvie.core.exceptions import ValidationError
from assurvie.core.logging import get_logger
from assurvie.domain.calculator.succession import (
    ALLOWANCE_757B,
    ALLOWANCE_990I,
    get_rule,
    succession_tax,
    tax_757b,
    tax_990i,
    usufruct_percentage,
)
from assurvie.domain.models.deces import (
    Beneficiary,
    BeneficiaryResult,
    ClauseKind,
    ClauseType,
    DecesInput,
    DecesResult,
    Kinship,
)

log = get_logger(__name__)

# Above this global rate the result carries an optimisation warning
HIGH_GLOBAL_RATE_PCT = 20.0

_SHARE_SUM_TOLERANCE = 1e-6


@dataclass
class ContractBases:
    """Contract value allocated between the two regimes."""

    valeur_contrat: float
    primes_apres_70: float
    ratio_apres_70: float
    base_990i: float
    base_757b: float

    @classmethod
    def from_input(cls, data: DecesInput) -> ContractBases:
        total_primes = data.premiums_before_age_70 + data.premiums_after_age_70
        ratio = data.premiums_after_age_70 / total_primes if total_primes > 0 else 0.0
        base_757b = ratio * data.contract_value_at_death
        return cls(
            valeur_contrat=data.contract_value_at_death,
            primes_apres_70=data.premiums_after_age_70,
            ratio_apres_70=ratio,
            base_990i=data.contract_value_at_death - base_757b,
            base_757b=base_757b,
        )


@dataclass
class Position:
    """One taxable position derived from a beneficiary line."""

    name: str
    kinship: Kinship
    clause_kind: ClauseKind
    effective_share: float
    # Usufruct or bare-ownership fraction (0-1), None for full ownership
    dismember_fraction: float | None = None
    usufruct_pct: float | None = None
    bare_ownership_pct: float | None = None
    usufructuary_name: str | None = None


def _validate(data: DecesInput) -> None:
    if data.contract_value_at_death <= 0:
        raise ValidationError("contract_value_at_death", data.contract_value_at_death, "must be > 0")
    if data.premiums_before_age_70 < 0:
        raise ValidationError("premiums_before_age_70", data.premiums_before_age_70, "must be >= 0")
    if data.premiums_after_age_70 < 0:
        raise ValidationError("premiums_after_age_70", data.premiums_after_age_70, "must be >= 0")

    total_primes = data.premiums_before_age_70 + data.premiums_after_age_70
    if total_primes > data.contract_value_at_death:
        raise ValidationError(
            "premiums", total_primes, "total premiums cannot exceed the contract value at death"
        )

    for i, b in enumerate(data.beneficiaries):
        if not 0 <= b.share_of_contract_percent <= 100:
            raise ValidationError(
                f"beneficiaries[{i}].share_of_contract_percent",
                b.share_of_contract_percent,
                "must be between 0 and 100",
            )
        if b.age < 0:
            raise ValidationError(f"beneficiaries[{i}].age", b.age, "must be >= 0")
        if b.is_dismembered:
            if b.usufructuary is None:
                raise ValidationError(
                    f"beneficiaries[{i}].usufructuary",
                    None,
                    "a usufructuary is required for a dismembered clause",
                )
            if b.usufructuary.age < 0:
                raise ValidationError(
                    f"beneficiaries[{i}].usufructuary.age", b.usufructuary.age, "must be >= 0"
                )


def to_position(beneficiary: Beneficiary) -> Position:
    """Turn a beneficiary line into its taxable position.

    A usufruct line is taxed in the usufructuary's name and kinship; a
    bare-ownership line in the beneficiary's own.
    """
    quotite = beneficiary.share_of_contract_percent / 100.0

    if not beneficiary.is_dismembered:
        return Position(
            name=beneficiary.name,
            kinship=beneficiary.kinship,
            clause_kind=ClauseKind.FULL_OWNERSHIP,
            effective_share=quotite,
        )

    usufruitier = beneficiary.usufructuary
    pct_usufruit = usufruct_percentage(usufruitier.age)
    pct_nue = 100.0 - pct_usufruit

    if beneficiary.clause_kind is ClauseKind.USUFRUCT:
        fraction = pct_usufruit / 100.0
        return Position(
            name=f"{usufruitier.name} (Usufruitier)",
            kinship=usufruitier.kinship,
            clause_kind=ClauseKind.USUFRUCT,
            effective_share=quotite * fraction,
            dismember_fraction=fraction,
            usufruct_pct=pct_usufruit,
            bare_ownership_pct=pct_nue,
            usufructuary_name=usufruitier.name,
        )

    fraction = pct_nue / 100.0
    return Position(
        name=f"{beneficiary.name} (Nu-propriétaire)",
        kinship=beneficiary.kinship,
        clause_kind=ClauseKind.BARE_OWNERSHIP,
        effective_share=quotite * fraction,
        dismember_fraction=fraction,
        usufruct_pct=pct_usufruit,
        bare_ownership_pct=pct_nue,
        usufructuary_name=usufruitier.name,
    )


def tax_position(position: Position, bases: ContractBases) -> BeneficiaryResult:
    """Apply articles 990 I and 757 B to one position."""
    part = position.effective_share
    exonere = get_rule(position.kinship).fully_exempt

    montant_brut = bases.valeur_contrat * part
    part_990i = part * bases.base_990i
    part_757b = part * bases.base_757b

    # Article 990 I: own allowance per beneficiary, scaled for dismembered positions
    abattement_990i = 0.0
    imposable_990i = 0.0
    impot_990i = 0.0
    if not exonere:
        facteur = position.dismember_fraction if position.dismember_fraction is not None else 1.0
        abattement_990i = min(ALLOWANCE_990I * facteur, part_990i)
        imposable_990i = max(0.0, part_990i - abattement_990i)
        impot_990i = tax_990i(imposable_990i)

    # Article 757 B: premiums only, the growth they produced is exempt
    primes_757b = bases.primes_apres_70 * part
    croissance_exoneree = max(0.0, part_757b - primes_757b)
    abattement_757b = 0.0
    imposable_757b = 0.0
    impot_757b = 0.0
    if not exonere and bases.primes_apres_70 > 0:
        abattement_757b = min(ALLOWANCE_757B * part, primes_757b)
        imposable_757b = max(0.0, primes_757b - abattement_757b)
        impot_757b = tax_757b(imposable_757b, position.kinship)

    impot_total = impot_990i + impot_757b

    return BeneficiaryResult(
        name=position.name,
        kinship=position.kinship,
        clause_kind=position.clause_kind,
        effective_share=part,
        gross_amount=montant_brut,
        share_990i=part_990i,
        allowance_990i=abattement_990i,
        taxable_990i=imposable_990i,
        tax_990i=impot_990i,
        share_757b=part_757b,
        premiums_757b=primes_757b,
        exempt_growth_757b=croissance_exoneree,
        allowance_757b=abattement_757b,
        taxable_757b=imposable_757b,
        tax_757b=impot_757b,
        total_tax=impot_total,
        net_amount=montant_brut - impot_total,
        effective_rate_pct=impot_total / montant_brut * 100.0 if montant_brut > 0 else 0.0,
        is_fully_exempt=exonere,
        succession_tax_equivalent=succession_tax(montant_brut, position.kinship),
        usufruct_pct=position.usufruct_pct,
        bare_ownership_pct=position.bare_ownership_pct,
        usufructuary_name=position.usufructuary_name,
    )


def _advisories(
    data: DecesInput,
    resultats: list[BeneficiaryResult],
    taux_global: float,
) -> tuple[list[str], list[str]]:
    """Build (optimisations, warnings) for a computed clause."""
    optimisations: list[str] = []
    alertes: list[str] = []

    exoneres = [r for r in resultats if r.is_fully_exempt]
    if exoneres:
        optimisations.append(
            f"{len(exoneres)} bénéficiaire(s) totalement exonéré(s) grâce à la loi Tepa (conjoint/PACS)."
        )

    demembres = [r for r in resultats if r.clause_kind is not ClauseKind.FULL_OWNERSHIP]
    if demembres:
        optimisations.append(
            "Clause démembrée appliquée : abattements proportionnels aux parts "
            "d'usufruit/nue-propriété selon le barème fiscal."
        )
        concernes = [r for r in demembres if r.share_990i > 0]
        if concernes:
            optimisations.append(
                "Clauses démembrées : abattements 990 I appliqués proportionnellement "
                f"aux parts reçues ({len(concernes)} bénéficiaire(s) concerné(s))."
            )

    if data.premiums_after_age_70 > ALLOWANCE_757B:
        exces = data.premiums_after_age_70 - ALLOWANCE_757B
        alertes.append(
            f"Les primes après 70 ans ({eur(data.premiums_after_age_70)}) dépassent "
            f"l'abattement global de {eur(ALLOWANCE_757B)} de {eur(exces)}. "
            "Privilégiez les versements avant 70 ans."
        )

    if any(r.kinship is Kinship.OTHER for r in resultats):
        alertes.append(
            "Les concubins (sans lien juridique) subissent un taux d'imposition de 60 % "
            "sans exonération Tepa. Considérez le PACS ou le mariage."
        )

    if taux_global > HIGH_GLOBAL_RATE_PCT:
        alertes.append(
            f"Taux d'imposition global élevé ({taux_global:.1f} %). "
            "Envisagez des stratégies d'optimisation."
        )

    if data.clause_type is ClauseType.STANDARD and any(
        r.kinship is Kinship.SPOUSE for r in resultats
    ):
        optimisations.append(
            "Clause standard avec conjoint : en cas de famille recomposée, faites relire "
            "la clause et envisagez une clause personnalisée."
        )

    return optimisations, alertes


def compute_death_benefit_tax(data: DecesInput) -> DecesResult:
    """Compute death-benefit taxation for every beneficiary of a contract.

    Args:
        data: Contract values at death and the beneficiary clause

    Returns:
        DecesResult with per-position breakdowns, totals and advisories

    Raises:
        ValidationError: If amounts are invalid or a dismembered line has no usufructuary
    """
    try:
        _validate(data)
    except ValidationError as e:
        log.warning("death_benefit_input_rejected", param=e.param_name, reason=e.reason)
        raise

    bases = ContractBases.from_input(data)
    positions = [to_position(b) for b in data.beneficiaries]

    # Usufruct and bare ownership of the same line add up to that line
    total_parts = sum(p.effective_share for p in positions)
    if positions and abs(total_parts - 1.0) > _SHARE_SUM_TOLERANCE:
        log.warning("beneficiary_shares_not_100", total_pct=round(total_parts * 100.0, 4))

    resultats = [tax_position(p, bases) for p in positions]

    total_transmis = data.contract_value_at_death
    total_impots = sum(r.total_tax for r in resultats)
    total_net = sum(r.net_amount for r in resultats)
    taux_global = total_impots / total_transmis * 100.0 if total_transmis > 0 else 0.0
    economie = sum(r.succession_tax_equivalent for r in resultats) - total_impots

    optimisations, alertes = _advisories(data, resultats, taux_global)

    log.info(
        "death_benefit_tax_computed",
        contract_value=total_transmis,
        positions=len(resultats),
        total_tax=round(total_impots, 2),
        global_rate_pct=round(taux_global, 2),
    )

    return DecesResult(
        beneficiaries=resultats,
        total_transmitted=total_transmis,
        total_tax=total_impots,
        total_net=total_net,
        global_effective_rate_pct=taux_global,
        ratio_after_70_pct=bases.ratio_apres_70 * 100.0,
        base_990i=bases.base_990i,
        base_757b=bases.base_757b,
        savings_vs_succession=economie,
        optimisations=optimisations,
        warnings=alertes,
    )
