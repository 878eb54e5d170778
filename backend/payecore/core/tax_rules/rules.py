"""
PAYE Rules Configuration
The admin-editable rules document consumed by the PAYE engine.

Default preset (Nigeria Tax Act 2025, Fourth Schedule):
  (a) First ₦800,000 at 0%
  (b) Next ₦2,200,000 at 15%
  (c) Next ₦9,000,000 at 18%
  (d) Next ₦13,000,000 at 21%
  (e) Next ₦25,000,000 at 23%
  (f) Above ₦50,000,000 at 25%

The stored document cannot hold infinity, so the final bracket is persisted
as UNBOUNDED_SENTINEL and mapped back to math.inf on load. That translation
lives only in rules_from_document / rules_to_document.
"""

import math
from dataclasses import dataclass
from enum import Enum


UNBOUNDED_SENTINEL = 9_999_999_999
HYBRID_ALLOWANCE_RATE = 0.20
MIN_RULES_YEAR = 2020
MAX_RULES_YEAR = 2100


class AllowanceType(str, Enum):
    FIXED = "fixed"
    PERCENT_OF_GROSS = "percentOfGross"
    HYBRID = "hybrid"


class RulesValidationError(ValueError):
    """Raised when a rules document cannot be used for computation."""


@dataclass(frozen=True)
class TaxBracket:
    up_to: float
    rate: float

    @property
    def is_unbounded(self) -> bool:
        return math.isinf(self.up_to)


@dataclass(frozen=True)
class ReliefGates:
    pension_is_deductible: bool = True
    nhf_is_deductible: bool = True
    life_assurance_cap: float | None = None


@dataclass(frozen=True)
class PersonalAllowance:
    type: AllowanceType
    value: float

    def resolve(self, gross_income: float) -> float:
        if self.type == AllowanceType.FIXED:
            return self.value
        if self.type == AllowanceType.PERCENT_OF_GROSS:
            return gross_income * self.value
        # hybrid: higher of 20% of gross or the fixed amount
        return max(gross_income * HYBRID_ALLOWANCE_RATE, self.value)


@dataclass(frozen=True)
class PayeRules:
    currency: str
    year: int
    reliefs: ReliefGates
    brackets: tuple[TaxBracket, ...]
    personal_allowance: PersonalAllowance
    notes: str = ""


DEFAULT_PAYE_RULES = PayeRules(
    currency="NGN",
    year=2026,
    reliefs=ReliefGates(
        pension_is_deductible=True,
        nhf_is_deductible=True,
        life_assurance_cap=None,
    ),
    brackets=(
        TaxBracket(up_to=800_000.0, rate=0.00),
        TaxBracket(up_to=3_000_000.0, rate=0.15),
        TaxBracket(up_to=12_000_000.0, rate=0.18),
        TaxBracket(up_to=25_000_000.0, rate=0.21),
        TaxBracket(up_to=50_000_000.0, rate=0.23),
        TaxBracket(up_to=math.inf, rate=0.25),
    ),
    personal_allowance=PersonalAllowance(type=AllowanceType.HYBRID, value=200_000.0),
    notes=(
        "Educational purposes only. Not legal or tax advice. Based on the Nigeria "
        "Tax Act 2025 PAYE schedule. Consult a tax professional for your specific "
        "situation."
    ),
)


def validate_rules(rules: PayeRules) -> PayeRules:
    """
    Check the invariants compute_tax relies on.
    Returns the rules unchanged so it can be used inline.
    """
    if not MIN_RULES_YEAR <= rules.year <= MAX_RULES_YEAR:
        raise RulesValidationError(
            f"Tax year must be between {MIN_RULES_YEAR} and {MAX_RULES_YEAR}, got {rules.year}"
        )

    if not rules.brackets:
        raise RulesValidationError("At least one tax bracket is required")

    previous = 0.0
    for index, bracket in enumerate(rules.brackets):
        if not 0 <= bracket.rate <= 1:
            raise RulesValidationError(
                f"Bracket {index + 1} rate must be between 0 and 1, got {bracket.rate}"
            )
        if bracket.up_to <= previous:
            raise RulesValidationError(
                f"Bracket {index + 1} upper limit must be greater than {previous:,.0f}"
            )
        previous = bracket.up_to

    if not rules.brackets[-1].is_unbounded:
        raise RulesValidationError("The last tax bracket must be unbounded")

    if rules.personal_allowance.value < 0:
        raise RulesValidationError("Personal allowance value cannot be negative")

    cap = rules.reliefs.life_assurance_cap
    if cap is not None and cap < 0:
        raise RulesValidationError("Life assurance cap cannot be negative")

    return rules


def _bracket_from_document(raw: dict) -> TaxBracket:
    up_to = float(raw["upTo"])
    if up_to >= UNBOUNDED_SENTINEL:
        up_to = math.inf
    return TaxBracket(up_to=up_to, rate=float(raw["rate"]))


def rules_from_document(document: dict) -> PayeRules:
    """
    Build PayeRules from the stored (camelCase) document and validate it.
    Raises RulesValidationError for missing keys or broken invariants.
    """
    try:
        reliefs = document.get("reliefs") or {}
        allowance = document["personalAllowance"]
        cap = reliefs.get("lifeAssuranceCap")

        rules = PayeRules(
            currency=document.get("currency", "NGN"),
            year=int(document["year"]),
            reliefs=ReliefGates(
                pension_is_deductible=bool(reliefs.get("pensionIsDeductible", True)),
                nhf_is_deductible=bool(reliefs.get("nhfIsDeductible", True)),
                life_assurance_cap=float(cap) if cap is not None else None,
            ),
            brackets=tuple(_bracket_from_document(b) for b in document["brackets"]),
            personal_allowance=PersonalAllowance(
                type=AllowanceType(allowance["type"]),
                value=float(allowance["value"]),
            ),
            notes=document.get("notes", ""),
        )
    except (KeyError, TypeError, ValueError) as e:
        raise RulesValidationError(f"Malformed rules document: missing or invalid {e}") from e

    return validate_rules(rules)


def rules_to_document(rules: PayeRules) -> dict:
    reliefs: dict = {
        "pensionIsDeductible": rules.reliefs.pension_is_deductible,
        "nhfIsDeductible": rules.reliefs.nhf_is_deductible,
    }
    if rules.reliefs.life_assurance_cap is not None:
        reliefs["lifeAssuranceCap"] = rules.reliefs.life_assurance_cap

    return {
        "currency": rules.currency,
        "year": rules.year,
        "reliefs": reliefs,
        "brackets": [
            {
                "upTo": UNBOUNDED_SENTINEL if b.is_unbounded else b.up_to,
                "rate": b.rate,
            }
            for b in rules.brackets
        ],
        "personalAllowance": {
            "type": rules.personal_allowance.type.value,
            "value": rules.personal_allowance.value,
        },
        "notes": rules.notes,
    }
