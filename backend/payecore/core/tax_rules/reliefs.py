"""
Non-salary relief resolution.

Each relief type maps to a rule that turns the claimed amount into the
deductible amount and a line-item label. Caps follow the Nigeria Tax Act 2025:
  - Rent relief: 20% of annual rent paid, max ₦500,000
  - Compensation for loss of employment: exempt up to ₦50,000,000
  - Personal effects / chattels: exempt up to ₦5,000,000
  - Gains on shares: exempt up to ₦150,000,000 a year
All other reliefs are deductible in full.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Callable


RENT_RELIEF_RATE = 0.20
RENT_RELIEF_MAX = 500_000.0
EMPLOYMENT_COMPENSATION_CAP = 50_000_000.0
PERSONAL_EFFECTS_CAP = 5_000_000.0
SHARE_GAINS_SMALL_THRESHOLD = 10_000_000.0
SHARE_GAINS_CAP = 150_000_000.0


class ReliefType(str, Enum):
    GIFTS = "gifts"
    RENT_RELIEF = "rent_relief"
    CHARITY_RELIGIOUS = "charity_religious"
    EMPLOYMENT_COMPENSATION = "employment_compensation"
    HOUSING_INTEREST = "housing_interest"
    LIFE_INSURANCE = "life_insurance"
    NHF = "nhf"
    NHIS = "nhis"
    OWNER_OCCUPIED_HOUSE = "owner_occupied_house"
    PENSION = "pension"
    PENSION_FUNDS = "pension_funds"
    PERSONAL_EFFECTS = "personal_effects"
    PRIVATE_VEHICLES = "private_vehicles"
    RETIREMENT_BENEFITS = "retirement_benefits"
    SHARE_GAINS = "share_gains"
    SHARE_GAINS_REINVESTED = "share_gains_reinvested"


@dataclass
class ReliefItem:
    type: ReliefType
    amount: float = 0.0
    annual_rent: float | None = None


@dataclass
class ResolvedRelief:
    amount: float
    label: str


ReliefRule = Callable[[float, float | None], ResolvedRelief]


def _uncapped(label: str) -> ReliefRule:
    def rule(amount: float, annual_rent: float | None) -> ResolvedRelief:
        return ResolvedRelief(amount=amount, label=label)

    return rule


def _capped(label: str, cap: float) -> ReliefRule:
    def rule(amount: float, annual_rent: float | None) -> ResolvedRelief:
        return ResolvedRelief(amount=min(amount, cap), label=label)

    return rule


def _rent_relief(amount: float, annual_rent: float | None) -> ResolvedRelief:
    # Driven by rent paid, not the claimed amount
    rent = annual_rent or 0.0
    return ResolvedRelief(
        amount=min(rent * RENT_RELIEF_RATE, RENT_RELIEF_MAX),
        label="Rent Relief (20% of annual rent, max ₦500,000)",
    )


def _share_gains(amount: float, annual_rent: float | None) -> ResolvedRelief:
    if amount <= SHARE_GAINS_SMALL_THRESHOLD:
        return ResolvedRelief(amount=amount, label="Gains on Shares (exempt up to ₦10M)")
    if amount <= SHARE_GAINS_CAP:
        return ResolvedRelief(amount=amount, label="Gains on Shares (exempt below ₦150M/year)")
    # Only the capped portion is relieved; the excess stays in taxable income
    return ResolvedRelief(
        amount=SHARE_GAINS_CAP,
        label="Gains on Shares (exempt portion, capped at ₦150M/year)",
    )


RELIEF_RULES: dict[ReliefType, ReliefRule] = {
    ReliefType.PENSION: _uncapped("Pension Contribution"),
    ReliefType.NHIS: _uncapped("NHIS Contribution"),
    ReliefType.NHF: _uncapped("NHF Contribution"),
    ReliefType.HOUSING_INTEREST: _uncapped("Interest on Owner-Occupied Housing Loan"),
    ReliefType.LIFE_INSURANCE: _uncapped("Life Insurance Premium"),
    ReliefType.PENSION_FUNDS: _uncapped("Income of Approved Pension Funds"),
    ReliefType.RETIREMENT_BENEFITS: _uncapped("Retirement Benefits"),
    ReliefType.OWNER_OCCUPIED_HOUSE: _uncapped("Gain on Owner-Occupied House"),
    ReliefType.GIFTS: _uncapped("Gifts"),
    ReliefType.PRIVATE_VEHICLES: _uncapped("Gain on Private Vehicles"),
    ReliefType.SHARE_GAINS_REINVESTED: _uncapped("Gains on Shares (reinvested)"),
    ReliefType.CHARITY_RELIGIOUS: _uncapped("Charitable / Religious Donations"),
    ReliefType.RENT_RELIEF: _rent_relief,
    ReliefType.EMPLOYMENT_COMPENSATION: _capped(
        "Compensation for Loss of Employment (max ₦50M)", EMPLOYMENT_COMPENSATION_CAP
    ),
    ReliefType.PERSONAL_EFFECTS: _capped(
        "Personal Effects / Chattels (max ₦5M)", PERSONAL_EFFECTS_CAP
    ),
    ReliefType.SHARE_GAINS: _share_gains,
}


def resolve_relief(item: ReliefItem) -> ResolvedRelief:
    # ReliefType(...) raises ValueError for unknown types
    rule = RELIEF_RULES[ReliefType(item.type)]
    return rule(item.amount, item.annual_rent)
