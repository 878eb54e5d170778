"""
PAYE (Pay-As-You-Earn) Calculator
Personal income tax for salary and non-salary earners, driven by a PayeRules
document instead of hard-coded brackets.

Flow:
  1. Gross income (salary components annualized for monthly inputs)
  2. Deductions (salary: pension / NHF / life assurance / voluntary;
     non-salary: itemised reliefs)
  3. Taxable income (personal allowance optional, see apply_personal_allowance)
  4. Progressive brackets
  5. Monthly tax and effective rate

Every step is recorded in line_items so the result can be audited line by line.
"""

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable

from payecore.core.currency import format_currency
from payecore.core.tax_rules.reliefs import ReliefItem, resolve_relief
from payecore.core.tax_rules.rules import PayeRules


NHF_DEFAULT_RATE = 0.025


class EarnerType(str, Enum):
    SALARY = "salary"
    NON_SALARY = "non-salary"


class Period(str, Enum):
    MONTHLY = "monthly"
    ANNUAL = "annual"


@dataclass
class CalcInputs:
    earner_type: EarnerType = EarnerType.SALARY
    period: Period = Period.ANNUAL
    # Salary earners, stated in `period`
    basic: float = 0.0
    housing: float = 0.0
    transport: float = 0.0
    other: float = 0.0
    bonus: float = 0.0
    pension_pct: float = 0.0
    nhf_enabled: bool = False
    nhf_amount: float | None = None
    life_assurance: float = 0.0
    voluntary_contrib: float = 0.0
    # Non-salary earners, always annual
    gross_income: float = 0.0
    reliefs: list[ReliefItem] = field(default_factory=list)


@dataclass
class CalcLineItem:
    label: str
    amount: float
    is_deduction: bool = False


@dataclass
class CalcOutputs:
    annual_tax: float
    monthly_tax: float
    taxable_income: float
    effective_rate: float
    line_items: list[CalcLineItem] = field(default_factory=list)
    assumptions_note: str = ""
    gross_income: float = 0.0
    total_deductions: float = 0.0
    personal_allowance: float = 0.0
    currency: str = "NGN"


def compute_tax(
    inputs: CalcInputs,
    rules: PayeRules,
    *,
    apply_personal_allowance: bool = False,
    formatter: Callable[[float], str] = format_currency,
) -> CalcOutputs:
    """
    Compute PAYE for one set of inputs against the given rules.

    Rules are expected to have passed validate_rules; this function does no
    I/O and raises nothing for well-formed inputs. The configured personal
    allowance is only subtracted when apply_personal_allowance is set.
    """
    line_items: list[CalcLineItem] = []

    gross_income, multiplier = _gross_income(inputs)
    line_items.append(CalcLineItem(label="Income Amount", amount=gross_income))

    if inputs.earner_type == EarnerType.NON_SALARY:
        total_deductions = _non_salary_deductions(inputs, line_items)
    else:
        total_deductions = _salary_deductions(inputs, rules, gross_income, multiplier, line_items)

    personal_allowance = 0.0
    if apply_personal_allowance:
        personal_allowance = rules.personal_allowance.resolve(gross_income)
        line_items.append(
            CalcLineItem(label="Personal Allowance", amount=personal_allowance, is_deduction=True)
        )

    taxable_income = max(gross_income - total_deductions - personal_allowance, 0.0)
    line_items.append(CalcLineItem(label="Taxable Income", amount=taxable_income))

    bracket_items = apply_brackets(taxable_income, rules, formatter)
    line_items.extend(bracket_items)

    annual_tax = sum((item.amount for item in bracket_items), 0.0)
    effective_rate = annual_tax / gross_income if gross_income > 0 else 0.0

    return CalcOutputs(
        annual_tax=annual_tax,
        monthly_tax=annual_tax / 12,
        taxable_income=taxable_income,
        effective_rate=effective_rate,
        line_items=line_items,
        assumptions_note=rules.notes,
        gross_income=gross_income,
        total_deductions=total_deductions,
        personal_allowance=personal_allowance,
        currency=rules.currency,
    )


def _gross_income(inputs: CalcInputs) -> tuple[float, int]:
    if inputs.earner_type == EarnerType.NON_SALARY:
        return inputs.gross_income, 1

    multiplier = 12 if inputs.period == Period.MONTHLY else 1
    components = (inputs.basic, inputs.housing, inputs.transport, inputs.other, inputs.bonus)
    return sum(c * multiplier for c in components), multiplier


def _non_salary_deductions(inputs: CalcInputs, line_items: list[CalcLineItem]) -> float:
    total = 0.0
    for item in inputs.reliefs:
        relief = resolve_relief(item)
        if relief.amount > 0:
            total += relief.amount
            line_items.append(
                CalcLineItem(label=relief.label, amount=relief.amount, is_deduction=True)
            )
    return total


def _salary_deductions(
    inputs: CalcInputs,
    rules: PayeRules,
    gross_income: float,
    multiplier: int,
    line_items: list[CalcLineItem],
) -> float:
    applied: list[CalcLineItem] = []

    if rules.reliefs.pension_is_deductible and inputs.pension_pct > 0:
        applied.append(
            CalcLineItem(
                label=f"Pension ({inputs.pension_pct:g}%)",
                amount=gross_income * (inputs.pension_pct / 100),
                is_deduction=True,
            )
        )

    if rules.reliefs.nhf_is_deductible and inputs.nhf_enabled:
        if inputs.nhf_amount:
            nhf = CalcLineItem(label="NHF Contribution", amount=inputs.nhf_amount * multiplier, is_deduction=True)
        else:
            nhf = CalcLineItem(label="NHF (2.5%)", amount=gross_income * NHF_DEFAULT_RATE, is_deduction=True)
        applied.append(nhf)

    if inputs.life_assurance > 0:
        life_assurance = inputs.life_assurance * multiplier
        cap = rules.reliefs.life_assurance_cap
        # A zero cap is treated as unset
        if cap:
            life_assurance = min(life_assurance, cap)
        applied.append(
            CalcLineItem(label="Life Assurance Premium", amount=life_assurance, is_deduction=True)
        )

    if inputs.voluntary_contrib > 0:
        applied.append(
            CalcLineItem(
                label="Voluntary Contributions",
                amount=inputs.voluntary_contrib * multiplier,
                is_deduction=True,
            )
        )

    line_items.extend(applied)
    total = sum((item.amount for item in applied), 0.0)
    if total > 0:
        line_items.append(CalcLineItem(label="Total Deductions", amount=total, is_deduction=True))
    return total


def apply_brackets(
    taxable_income: float,
    rules: PayeRules,
    formatter: Callable[[float], str] = format_currency,
) -> list[CalcLineItem]:
    """One line item per bracket entered; brackets past the income are skipped."""
    items: list[CalcLineItem] = []
    remaining = taxable_income
    prev_limit = 0.0

    for bracket in rules.brackets:
        if remaining <= 0:
            break

        bracket_size = math.inf if math.isinf(bracket.up_to) else bracket.up_to - prev_limit
        taxable_in_bracket = min(remaining, bracket_size)
        tax_in_bracket = taxable_in_bracket * bracket.rate

        items.append(
            CalcLineItem(
                label=f"Tax on {formatter(taxable_in_bracket)} @ {bracket.rate * 100:.1f}%",
                amount=tax_in_bracket,
            )
        )

        remaining -= taxable_in_bracket
        prev_limit = bracket.up_to

    return items
