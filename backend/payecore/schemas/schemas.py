"""
Pydantic schemas for API request/response validation.
"""

from pydantic import BaseModel, Field

from payecore.core.tax_rules.paye import CalcInputs, EarnerType, Period
from payecore.core.tax_rules.reliefs import ReliefItem, ReliefType
from payecore.core.tax_rules.rules import (
    AllowanceType,
    PayeRules,
    UNBOUNDED_SENTINEL,
    rules_from_document,
)


# ── Calculator Schemas ──

class ReliefItemRequest(BaseModel):
    type: ReliefType
    amount: float = Field(default=0, ge=0)
    annual_rent: float | None = Field(default=None, ge=0)


class CalcInputsRequest(BaseModel):
    earner_type: EarnerType = EarnerType.SALARY
    period: Period = Period.ANNUAL
    basic: float = Field(default=0, ge=0)
    housing: float = Field(default=0, ge=0)
    transport: float = Field(default=0, ge=0)
    other: float = Field(default=0, ge=0)
    bonus: float = Field(default=0, ge=0)
    pension_pct: float = Field(default=0, ge=0, le=100)
    nhf_enabled: bool = False
    nhf_amount: float | None = Field(default=None, ge=0)
    life_assurance: float = Field(default=0, ge=0)
    voluntary_contrib: float = Field(default=0, ge=0)
    gross_income: float = Field(default=0, ge=0)
    reliefs: list[ReliefItemRequest] = []

    def to_inputs(self) -> CalcInputs:
        data = self.model_dump(exclude={"reliefs"})
        return CalcInputs(
            **data,
            reliefs=[ReliefItem(**r.model_dump()) for r in self.reliefs],
        )


# ── Rules Schemas (stored document shape) ──

class ReliefGatesDocument(BaseModel):
    pensionIsDeductible: bool = True
    nhfIsDeductible: bool = True
    lifeAssuranceCap: float | None = Field(default=None, ge=0)


class TaxBracketDocument(BaseModel):
    upTo: float = Field(..., gt=0, description=f"Use {UNBOUNDED_SENTINEL} for the unbounded last bracket")
    rate: float = Field(..., ge=0, le=1)


class PersonalAllowanceDocument(BaseModel):
    type: AllowanceType
    value: float = Field(..., ge=0)


class PayeRulesDocument(BaseModel):
    currency: str = "NGN"
    year: int = Field(..., ge=2020, le=2100)
    reliefs: ReliefGatesDocument = ReliefGatesDocument()
    brackets: list[TaxBracketDocument] = Field(..., min_length=1)
    personalAllowance: PersonalAllowanceDocument
    notes: str = ""

    def to_rules(self) -> PayeRules:
        """Raises RulesValidationError when the brackets break engine invariants."""
        return rules_from_document(self.model_dump(mode="json", exclude_none=True))


class PayeCalculateRequest(BaseModel):
    inputs: CalcInputsRequest
    rules: PayeRulesDocument | None = None
    apply_personal_allowance: bool | None = None


class PayeTestRequest(BaseModel):
    inputs: CalcInputsRequest
    rules: PayeRulesDocument


# ── Response Schemas ──

class CalcLineItemResponse(BaseModel):
    label: str
    amount: float
    is_deduction: bool = False


class CalcOutputsResponse(BaseModel):
    annual_tax: float
    monthly_tax: float
    taxable_income: float
    effective_rate: float
    line_items: list[CalcLineItemResponse]
    assumptions_note: str
    gross_income: float
    total_deductions: float
    personal_allowance: float
    currency: str


class PayeTestResponse(BaseModel):
    allowance_ignored: CalcOutputsResponse
    allowance_applied: CalcOutputsResponse
