"""
Tax calculation API routes.
Exposes the PAYE calculator and its rules document via REST endpoints.
"""

import logging
from dataclasses import asdict
from functools import partial

from fastapi import APIRouter, HTTPException, Depends

from payecore.api.deps import get_rules_store, require_admin
from payecore.config import get_settings
from payecore.core.currency import format_currency
from payecore.core.rules_store import RulesStore
from payecore.core.tax_rules.paye import CalcInputs, compute_tax
from payecore.core.tax_rules.rules import PayeRules, rules_to_document
from payecore.schemas.schemas import (
    CalcOutputsResponse,
    PayeCalculateRequest,
    PayeRulesDocument,
    PayeTestRequest,
    PayeTestResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()

settings = get_settings()


def _calculate(inputs: CalcInputs, rules: PayeRules, apply_personal_allowance: bool) -> dict:
    outputs = compute_tax(
        inputs,
        rules,
        apply_personal_allowance=apply_personal_allowance,
        formatter=partial(format_currency, currency=rules.currency),
    )
    return asdict(outputs)


@router.post("/paye/calculate", response_model=CalcOutputsResponse)
async def calculate_paye(
    data: PayeCalculateRequest,
    store: RulesStore = Depends(get_rules_store),
):
    """Calculate PAYE against the submitted rules, or the current rules if none are given."""
    try:
        rules = data.rules.to_rules() if data.rules else store.get_rules()
        apply_allowance = (
            data.apply_personal_allowance
            if data.apply_personal_allowance is not None
            else settings.APPLY_PERSONAL_ALLOWANCE
        )
        return _calculate(data.inputs.to_inputs(), rules, apply_allowance)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/paye/rules")
async def get_paye_rules(store: RulesStore = Depends(get_rules_store)):
    """Current PAYE rules in stored document form."""
    return rules_to_document(store.get_rules())


@router.put("/paye/rules")
async def update_paye_rules(
    data: PayeRulesDocument,
    store: RulesStore = Depends(get_rules_store),
    admin=Depends(require_admin),
):
    """Replace the PAYE rules document (admin only)."""
    try:
        rules = data.to_rules()
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    try:
        document = store.save_rules(rules, updated_by=str(admin.id))
    except RuntimeError as e:
        raise HTTPException(status_code=503, detail=str(e))
    except Exception as e:
        logger.exception("Failed to save PAYE rules")
        raise HTTPException(status_code=500, detail=f"Failed to save rules: {str(e)}")

    return {"status": "saved", "rules": document}


@router.post("/paye/test", response_model=PayeTestResponse)
async def run_test_calculator(data: PayeTestRequest, admin=Depends(require_admin)):
    """
    Run proposed rules through the calculator without saving them.
    Both personal allowance modes are returned side by side.
    """
    try:
        rules = data.rules.to_rules()
        inputs = data.inputs.to_inputs()
        return {
            "allowance_ignored": _calculate(inputs, rules, apply_personal_allowance=False),
            "allowance_applied": _calculate(inputs, rules, apply_personal_allowance=True),
        }
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
