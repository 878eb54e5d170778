from payecore.core.tax_rules.paye import CalcInputs, CalcOutputs, compute_tax
from payecore.core.tax_rules.reliefs import ReliefItem, ReliefType, resolve_relief
from payecore.core.tax_rules.rules import DEFAULT_PAYE_RULES, PayeRules, validate_rules

__all__ = [
    "CalcInputs",
    "CalcOutputs",
    "compute_tax",
    "ReliefItem",
    "ReliefType",
    "resolve_relief",
    "DEFAULT_PAYE_RULES",
    "PayeRules",
    "validate_rules",
]
