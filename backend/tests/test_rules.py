"""
Tests for PAYE rules validation and the stored-document boundary.
"""

import dataclasses
import math

import pytest

from payecore.core.tax_rules.rules import (
    DEFAULT_PAYE_RULES,
    UNBOUNDED_SENTINEL,
    AllowanceType,
    ReliefGates,
    RulesValidationError,
    TaxBracket,
    rules_from_document,
    rules_to_document,
    validate_rules,
)


@pytest.fixture
def document():
    return {
        "currency": "NGN",
        "year": 2025,
        "reliefs": {"pensionIsDeductible": True, "nhfIsDeductible": False, "lifeAssuranceCap": 100000},
        "brackets": [
            {"upTo": 300000, "rate": 0.07},
            {"upTo": 600000, "rate": 0.11},
            {"upTo": UNBOUNDED_SENTINEL, "rate": 0.15},
        ],
        "personalAllowance": {"type": "fixed", "value": 200000},
        "notes": "Stored rules",
    }


class TestDefaultRules:
    def test_default_rules_valid(self):
        assert validate_rules(DEFAULT_PAYE_RULES) is DEFAULT_PAYE_RULES

    def test_default_rules_shape(self):
        assert len(DEFAULT_PAYE_RULES.brackets) == 6
        assert DEFAULT_PAYE_RULES.brackets[0] == TaxBracket(up_to=800_000, rate=0.0)
        assert DEFAULT_PAYE_RULES.brackets[-1].is_unbounded
        assert DEFAULT_PAYE_RULES.brackets[-1].rate == 0.25
        assert DEFAULT_PAYE_RULES.personal_allowance.type == AllowanceType.HYBRID
        assert DEFAULT_PAYE_RULES.personal_allowance.value == 200_000


class TestValidation:
    def test_empty_brackets(self):
        with pytest.raises(RulesValidationError):
            validate_rules(dataclasses.replace(DEFAULT_PAYE_RULES, brackets=()))

    def test_non_increasing_limits(self):
        brackets = (
            TaxBracket(up_to=600_000, rate=0.07),
            TaxBracket(up_to=300_000, rate=0.11),
            TaxBracket(up_to=math.inf, rate=0.15),
        )
        with pytest.raises(RulesValidationError):
            validate_rules(dataclasses.replace(DEFAULT_PAYE_RULES, brackets=brackets))

    def test_negative_rate(self):
        brackets = (TaxBracket(up_to=math.inf, rate=-0.1),)
        with pytest.raises(RulesValidationError):
            validate_rules(dataclasses.replace(DEFAULT_PAYE_RULES, brackets=brackets))

    def test_rate_above_one(self):
        brackets = (TaxBracket(up_to=math.inf, rate=1.5),)
        with pytest.raises(RulesValidationError):
            validate_rules(dataclasses.replace(DEFAULT_PAYE_RULES, brackets=brackets))

    def test_bounded_last_bracket(self):
        brackets = (TaxBracket(up_to=300_000, rate=0.07),)
        with pytest.raises(RulesValidationError, match="unbounded"):
            validate_rules(dataclasses.replace(DEFAULT_PAYE_RULES, brackets=brackets))

    def test_negative_life_assurance_cap(self):
        rules = dataclasses.replace(DEFAULT_PAYE_RULES, reliefs=ReliefGates(life_assurance_cap=-1))
        with pytest.raises(RulesValidationError):
            validate_rules(rules)

    def test_year_out_of_range(self):
        with pytest.raises(RulesValidationError):
            validate_rules(dataclasses.replace(DEFAULT_PAYE_RULES, year=1999))

    def test_is_value_error(self):
        assert issubclass(RulesValidationError, ValueError)


class TestDocumentBoundary:
    def test_sentinel_becomes_infinity(self, document):
        rules = rules_from_document(document)
        assert math.isinf(rules.brackets[-1].up_to)
        assert rules.brackets[0].up_to == 300_000

    def test_gates_and_cap(self, document):
        rules = rules_from_document(document)
        assert rules.reliefs.pension_is_deductible is True
        assert rules.reliefs.nhf_is_deductible is False
        assert rules.reliefs.life_assurance_cap == 100_000
        assert rules.notes == "Stored rules"

    def test_infinity_becomes_sentinel(self, document):
        stored = rules_to_document(rules_from_document(document))
        assert stored["brackets"][-1]["upTo"] == UNBOUNDED_SENTINEL
        assert stored["personalAllowance"] == {"type": "fixed", "value": 200000}

    def test_missing_cap_omitted(self):
        stored = rules_to_document(DEFAULT_PAYE_RULES)
        assert "lifeAssuranceCap" not in stored["reliefs"]

    def test_missing_key(self, document):
        del document["brackets"]
        with pytest.raises(RulesValidationError, match="Malformed"):
            rules_from_document(document)

    def test_unknown_allowance_type(self, document):
        document["personalAllowance"]["type"] = "sliding"
        with pytest.raises(RulesValidationError):
            rules_from_document(document)

    def test_finite_last_bracket_rejected(self, document):
        document["brackets"][-1]["upTo"] = 900000
        with pytest.raises(RulesValidationError):
            rules_from_document(document)
