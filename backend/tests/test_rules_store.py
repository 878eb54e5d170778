"""
Tests for the Supabase-backed PAYE rules store.
"""

import dataclasses

import pytest

from payecore.core.rules_store import CURRENT_RULES_ID, RulesStore
from payecore.core.tax_rules.rules import (
    DEFAULT_PAYE_RULES,
    UNBOUNDED_SENTINEL,
    RulesValidationError,
    rules_to_document,
)


@pytest.fixture
def store(fake_supabase):
    return RulesStore(client=fake_supabase)


class TestGetRules:
    def test_no_client_uses_defaults(self):
        assert RulesStore().get_rules() is DEFAULT_PAYE_RULES

    def test_no_row_uses_defaults(self, store):
        assert store.get_rules() is DEFAULT_PAYE_RULES

    def test_stored_rules_loaded(self, store, fake_supabase, test_rules):
        fake_supabase.get_table("paye_rules").rows.append(
            {"id": CURRENT_RULES_ID, "document": rules_to_document(test_rules)}
        )
        assert store.get_rules() == test_rules

    def test_backend_error_falls_back(self, store, fake_supabase):
        fake_supabase.get_table("paye_rules").error = ConnectionError("supabase down")
        assert store.get_rules() is DEFAULT_PAYE_RULES

    def test_invalid_stored_document_falls_back(self, store, fake_supabase):
        document = rules_to_document(DEFAULT_PAYE_RULES)
        document["brackets"] = [{"upTo": 500000, "rate": 0.1}]
        fake_supabase.get_table("paye_rules").rows.append({"id": CURRENT_RULES_ID, "document": document})
        assert store.get_rules() is DEFAULT_PAYE_RULES


class TestSaveRules:
    def test_save_then_load(self, store, test_rules):
        document = store.save_rules(test_rules, updated_by="admin-1")
        assert document["brackets"][-1]["upTo"] == UNBOUNDED_SENTINEL
        assert store.get_rules() == test_rules

    def test_save_replaces_previous(self, store, fake_supabase, test_rules):
        store.save_rules(DEFAULT_PAYE_RULES)
        store.save_rules(test_rules, updated_by="admin-1")
        rows = fake_supabase.tables["paye_rules"].rows
        assert len(rows) == 1
        assert rows[0]["updated_by"] == "admin-1"

    def test_invalid_rules_not_saved(self, store, fake_supabase):
        rules = dataclasses.replace(DEFAULT_PAYE_RULES, brackets=())
        with pytest.raises(RulesValidationError):
            store.save_rules(rules)
        assert fake_supabase.tables.get("paye_rules") is None

    def test_save_without_backend(self):
        with pytest.raises(RuntimeError):
            RulesStore().save_rules(DEFAULT_PAYE_RULES)

    def test_write_errors_propagate(self, store, fake_supabase):
        fake_supabase.get_table("paye_rules").error = ConnectionError("supabase down")
        with pytest.raises(ConnectionError):
            store.save_rules(DEFAULT_PAYE_RULES)
