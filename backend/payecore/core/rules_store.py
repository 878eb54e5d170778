"""
PAYE rules persistence.
Keeps the admin-edited rules document in a Supabase table, one row per
deployment ("current"). Reads fall back to DEFAULT_PAYE_RULES so the
calculator stays usable when no override exists or the backend is down.
"""

import logging

from payecore.core.tax_rules.rules import (
    DEFAULT_PAYE_RULES,
    PayeRules,
    RulesValidationError,
    rules_from_document,
    rules_to_document,
    validate_rules,
)

logger = logging.getLogger(__name__)

CURRENT_RULES_ID = "current"


class RulesStore:
    """Loads and saves the PAYE rules document."""

    def __init__(self, client=None, table: str = "paye_rules"):
        self.client = client
        self.table = table

    def get_rules(self) -> PayeRules:
        if self.client is None:
            logger.debug("No rules backend configured, using default PAYE rules")
            return DEFAULT_PAYE_RULES

        try:
            response = (
                self.client.table(self.table)
                .select("document")
                .eq("id", CURRENT_RULES_ID)
                .limit(1)
                .execute()
            )
        except Exception as e:
            logger.warning(f"Failed to load PAYE rules from {self.table}: {e}")
            return DEFAULT_PAYE_RULES

        rows = response.data or []
        if not rows or not rows[0].get("document"):
            logger.info("No stored PAYE rules override, using defaults")
            return DEFAULT_PAYE_RULES

        try:
            return rules_from_document(rows[0]["document"])
        except RulesValidationError as e:
            logger.error(f"Stored PAYE rules are invalid, using defaults: {e}")
            return DEFAULT_PAYE_RULES

    def save_rules(self, rules: PayeRules, updated_by: str | None = None) -> dict:
        if self.client is None:
            raise RuntimeError("Rules backend is not configured")

        validate_rules(rules)
        document = rules_to_document(rules)
        self.client.table(self.table).upsert(
            {
                "id": CURRENT_RULES_ID,
                "document": document,
                "updated_by": updated_by,
            }
        ).execute()

        logger.info(f"PAYE rules for {rules.year} saved by {updated_by or 'unknown'}")
        return document
