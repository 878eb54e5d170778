"""
Seed the PAYE rules table via the Supabase REST (PostgREST) endpoint.
Pushes the built-in default preset, or a rules document from a JSON file.

Usage:
    python -m scripts.seed_rules
    python -m scripts.seed_rules --file rules_2026.json
    python -m scripts.seed_rules --dry-run
"""

import argparse
import json
import os
import sys

import httpx
from dotenv import load_dotenv

from payecore.core.rules_store import CURRENT_RULES_ID
from payecore.core.tax_rules.rules import (
    DEFAULT_PAYE_RULES,
    RulesValidationError,
    rules_from_document,
    rules_to_document,
)

load_dotenv()

SUPABASE_URL = os.getenv("SUPABASE_URL")
SUPABASE_SERVICE_ROLE_KEY = os.getenv("SUPABASE_SERVICE_ROLE_KEY")
PAYE_RULES_TABLE = os.getenv("PAYE_RULES_TABLE", "paye_rules")


def load_document(file_path: str | None) -> dict:
    """Read and validate a rules document; the default preset when no file is given."""
    if file_path is None:
        return rules_to_document(DEFAULT_PAYE_RULES)

    with open(file_path, "r", encoding="utf-8") as f:
        raw = json.load(f)

    # Round-trip so the sentinel and key names are normalised before upload
    return rules_to_document(rules_from_document(raw))


def upsert_rules(client: httpx.Client, document: dict, table: str = PAYE_RULES_TABLE) -> httpx.Response:
    response = client.post(
        f"/rest/v1/{table}",
        json={"id": CURRENT_RULES_ID, "document": document, "updated_by": "seed_rules"},
        headers={"Prefer": "resolution=merge-duplicates,return=minimal"},
    )
    response.raise_for_status()
    return response


def main():
    parser = argparse.ArgumentParser(description="Seed the PAYE rules table")
    parser.add_argument("--file", help="Path to a rules JSON document (camelCase keys)")
    parser.add_argument("--dry-run", action="store_true", help="Print the document without uploading")
    args = parser.parse_args()

    try:
        document = load_document(args.file)
    except (OSError, json.JSONDecodeError, RulesValidationError) as e:
        print(f"Error: could not load rules document: {e}")
        sys.exit(1)

    if args.dry_run:
        print(json.dumps(document, indent=2, ensure_ascii=False))
        return

    if not SUPABASE_URL or not SUPABASE_SERVICE_ROLE_KEY:
        print("Error: SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY must be set in .env")
        sys.exit(1)

    headers = {
        "apikey": SUPABASE_SERVICE_ROLE_KEY,
        "Authorization": f"Bearer {SUPABASE_SERVICE_ROLE_KEY}",
        "Content-Type": "application/json",
    }

    print(f"Seeding PAYE rules for {document['year']} into {PAYE_RULES_TABLE} at {SUPABASE_URL}")
    with httpx.Client(base_url=SUPABASE_URL, headers=headers, timeout=30) as client:
        try:
            upsert_rules(client, document)
        except httpx.HTTPStatusError as e:
            print(f"Seeding failed with status {e.response.status_code}")
            print(f"Response: {e.response.text[:500]}")
            sys.exit(1)

    print("PAYE rules seeded successfully!")


if __name__ == "__main__":
    main()
