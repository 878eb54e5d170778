import math

import pytest

from payecore.core.tax_rules.rules import (
    AllowanceType,
    PayeRules,
    PersonalAllowance,
    ReliefGates,
    TaxBracket,
)


class FakeQuery:
    """Mimics the chained supabase-py query builder closely enough for the rules store."""

    def __init__(self, table: "FakeTable"):
        self.table = table
        self.filters: dict = {}
        self.payload = None

    def select(self, *columns):
        return self

    def eq(self, column, value):
        self.filters[column] = value
        return self

    def limit(self, count):
        return self

    def single(self):
        return self

    def upsert(self, payload):
        self.payload = payload
        return self

    def execute(self):
        if self.table.error is not None:
            raise self.table.error
        if self.payload is not None:
            self.table.rows = [r for r in self.table.rows if r["id"] != self.payload["id"]]
            self.table.rows.append(self.payload)
            return FakeResponse([self.payload])
        rows = [
            r for r in self.table.rows
            if all(r.get(k) == v for k, v in self.filters.items())
        ]
        return FakeResponse(rows)


class FakeResponse:
    def __init__(self, data):
        self.data = data


class FakeTable:
    def __init__(self):
        self.rows: list[dict] = []
        self.error: Exception | None = None


class FakeSupabase:
    def __init__(self):
        self.tables: dict[str, FakeTable] = {}

    def get_table(self, name: str) -> FakeTable:
        return self.tables.setdefault(name, FakeTable())

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self.get_table(name))


@pytest.fixture
def fake_supabase():
    return FakeSupabase()


@pytest.fixture
def test_rules():
    """Three-bracket rules with a fixed ₦200,000 personal allowance."""
    return PayeRules(
        currency="NGN",
        year=2025,
        reliefs=ReliefGates(pension_is_deductible=True, nhf_is_deductible=True),
        brackets=(
            TaxBracket(up_to=300_000.0, rate=0.07),
            TaxBracket(up_to=600_000.0, rate=0.11),
            TaxBracket(up_to=math.inf, rate=0.15),
        ),
        personal_allowance=PersonalAllowance(type=AllowanceType.FIXED, value=200_000.0),
        notes="Test rules",
    )
