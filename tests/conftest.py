import asyncio
import os
from datetime import datetime, timedelta, timezone
from decimal import Decimal

# Settings are read at import time; keep these before any app import.
os.environ.setdefault("ADMIN_USER", "admin")
os.environ.setdefault("ADMIN_PASSWORD", "test-password")
os.environ.setdefault("JWT_SECRET", "test-jwt-secret")

import pytest
from sqlalchemy.exc import OperationalError
from sqlalchemy.sql import ClauseElement

from leads_service import LeadsService

NOW = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)


class FakeLeadStore:
    """In-memory stand-in for LeadStore with per-table failure switches."""

    def __init__(self, tables=None, failing=(), slow=(), broken_writes=False):
        self.tables = {name: [dict(r) for r in rows] for name, rows in (tables or {}).items()}
        self.failing = set(failing)
        self.slow = set(slow)
        self.broken_writes = broken_writes
        self.list_calls = []

    async def list_rows(self, table_name):
        self.list_calls.append(table_name)
        if table_name in self.failing:
            raise RuntimeError(f'relation "{table_name}" does not exist')
        if table_name in self.slow:
            await asyncio.sleep(10)
        return [dict(r) for r in self.tables.get(table_name, [])]

    async def update(self, table_name, lead_id, fields):
        if self.broken_writes:
            raise OperationalError("UPDATE", {}, Exception("connection reset"))
        affected = 0
        for row in self.tables.get(table_name, []):
            if row.get("id") == lead_id:
                for key, value in fields.items():
                    # SQL expressions such as now() resolve to the fixed clock
                    row[key] = NOW if isinstance(value, ClauseElement) else value
                affected += 1
        return affected

    async def delete(self, table_name, lead_id):
        if self.broken_writes:
            raise OperationalError("DELETE", {}, Exception("connection reset"))
        rows = self.tables.get(table_name, [])
        kept = [r for r in rows if r.get("id") != lead_id]
        self.tables[table_name] = kept
        return len(rows) - len(kept)


def scenario_tables():
    """demo 2h old, contact 30d old (not responded), roi 1h old; all share id 1."""
    return {
        "demo_requests": [
            {
                "id": 1,
                "name": "Example User",
                "email": "example@seaside.test",
                "hotel_name": "Seaside Inn",
                "form_type": "demo",
                "submitted_at": NOW - timedelta(hours=2),
            },
        ],
        "contact_forms": [
            {
                "id": 1,
                "name": "Olena Koval",
                "email": "olena@grandhotel.test",
                "company": "Grand Hotel",
                "subject": "Channel manager integration",
                "responded_at": None,
                "created_at": NOW - timedelta(days=30),
            },
        ],
        "roi_calculations": [
            {
                "id": 1,
                "name": "Marco Bianchi",
                "email": "marco@alpina.test",
                "hotel_size": 40,
                "current_revenue": Decimal("50000"),
                "submitted_at": NOW - timedelta(hours=1),
            },
        ],
    }


@pytest.fixture
def make_service():
    def _make(store, **kwargs):
        kwargs.setdefault("clock", lambda: NOW)
        return LeadsService(store, **kwargs)

    return _make
