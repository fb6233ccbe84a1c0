import logging
from typing import Any, Callable, Dict, List

from sqlalchemy import column, delete, table, text, update
from sqlalchemy.ext.asyncio import AsyncSession

log = logging.getLogger("hotelmol")

LEAD_TABLES = frozenset({"demo_requests", "contact_forms", "roi_calculations"})


def _checked(table_name: str) -> str:
    # table names get interpolated into SQL, so only the known three are allowed
    if table_name not in LEAD_TABLES:
        raise ValueError(f"Unknown lead table: {table_name}")
    return table_name


class LeadStore:
    """Row-level access to the lead tables.

    Every call opens its own session, so reads for different sources can be
    awaited concurrently.
    """

    def __init__(self, session_factory: Callable[[], AsyncSession]):
        self._session_factory = session_factory

    async def list_rows(self, table_name: str) -> List[Dict[str, Any]]:
        # SELECT * so reads survive column renames between form revisions
        stmt = text(f"SELECT * FROM {_checked(table_name)}")
        async with self._session_factory() as session:
            result = await session.execute(stmt)
            rows = [dict(row) for row in result.mappings().all()]
        log.debug("Read %d rows from %s", len(rows), table_name)
        return rows

    async def update(self, table_name: str, lead_id: int, fields: Dict[str, Any]) -> int:
        """Update one row by id; returns the number of rows matched."""
        t = table(_checked(table_name), column("id"), *(column(name) for name in fields))
        stmt = update(t).where(t.c.id == lead_id).values(**fields)
        async with self._session_factory() as session:
            result = await session.execute(stmt)
            affected = result.rowcount
            await session.commit()
        return affected

    async def delete(self, table_name: str, lead_id: int) -> int:
        t = table(_checked(table_name), column("id"))
        stmt = delete(t).where(t.c.id == lead_id)
        async with self._session_factory() as session:
            result = await session.execute(stmt)
            affected = result.rowcount
            await session.commit()
        return affected
