"""Unified leads view over demo requests, contact forms and ROI calculations.

Reads fan out to one reader per requested source and never fail the whole
request: a source that errors or times out is logged and counted as empty.
Mutations go the other way and raise typed errors (see ``errors.py``).
"""

import asyncio
import logging
from collections import Counter
from datetime import datetime, timedelta, timezone
from typing import Callable, Iterable, List, Optional

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError

from errors import InvalidLeadSourceError, LeadNotFoundError, LeadStorageError
from lead_normalizer import SOURCE_MAPPINGS, normalize_lead
from lead_store import LeadStore
from schemas.lead import DailyLeadCount, Lead, LeadFilters, LeadSource, LeadStats, LeadsPage
from settings import settings

log = logging.getLogger("hotelmol")

STATS_DAYS = 30
LATEST_LIMIT = 5

# Fixed source rank so equal timestamps order the same way on every call
_SOURCE_RANK = {LeadSource.demo: 0, LeadSource.contact: 1, LeadSource.roi: 2}


def _sort_key(lead: Lead):
    return (lead.created_at, _SOURCE_RANK[lead.source], lead.id)


def requested_sources(source: str) -> List[LeadSource]:
    if source == "all":
        return list(LeadSource)
    return [LeadSource(source)]


def _matches(lead: Lead, term: str) -> bool:
    return any(value and term in value.lower() for value in (lead.name, lead.email, lead.company))


def filter_leads(leads: Iterable[Lead], filters: LeadFilters) -> List[Lead]:
    term = (filters.search_term or "").strip().lower()

    def keep(lead: Lead) -> bool:
        if filters.date_from is not None and lead.created_at < filters.date_from:
            return False
        if filters.date_to is not None and lead.created_at > filters.date_to:
            return False
        # demo/roi leads have no responded state and always pass
        if not filters.show_responded and lead.source == LeadSource.contact and lead.responded_at is not None:
            return False
        if term and not _matches(lead, term):
            return False
        return True

    return [lead for lead in leads if keep(lead)]


def sort_leads(leads: Iterable[Lead], sort_dir: str = "desc") -> List[Lead]:
    return sorted(leads, key=_sort_key, reverse=(sort_dir != "asc"))


class LeadsService:
    """Read/filter/paginate leads and apply staff actions to them."""

    def __init__(
        self,
        store: LeadStore,
        *,
        source_timeout: Optional[float] = None,
        new_window_hours: Optional[int] = None,
        default_page_size: Optional[int] = None,
        max_page_size: Optional[int] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self._store = store
        self._source_timeout = settings.leads_source_timeout_seconds if source_timeout is None else source_timeout
        self._new_window = timedelta(
            hours=settings.leads_new_window_hours if new_window_hours is None else new_window_hours
        )
        self._default_page_size = default_page_size or settings.leads_default_page_size
        self._max_page_size = max_page_size or settings.leads_max_page_size
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    def _page_size(self, requested: Optional[int]) -> int:
        if not requested or requested < 1:
            return self._default_page_size
        return min(requested, self._max_page_size)

    async def read_source(self, source: LeadSource, now: datetime) -> List[Lead]:
        """All leads of one source, newest first; [] if the source can't be read."""
        table = SOURCE_MAPPINGS[source].table
        try:
            rows = await asyncio.wait_for(self._store.list_rows(table), timeout=self._source_timeout)
        except asyncio.TimeoutError:
            log.warning("Lead source %s timed out after %.1fs, treating as empty", table, self._source_timeout)
            return []
        except Exception as e:
            log.warning("Failed to fetch %s, treating as empty: %s", table, e)
            return []

        leads = []
        for row in rows:
            try:
                leads.append(normalize_lead(source, row, now=now, window=self._new_window))
            except (TypeError, ValueError) as e:
                log.warning("Skipping malformed %s row id=%s: %s", table, row.get("id"), e)
        return sort_leads(leads, "desc")

    async def collect(self, sources: Iterable[LeadSource], now: Optional[datetime] = None) -> List[Lead]:
        now = now or self._clock()
        results = await asyncio.gather(*(self.read_source(source, now) for source in sources))
        return [lead for leads in results for lead in leads]

    async def fetch_leads(self, filters: Optional[LeadFilters] = None) -> LeadsPage:
        filters = filters or LeadFilters()
        page = filters.page
        page_size = self._page_size(filters.page_size)

        try:
            leads = await self.collect(requested_sources(filters.source))
            leads = sort_leads(filter_leads(leads, filters), filters.sort_dir)
        except Exception:
            log.exception("Error fetching leads")
            return LeadsPage(items=[], total=0, page=page, page_size=page_size)

        offset = (page - 1) * page_size
        return LeadsPage(
            items=leads[offset:offset + page_size],
            total=len(leads),
            page=page,
            page_size=page_size,
        )

    async def get_stats(self) -> LeadStats:
        now = self._clock()
        try:
            leads = await self.collect(list(LeadSource), now=now)
        except Exception:
            log.exception("Error collecting lead stats")
            leads = []

        cutoff = now - timedelta(days=STATS_DAYS)
        per_day = Counter(lead.created_at.date().isoformat() for lead in leads if lead.created_at > cutoff)

        return LeadStats(
            total_leads=len(leads),
            new_leads=sum(1 for lead in leads if lead.is_new),
            by_day=[DailyLeadCount(date=day, count=count) for day, count in sorted(per_day.items())],
            latest=sort_leads(leads, "desc")[:LATEST_LIMIT],
        )

    async def mark_responded(self, lead_id: int) -> None:
        """Stamp ``responded_at`` on a contact lead. Calling it again re-stamps."""
        table = SOURCE_MAPPINGS[LeadSource.contact].table
        try:
            affected = await self._store.update(table, lead_id, {"responded_at": func.now()})
        except (SQLAlchemyError, OSError) as e:
            log.error("Error marking lead %s as responded: %s", lead_id, e)
            raise LeadStorageError("Failed to mark lead as responded") from e

        if not affected:
            raise LeadNotFoundError(f"Contact lead {lead_id} not found")
        log.info("Marked contact lead %s as responded", lead_id)

    async def delete_lead(self, lead_id: int, source: LeadSource | str) -> None:
        try:
            source = LeadSource(source)
        except ValueError:
            raise InvalidLeadSourceError(f"Invalid lead source: {source}") from None

        table = SOURCE_MAPPINGS[source].table
        try:
            affected = await self._store.delete(table, lead_id)
        except (SQLAlchemyError, OSError) as e:
            log.error("Error deleting %s lead %s: %s", source.value, lead_id, e)
            raise LeadStorageError("Failed to delete lead") from e

        if not affected:
            raise LeadNotFoundError(f"{source.value.capitalize()} lead {lead_id} not found")
        log.info("Deleted %s lead %s", source.value, lead_id)
