import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from auth_tokens import get_current_admin
from db import SessionLocal
from errors import LeadMutationError
from lead_store import LeadStore
from leads_service import LeadsService
from schemas.lead import LeadFilters, LeadsPage, LeadStats

log = logging.getLogger("hotelmol")

leads_router = APIRouter(dependencies=[Depends(get_current_admin)])


def get_leads_service() -> LeadsService:
    return LeadsService(LeadStore(SessionLocal))


@leads_router.get("/leads", response_model=LeadsPage)
async def list_leads(
    source: str = "all",
    date_from: Optional[str] = Query(None, alias="dateFrom"),
    date_to: Optional[str] = Query(None, alias="dateTo"),
    search_term: Optional[str] = Query(None, alias="searchTerm"),
    show_responded: Optional[str] = Query(None, alias="showResponded"),
    sort_dir: str = Query("desc", alias="sortDir"),
    # kept as strings so LeadFilters can clamp bad values instead of a 422
    page: Optional[str] = None,
    page_size: Optional[str] = Query(None, alias="pageSize"),
    service: LeadsService = Depends(get_leads_service),
):
    filters = LeadFilters(
        source=source,
        date_from=date_from,
        date_to=date_to,
        search_term=search_term,
        show_responded=show_responded,
        sort_dir=sort_dir,
        page=page,
        page_size=page_size,
    )
    return await service.fetch_leads(filters)


@leads_router.get("/leads/stats", response_model=LeadStats)
async def lead_stats(service: LeadsService = Depends(get_leads_service)):
    return await service.get_stats()


@leads_router.post("/leads/contact/{lead_id}/responded")
async def mark_lead_responded(lead_id: int, service: LeadsService = Depends(get_leads_service)):
    try:
        await service.mark_responded(lead_id)
    except LeadMutationError as e:
        raise HTTPException(e.status_code, e.message)
    return {"ok": True, "source": "contact", "id": lead_id}


@leads_router.delete("/leads/{source}/{lead_id}")
async def delete_lead(source: str, lead_id: int, service: LeadsService = Depends(get_leads_service)):
    try:
        await service.delete_lead(lead_id, source)
    except LeadMutationError as e:
        raise HTTPException(e.status_code, e.message)
    return {"ok": True, "source": source, "id": lead_id}
