import asyncio
import logging
import time
from typing import List

import httpx
from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from auth_tokens import get_current_admin
from db import SessionLocal
from schemas.status import ConnectionStatus
from settings import settings
from utils import scrub

log = logging.getLogger("hotelmol")

status_router = APIRouter()

DATABASE_SERVICE = "Database"
WORKFLOW_SERVICE = "Workflow Webhook"


async def get_db():
    async with SessionLocal() as session:
        yield session


def _elapsed_ms(start: float) -> int:
    return round((time.perf_counter() - start) * 1000)


async def check_database(db: AsyncSession) -> ConnectionStatus:
    start = time.perf_counter()
    try:
        await db.execute(text("SELECT 1"))
    except Exception as e:
        log.warning("Database status check failed: %s", scrub(str(e), [settings.postgres_dsn]))
        return ConnectionStatus(service=DATABASE_SERVICE, status="error", message="Database unreachable")
    return ConnectionStatus(
        service=DATABASE_SERVICE,
        status="connected",
        message="Connection pool active",
        latency=_elapsed_ms(start),
    )


async def check_workflow_webhook() -> ConnectionStatus:
    url = getattr(settings, "workflow_health_url", None)
    if not url:
        return ConnectionStatus(service=WORKFLOW_SERVICE, status="error", message="WORKFLOW_HEALTH_URL not set")

    headers = {"Accept": "application/json"}
    secret = getattr(settings, "workflow_webhook_secret", None)
    if secret:
        headers["X-Api-Key-Blog-Publishing"] = secret

    start = time.perf_counter()
    try:
        timeout = httpx.Timeout(connect=5.0, read=10.0, write=10.0, pool=5.0)
        async with httpx.AsyncClient(timeout=timeout, follow_redirects=True) as client:
            r = await client.get(url, headers=headers, params={"limit": 1})
    except httpx.HTTPError as e:
        log.warning("Workflow webhook status check failed: %s", scrub(str(e), [secret]))
        return ConnectionStatus(service=WORKFLOW_SERVICE, status="error", message="Workflow webhook unreachable")

    if r.status_code < 200 or r.status_code >= 300:
        log.warning("Workflow webhook responded non-2xx: %s %s", r.status_code, r.text[:500])
        return ConnectionStatus(
            service=WORKFLOW_SERVICE,
            status="error",
            message=f"Workflow webhook error: {r.status_code}",
            latency=_elapsed_ms(start),
        )

    return ConnectionStatus(
        service=WORKFLOW_SERVICE,
        status="connected",
        message="Workflow webhook reachable",
        latency=_elapsed_ms(start),
    )


@status_router.get("/health")
def health():
    return {"ok": True}


@status_router.get("/status", response_model=List[ConnectionStatus], dependencies=[Depends(get_current_admin)])
async def service_status(db: AsyncSession = Depends(get_db)):
    return list(await asyncio.gather(check_database(db), check_workflow_webhook()))
