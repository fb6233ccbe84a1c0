# hotelmol admin backend (FastAPI): leads, stats and service status for the dashboard
import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request

from db import dispose_engine
from routers.auth import auth_router
from routers.leads import leads_router
from routers.status import status_router
from settings import settings
from utils import scrub

logging.basicConfig(level=settings.log_level, format="%(asctime)s %(levelname)s %(name)s %(message)s")
log = logging.getLogger("hotelmol")


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    await dispose_engine()
    log.info("Database engine disposed")


app = FastAPI(title="hotelmol admin backend", lifespan=lifespan)


def _secrets():
    return (
        settings.postgres_dsn,
        settings.admin_password,
        settings.jwt_secret,
        settings.workflow_webhook_secret,
    )


# --------- global request logger ----------
@app.middleware("http")
async def log_requests(request: Request, call_next):
    ip = request.headers.get("x-forwarded-for") or (request.client.host if request.client else None)
    log.info("REQ %s %s ip=%s", request.method, request.url.path, ip)

    # login bodies carry credentials
    if not request.url.path.startswith("/auth/"):
        body_bytes = await request.body()
        if body_bytes:
            text = body_bytes[:2000].decode("utf-8", errors="replace")
            log.info("REQ_BODY %s", scrub(text, _secrets()))

        # re-create receive so the endpoint can read the body again
        async def receive():
            return {"type": "http.request", "body": body_bytes, "more_body": False}

        request._receive = receive  # noqa: SLF001

    start = time.perf_counter()
    response = await call_next(request)
    log.info(
        "RESP %s %s -> %s (%.0fms)",
        request.method,
        request.url.path,
        response.status_code,
        (time.perf_counter() - start) * 1000,
    )
    return response


app.include_router(status_router)
app.include_router(auth_router)
app.include_router(leads_router)
