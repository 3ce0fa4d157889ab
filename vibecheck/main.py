import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.middleware.cors import CORSMiddleware
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from vibecheck.database import Base, engine
from vibecheck.routers import check_ins, insights, notifications, venues
from vibecheck.services.cache import redis_available
from vibecheck.services.errors import VibeCheckError, error_to_http

log = logging.getLogger(__name__)

VERSION = "1.0.0"

app = FastAPI(
    title="VibeCheck",
    description="Live nightlife check-ins and partner venue insights",
    version=VERSION,
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.on_event("startup")
def on_startup():
    # create_all only adds missing tables; alembic owns schema changes
    Base.metadata.create_all(bind=engine)
    log.info("Schema sync complete")


# Routers
app.include_router(venues.router)
app.include_router(check_ins.router)
app.include_router(notifications.router)
app.include_router(insights.router)


@app.get("/health")
def health_check():
    checks = {"api": "ok"}
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        checks["database"] = "ok"
    except SQLAlchemyError:
        checks["database"] = "error"
    checks["redis"] = "ok" if redis_available() else "unavailable"
    overall = "ok" if checks.get("database") == "ok" else "degraded"
    return {"status": overall, "version": VERSION, "checks": checks}


@app.exception_handler(VibeCheckError)
async def vibecheck_error_handler(request: Request, exc: VibeCheckError):
    http = error_to_http(exc)
    if exc.status_code >= 500:
        log.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=http.status_code, content={"detail": http.detail, "kind": exc.kind})
