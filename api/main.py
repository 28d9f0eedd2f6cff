import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from core import db
from core.logs import configure_logging
from diagnostics import router as diagnostics_router
from intakes import router as intakes_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_: FastAPI):
    configure_logging()
    # The pool backs the audit log; without DATABASE_URL audit writes are skipped.
    if db.is_configured():
        await db.init_pool()
    else:
        logger.warning("database_not_configured audit_log=disabled")
    try:
        yield
    finally:
        await db.close_pool()


app = FastAPI(lifespan=lifespan)

app.include_router(intakes_router.router, tags=["intakeq"])
app.include_router(diagnostics_router.router, tags=["diagnostics"])


@app.get("/health")
def health() -> dict:
    return {"status": "ok"}
