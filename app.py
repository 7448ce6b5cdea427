import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from stars.config import CORS_ORIGINS, ENVIRONMENT
from stars.database import get_db_pool, close_db_pool, run_schema_migrations
from stars.dependencies import set_email_queue
from stars.exceptions import register_exception_handlers
from stars.repositories import PipelineStore
from stars.routers import (
    health_router,
    auth_router,
    organizations_router,
    positions_router,
    candidates_router,
    pipeline_router,
    activity_router,
    notifications_router,
    emails_router,
    manatal_router,
)
from stars.services import BackgroundEmailQueue, EmailDispatcher

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application lifecycle - database pool and the email queue."""
    pool = await get_db_pool()
    await run_schema_migrations(pool)

    email_queue = BackgroundEmailQueue(EmailDispatcher(PipelineStore.from_pool(pool)))
    set_email_queue(email_queue)
    logger.info(f"S.T.A.R.S backend started ({ENVIRONMENT})")

    yield

    # Let queued emails finish before the pool goes away
    if email_queue.pending:
        logger.info(f"Waiting for {email_queue.pending} queued email(s)")
    await email_queue.drain()
    set_email_queue(None)
    await close_db_pool()


app = FastAPI(title="Nimble S.T.A.R.S", lifespan=lifespan)

# CORS middleware for the admin and client portals
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["*"],
    allow_credentials=True,
)

register_exception_handlers(app)

app.include_router(health_router)
app.include_router(auth_router)
app.include_router(organizations_router)
app.include_router(positions_router)
app.include_router(candidates_router)
app.include_router(pipeline_router)
app.include_router(activity_router)
app.include_router(notifications_router)
app.include_router(emails_router)
app.include_router(manatal_router)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("app:app", host="0.0.0.0", port=8080, reload=ENVIRONMENT == "development")
