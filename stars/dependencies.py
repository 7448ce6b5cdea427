"""
FastAPI dependency injection factories.

This module provides dependency factories for the pipeline store, services,
and other shared resources used across routers.
"""
import asyncpg
from typing import Optional
from fastapi import Depends

from stars.database import get_db_pool
from stars.repositories import PipelineStore
from stars.services import (
    BackgroundEmailQueue,
    StageWorkflowService,
    NotificationService,
    ActivityService,
    EmailLogService,
    OrganizationService,
    UserService,
    PositionService,
    CandidateService,
    ManatalClient,
    ImportService,
)


# Global email queue instance (set during app startup)
_email_queue: Optional[BackgroundEmailQueue] = None


def set_email_queue(queue: Optional[BackgroundEmailQueue]):
    """Set the global email queue instance."""
    global _email_queue
    _email_queue = queue


def get_email_queue() -> BackgroundEmailQueue:
    """Get the global email queue instance."""
    if _email_queue is None:
        raise RuntimeError("Email queue not initialized. Call set_email_queue() during app startup.")
    return _email_queue


# =============================================================================
# Database Dependencies
# =============================================================================

async def get_pool() -> asyncpg.Pool:
    """Get the database connection pool."""
    return await get_db_pool()


async def get_store(
    pool: asyncpg.Pool = Depends(get_pool)
) -> PipelineStore:
    """Get the repositories bundled over the pool."""
    return PipelineStore.from_pool(pool)


# =============================================================================
# Pipeline Service Dependencies
# =============================================================================

async def get_workflow_service(
    store: PipelineStore = Depends(get_store),
    email_queue: BackgroundEmailQueue = Depends(get_email_queue),
) -> StageWorkflowService:
    """Get a StageWorkflowService instance."""
    return StageWorkflowService(store, email_queue)


async def get_notification_service(
    store: PipelineStore = Depends(get_store),
    email_queue: BackgroundEmailQueue = Depends(get_email_queue),
) -> NotificationService:
    """Get a NotificationService instance."""
    return NotificationService(store, email_queue)


async def get_activity_service(
    store: PipelineStore = Depends(get_store)
) -> ActivityService:
    return ActivityService(store)


async def get_email_log_service(
    store: PipelineStore = Depends(get_store)
) -> EmailLogService:
    return EmailLogService(store)


# =============================================================================
# CRUD Service Dependencies
# =============================================================================

async def get_organization_service(
    store: PipelineStore = Depends(get_store)
) -> OrganizationService:
    return OrganizationService(store)


async def get_user_service(
    store: PipelineStore = Depends(get_store)
) -> UserService:
    return UserService(store)


async def get_position_service(
    store: PipelineStore = Depends(get_store)
) -> PositionService:
    return PositionService(store)


async def get_candidate_service(
    store: PipelineStore = Depends(get_store)
) -> CandidateService:
    return CandidateService(store)


# =============================================================================
# ATS Dependencies
# =============================================================================

async def get_manatal_client() -> ManatalClient:
    """Get a ManatalClient configured from the environment."""
    return ManatalClient()


async def get_import_service(
    store: PipelineStore = Depends(get_store),
    manatal: ManatalClient = Depends(get_manatal_client),
) -> ImportService:
    """Get an ImportService instance."""
    return ImportService(store, manatal=manatal)
