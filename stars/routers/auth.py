"""
Authentication router - the signed-in user and login tracking.

Sign-in itself happens against Supabase in the frontend; the backend only
verifies the resulting access token.
"""
import logging

from fastapi import APIRouter, Depends

from stars.auth import CurrentUser, get_current_user
from stars.dependencies import get_user_service, get_workflow_service
from stars.models import LoginResponse, UserResponse
from stars.services import StageWorkflowService, UserService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.get("/me", response_model=UserResponse)
async def get_me(
    user: CurrentUser = Depends(get_current_user),
    service: UserService = Depends(get_user_service),
):
    """Get the current user's profile."""
    return await service.get(user.id)


@router.post("/login", response_model=LoginResponse)
async def record_login(
    user: CurrentUser = Depends(get_current_user),
    service: StageWorkflowService = Depends(get_workflow_service),
):
    """
    Record a sign-in for the current user.

    Called by the frontend right after Supabase sign-in. For client users
    this notifies the admins, at most once per debounce window.
    """
    return await service.record_login(user.id)
