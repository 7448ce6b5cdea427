"""
Position (open job at a client organization) models.
"""
from datetime import datetime
from typing import Optional
from pydantic import Field

from .common import CamelModel
from .enums import PositionStatus


class PositionCreate(CamelModel):
    title: str = Field(..., min_length=1)
    description: Optional[str] = None
    org_id: str
    status: PositionStatus = PositionStatus.OPEN


class PositionStatusUpdate(CamelModel):
    status: PositionStatus


class PositionResponse(CamelModel):
    id: str
    title: str
    description: Optional[str] = None
    status: PositionStatus
    org_id: str
    created_at: datetime


class CountResponse(CamelModel):
    count: int
