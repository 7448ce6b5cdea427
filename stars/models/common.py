"""
Common models used across multiple endpoints.
"""
from typing import Generic, TypeVar, List
from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel


T = TypeVar('T')


class CamelModel(BaseModel):
    """
    Base model for the public JSON contract.

    Fields are declared in snake_case and exposed in camelCase
    (candidate_id <-> candidateId). Input accepts either spelling.
    """

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True


class PaginatedResponse(CamelModel, Generic[T]):
    """
    Generic paginated response model for list endpoints.

    Example usage:
        @router.get("/items", response_model=PaginatedResponse[ItemResponse])
        async def list_items(limit: int = 50, offset: int = 0):
            items, total = await repo.list_items(limit=limit, offset=offset)
            return PaginatedResponse(items=items, total=total, limit=limit, offset=offset)
    """
    items: List[T] = Field(..., description="List of items in this page")
    total: int = Field(..., description="Total number of items across all pages", ge=0)
    limit: int = Field(..., description="Maximum number of items per page", ge=1)
    offset: int = Field(..., description="Number of items to skip", ge=0)
