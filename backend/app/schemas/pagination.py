"""Paginated list responses."""

from pydantic import BaseModel


class PaginatedResponse(BaseModel):
    """One page of a newest-first list: items plus total and whether more pages follow."""

    items: list[dict]
    total: int
    limit: int
    offset: int
    has_more: bool
