"""
Configure generic models not specific
to a particular feature.
"""
from typing import Generic, TypeVar

from pydantic import BaseModel

ItemT = TypeVar("ItemT")


class Page(BaseModel, Generic[ItemT]):
    """
    One page of a listing plus what a client needs
    to link to the neighbouring pages.
    """
    data: list[ItemT]
    total_items: int
    total_pages: int
    current_page: int
    per_page: int
    has_next: bool
    has_prev: bool
    search_query: str | None = None
    query_params: dict[str, str] = {}
