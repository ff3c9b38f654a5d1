"""Envelope shared by every cursor-paginated list response."""

from typing import Generic, List, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from ..pagination import CursorMeta


ItemT = TypeVar("ItemT")


class ListResponse(BaseModel, Generic[ItemT]):
    """One page of items plus the cursor to continue from."""

    items: List[ItemT] = Field(description="Items of this page")
    meta: CursorMeta = Field(description="Pagination metadata")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "items": [],
                "meta": {
                    "next_cursor": "eyJ2YWx1ZSI6IjIwMjUtMDEtMDJUMDA6MDA6MDArMDA6MDAiLCJpZCI6ImIifQ",
                    "has_more": True,
                    "sort_by": "reviewed_at",
                    "sort_dir": "desc"
                }
            }
        }
    )
