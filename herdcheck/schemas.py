from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class ValidationResult(BaseModel):
    """Outcome of one validator call.

    ``errors`` block the operation, ``warnings`` never do. ``warnings`` is
    None rather than an empty list when there are none.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    is_valid: bool = Field(..., alias="isValid")
    errors: List[str] = Field(default_factory=list)
    warnings: Optional[List[str]] = None

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class PaginationInfo(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    page: int
    limit: int
    total_pages: int = Field(..., alias="totalPages")
    total_items: int = Field(..., alias="totalItems")
    has_next_page: bool = Field(..., alias="hasNextPage")
    has_prev_page: bool = Field(..., alias="hasPrevPage")


class Coordinates(BaseModel):
    latitude: float
    longitude: float


class DistanceResult(BaseModel):
    distance: float
    unit: Literal["km", "miles"]


class AgeInfo(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    years: int
    months: int
    days: int
    total_days: int = Field(..., alias="totalDays")
    category: Literal["calf", "young", "adult", "senior"]


class DistanceRequest(BaseModel):
    # Coordinates arrive loose so they go through the coordinate validator
    # instead of failing pydantic parsing.
    origin: Dict[str, Any]
    destination: Dict[str, Any]
    unit: Literal["km", "miles"] = "km"
