from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field


class FilterSpecModel(BaseModel):
    mode: str = "baseline"
    role_mode: str = "all"
    location_mode: str = "all"
    selected_roles: List[str] = Field(default_factory=list)
    selected_locations: List[str] = Field(default_factory=list)


class DimensionOptionModel(BaseModel):
    value: str
    text: str
    csv_value: str


class MetaOptionsResponse(BaseModel):
    options: List[DimensionOptionModel]


class CategoryQueryModel(BaseModel):
    filters: FilterSpecModel = Field(default_factory=FilterSpecModel)
    limit: Optional[int] = None
    exclude: List[str] = Field(default_factory=list)
