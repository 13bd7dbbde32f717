from pydantic import Field
from typing import List

from app.schemas.base import CamelModel, StrictCamelModel


class TechnologyRequest(StrictCamelModel):
    """Schema for creating or renaming a technology"""
    name: str = Field(..., min_length=1, max_length=25)


class TechnologyResponse(CamelModel):
    name: str


class TechnologyEnvelope(CamelModel):
    technology: TechnologyResponse


class TechnologyListEnvelope(CamelModel):
    technologies: List[TechnologyResponse]
