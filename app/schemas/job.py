from pydantic import Field
from typing import List, Optional

from app.schemas.base import CamelModel, StrictCamelModel


class JobCreateRequest(StrictCamelModel):
    """Schema for creating a new job"""
    title: str = Field(..., min_length=1)
    salary: Optional[int] = Field(None, ge=0)
    equity: Optional[float] = Field(None, ge=0, le=1)
    company_handle: str = Field(..., min_length=1, max_length=25)
    technology: Optional[List[str]] = None


class JobUpdateRequest(StrictCamelModel):
    """Schema for a partial job update; id and companyHandle cannot change"""
    title: Optional[str] = Field(None, min_length=1)
    salary: Optional[int] = Field(None, ge=0)
    equity: Optional[float] = Field(None, ge=0, le=1)
    technology: Optional[List[str]] = None


class JobResponse(CamelModel):
    """Schema for job response"""
    id: int
    title: str
    salary: Optional[int] = None
    equity: Optional[float] = None
    company_handle: str


class JobDetailResponse(JobResponse):
    technology: List[str] = []


class JobEnvelope(CamelModel):
    job: JobDetailResponse


class JobListEnvelope(CamelModel):
    jobs: List[JobResponse]
