from pydantic import Field
from typing import List, Optional

from app.schemas.base import CamelModel, StrictCamelModel


class CompanyCreateRequest(StrictCamelModel):
    """Schema for creating a company"""
    handle: str = Field(..., min_length=1, max_length=25, pattern=r"^[a-z0-9-]+$")
    name: str = Field(..., min_length=1)
    num_employees: Optional[int] = Field(None, ge=0)
    description: str
    logo_url: Optional[str] = None


class CompanyUpdateRequest(StrictCamelModel):
    """Schema for a partial company update; handle cannot change"""
    name: Optional[str] = Field(None, min_length=1)
    num_employees: Optional[int] = Field(None, ge=0)
    description: Optional[str] = None
    logo_url: Optional[str] = None


class CompanyJob(CamelModel):
    """A job as listed under its company"""
    id: int
    title: str
    salary: Optional[int] = None
    equity: Optional[float] = None


class CompanyResponse(CamelModel):
    handle: str
    name: str
    num_employees: Optional[int] = None
    description: str
    logo_url: Optional[str] = None


class CompanyDetailResponse(CompanyResponse):
    jobs: List[CompanyJob] = []


class CompanyEnvelope(CamelModel):
    company: CompanyResponse


class CompanyDetailEnvelope(CamelModel):
    company: CompanyDetailResponse


class CompanyListEnvelope(CamelModel):
    companies: List[CompanyResponse]
