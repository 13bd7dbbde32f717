import logging
from typing import Optional
from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.deps import get_admin_user
from app.crud import company as company_crud
from app.helpers.keys import check_allowed_keys
from app.schemas.auth import TokenUser
from app.schemas.company import (
    CompanyCreateRequest,
    CompanyUpdateRequest,
    CompanyEnvelope,
    CompanyDetailEnvelope,
    CompanyListEnvelope,
)

router = APIRouter(prefix="/companies", tags=["Companies"])
logger = logging.getLogger(__name__)


@router.post("/", status_code=status.HTTP_201_CREATED, response_model=CompanyEnvelope)
def create_company(
    request: CompanyCreateRequest,
    db: Session = Depends(get_db),
    admin_user: TokenUser = Depends(get_admin_user)
):
    """Create a company. Admin only."""
    company = company_crud.create(
        db,
        handle=request.handle,
        name=request.name,
        num_employees=request.num_employees,
        description=request.description,
        logo_url=request.logo_url,
    )
    logger.info(f"Created company {company['handle']}")
    return {"company": company}


@router.get("/", response_model=CompanyListEnvelope)
def list_companies(
    request: Request,
    name: Optional[str] = None,
    min_employees: Optional[int] = Query(None, alias="minEmployees", ge=0),
    max_employees: Optional[int] = Query(None, alias="maxEmployees", ge=0),
    db: Session = Depends(get_db)
):
    """
    List companies, optionally filtered.

    Args:
        name: Case-insensitive partial match on the company name
        minEmployees: Lower bound on employee count
        maxEmployees: Upper bound on employee count
    """
    check_allowed_keys(request.query_params, company_crud.FILTER_KEYS)

    filters = {
        "name": name,
        "minEmployees": min_employees,
        "maxEmployees": max_employees,
    }
    filters = {key: value for key, value in filters.items() if value is not None}

    return {"companies": company_crud.find_all(db, filters)}


@router.get("/{handle}", response_model=CompanyDetailEnvelope)
def get_company(handle: str, db: Session = Depends(get_db)):
    """Retrieve a company and its jobs."""
    return {"company": company_crud.get(db, handle)}


@router.patch("/{handle}", response_model=CompanyEnvelope)
def update_company(
    handle: str,
    request: CompanyUpdateRequest,
    db: Session = Depends(get_db),
    admin_user: TokenUser = Depends(get_admin_user)
):
    """Partially update a company. Admin only."""
    company = company_crud.update(db, handle, request.model_dump(by_alias=True, exclude_unset=True))
    logger.info(f"Updated company {handle}")
    return {"company": company}


@router.delete("/{handle}")
def delete_company(
    handle: str,
    db: Session = Depends(get_db),
    admin_user: TokenUser = Depends(get_admin_user)
):
    """Delete a company and its jobs. Admin only."""
    company_crud.remove(db, handle)
    logger.info(f"Deleted company {handle}")
    return {"deleted": handle}
