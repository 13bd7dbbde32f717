import logging
from typing import List, Optional
from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.deps import get_admin_user
from app.crud import job as job_crud
from app.helpers.keys import check_allowed_keys
from app.schemas.auth import TokenUser
from app.schemas.job import JobCreateRequest, JobUpdateRequest, JobEnvelope, JobListEnvelope

router = APIRouter(prefix="/jobs", tags=["Jobs"])
logger = logging.getLogger(__name__)


@router.post("/", status_code=status.HTTP_201_CREATED, response_model=JobEnvelope)
def create_job(
    request: JobCreateRequest,
    db: Session = Depends(get_db),
    admin_user: TokenUser = Depends(get_admin_user)
):
    """
    Create a job posting. Admin only.

    An optional `technology` list links the job to existing technologies
    in the same transaction.
    """
    job = job_crud.create(db, request.model_dump(by_alias=True, exclude_unset=True))
    logger.info(f"Created job {job['id']}: {job['title']} ({job['companyHandle']})")
    return {"job": job}


@router.get("/", response_model=JobListEnvelope)
def list_jobs(
    request: Request,
    title: Optional[str] = None,
    min_salary: Optional[int] = Query(None, alias="minSalary", ge=0),
    has_equity: Optional[bool] = Query(None, alias="hasEquity"),
    technology: Optional[List[str]] = Query(None),
    db: Session = Depends(get_db)
):
    """
    List jobs ordered by title, optionally filtered.

    Args:
        title: Case-insensitive partial match
        minSalary: Only jobs paying at least this much
        hasEquity: When true, only jobs offering equity
        technology: Repeatable; jobs using any of the named technologies
    """
    check_allowed_keys(request.query_params, job_crud.FILTER_KEYS)

    opts = {
        "title": title,
        "minSalary": min_salary,
        "hasEquity": has_equity,
        "technology": technology,
    }
    opts = {key: value for key, value in opts.items() if value is not None}

    return {"jobs": job_crud.find_all(db, opts)}


@router.get("/{job_id}", response_model=JobEnvelope)
def get_job(job_id: int, db: Session = Depends(get_db)):
    """Retrieve a job and its technologies."""
    return {"job": job_crud.get(db, job_id)}


@router.patch("/{job_id}", response_model=JobEnvelope)
def update_job(
    job_id: int,
    request: JobUpdateRequest,
    db: Session = Depends(get_db),
    admin_user: TokenUser = Depends(get_admin_user)
):
    """Partially update a job. Admin only."""
    job = job_crud.update(db, job_id, request.model_dump(by_alias=True, exclude_unset=True))
    logger.info(f"Updated job {job_id}")
    return {"job": job}


@router.delete("/{job_id}")
def delete_job(
    job_id: int,
    db: Session = Depends(get_db),
    admin_user: TokenUser = Depends(get_admin_user)
):
    """Delete a job by ID. Admin only."""
    job_crud.remove(db, job_id)
    logger.info(f"Deleted job {job_id}")
    return {"deleted": job_id}
