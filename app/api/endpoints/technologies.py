import logging
from typing import Optional
from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.deps import get_admin_user
from app.crud import technology as technology_crud
from app.helpers.keys import check_allowed_keys
from app.schemas.auth import TokenUser
from app.schemas.technology import TechnologyRequest, TechnologyEnvelope, TechnologyListEnvelope

router = APIRouter(prefix="/technologies", tags=["Technologies"])
logger = logging.getLogger(__name__)


@router.post("/", status_code=status.HTTP_201_CREATED, response_model=TechnologyEnvelope)
def create_technology(
    request: TechnologyRequest,
    db: Session = Depends(get_db),
    admin_user: TokenUser = Depends(get_admin_user)
):
    """Create a technology. Names must be lowercase. Admin only."""
    technology = technology_crud.create(db, request.name)
    logger.info(f"Created technology {technology['name']}")
    return {"technology": technology}


@router.get("/", response_model=TechnologyListEnvelope)
def list_technologies(
    request: Request,
    name: Optional[str] = None,
    db: Session = Depends(get_db)
):
    """List technologies; `name` is a case-insensitive partial match."""
    check_allowed_keys(request.query_params, technology_crud.FILTER_KEYS)
    opts = {"name": name} if name is not None else {}
    return {"technologies": technology_crud.find_all(db, opts)}


@router.get("/{name}", response_model=TechnologyEnvelope)
def get_technology(name: str, db: Session = Depends(get_db)):
    return {"technology": technology_crud.get(db, name)}


@router.patch("/{name}", response_model=TechnologyEnvelope)
def update_technology(
    name: str,
    request: TechnologyRequest,
    db: Session = Depends(get_db),
    admin_user: TokenUser = Depends(get_admin_user)
):
    """Rename a technology; job and user links follow. Admin only."""
    technology = technology_crud.update(db, name, request.model_dump(by_alias=True, exclude_unset=True))
    logger.info(f"Renamed technology {name} -> {technology['name']}")
    return {"technology": technology}


@router.delete("/{name}")
def delete_technology(
    name: str,
    db: Session = Depends(get_db),
    admin_user: TokenUser = Depends(get_admin_user)
):
    """Delete a technology. Admin only."""
    technology_crud.remove(db, name)
    logger.info(f"Deleted technology {name}")
    return {"deleted": name}
