"""
Project management API endpoints.

Callers identify themselves with an opaque ``user_id``; every write or delete
checks it against the project's owner before touching the row.
"""

import logging
import math

from fastapi import APIRouter, HTTPException, Depends
from pydantic import BaseModel, TypeAdapter, ValidationError
from typing import Any, Dict, Optional, List
from sqlalchemy.orm import Session

from viability.api.calculations import DSCRResponse, RawNumber, dscr_to_response
from viability.calculations import amortization, dscr
from viability.calculations.numbers import parse_number, parse_optional_number
from viability.config import get_settings
from viability.db.database import get_db
from viability.db.models import Project, PROJECT_NUMERIC_FIELDS, PROJECT_TEXT_FIELDS

logger = logging.getLogger(__name__)
settings = get_settings()

router = APIRouter()

_bool_adapter = TypeAdapter(bool)


class OwnerRequest(BaseModel):
    """Request body carrying only the caller's identity."""

    user_id: Optional[str] = None


class ProjectUpdateRequest(BaseModel):
    """Partial update of a project by its owner."""

    user_id: Optional[str] = None
    updates: Optional[Dict[str, Any]] = None


class ProjectDSCRRequest(BaseModel):
    """Expected rent and charges to test against the stored loan payment."""

    monthly_rent: RawNumber = None
    monthly_expenses: RawNumber = None


class ProjectSummary(BaseModel):
    """Row of the project list."""

    id: str
    name: str
    postal_code: Optional[str]
    price: Optional[float]


class ProjectResponse(BaseModel):
    """Schema for project response."""

    id: str
    owner_id: str
    name: str
    postal_code: Optional[str]
    description: Optional[str]
    is_public: bool
    price: Optional[float]
    notary_fees: Optional[float]
    works: Optional[float]
    brokerage_fees: Optional[float]
    loan_rate: Optional[float]
    loan_years: Optional[float]
    insurance: Optional[float]
    monthly_payment: Optional[float]
    monthly_expenses: Optional[float]
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    class Config:
        from_attributes = True


class ProjectListResponse(BaseModel):
    """Response for listing projects."""

    projects: List[ProjectSummary]
    total: int


class RecomputeResponse(BaseModel):
    """Financing figures written back to the project."""

    id: str
    principal: float
    monthly_payment: float
    monthly_expenses: float


def project_to_response(project: Project) -> ProjectResponse:
    """Convert Project model to response schema."""
    return ProjectResponse(
        id=project.id,
        owner_id=project.owner_id,
        name=project.name,
        postal_code=project.postal_code,
        description=project.description,
        is_public=bool(project.is_public),
        price=project.price,
        notary_fees=project.notary_fees,
        works=project.works,
        brokerage_fees=project.brokerage_fees,
        loan_rate=project.loan_rate,
        loan_years=project.loan_years,
        insurance=project.insurance,
        monthly_payment=project.monthly_payment,
        monthly_expenses=project.monthly_expenses,
        created_at=project.created_at.isoformat() if project.created_at else None,
        updated_at=project.updated_at.isoformat() if project.updated_at else None,
    )


def get_active_project(db: Session, project_id: str) -> Project:
    """Load a non-deleted project or raise 404."""
    project = (
        db.query(Project)
        .filter(Project.id == project_id, Project.is_deleted == False)
        .first()
    )
    if not project:
        raise HTTPException(status_code=404, detail="Project not found")
    return project


def get_owned_project(db: Session, project_id: str, user_id: Optional[str]) -> Project:
    """Load a project and verify that ``user_id`` owns it."""
    if not user_id:
        raise HTTPException(status_code=400, detail="user_id required")

    project = get_active_project(db, project_id)
    if project.owner_id != user_id:
        logger.warning(f"User {user_id} denied access to project {project_id}")
        raise HTTPException(status_code=403, detail="Not authorized")
    return project


def normalize_updates(updates: Dict[str, Any]) -> Dict[str, Any]:
    """
    Validate field names and coerce raw values.

    Numeric fields go through the number parser; an empty string clears the
    field.
    """
    allowed = set(PROJECT_NUMERIC_FIELDS) | set(PROJECT_TEXT_FIELDS) | {"is_public"}
    unknown = sorted(set(updates) - allowed)
    if unknown:
        raise HTTPException(
            status_code=400,
            detail=f"Unknown project field(s): {', '.join(unknown)}",
        )

    cleaned = {}
    for field, value in updates.items():
        if field in PROJECT_NUMERIC_FIELDS:
            cleaned[field] = parse_optional_number(value)
        elif field == "is_public":
            try:
                cleaned[field] = _bool_adapter.validate_python(value)
            except ValidationError:
                raise HTTPException(
                    status_code=400, detail="is_public must be a boolean"
                )
        else:
            cleaned[field] = None if value is None else str(value)

    if "name" in cleaned and not cleaned["name"]:
        raise HTTPException(status_code=400, detail="Project name cannot be empty")

    return cleaned


@router.post("/create", status_code=201)
async def create_project(
    request: OwnerRequest,
    db: Session = Depends(get_db),
):
    """Create an empty project owned by the caller."""
    if not request.user_id:
        raise HTTPException(status_code=400, detail="user_id is required")

    project = Project(
        owner_id=request.user_id,
        name=settings.default_project_name,
        is_public=False,
    )
    db.add(project)
    db.commit()
    db.refresh(project)

    logger.info(f"Created project {project.id} for user {request.user_id}")
    return {"id": project.id}


@router.get("/", response_model=ProjectListResponse)
async def list_projects(
    owner_id: str,
    db: Session = Depends(get_db),
):
    """List a user's projects, newest first."""
    projects = (
        db.query(Project)
        .filter(Project.owner_id == owner_id, Project.is_deleted == False)
        .order_by(Project.created_at.desc())
        .all()
    )

    return ProjectListResponse(
        projects=[
            ProjectSummary(
                id=p.id, name=p.name, postal_code=p.postal_code, price=p.price
            )
            for p in projects
        ],
        total=len(projects),
    )


@router.get("/{project_id}", response_model=ProjectResponse)
async def get_project(
    project_id: str,
    db: Session = Depends(get_db),
):
    """Get a project by ID."""
    return project_to_response(get_active_project(db, project_id))


@router.patch("/{project_id}")
async def update_project(
    project_id: str,
    request: ProjectUpdateRequest,
    db: Session = Depends(get_db),
):
    """Update a project's fields. Only the owner may do this."""
    if not request.user_id:
        raise HTTPException(status_code=400, detail="user_id required")
    if request.updates is None:
        raise HTTPException(status_code=400, detail="updates required")

    project = get_owned_project(db, project_id, request.user_id)

    for field, value in normalize_updates(request.updates).items():
        setattr(project, field, value)

    db.commit()
    return {"ok": True}


@router.delete("/{project_id}")
async def delete_project(
    project_id: str,
    request: OwnerRequest,
    db: Session = Depends(get_db),
):
    """Soft delete a project. Only the owner may do this."""
    project = get_owned_project(db, project_id, request.user_id)

    project.is_deleted = True
    db.commit()

    logger.info(f"Deleted project {project_id}")
    return {"ok": True}


@router.post("/{project_id}/recompute", response_model=RecomputeResponse)
async def recompute_project(
    project_id: str,
    request: OwnerRequest,
    db: Session = Depends(get_db),
):
    """
    Recompute the monthly payment and expense estimate from the stored
    acquisition costs and loan terms, and save them.
    """
    project = get_owned_project(db, project_id, request.user_id)

    principal = amortization.calculate_project_principal(
        project.price, project.notary_fees, project.works, project.brokerage_fees
    )
    payment = amortization.calculate_monthly_payment(
        principal, parse_number(project.loan_rate), parse_number(project.loan_years)
    )
    if not math.isfinite(payment):
        raise HTTPException(
            status_code=422,
            detail="Loan terms do not produce a finite monthly payment",
        )

    expenses = amortization.estimate_monthly_expenses(
        payment, project.monthly_expenses, settings.estimated_expense_ratio
    )

    project.monthly_payment = payment
    project.monthly_expenses = expenses
    db.commit()

    return RecomputeResponse(
        id=project.id,
        principal=principal,
        monthly_payment=payment,
        monthly_expenses=expenses,
    )


@router.post("/{project_id}/dscr", response_model=DSCRResponse)
async def project_dscr(
    project_id: str,
    request: ProjectDSCRRequest,
    db: Session = Depends(get_db),
):
    """Check expected rent and charges against the project's loan payment."""
    project = get_active_project(db, project_id)

    payment = parse_number(project.monthly_payment)
    if payment <= 0:
        raise HTTPException(
            status_code=422,
            detail="The monthly loan payment must be entered or computed",
        )

    result = dscr.evaluate_dscr(request.monthly_rent, request.monthly_expenses, payment)
    return dscr_to_response(result)
