from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from papeleo.api.deps import get_db, get_current_user
import papeleo.repositories.organization as organization_repo
from papeleo.services.project import create_project, list_projects
from papeleo.schemas.organization import Organization, Project, ProjectCreate
from papeleo.schemas.pagination import PaginatedResponse
from papeleo.db.models.user import User
from papeleo.domain.listing import page_count

router = APIRouter(prefix="/organizations", tags=["organizations"])


@router.get("", response_model=list[Organization])
def get_my_organizations(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Organizations owned by the current user."""
    organizations = organization_repo.get_organizations_by_user_id(db, current_user.id)
    return [Organization.model_validate(organization) for organization in organizations]


@router.get("/{organization_id}/projects", response_model=PaginatedResponse[Project])
def get_organization_projects(
    organization_id: str,
    search: str | None = Query(None, description="Filter by project name"),
    page: int = Query(1, ge=1, description="Page number (1-indexed)"),
    page_size: int = Query(9, ge=1, le=100, description="Number of items per page"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    projects, total = list_projects(
        db,
        organization_id,
        current_user,
        search=search,
        page=page,
        page_size=page_size,
    )
    return PaginatedResponse(
        items=[Project.model_validate(project) for project in projects],
        total=total,
        page=page,
        page_size=page_size,
        pages=page_count(total, page_size),
    )


@router.post(
    "/{organization_id}/projects",
    response_model=Project,
    status_code=status.HTTP_201_CREATED,
)
def create_organization_project(
    organization_id: str,
    project_data: ProjectCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    project = create_project(db, organization_id, project_data.name, current_user)
    return Project.model_validate(project)
