from datetime import datetime, timezone
from sqlalchemy.orm import Session

from papeleo.db.models.organization import (
    ContractualProject as ProjectModel,
    Organization as OrganizationModel,
)
from papeleo.errors import NotFoundError


def get_organization_by_id(db: Session, organization_id: str) -> OrganizationModel | None:
    """Get a non-deleted organization by ID."""
    return (
        db.query(OrganizationModel)
        .filter(
            OrganizationModel.id == organization_id,
            OrganizationModel.deleted_at.is_(None),
        )
        .first()
    )


def get_organizations_by_user_id(db: Session, user_id: str) -> list[OrganizationModel]:
    """Organizations owned by a user, oldest first."""
    return (
        db.query(OrganizationModel)
        .filter(
            OrganizationModel.user_id == user_id,
            OrganizationModel.deleted_at.is_(None),
        )
        .order_by(OrganizationModel.created_at)
        .all()
    )


def create_organization(db: Session, name: str, user_id: str) -> OrganizationModel:
    """Create a new organization in the database. Pure data access - no business logic."""
    db_organization = OrganizationModel(name=name, user_id=user_id)
    db.add(db_organization)
    db.commit()
    db.refresh(db_organization)
    return db_organization


def get_project_by_id(db: Session, project_id: str) -> ProjectModel | None:
    """Get a non-deleted project by ID."""
    return (
        db.query(ProjectModel)
        .filter(ProjectModel.id == project_id, ProjectModel.deleted_at.is_(None))
        .first()
    )


def get_projects_by_organization_id(db: Session, organization_id: str) -> list[ProjectModel]:
    """Non-deleted projects of an organization, newest first."""
    return (
        db.query(ProjectModel)
        .filter(
            ProjectModel.organization_id == organization_id,
            ProjectModel.deleted_at.is_(None),
        )
        .order_by(ProjectModel.created_at.desc())
        .all()
    )


def create_project(db: Session, organization_id: str, name: str) -> ProjectModel:
    """Create a new project in the database. Pure data access - no business logic."""
    db_project = ProjectModel(organization_id=organization_id, name=name)
    db.add(db_project)
    db.commit()
    db.refresh(db_project)
    return db_project


def update_project(db: Session, project_id: str, **kwargs) -> ProjectModel:
    """
    Update a project. Only updates fields that are explicitly provided.

    To clear a field (set to None), explicitly pass it with None value.
    """
    project = get_project_by_id(db, project_id)
    if not project:
        raise NotFoundError("Project not found")

    if "name" in kwargs:
        project.name = kwargs["name"]
    if "contratante_data" in kwargs:
        project.contratante_data = kwargs["contratante_data"]
    if "signature" in kwargs:
        project.signature = kwargs["signature"]  # Can be None to clear

    db.commit()
    db.refresh(project)
    return project


def soft_delete_project(db: Session, project_id: str) -> None:
    """Mark a project as deleted. Pure data access - no business logic."""
    project = get_project_by_id(db, project_id)
    if not project:
        raise NotFoundError("Project not found")

    project.deleted_at = datetime.now(timezone.utc)
    db.commit()
