import logging

from sqlalchemy.orm import Session

import papeleo.repositories.organization as organization_repo
from papeleo.core.config import settings
from papeleo.db.models.organization import ContractualProject as ProjectModel
from papeleo.db.models.user import User
from papeleo.domain.listing import filter_by_substring, paginate
from papeleo.domain.paths import build_storage_path
from papeleo.errors import DomainValidationError, StorageError
from papeleo.services.access import get_owned_organization
from papeleo.services.storage import StorageClient
from papeleo.services.uploads import UploadedFile, validate_upload

logger = logging.getLogger(__name__)


def list_projects(
    db: Session,
    organization_id: str,
    current_user: User,
    search: str | None = None,
    page: int = 1,
    page_size: int = 9,
) -> tuple[list[ProjectModel], int]:
    """
    Projects of an organization owned by the current user.

    Search matches the project name; returns (page of projects, total after filtering).
    """
    get_owned_organization(db, organization_id, current_user)
    projects = organization_repo.get_projects_by_organization_id(db, organization_id)
    filtered = filter_by_substring(projects, search, [lambda project: project.name])
    return paginate(filtered, page, page_size), len(filtered)


def create_project(db: Session, organization_id: str, name: str, current_user: User) -> ProjectModel:
    get_owned_organization(db, organization_id, current_user)
    name = name.strip()
    if not name:
        raise DomainValidationError("Project name is required")
    return organization_repo.create_project(db, organization_id=organization_id, name=name)


def rename_project(db: Session, project: ProjectModel, name: str) -> ProjectModel:
    name = name.strip()
    if not name:
        raise DomainValidationError("Project name is required")
    return organization_repo.update_project(db, project_id=project.id, name=name)


def update_contratante_data(db: Session, project: ProjectModel, data: dict[str, str]) -> ProjectModel:
    """Replace the project's contratante key/value map; blank keys are dropped."""
    cleaned = {key.strip(): value.strip() for key, value in data.items() if key and key.strip()}
    return organization_repo.update_project(db, project_id=project.id, contratante_data=cleaned)


async def upload_project_signature(
    db: Session, storage: StorageClient, project: ProjectModel, upload: UploadedFile
) -> ProjectModel:
    """Store the contratante's signature image in the public bucket and keep its URL."""
    validate_upload(upload, image_only=True)

    path = build_storage_path("signatures", project.id, upload.file_name)
    await storage.upload(
        path, upload.content, content_type=upload.content_type, bucket=settings.storage_public_bucket
    )
    url = storage.get_public_url(path, bucket=settings.storage_public_bucket)
    return organization_repo.update_project(db, project_id=project.id, signature=url)


async def remove_project_signature(
    db: Session, storage: StorageClient, project: ProjectModel
) -> ProjectModel:
    """Forget the project signature; a failed object removal is logged, not raised."""
    if project.signature:
        marker = f"/object/public/{settings.storage_public_bucket}/"
        if marker in project.signature:
            path = project.signature.split(marker, 1)[1]
            try:
                await storage.remove([path], bucket=settings.storage_public_bucket)
            except StorageError as e:
                logger.warning("Could not remove signature object %s: %s", path, e)
    return organization_repo.update_project(db, project_id=project.id, signature=None)
