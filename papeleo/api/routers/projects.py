from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status
from sqlalchemy.orm import Session

from papeleo.api.deps import get_db, get_current_user, get_storage, read_upload
import papeleo.repositories.organization as organization_repo
from papeleo.services.access import get_owned_project
from papeleo.services.contract import generate_contract, list_contracts, upload_contract
from papeleo.services.documents import project_documents_overview
from papeleo.services.invitation import list_invitations
from papeleo.services.project import (
    remove_project_signature,
    rename_project,
    update_contratante_data,
    upload_project_signature,
)
from papeleo.services.storage import StorageClient
from papeleo.schemas.contract import (
    BatchFailure,
    Contract,
    ContractGenerate,
    ContractGenerateResult,
    RequiredDocument,
)
from papeleo.schemas.document import ProjectDocumentRow
from papeleo.schemas.member import Invitation
from papeleo.schemas.organization import ContratanteData, Project, ProjectUpdate
from papeleo.schemas.pagination import PaginatedResponse
from papeleo.db.models.user import User
from papeleo.domain.listing import page_count

router = APIRouter(prefix="/projects", tags=["projects"])


@router.get("/{project_id}", response_model=Project)
def get_project_by_id(
    project_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return Project.model_validate(get_owned_project(db, project_id, current_user))


@router.patch("/{project_id}", response_model=Project)
def rename_project_by_id(
    project_id: str,
    project_data: ProjectUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    project = get_owned_project(db, project_id, current_user)
    return Project.model_validate(rename_project(db, project, project_data.name))


@router.delete("/{project_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_project_by_id(
    project_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Soft-delete a project. Its contracts disappear from every listing."""
    project = get_owned_project(db, project_id, current_user)
    organization_repo.soft_delete_project(db, project.id)


@router.get("/{project_id}/contratante-data", response_model=ContratanteData)
def get_project_contratante_data(
    project_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    project = get_owned_project(db, project_id, current_user)
    return ContratanteData(data=project.contratante_data or {})


@router.put("/{project_id}/contratante-data", response_model=ContratanteData)
def replace_project_contratante_data(
    project_id: str,
    contratante_data: ContratanteData,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    project = get_owned_project(db, project_id, current_user)
    project = update_contratante_data(db, project, contratante_data.data)
    return ContratanteData(data=project.contratante_data or {})


@router.put("/{project_id}/signature", response_model=Project)
async def upload_signature_for_project(
    project_id: str,
    file: UploadFile = File(...),
    db: Session = Depends(get_db),
    storage: StorageClient = Depends(get_storage),
    current_user: User = Depends(get_current_user),
):
    """Upload the contratante's signature image (stored in the public bucket)."""
    project = get_owned_project(db, project_id, current_user)
    upload = await read_upload(file)
    project = await upload_project_signature(db, storage, project, upload)
    return Project.model_validate(project)


@router.delete("/{project_id}/signature", response_model=Project)
async def delete_signature_for_project(
    project_id: str,
    db: Session = Depends(get_db),
    storage: StorageClient = Depends(get_storage),
    current_user: User = Depends(get_current_user),
):
    project = get_owned_project(db, project_id, current_user)
    project = await remove_project_signature(db, storage, project)
    return Project.model_validate(project)


@router.get("/{project_id}/contracts", response_model=PaginatedResponse[Contract])
def get_project_contracts(
    project_id: str,
    search: str | None = Query(None, description="Filter by contract name"),
    page: int = Query(1, ge=1, description="Page number (1-indexed)"),
    page_size: int = Query(9, ge=1, le=100, description="Number of items per page"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    project = get_owned_project(db, project_id, current_user)
    contracts, total = list_contracts(db, project, search=search, page=page, page_size=page_size)
    return PaginatedResponse(
        items=[Contract.model_validate(contract) for contract in contracts],
        total=total,
        page=page,
        page_size=page_size,
        pages=page_count(total, page_size),
    )


@router.post(
    "/{project_id}/contracts/upload",
    response_model=Contract,
    status_code=status.HTTP_201_CREATED,
)
async def upload_project_contract(
    project_id: str,
    name: str = Form(..., min_length=1, max_length=255),
    file: UploadFile = File(...),
    db: Session = Depends(get_db),
    storage: StorageClient = Depends(get_storage),
    current_user: User = Depends(get_current_user),
):
    """Create a contract from an uploaded draft file."""
    project = get_owned_project(db, project_id, current_user)
    upload = await read_upload(file)
    contract = await upload_contract(db, storage, project, name, upload)
    return Contract.model_validate(contract)


@router.post(
    "/{project_id}/contracts/generate",
    response_model=ContractGenerateResult,
    status_code=status.HTTP_201_CREATED,
)
async def generate_project_contract(
    project_id: str,
    contract_data: ContractGenerate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    Create a contract whose draft is generated from a contractual object.

    Required documents that could not be created are listed in
    ``failed_required_documents``; the contract itself is kept.
    """
    project = get_owned_project(db, project_id, current_user)
    contract, report = await generate_contract(
        db,
        project,
        name=contract_data.name,
        contractual_object=contract_data.contractual_object,
        required_documents=contract_data.required_documents,
    )
    return ContractGenerateResult(
        contract=Contract.model_validate(contract),
        required_documents=[RequiredDocument.model_validate(required) for required in report.created],
        failed_required_documents=[BatchFailure(**failure) for failure in report.failed],
    )


@router.get("/{project_id}/invitations", response_model=list[Invitation])
def get_project_invitations(
    project_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    project = get_owned_project(db, project_id, current_user)
    return [Invitation.model_validate(member) for member in list_invitations(db, project)]


@router.get("/{project_id}/documents", response_model=PaginatedResponse[ProjectDocumentRow])
def get_project_documents(
    project_id: str,
    search: str | None = Query(None, description="Filter by contractor email or contract name"),
    page: int = Query(1, ge=1, description="Page number (1-indexed)"),
    page_size: int = Query(10, ge=1, le=100, description="Number of items per page"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Document state and background-check badges for every member of the project."""
    project = get_owned_project(db, project_id, current_user)
    rows, total = project_documents_overview(
        db, project, search=search, page=page, page_size=page_size
    )
    return PaginatedResponse(
        items=rows,
        total=total,
        page=page,
        page_size=page_size,
        pages=page_count(total, page_size),
    )
