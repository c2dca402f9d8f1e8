import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

import papeleo.repositories.contract as contract_repo
from papeleo.core.config import settings
from papeleo.db.models.contract import Contract as ContractModel
from papeleo.db.models.contract import RequiredDocument as RequiredDocumentModel
from papeleo.db.models.organization import ContractualProject as ProjectModel
from papeleo.domain.listing import filter_by_substring, paginate
from papeleo.domain.paths import build_storage_path, is_docgen_url, storage_path_from_url
from papeleo.domain.result import BatchReport, Err, Ok
from papeleo.errors import DomainValidationError, DuplicateResourceError, StorageError
from papeleo.schemas.contract import RequiredDocumentCreate
from papeleo.services.ai_generation import generate_contract_draft
from papeleo.services.google_docs import extract_document_id
from papeleo.services.status import invalidate_contract_statuses
from papeleo.services.storage import StorageClient
from papeleo.services.uploads import UploadedFile, validate_upload

logger = logging.getLogger(__name__)

MIN_SUGGESTION_TERM_LENGTH = 2


def list_contracts(
    db: Session,
    project: ProjectModel,
    search: str | None = None,
    page: int = 1,
    page_size: int = 9,
) -> tuple[list[ContractModel], int]:
    contracts = contract_repo.get_contracts_by_project_id(db, project.id)
    filtered = filter_by_substring(contracts, search, [lambda contract: contract.name])
    return paginate(filtered, page, page_size), len(filtered)


def _clean_name(name: str) -> str:
    name = name.strip()
    if not name:
        raise DomainValidationError("Contract name is required")
    return name


async def _store_draft(storage: StorageClient, project_id: str, upload: UploadedFile) -> str:
    path = build_storage_path("contracts", project_id, upload.file_name)
    await storage.upload(path, upload.content, content_type=upload.content_type)
    return storage.get_public_url(path)


async def upload_contract(
    db: Session,
    storage: StorageClient,
    project: ProjectModel,
    name: str,
    upload: UploadedFile,
) -> ContractModel:
    """
    Create a contract from an uploaded draft file.

    - Validates name and file size before touching storage
    - Uploads to contracts/{project_id}/{sanitized file name}
    - Creates the contract with status "draft" and the file's public URL
    """
    name = _clean_name(name)
    validate_upload(upload)

    draft_url = await _store_draft(storage, project.id, upload)
    return contract_repo.create_contract(
        db, project_id=project.id, name=name, contract_draft_url=draft_url
    )


def _create_required_document(
    db: Session, contract_id: str, data: RequiredDocumentCreate
) -> Ok[RequiredDocumentModel] | Err:
    try:
        required = contract_repo.create_required_document(
            db,
            contract_id=contract_id,
            name=data.name.strip(),
            type=data.type,
            due_date=data.due_date,
            template_id=data.template_id,
        )
    except SQLAlchemyError as e:
        db.rollback()
        logger.warning("Could not create required document %r: %s", data.name, e)
        return Err(f"Could not create required document '{data.name}'")
    return Ok(required)


async def generate_contract(
    db: Session,
    project: ProjectModel,
    name: str,
    contractual_object: str,
    required_documents: list[RequiredDocumentCreate],
) -> tuple[ContractModel, BatchReport]:
    """
    Create a contract whose draft is written by the AI generation endpoint.

    The generation call and the contract row are all-or-nothing. Required
    documents are then created one by one; a failure there is reported in the
    returned BatchReport and does not undo the contract.
    """
    name = _clean_name(name)
    if not contractual_object.strip():
        raise DomainValidationError("Contractual object is required")

    draft_url = await generate_contract_draft(contractual_object.strip(), name)
    contract = contract_repo.create_contract(
        db, project_id=project.id, name=name, contract_draft_url=draft_url
    )

    report = BatchReport()
    for data in required_documents:
        report.record(data.name, _create_required_document(db, contract.id, data))
    if report.has_failures:
        logger.warning(
            "Contract %s created with %d failed required documents", contract.id, len(report.failed)
        )
    return contract, report


def rename_contract(db: Session, contract: ContractModel, name: str) -> ContractModel:
    return contract_repo.update_contract(db, contract_id=contract.id, name=_clean_name(name))


def _is_stored_draft(url: str | None) -> bool:
    return bool(url) and not is_docgen_url(url, settings.docgen_base_url) and not extract_document_id(url)


async def replace_contract_draft(
    db: Session, storage: StorageClient, contract: ContractModel, upload: UploadedFile
) -> ContractModel:
    """
    Replace a contract's draft with a new uploaded file.

    The previous file is removed from storage only when it was an upload (not a
    docgen or Google Docs link); a failed removal is logged and ignored.
    """
    validate_upload(upload)

    previous_url = contract.contract_draft_url
    draft_url = await _store_draft(storage, contract.project_id, upload)

    if _is_stored_draft(previous_url) and previous_url != draft_url:
        previous_path = storage_path_from_url(previous_url, settings.storage_bucket)
        try:
            await storage.remove([previous_path])
        except StorageError as e:
            logger.warning("Could not remove previous draft %s: %s", previous_path, e)

    return contract_repo.update_contract(db, contract_id=contract.id, contract_draft_url=draft_url)


def add_required_document(
    db: Session, contract: ContractModel, data: RequiredDocumentCreate
) -> RequiredDocumentModel:
    """Add a requirement; the same name cannot be required twice for one phase."""
    name = data.name.strip()
    if not name:
        raise DomainValidationError("Required document name is required")

    existing = contract_repo.get_required_documents(db, contract.id, type=data.type)
    if any(required.name.lower() == name.lower() for required in existing):
        raise DuplicateResourceError(
            f"Required document '{name}' already exists for this contract"
        )

    required = contract_repo.create_required_document(
        db,
        contract_id=contract.id,
        name=name,
        type=data.type,
        due_date=data.due_date,
        template_id=data.template_id,
    )
    invalidate_contract_statuses(contract)
    return required


def remove_required_document(db: Session, required: RequiredDocumentModel) -> None:
    """Soft-delete a requirement; members' completeness is recomputed on next read."""
    contract_repo.soft_delete_required_document(db, required.id)
    invalidate_contract_statuses(required.contract)


def suggest_required_document_names(
    db: Session, search: str | None, type: str | None = None
) -> list[str]:
    """Up to five names already used for requirements, most used first."""
    term = (search or "").strip()
    if len(term) < MIN_SUGGESTION_TERM_LENGTH:
        return []
    return [name for name, _uses in contract_repo.get_required_document_name_counts(db, term, type=type)]
