import logging
from collections import defaultdict
from datetime import date, datetime, timezone

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

import papeleo.repositories.contract as contract_repo
import papeleo.repositories.document as document_repo
import papeleo.repositories.member as member_repo
import papeleo.repositories.user as user_repo
from papeleo.core.config import settings
from papeleo.db.base import new_id
from papeleo.db.models.contract_member import (
    ContractMember as MemberModel,
    ContractualDocument as DocumentModel,
    ContractualExtraDocument as ExtraDocumentModel,
)
from papeleo.db.models.organization import ContractualProject as ProjectModel
from papeleo.domain.listing import filter_by_substring, paginate
from papeleo.domain.months import month_label_sort_key, new_months, parse_month_label
from papeleo.domain.paths import (
    build_storage_path,
    candidate_storage_paths,
    extra_document_path,
    is_docgen_url,
)
from papeleo.domain.requirements import plan_contractual_documents
from papeleo.domain.result import Err, Ok
from papeleo.errors import DomainValidationError, ExternalServiceError, NotFoundError, StorageError
from papeleo.schemas.document import (
    ContractualDocument,
    ExtraDocument,
    MonthDocuments,
    PrecontractualDocuments,
    PrecontractualItem,
    ProjectDocumentRow,
)
from papeleo.services.status import compute_member_status, get_member_status, invalidate_member_status
from papeleo.services.storage import StorageClient
from papeleo.services.uploads import PRECONTRACTUAL_EXTENSIONS, UploadedFile, validate_upload
from papeleo.services.verification import verify_document

logger = logging.getLogger(__name__)


def expand_contractual_documents(
    db: Session, member: MemberModel, start_date: date, end_date: date
) -> Ok[list[DocumentModel]] | Err:
    """
    Create placeholder contractual documents (url NULL) for the months of a range.

    One row per (contractual requirement x month not yet present for the member).
    With no contractual requirements there is nothing to create, which is a
    success. Running it again with the same range creates nothing.
    """
    try:
        requirements = contract_repo.get_required_documents(db, member.contract_id, type="contractual")
        if not requirements:
            return Ok([])

        existing = document_repo.get_documents_by_member_id(db, member.id, type="contractual")
        months = new_months(start_date, end_date, (document.month for document in existing))
        planned = plan_contractual_documents(
            requirements,
            months,
            existing_pairs=((document.required_document_id, document.month) for document in existing),
        )
        if not planned:
            return Ok([])

        created = document_repo.create_documents(db, member.id, planned)
    except SQLAlchemyError as e:
        db.rollback()
        logger.warning("Could not expand contractual documents for member %s: %s", member.id, e)
        return Err("Could not create contractual documents for the new months")

    invalidate_member_status(member.id)
    logger.info("Created %d contractual documents for member %s", len(created), member.id)
    return Ok(created)


def list_precontractual_documents(db: Session, member: MemberModel) -> PrecontractualDocuments:
    requirements = contract_repo.get_required_documents(db, member.contract_id, type="precontractual")
    documents = {
        document.required_document_id: document
        for document in document_repo.get_documents_by_member_id(db, member.id, type="precontractual")
    }
    items = [
        PrecontractualItem(
            required_document_id=required.id,
            name=required.name,
            due_date=required.due_date,
            document=(
                ContractualDocument.model_validate(documents[required.id])
                if required.id in documents
                else None
            ),
        )
        for required in requirements
    ]
    return PrecontractualDocuments(
        items=items,
        complete=all(item.document is not None and item.document.url for item in items),
    )


def list_contractual_documents(db: Session, member: MemberModel) -> list[MonthDocuments]:
    """Regular and extra documents grouped by month, oldest month first, undated last."""
    grouped: dict[str | None, tuple[list, list]] = defaultdict(lambda: ([], []))
    for document in document_repo.get_documents_by_member_id(db, member.id, type="contractual"):
        grouped[document.month][0].append(ContractualDocument.model_validate(document))
    for extra in document_repo.get_extra_documents_by_member_id(db, member.id):
        grouped[extra.month][1].append(ExtraDocument.model_validate(extra))

    return [
        MonthDocuments(month=month, documents=documents, extra_documents=extras)
        for month, (documents, extras) in sorted(
            grouped.items(), key=lambda entry: month_label_sort_key(entry[0])
        )
    ]


def _upsert_document(
    db: Session, member: MemberModel, required_document_id: str, url: str, month: str | None
) -> DocumentModel:
    existing = document_repo.get_document(db, member.id, required_document_id, month)
    if existing:
        return document_repo.update_document_url(db, existing.id, url)
    return document_repo.create_document(
        db, member_id=member.id, required_document_id=required_document_id, url=url, month=month
    )


def _get_requirement(db: Session, member: MemberModel, required_document_id: str, type: str):
    required = contract_repo.get_required_document_by_id(db, required_document_id)
    if not required or required.contract_id != member.contract_id:
        raise NotFoundError("Required document not found")
    if required.type != type:
        raise DomainValidationError(f"Required document '{required.name}' is not {type}")
    return required


async def upload_precontractual_document(
    db: Session,
    storage: StorageClient,
    member: MemberModel,
    required_document_id: str,
    upload: UploadedFile,
) -> DocumentModel:
    """
    Upload a precontractual document after checking it is what it claims to be.

    - Rejects oversized files before any outbound call
    - Rejects the file (nothing stored) when verification says it is not valid
    - Upserts the member x requirement row with the stored file's URL
    """
    required = _get_requirement(db, member, required_document_id, "precontractual")
    validate_upload(upload, allowed_extensions=PRECONTRACTUAL_EXTENSIONS)

    is_valid = await verify_document(
        upload.content, upload.file_name, upload.content_type, required.name
    )
    if not is_valid:
        raise DomainValidationError(
            f"The uploaded file does not appear to be a valid '{required.name}'"
        )

    path = build_storage_path(
        "precontractualdocuments", member.id, f"{required.id} {upload.file_name}"
    )
    await storage.upload(path, upload.content, content_type=upload.content_type)
    document = _upsert_document(db, member, required.id, storage.get_public_url(path), None)

    invalidate_member_status(member.id)
    return document


async def upload_contractual_document(
    db: Session,
    storage: StorageClient,
    member: MemberModel,
    required_document_id: str,
    month: str,
    upload: UploadedFile,
) -> DocumentModel:
    """
    Upload the document of one requirement for one month.

    Locked until the precontractual phase is complete and the contract is signed.
    """
    required = _get_requirement(db, member, required_document_id, "contractual")
    month = month.strip().lower()
    if parse_month_label(month) is None:
        raise DomainValidationError(f"Invalid month '{month}'")
    validate_upload(upload)

    status = compute_member_status(db, member)
    if not status.contractual_unlocked:
        raise DomainValidationError(
            "Contractual documents are locked until precontractual documents are complete and the contract is signed"
        )

    path = build_storage_path(
        "contractualdocuments", member.id, f"{required.id} {month} {upload.file_name}"
    )
    await storage.upload(path, upload.content, content_type=upload.content_type)
    document = _upsert_document(db, member, required.id, storage.get_public_url(path), month)

    invalidate_member_status(member.id)
    return document


async def upload_extra_document(
    db: Session,
    storage: StorageClient,
    member: MemberModel,
    name: str,
    upload: UploadedFile,
    month: str | None = None,
) -> ExtraDocumentModel:
    """Upload an ad-hoc document that no requirement asked for."""
    name = name.strip()
    if not name:
        raise DomainValidationError("Document name is required")
    if month:
        month = month.strip().lower()
        if parse_month_label(month) is None:
            raise DomainValidationError(f"Invalid month '{month}'")
    validate_upload(upload)

    document_id = new_id()
    path = extra_document_path(member.id, document_id, upload.file_name, datetime.now(timezone.utc))
    await storage.upload(path, upload.content, content_type=upload.content_type)
    extra = document_repo.create_extra_document(
        db,
        member_id=member.id,
        name=name,
        month=month or None,
        url=storage.get_public_url(path),
        id=document_id,
    )

    invalidate_member_status(member.id)
    return extra


def delete_extra_document(db: Session, extra: ExtraDocumentModel) -> None:
    document_repo.soft_delete_extra_document(db, extra.id)
    invalidate_member_status(extra.contract_member_id)


async def _sign_candidate(storage: StorageClient, path: str, expires_in: int) -> Ok[str] | Err:
    try:
        return Ok(await storage.create_signed_url(path, expires_in))
    except StorageError as e:
        logger.warning("Could not sign %s: %s", path, e)
        return Err(f"{path}: {e}")


async def resolve_signed_url(storage: StorageClient, url: str, preview: bool = False) -> str:
    """
    Short-lived URL for a stored document.

    Docgen links are returned unchanged. Otherwise the candidate storage paths
    are tried in order; when all fail a single aggregated error is raised.
    """
    url = url.strip()
    if not url:
        raise DomainValidationError("File URL is required")
    if is_docgen_url(url, settings.docgen_base_url):
        return url

    expires_in = (
        settings.preview_signed_url_expiry_seconds if preview else settings.signed_url_expiry_seconds
    )
    errors = []
    for path in candidate_storage_paths(url, settings.storage_bucket):
        result = await _sign_candidate(storage, path, expires_in)
        if result.ok:
            return result.value
        errors.append(result.error)

    logger.error("Could not resolve a signed URL for %s after %d attempts", url, len(errors))
    raise ExternalServiceError(
        "Could not generate a signed URL for the file. Tried: " + "; ".join(errors)
    )


def project_documents_overview(
    db: Session,
    project: ProjectModel,
    search: str | None = None,
    page: int = 1,
    page_size: int = 10,
) -> tuple[list[ProjectDocumentRow], int]:
    """One row per member of the project, searchable by contractor email or contract name."""
    rows = []
    for member in member_repo.get_members_by_project_id(db, project.id):
        user = user_repo.get_user_by_id(db, member.user_id)
        contract = contract_repo.get_contract_by_id(db, member.contract_id)
        status = get_member_status(db, member)
        rows.append(
            ProjectDocumentRow(
                member_id=member.id,
                user_email=user.email if user else "",
                contract_id=member.contract_id,
                contract_name=contract.name if contract else "",
                document_state=status.document_state,
                signed=status.signed,
                status_juridico=status.status_juridico,
                status_seguridad_social=status.status_seguridad_social,
            )
        )

    filtered = filter_by_substring(
        rows, search, [lambda row: row.user_email, lambda row: row.contract_name]
    )
    return paginate(filtered, page, page_size), len(filtered)
