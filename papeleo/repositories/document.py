from datetime import datetime, timezone
from sqlalchemy.orm import Session

from papeleo.db.base import new_id
from papeleo.db.models.contract import RequiredDocument as RequiredDocumentModel
from papeleo.db.models.contract_member import (
    ContractualDocument as DocumentModel,
    ContractualExtraDocument as ExtraDocumentModel,
)
from papeleo.domain.requirements import PlannedDocument
from papeleo.errors import NotFoundError


def get_documents_by_member_id(
    db: Session, member_id: str, type: str | None = None
) -> list[DocumentModel]:
    """Non-deleted documents of a member, optionally restricted to one requirement type."""
    query = (
        db.query(DocumentModel)
        .join(RequiredDocumentModel, DocumentModel.required_document_id == RequiredDocumentModel.id)
        .filter(
            DocumentModel.contract_member_id == member_id,
            DocumentModel.deleted_at.is_(None),
            RequiredDocumentModel.deleted_at.is_(None),
        )
    )
    if type is not None:
        query = query.filter(RequiredDocumentModel.type == type)
    return query.order_by(DocumentModel.created_at, RequiredDocumentModel.name).all()


def get_document(
    db: Session, member_id: str, required_document_id: str, month: str | None = None
) -> DocumentModel | None:
    """The live row for a member x requirement (x month)."""
    query = db.query(DocumentModel).filter(
        DocumentModel.contract_member_id == member_id,
        DocumentModel.required_document_id == required_document_id,
        DocumentModel.deleted_at.is_(None),
    )
    if month is None:
        query = query.filter(DocumentModel.month.is_(None))
    else:
        query = query.filter(DocumentModel.month == month)
    return query.first()


def create_document(
    db: Session,
    member_id: str,
    required_document_id: str,
    url: str | None,
    month: str | None = None,
) -> DocumentModel:
    """Create a new document row in the database. Pure data access - no business logic."""
    db_document = DocumentModel(
        contract_member_id=member_id,
        required_document_id=required_document_id,
        url=url,
        month=month,
    )
    db.add(db_document)
    db.commit()
    db.refresh(db_document)
    return db_document


def create_documents(
    db: Session, member_id: str, planned: list[PlannedDocument]
) -> list[DocumentModel]:
    """Bulk-insert placeholder rows (url NULL) in one transaction."""
    rows = [
        DocumentModel(
            contract_member_id=member_id,
            required_document_id=item.required_document_id,
            month=item.month,
            url=None,
        )
        for item in planned
    ]
    db.add_all(rows)
    db.commit()
    for row in rows:
        db.refresh(row)
    return rows


def update_document_url(db: Session, document_id: str, url: str) -> DocumentModel:
    document = db.query(DocumentModel).filter(DocumentModel.id == document_id).first()
    if not document:
        raise NotFoundError("Document not found")

    document.url = url
    document.updated_at = datetime.now(timezone.utc)
    db.commit()
    db.refresh(document)
    return document


def get_extra_document_by_id(db: Session, extra_document_id: str) -> ExtraDocumentModel | None:
    """Get a non-deleted extra document by ID."""
    return (
        db.query(ExtraDocumentModel)
        .filter(
            ExtraDocumentModel.id == extra_document_id,
            ExtraDocumentModel.deleted_at.is_(None),
        )
        .first()
    )


def get_extra_documents_by_member_id(db: Session, member_id: str) -> list[ExtraDocumentModel]:
    """Non-deleted extra documents of a member, oldest first."""
    return (
        db.query(ExtraDocumentModel)
        .filter(
            ExtraDocumentModel.contract_member_id == member_id,
            ExtraDocumentModel.deleted_at.is_(None),
        )
        .order_by(ExtraDocumentModel.created_at)
        .all()
    )


def create_extra_document(
    db: Session,
    member_id: str,
    name: str,
    month: str | None = None,
    url: str | None = None,
    id: str | None = None,
) -> ExtraDocumentModel:
    """Create a new extra document in the database. Pure data access - no business logic."""
    db_extra = ExtraDocumentModel(
        id=id or new_id(),
        contract_member_id=member_id,
        name=name,
        month=month,
        url=url,
    )
    db.add(db_extra)
    db.commit()
    db.refresh(db_extra)
    return db_extra


def soft_delete_extra_document(db: Session, extra_document_id: str) -> None:
    """Mark an extra document as deleted. Pure data access - no business logic."""
    extra = get_extra_document_by_id(db, extra_document_id)
    if not extra:
        raise NotFoundError("Extra document not found")

    extra.deleted_at = datetime.now(timezone.utc)
    db.commit()
