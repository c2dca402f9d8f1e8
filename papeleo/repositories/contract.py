from datetime import date, datetime, timezone
from sqlalchemy import func
from sqlalchemy.orm import Session

from papeleo.db.models.contract import (
    Contract as ContractModel,
    GeneratedDocument as GeneratedDocumentModel,
    RequiredDocument as RequiredDocumentModel,
)
from papeleo.errors import NotFoundError


def get_contract_by_id(db: Session, contract_id: str) -> ContractModel | None:
    """Get a non-deleted contract by ID."""
    return (
        db.query(ContractModel)
        .filter(ContractModel.id == contract_id, ContractModel.deleted_at.is_(None))
        .first()
    )


def get_contracts_by_project_id(db: Session, project_id: str) -> list[ContractModel]:
    """Non-deleted contracts of a project, newest first."""
    return (
        db.query(ContractModel)
        .filter(
            ContractModel.project_id == project_id,
            ContractModel.deleted_at.is_(None),
        )
        .order_by(ContractModel.created_at.desc())
        .all()
    )


def create_contract(
    db: Session,
    project_id: str,
    name: str,
    contract_draft_url: str | None = None,
    status: str = "draft",
) -> ContractModel:
    """Create a new contract in the database. Pure data access - no business logic."""
    db_contract = ContractModel(
        project_id=project_id,
        name=name,
        contract_draft_url=contract_draft_url,
        status=status,
    )
    db.add(db_contract)
    db.commit()
    db.refresh(db_contract)
    return db_contract


def update_contract(db: Session, contract_id: str, **kwargs) -> ContractModel:
    """Update a contract. Only updates fields that are explicitly provided."""
    contract = get_contract_by_id(db, contract_id)
    if not contract:
        raise NotFoundError("Contract not found")

    if "name" in kwargs:
        contract.name = kwargs["name"]
    if "contract_draft_url" in kwargs:
        contract.contract_draft_url = kwargs["contract_draft_url"]
    if "status" in kwargs:
        contract.status = kwargs["status"]

    db.commit()
    db.refresh(contract)
    return contract


def soft_delete_contract(db: Session, contract_id: str) -> None:
    """Mark a contract as deleted. Pure data access - no business logic."""
    contract = get_contract_by_id(db, contract_id)
    if not contract:
        raise NotFoundError("Contract not found")

    contract.deleted_at = datetime.now(timezone.utc)
    db.commit()


def get_required_document_by_id(
    db: Session, required_document_id: str
) -> RequiredDocumentModel | None:
    """Get a non-deleted required document by ID."""
    return (
        db.query(RequiredDocumentModel)
        .filter(
            RequiredDocumentModel.id == required_document_id,
            RequiredDocumentModel.deleted_at.is_(None),
        )
        .first()
    )


def get_required_documents(
    db: Session, contract_id: str, type: str | None = None
) -> list[RequiredDocumentModel]:
    """Non-deleted required documents of a contract, optionally of one type."""
    query = db.query(RequiredDocumentModel).filter(
        RequiredDocumentModel.contract_id == contract_id,
        RequiredDocumentModel.deleted_at.is_(None),
    )
    if type is not None:
        query = query.filter(RequiredDocumentModel.type == type)
    return query.order_by(RequiredDocumentModel.created_at, RequiredDocumentModel.name).all()


def create_required_document(
    db: Session,
    contract_id: str,
    name: str,
    type: str,
    due_date: date | None = None,
    template_id: str | None = None,
) -> RequiredDocumentModel:
    """Create a new required document in the database. Pure data access - no business logic."""
    db_required = RequiredDocumentModel(
        contract_id=contract_id,
        name=name,
        type=type,
        due_date=due_date,
        template_id=template_id,
    )
    db.add(db_required)
    db.commit()
    db.refresh(db_required)
    return db_required


def soft_delete_required_document(db: Session, required_document_id: str) -> None:
    """Mark a required document as deleted. Pure data access - no business logic."""
    required = get_required_document_by_id(db, required_document_id)
    if not required:
        raise NotFoundError("Required document not found")

    required.deleted_at = datetime.now(timezone.utc)
    db.commit()


def get_required_document_name_counts(
    db: Session,
    search: str,
    type: str | None = None,
    limit: int = 5,
) -> list[tuple[str, int]]:
    """
    Names already used for required documents matching ``search``.

    Returns (name, uses) pairs ranked by uses, then name.
    """
    uses = func.count(RequiredDocumentModel.id)
    query = db.query(RequiredDocumentModel.name, uses).filter(
        RequiredDocumentModel.deleted_at.is_(None),
        RequiredDocumentModel.name.ilike(f"%{search}%"),
    )
    if type is not None:
        query = query.filter(RequiredDocumentModel.type == type)
    rows = (
        query.group_by(RequiredDocumentModel.name)
        .order_by(uses.desc(), RequiredDocumentModel.name)
        .limit(limit)
        .all()
    )
    return [(name, count) for name, count in rows]


def get_generated_document_by_id(
    db: Session, document_id: str
) -> GeneratedDocumentModel | None:
    """Get a docgen document by ID."""
    return (
        db.query(GeneratedDocumentModel)
        .filter(GeneratedDocumentModel.id == document_id)
        .first()
    )
