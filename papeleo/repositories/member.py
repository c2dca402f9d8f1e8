from datetime import date, datetime
from sqlalchemy.orm import Session

from papeleo.db.models.contract import Contract as ContractModel
from papeleo.db.models.contract_member import (
    ContractExtension as ExtensionModel,
    ContractMember as MemberModel,
    ContractualDocument as DocumentModel,
    ContractualExtraDocument as ExtraDocumentModel,
)
from papeleo.errors import NotFoundError


def get_member_by_id(db: Session, member_id: str) -> MemberModel | None:
    """Get a contract member by ID."""
    return db.query(MemberModel).filter(MemberModel.id == member_id).first()


def get_members_by_project_id(db: Session, project_id: str) -> list[MemberModel]:
    """Members of every non-deleted contract of a project, newest first."""
    return (
        db.query(MemberModel)
        .join(ContractModel, MemberModel.contract_id == ContractModel.id)
        .filter(
            ContractModel.project_id == project_id,
            ContractModel.deleted_at.is_(None),
        )
        .order_by(MemberModel.created_at.desc())
        .all()
    )


def get_members_by_user_id(db: Session, user_id: str) -> list[MemberModel]:
    """Memberships of a user on non-deleted contracts, newest first."""
    return (
        db.query(MemberModel)
        .join(ContractModel, MemberModel.contract_id == ContractModel.id)
        .filter(
            MemberModel.user_id == user_id,
            ContractModel.deleted_at.is_(None),
        )
        .order_by(MemberModel.created_at.desc())
        .all()
    )


def create_member(
    db: Session,
    user_id: str,
    contract_id: str,
    value: str | None,
    start_date: date,
    end_date: date,
    invited_at: datetime,
    contract: dict | None = None,
) -> MemberModel:
    """Create a new contract member in the database. Pure data access - no business logic."""
    db_member = MemberModel(
        user_id=user_id,
        contract_id=contract_id,
        status="pending",
        value=value,
        start_date=start_date,
        end_date=end_date,
        invited_at=invited_at,
        contract=contract,
    )
    db.add(db_member)
    db.commit()
    db.refresh(db_member)
    return db_member


_UPDATABLE_FIELDS = (
    "status",
    "signed",
    "contratante_signed",
    "ending",
    "contract",
    "accepted_at",
    "end_date",
    "status_juridico",
    "status_seguridad_social",
)


def update_member(db: Session, member_id: str, **kwargs) -> MemberModel:
    """Update a member. Only updates fields that are explicitly provided."""
    member = get_member_by_id(db, member_id)
    if not member:
        raise NotFoundError("Contract member not found")

    for field_name in _UPDATABLE_FIELDS:
        if field_name in kwargs:
            setattr(member, field_name, kwargs[field_name])

    db.commit()
    db.refresh(member)
    return member


def delete_member(db: Session, member_id: str) -> None:
    """Delete a contract member from the database. Pure data access - no business logic."""
    member = get_member_by_id(db, member_id)
    if not member:
        raise NotFoundError("Contract member not found")

    for model in (DocumentModel, ExtraDocumentModel, ExtensionModel):
        db.query(model).filter(model.contract_member_id == member_id).delete(
            synchronize_session=False
        )
    db.delete(member)
    db.commit()


def get_extensions_by_member_id(db: Session, member_id: str) -> list[ExtensionModel]:
    """Extensions of a member, newest first."""
    return (
        db.query(ExtensionModel)
        .filter(ExtensionModel.contract_member_id == member_id)
        .order_by(ExtensionModel.created_at.desc(), ExtensionModel.extension_start_date.desc())
        .all()
    )


def create_extension(
    db: Session,
    member_id: str,
    start_date: date,
    end_date: date,
    extension_url: str | None,
) -> ExtensionModel:
    """Create a new extension in the database. Pure data access - no business logic."""
    db_extension = ExtensionModel(
        contract_member_id=member_id,
        extension_start_date=start_date,
        extension_end_date=end_date,
        extension_url=extension_url,
    )
    db.add(db_extension)
    db.commit()
    db.refresh(db_extension)
    return db_extension
