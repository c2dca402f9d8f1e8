"""The contractor's own data: memberships, contractor details and signature."""

from sqlalchemy.orm import Session

import papeleo.repositories.contract as contract_repo
import papeleo.repositories.member as member_repo
import papeleo.repositories.user as user_repo
from papeleo.core.config import settings
from papeleo.db.models.user import User
from papeleo.domain.paths import build_storage_path
from papeleo.schemas.member import Member, MyContract
from papeleo.schemas.user import DocumentData
from papeleo.services.storage import StorageClient
from papeleo.services.uploads import UploadedFile, validate_upload


def list_my_contracts(db: Session, current_user: User) -> list[MyContract]:
    contracts = []
    for member in member_repo.get_members_by_user_id(db, current_user.id):
        contract = contract_repo.get_contract_by_id(db, member.contract_id)
        if not contract:
            continue
        contracts.append(
            MyContract(
                **Member.model_validate(member).model_dump(),
                contract_name=contract.name,
                contract_draft_url=contract.contract_draft_url,
                project_id=contract.project_id,
            )
        )
    return contracts


def get_document_data(current_user: User) -> DocumentData:
    return DocumentData.model_validate(current_user.document_id or {})


def update_document_data(db: Session, current_user: User, data: DocumentData) -> DocumentData:
    """Merge the provided contractor fields into the stored ones."""
    merged = {**(current_user.document_id or {}), **data.model_dump(by_alias=True, exclude_none=True)}
    user = user_repo.update_user(db, current_user.id, document_id=merged)
    return DocumentData.model_validate(user.document_id or {})


async def upload_user_signature(
    db: Session, storage: StorageClient, current_user: User, upload: UploadedFile
) -> User:
    validate_upload(upload, image_only=True)

    path = build_storage_path("signatures/users", current_user.id, upload.file_name)
    await storage.upload(
        path, upload.content, content_type=upload.content_type, bucket=settings.storage_public_bucket
    )
    url = storage.get_public_url(path, bucket=settings.storage_public_bucket)
    return user_repo.update_user(db, current_user.id, signature=url)
