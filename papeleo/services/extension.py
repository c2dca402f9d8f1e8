import logging
from datetime import date

from sqlalchemy.orm import Session

import papeleo.repositories.member as member_repo
from papeleo.db.models.contract_member import (
    ContractExtension as ExtensionModel,
    ContractMember as MemberModel,
)
from papeleo.domain.extension_window import ExtensionWindowPolicy
from papeleo.domain.paths import build_storage_path
from papeleo.services.documents import expand_contractual_documents
from papeleo.services.status import invalidate_member_status
from papeleo.services.storage import StorageClient
from papeleo.services.uploads import UploadedFile, validate_upload

logger = logging.getLogger(__name__)


def list_extensions(db: Session, member: MemberModel) -> list[ExtensionModel]:
    extensions = member_repo.get_extensions_by_member_id(db, member.id)
    return sorted(extensions, key=lambda extension: extension.extension_start_date, reverse=True)


async def create_extension(
    db: Session,
    storage: StorageClient,
    member: MemberModel,
    start_date: date,
    end_date: date,
    upload: UploadedFile,
) -> tuple[ExtensionModel, int, str | None]:
    """
    Extend a member's contract and pre-create its contractual documents.

    - The window policy and the file are validated before any storage call
    - The extension document goes to extension/{member_id}/{file name}
    - Placeholder documents for the new months are created afterwards; a
      failure there is returned, not raised

    Returns (extension, number of documents created, expansion error or None).
    """
    ExtensionWindowPolicy(
        contract_start=member.start_date, contract_end=member.end_date
    ).validate(start_date, end_date)
    validate_upload(upload)

    path = build_storage_path("extension", member.id, upload.file_name)
    await storage.upload(path, upload.content, content_type=upload.content_type)
    extension = member_repo.create_extension(
        db,
        member_id=member.id,
        start_date=start_date,
        end_date=end_date,
        extension_url=storage.get_public_url(path),
    )
    invalidate_member_status(member.id)

    expansion = expand_contractual_documents(db, member, start_date, end_date)
    if not expansion.ok:
        logger.warning("Extension %s created but documents were not: %s", extension.id, expansion.error)
        return extension, 0, expansion.error
    return extension, len(expansion.value), None
