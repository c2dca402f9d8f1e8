import logging

from sqlalchemy.orm import Session

import papeleo.repositories.member as member_repo
from papeleo.db.models.contract_member import ContractMember as MemberModel
from papeleo.domain.paths import build_storage_path
from papeleo.domain.status import has_termination
from papeleo.errors import DomainValidationError, DuplicateResourceError
from papeleo.services.status import invalidate_member_status
from papeleo.services.storage import StorageClient
from papeleo.services.uploads import UploadedFile, validate_upload

logger = logging.getLogger(__name__)

# solicitud: requested by the contractor; comun: administrative termination
TERMINATION_TYPES = ("solicitud", "comun")


async def request_termination(
    db: Session,
    storage: StorageClient,
    member: MemberModel,
    termination_type: str,
    upload: UploadedFile,
) -> MemberModel:
    """
    Record the termination of a member's contract with its supporting letter.

    The first request wins: a member that already has one is rejected before
    anything is uploaded.
    """
    if has_termination(member.ending):
        raise DuplicateResourceError("A termination request already exists for this contract")
    if termination_type not in TERMINATION_TYPES:
        raise DomainValidationError(
            f"Invalid termination type '{termination_type}'. Allowed: {', '.join(TERMINATION_TYPES)}"
        )
    validate_upload(upload)

    path = build_storage_path("renuncia", member.id, upload.file_name)
    await storage.upload(path, upload.content, content_type=upload.content_type)

    member = member_repo.update_member(
        db,
        member_id=member.id,
        ending={"url": storage.get_public_url(path), "status": termination_type},
    )
    invalidate_member_status(member.id)
    logger.info("Termination (%s) recorded for member %s", termination_type, member.id)
    return member
