import logging
from datetime import datetime, timezone

from sqlalchemy.orm import Session

import papeleo.repositories.contract as contract_repo
import papeleo.repositories.member as member_repo
import papeleo.repositories.organization as organization_repo
import papeleo.repositories.user as user_repo
from papeleo.db.models.contract_member import ContractMember as MemberModel
from papeleo.db.models.user import User
from papeleo.domain.placeholders import fill_contractor_details, insert_signature
from papeleo.errors import (
    DomainValidationError,
    DuplicateResourceError,
    ExternalServiceError,
    NotFoundError,
)
from papeleo.schemas.user import DocumentData
from papeleo.services.email import EMAIL_ERRORS
from papeleo.services.email import send_contract_signed_email as send_contract_signed_email_service
from papeleo.services.google_docs import extract_document_id, stamp_signature
from papeleo.services.status import invalidate_member_status, precontractual_uploaded

logger = logging.getLogger(__name__)


async def sign_contract(db: Session, member: MemberModel, current_user: User) -> MemberModel:
    """
    Contractor signature.

    Business logic:
    - A member signs once; a second attempt is rejected
    - Requires complete contractor data, a stored signature image and a
      complete precontractual phase
    - Writes the contractor's details into the member's contract copy and
      puts the signature image on the first signature line
    - Notifies the contract owner (failure is logged, not raised)
    """
    if member.signed:
        raise DuplicateResourceError("Contract already signed")

    details = DocumentData.model_validate(current_user.document_id or {})
    if not details.is_complete:
        raise DomainValidationError("Complete your contractor data before signing")
    if not current_user.signature:
        raise DomainValidationError("Upload your signature before signing")
    if not precontractual_uploaded(db, member):
        raise DomainValidationError("Precontractual documents must be complete before signing")

    sections = member.contract
    if sections:
        sections = fill_contractor_details(sections, details.model_dump(by_alias=True))
        sections = insert_signature(sections, current_user.signature, occurrence="first")

    now = datetime.now(timezone.utc)
    member = member_repo.update_member(
        db,
        member_id=member.id,
        signed=True,
        status="accepted",
        accepted_at=member.accepted_at or now,
        contract=sections,
    )
    invalidate_member_status(member.id)

    await _notify_owner(db, member, current_user)
    return member


async def _notify_owner(db: Session, member: MemberModel, contractor: User) -> None:
    contract = contract_repo.get_contract_by_id(db, member.contract_id)
    project = organization_repo.get_project_by_id(db, contract.project_id) if contract else None
    organization = (
        organization_repo.get_organization_by_id(db, project.organization_id) if project else None
    )
    owner = user_repo.get_user_by_id(db, organization.user_id) if organization else None
    if not owner:
        logger.warning("No owner found to notify about signed member %s", member.id)
        return

    try:
        await send_contract_signed_email_service(
            email=owner.email, contractor_email=contractor.email, contract_name=contract.name
        )
    except EMAIL_ERRORS as e:
        logger.warning("Contract signed email to %s failed: %s", owner.email, e)


async def countersign_contract(db: Session, member: MemberModel) -> MemberModel:
    """
    Contratante signature, once the contractor has signed.

    When the draft is a Google Docs document the project signature is also
    stamped at its end; a Docs API failure is logged and does not undo the
    signature.
    """
    if member.contratante_signed:
        raise DuplicateResourceError("Contract already countersigned")
    if not member.signed:
        raise DomainValidationError("The contractor has not signed yet")

    contract = contract_repo.get_contract_by_id(db, member.contract_id)
    if not contract:
        raise NotFoundError("Contract not found")
    project = organization_repo.get_project_by_id(db, contract.project_id)
    if not project or not project.signature:
        raise DomainValidationError("Upload the project signature before signing")

    member = member_repo.update_member(db, member_id=member.id, contratante_signed=True)
    invalidate_member_status(member.id)

    document_id = extract_document_id(contract.contract_draft_url)
    if document_id:
        try:
            await stamp_signature(document_id, project.signature, caption=project.name)
        except (DomainValidationError, ExternalServiceError) as e:
            logger.warning("Could not stamp signature into document %s: %s", document_id, e)

    return member
