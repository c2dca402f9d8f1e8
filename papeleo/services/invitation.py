import logging
from datetime import date, datetime, timezone

from sqlalchemy.orm import Session

import papeleo.repositories.contract as contract_repo
import papeleo.repositories.member as member_repo
import papeleo.repositories.organization as organization_repo
import papeleo.repositories.user as user_repo
from papeleo.core.config import settings
from papeleo.db.models.contract import Contract as ContractModel
from papeleo.db.models.contract_member import ContractMember as MemberModel
from papeleo.db.models.organization import ContractualProject as ProjectModel
from papeleo.db.models.user import User as UserModel
from papeleo.domain.paths import docgen_document_id
from papeleo.domain.placeholders import has_placeholder, insert_signature, substitute_placeholders
from papeleo.errors import DomainValidationError, DuplicateResourceError, NotFoundError
from papeleo.services.documents import expand_contractual_documents
from papeleo.services.email import EMAIL_ERRORS
from papeleo.services.email import send_invitation_email as send_invitation_email_service
from papeleo.services.status import invalidate_member_status

logger = logging.getLogger(__name__)

MAX_USER_SEARCH_RESULTS = 10


def search_users(db: Session, email: str | None) -> list[UserModel]:
    term = (email or "").strip()
    if not term:
        return []
    return user_repo.search_users_by_email(db, term, limit=MAX_USER_SEARCH_RESULTS)


def list_invitations(db: Session, project: ProjectModel) -> list[MemberModel]:
    return member_repo.get_members_by_project_id(db, project.id)


def prepare_member_contract(
    db: Session,
    contract: ContractModel,
    project: ProjectModel,
    user: UserModel,
    value: str | None,
    end_date: date,
) -> dict | None:
    """
    The member's own copy of a docgen contract, with placeholders filled in.

    Returns None when the draft is not a docgen document. The project
    signature, when there is one, replaces the last signature line.
    """
    document_id = docgen_document_id(contract.contract_draft_url, settings.docgen_base_url)
    if not document_id:
        return None

    document = contract_repo.get_generated_document_by_id(db, document_id)
    if not document or not document.sections:
        logger.warning("Docgen document %s for contract %s not found", document_id, contract.id)
        return None

    sections = substitute_placeholders(
        document.sections, value=value, end_date=end_date, user_email=user.email
    )
    if has_placeholder(sections):
        logger.warning("Contract %s for %s still has unresolved placeholders", contract.id, user.email)
    if project.signature:
        sections = insert_signature(sections, project.signature, occurrence="last")
    return sections


async def create_invitation(
    db: Session,
    contract: ContractModel,
    user_id: str,
    value: str | None,
    start_date: date,
    end_date: date,
) -> MemberModel:
    """
    Invite a contractor to a contract.

    - Validates date ordering and that the user exists
    - Rejects a second invitation of the same user to the same contract
    - Copies and fills the docgen contract for the member
    - Creates the contractual document placeholders for the contract term
    - Sends the invitation email (failure is logged, not raised)
    """
    if end_date < start_date:
        raise DomainValidationError(
            f"End date ({end_date}) cannot precede start date ({start_date})"
        )

    user = user_repo.get_user_by_id(db, user_id)
    if not user:
        raise NotFoundError(f"User with id {user_id} not found")

    project = organization_repo.get_project_by_id(db, contract.project_id)
    if not project:
        raise NotFoundError("Project not found")

    if any(member.user_id == user_id for member in contract.members):
        raise DuplicateResourceError(f"User {user.email} is already invited to this contract")

    member = member_repo.create_member(
        db,
        user_id=user.id,
        contract_id=contract.id,
        value=value,
        start_date=start_date,
        end_date=end_date,
        invited_at=datetime.now(timezone.utc),
        contract=prepare_member_contract(db, contract, project, user, value, end_date),
    )

    expansion = expand_contractual_documents(db, member, start_date, end_date)
    if not expansion.ok:
        logger.warning("Invitation %s created without contractual documents: %s", member.id, expansion.error)

    try:
        await send_invitation_email_service(
            email=user.email, contract_name=contract.name, project_name=project.name
        )
    except EMAIL_ERRORS as e:
        logger.warning("Invitation email to %s failed: %s", user.email, e)

    return member


def delete_invitation(db: Session, member: MemberModel) -> None:
    """Remove an invitation; signed members stay."""
    if member.signed:
        raise DomainValidationError("Cannot delete the invitation of a member who already signed")
    member_repo.delete_member(db, member.id)
    invalidate_member_status(member.id)
