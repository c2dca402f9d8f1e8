"""Ownership checks shared by the contratante and contratista endpoints.

Contratante resources belong to whoever owns the project's organization;
member resources belong to the member's user.
"""

from sqlalchemy.orm import Session

import papeleo.repositories.contract as contract_repo
import papeleo.repositories.member as member_repo
import papeleo.repositories.organization as organization_repo
from papeleo.db.models.contract import Contract as ContractModel
from papeleo.db.models.contract import RequiredDocument as RequiredDocumentModel
from papeleo.db.models.contract_member import ContractMember as MemberModel
from papeleo.db.models.organization import (
    ContractualProject as ProjectModel,
    Organization as OrganizationModel,
)
from papeleo.db.models.user import User
from papeleo.errors import ForbiddenError, NotFoundError


def get_owned_organization(db: Session, organization_id: str, current_user: User) -> OrganizationModel:
    organization = organization_repo.get_organization_by_id(db, organization_id)
    if not organization:
        raise NotFoundError("Organization not found")
    if organization.user_id != current_user.id:
        raise ForbiddenError("Not enough permissions")
    return organization


def get_owned_project(db: Session, project_id: str, current_user: User) -> ProjectModel:
    project = organization_repo.get_project_by_id(db, project_id)
    if not project:
        raise NotFoundError("Project not found")
    get_owned_organization(db, project.organization_id, current_user)
    return project


def get_owned_contract(db: Session, contract_id: str, current_user: User) -> ContractModel:
    contract = contract_repo.get_contract_by_id(db, contract_id)
    if not contract:
        raise NotFoundError("Contract not found")
    get_owned_project(db, contract.project_id, current_user)
    return contract


def get_owned_required_document(
    db: Session, required_document_id: str, current_user: User
) -> RequiredDocumentModel:
    required = contract_repo.get_required_document_by_id(db, required_document_id)
    if not required:
        raise NotFoundError("Required document not found")
    get_owned_contract(db, required.contract_id, current_user)
    return required


def is_project_owner(db: Session, contract: ContractModel, current_user: User) -> bool:
    project = organization_repo.get_project_by_id(db, contract.project_id)
    if not project:
        return False
    organization = organization_repo.get_organization_by_id(db, project.organization_id)
    return organization is not None and organization.user_id == current_user.id


def _get_live_member(db: Session, member_id: str) -> tuple[MemberModel, ContractModel]:
    member = member_repo.get_member_by_id(db, member_id)
    if not member:
        raise NotFoundError("Contract member not found")
    contract = contract_repo.get_contract_by_id(db, member.contract_id)
    if not contract:
        raise NotFoundError("Contract not found")
    return member, contract


def get_member_for_contractor(db: Session, member_id: str, current_user: User) -> MemberModel:
    """The member, when it belongs to the current user."""
    member, _contract = _get_live_member(db, member_id)
    if member.user_id != current_user.id:
        raise ForbiddenError("Not enough permissions")
    return member


def get_member_for_owner(db: Session, member_id: str, current_user: User) -> MemberModel:
    """The member, when the current user owns its contract's organization."""
    member, contract = _get_live_member(db, member_id)
    if not is_project_owner(db, contract, current_user):
        raise ForbiddenError("Not enough permissions")
    return member


def get_member_for_reader(db: Session, member_id: str, current_user: User) -> MemberModel:
    """The member, for either the contractor or the contract's owner."""
    member, contract = _get_live_member(db, member_id)
    if member.user_id != current_user.id and not is_project_owner(db, contract, current_user):
        raise ForbiddenError("Not enough permissions")
    return member
