"""Per-member status assembled from the database, cached for a few minutes."""

from sqlalchemy.orm import Session

import papeleo.repositories.contract as contract_repo
import papeleo.repositories.document as document_repo
from papeleo.core.config import settings
from papeleo.db.models.contract import Contract as ContractModel
from papeleo.db.models.contract_member import ContractMember as MemberModel
from papeleo.domain.cache import TTLCache
from papeleo.domain.status import (
    BackgroundCheck,
    DocumentState,
    PhaseGates,
    all_uploaded,
    background_check_from_record,
    document_state,
    has_termination,
)
from papeleo.schemas.member import BackgroundCheckBadge, MemberStatus

status_cache = TTLCache(settings.status_cache_ttl_seconds)


def invalidate_member_status(member_id: str) -> None:
    """Drop the cached status; call after every mutation on the member."""
    status_cache.invalidate(member_id)


def invalidate_contract_statuses(contract: ContractModel) -> None:
    """Drop the cached status of every member of ``contract``; its requirements changed."""
    for member in contract.members:
        invalidate_member_status(member.id)


def precontractual_uploaded(db: Session, member: MemberModel) -> bool:
    """Every precontractual requirement of the contract has an uploaded document."""
    requirements = contract_repo.get_required_documents(db, member.contract_id, type="precontractual")
    documents = {
        document.required_document_id: document
        for document in document_repo.get_documents_by_member_id(db, member.id, type="precontractual")
    }
    return all_uploaded(
        documents[required.id].url if required.id in documents else None
        for required in requirements
    )


def contractual_uploaded(db: Session, member: MemberModel) -> bool:
    """Every contractual document row created so far (all months) has a URL."""
    documents = document_repo.get_documents_by_member_id(db, member.id, type="contractual")
    return all_uploaded(document.url for document in documents)


def _badge(check: BackgroundCheck) -> BackgroundCheckBadge:
    return BackgroundCheckBadge(status=check.status.value, novedades=check.novedades, code=check.code)


def member_document_state(
    member: MemberModel, precontractual_complete: bool, contractual_complete: bool
) -> DocumentState:
    """Before signing the precontractual phase decides; afterwards the contractual one."""
    if member.signed:
        return document_state(contractual_complete, member.ending, DocumentState.SIGNED)
    return document_state(precontractual_complete, member.ending, DocumentState.COMPLETE)


def compute_member_status(db: Session, member: MemberModel) -> MemberStatus:
    precontractual_complete = precontractual_uploaded(db, member)
    contractual_complete = contractual_uploaded(db, member)
    gates = PhaseGates(
        precontractual_complete=precontractual_complete,
        signed=bool(member.signed),
        contractual_complete=contractual_complete,
    )
    state = member_document_state(member, precontractual_complete, contractual_complete)

    return MemberStatus(
        member_id=member.id,
        precontractual_complete=gates.precontractual_complete,
        signed=gates.signed,
        contratante_signed=bool(member.contratante_signed),
        contractual_complete=gates.contractual_complete,
        signature_unlocked=gates.signature_unlocked,
        contractual_unlocked=gates.contractual_unlocked,
        document_state=state.value,
        termination_requested=has_termination(member.ending),
        status_juridico=_badge(background_check_from_record(member.status_juridico)),
        status_seguridad_social=_badge(background_check_from_record(member.status_seguridad_social)),
    )


def get_member_status(db: Session, member: MemberModel) -> MemberStatus:
    """Cached status for a member; recomputed after expiry or invalidation."""
    cached = status_cache.get(member.id)
    if cached is not None:
        return cached
    status = compute_member_status(db, member)
    status_cache.set(member.id, status)
    return status
