from typing import Literal

from fastapi import APIRouter, Depends, File, Query, UploadFile, status
from sqlalchemy.orm import Session

from papeleo.api.deps import get_db, get_current_user, get_storage, read_upload
import papeleo.repositories.contract as contract_repo
from papeleo.services.access import get_owned_contract
from papeleo.services.contract import add_required_document, rename_contract, replace_contract_draft
from papeleo.services.invitation import create_invitation
from papeleo.services.storage import StorageClient
from papeleo.schemas.contract import Contract, ContractUpdate, RequiredDocument, RequiredDocumentCreate
from papeleo.schemas.member import Invitation, InvitationCreate
from papeleo.db.models.user import User

router = APIRouter(prefix="/contracts", tags=["contracts"])


@router.patch("/{contract_id}", response_model=Contract)
def rename_contract_by_id(
    contract_id: str,
    contract_data: ContractUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    contract = get_owned_contract(db, contract_id, current_user)
    return Contract.model_validate(rename_contract(db, contract, contract_data.name))


@router.put("/{contract_id}/draft", response_model=Contract)
async def replace_draft_for_contract(
    contract_id: str,
    file: UploadFile = File(...),
    db: Session = Depends(get_db),
    storage: StorageClient = Depends(get_storage),
    current_user: User = Depends(get_current_user),
):
    contract = get_owned_contract(db, contract_id, current_user)
    upload = await read_upload(file)
    contract = await replace_contract_draft(db, storage, contract, upload)
    return Contract.model_validate(contract)


@router.delete("/{contract_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_contract_by_id(
    contract_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    contract = get_owned_contract(db, contract_id, current_user)
    contract_repo.soft_delete_contract(db, contract.id)


@router.get("/{contract_id}/required-documents", response_model=list[RequiredDocument])
def get_contract_required_documents(
    contract_id: str,
    type: Literal["precontractual", "contractual"] | None = Query(None),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    contract = get_owned_contract(db, contract_id, current_user)
    required_documents = contract_repo.get_required_documents(db, contract.id, type=type)
    return [RequiredDocument.model_validate(required) for required in required_documents]


@router.post(
    "/{contract_id}/required-documents",
    response_model=RequiredDocument,
    status_code=status.HTTP_201_CREATED,
)
def create_contract_required_document(
    contract_id: str,
    required_data: RequiredDocumentCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    contract = get_owned_contract(db, contract_id, current_user)
    return RequiredDocument.model_validate(add_required_document(db, contract, required_data))


@router.post(
    "/{contract_id}/invitations",
    response_model=Invitation,
    status_code=status.HTTP_201_CREATED,
)
async def invite_to_contract(
    contract_id: str,
    invitation_data: InvitationCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    Invite a contractor to this contract.

    The member gets its own filled-in copy of a docgen contract and the
    contractual document placeholders for the whole term.
    """
    contract = get_owned_contract(db, contract_id, current_user)
    member = await create_invitation(
        db,
        contract,
        user_id=invitation_data.user_id,
        value=invitation_data.value,
        start_date=invitation_data.start_date,
        end_date=invitation_data.end_date,
    )
    return Invitation.model_validate(member)
