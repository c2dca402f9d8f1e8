from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status
from sqlalchemy.orm import Session

from papeleo.api.deps import get_db, get_current_user, get_storage, read_upload
from papeleo.services.access import (
    get_member_for_contractor,
    get_member_for_owner,
    get_member_for_reader,
)
from papeleo.services.background_check import get_member_background_check_url
from papeleo.services.documents import (
    list_contractual_documents,
    list_precontractual_documents,
    upload_contractual_document,
    upload_extra_document,
    upload_precontractual_document,
)
from papeleo.services.signing import countersign_contract, sign_contract
from papeleo.services.status import get_member_status
from papeleo.services.storage import StorageClient
from papeleo.services.termination import request_termination
from papeleo.schemas.document import (
    ContractualDocument,
    ExtraDocument,
    MonthDocuments,
    PrecontractualDocuments,
)
from papeleo.schemas.member import BackgroundCheckUrl, Member, MemberContract, MemberStatus
from papeleo.db.models.user import User

router = APIRouter(prefix="/members", tags=["members"])


@router.get("/{member_id}/status", response_model=MemberStatus)
def get_status_for_member(
    member_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Phase flags, gates, document state and background-check badges."""
    member = get_member_for_reader(db, member_id, current_user)
    return get_member_status(db, member)


@router.get("/{member_id}/contract", response_model=MemberContract)
def get_contract_for_member(
    member_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """The member's own copy of the contract sections, as filled so far."""
    member = get_member_for_reader(db, member_id, current_user)
    return MemberContract.model_validate(member)


@router.get("/{member_id}/precontractual-documents", response_model=PrecontractualDocuments)
def get_precontractual_documents(
    member_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    member = get_member_for_reader(db, member_id, current_user)
    return list_precontractual_documents(db, member)


@router.post(
    "/{member_id}/precontractual-documents",
    response_model=ContractualDocument,
    status_code=status.HTTP_201_CREATED,
)
async def upload_precontractual(
    member_id: str,
    required_document_id: str = Form(...),
    file: UploadFile = File(...),
    db: Session = Depends(get_db),
    storage: StorageClient = Depends(get_storage),
    current_user: User = Depends(get_current_user),
):
    """
    Upload the document for a precontractual requirement.

    The file is checked by the verification service first; a file it rejects
    is not stored.
    """
    member = get_member_for_contractor(db, member_id, current_user)
    upload = await read_upload(file)
    document = await upload_precontractual_document(db, storage, member, required_document_id, upload)
    return ContractualDocument.model_validate(document)


@router.get("/{member_id}/contractual-documents", response_model=list[MonthDocuments])
def get_contractual_documents(
    member_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    member = get_member_for_reader(db, member_id, current_user)
    return list_contractual_documents(db, member)


@router.post(
    "/{member_id}/contractual-documents",
    response_model=ContractualDocument,
    status_code=status.HTTP_201_CREATED,
)
async def upload_contractual(
    member_id: str,
    required_document_id: str = Form(...),
    month: str = Form(..., description="Month label, e.g. 'enero 2024'"),
    file: UploadFile = File(...),
    db: Session = Depends(get_db),
    storage: StorageClient = Depends(get_storage),
    current_user: User = Depends(get_current_user),
):
    member = get_member_for_contractor(db, member_id, current_user)
    upload = await read_upload(file)
    document = await upload_contractual_document(
        db, storage, member, required_document_id, month, upload
    )
    return ContractualDocument.model_validate(document)


@router.post(
    "/{member_id}/extra-documents",
    response_model=ExtraDocument,
    status_code=status.HTTP_201_CREATED,
)
async def upload_extra(
    member_id: str,
    name: str = Form(..., min_length=1, max_length=255),
    month: str | None = Form(None),
    file: UploadFile = File(...),
    db: Session = Depends(get_db),
    storage: StorageClient = Depends(get_storage),
    current_user: User = Depends(get_current_user),
):
    member = get_member_for_contractor(db, member_id, current_user)
    upload = await read_upload(file)
    extra = await upload_extra_document(db, storage, member, name, upload, month=month)
    return ExtraDocument.model_validate(extra)


@router.post("/{member_id}/sign", response_model=Member)
async def sign_member_contract(
    member_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Contractor signature. Only the invited contractor can sign."""
    member = get_member_for_contractor(db, member_id, current_user)
    member = await sign_contract(db, member, current_user)
    return Member.model_validate(member)


@router.post("/{member_id}/countersign", response_model=Member)
async def countersign_member_contract(
    member_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    member = get_member_for_owner(db, member_id, current_user)
    member = await countersign_contract(db, member)
    return Member.model_validate(member)


@router.post("/{member_id}/termination", response_model=Member)
async def request_member_termination(
    member_id: str,
    termination_type: str = Form(..., description="solicitud or comun"),
    file: UploadFile = File(...),
    db: Session = Depends(get_db),
    storage: StorageClient = Depends(get_storage),
    current_user: User = Depends(get_current_user),
):
    member = get_member_for_reader(db, member_id, current_user)
    upload = await read_upload(file)
    member = await request_termination(db, storage, member, termination_type, upload)
    return Member.model_validate(member)


@router.get("/{member_id}/background-check", response_model=BackgroundCheckUrl)
async def get_background_check(
    member_id: str,
    source: str = Query(..., description="juridico or seguridad_social"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """URL of the background-check report behind a badge."""
    member = get_member_for_reader(db, member_id, current_user)
    url = await get_member_background_check_url(member, source)
    return BackgroundCheckUrl(url=url)
