from fastapi import APIRouter, Depends, File, UploadFile
from sqlalchemy.orm import Session

from papeleo.api.deps import get_db, get_current_user, get_storage, read_upload
from papeleo.services.profile import (
    get_document_data,
    list_my_contracts,
    update_document_data,
    upload_user_signature,
)
from papeleo.services.storage import StorageClient
from papeleo.schemas.member import MyContract
from papeleo.schemas.user import DocumentData, DocumentDataResponse, User as UserSchema
from papeleo.db.models.user import User

router = APIRouter(prefix="/me", tags=["me"])


@router.get("/contracts", response_model=list[MyContract])
def get_my_contracts(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Contracts the current user was invited to."""
    return list_my_contracts(db, current_user)


@router.get("/document-data", response_model=DocumentDataResponse)
def get_my_document_data(current_user: User = Depends(get_current_user)):
    data = get_document_data(current_user)
    return DocumentDataResponse(data=data, complete=data.is_complete)


@router.put("/document-data", response_model=DocumentDataResponse)
def update_my_document_data(
    document_data: DocumentData,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Merge the given contractor details into the stored ones."""
    data = update_document_data(db, current_user, document_data)
    return DocumentDataResponse(data=data, complete=data.is_complete)


@router.put("/signature", response_model=UserSchema)
async def upload_my_signature(
    file: UploadFile = File(...),
    db: Session = Depends(get_db),
    storage: StorageClient = Depends(get_storage),
    current_user: User = Depends(get_current_user),
):
    upload = await read_upload(file)
    user = await upload_user_signature(db, storage, current_user, upload)
    return UserSchema.model_validate(user)
