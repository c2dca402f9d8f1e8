from datetime import date

from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from sqlalchemy.orm import Session

from papeleo.api.deps import get_db, get_current_user, get_storage, read_upload
from papeleo.services.access import get_member_for_owner, get_member_for_reader
from papeleo.services.extension import create_extension, list_extensions
from papeleo.services.storage import StorageClient
from papeleo.schemas.extension import Extension, ExtensionResult
from papeleo.db.models.user import User

router = APIRouter(prefix="/members", tags=["extensions"])


@router.get("/{member_id}/extensions", response_model=list[Extension])
def get_member_extensions(
    member_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Extensions of a member's contract, newest first."""
    member = get_member_for_reader(db, member_id, current_user)
    return [Extension.model_validate(extension) for extension in list_extensions(db, member)]


@router.post(
    "/{member_id}/extensions",
    response_model=ExtensionResult,
    status_code=status.HTTP_201_CREATED,
)
async def create_member_extension(
    member_id: str,
    start_date: date = Form(...),
    end_date: date = Form(...),
    file: UploadFile = File(...),
    db: Session = Depends(get_db),
    storage: StorageClient = Depends(get_storage),
    current_user: User = Depends(get_current_user),
):
    """
    Extend a member's contract.

    The contractual documents for the new months are created right after the
    extension. If that step fails the extension is still returned, with the
    reason in ``expansion_error``.
    """
    member = get_member_for_owner(db, member_id, current_user)
    upload = await read_upload(file)
    extension, created, error = await create_extension(
        db, storage, member, start_date, end_date, upload
    )
    return ExtensionResult(
        extension=Extension.model_validate(extension),
        created_documents=created,
        expansion_error=error,
    )
