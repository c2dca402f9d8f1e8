from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from papeleo.api.deps import get_db, get_current_user, get_storage
import papeleo.repositories.document as document_repo
from papeleo.errors import NotFoundError
from papeleo.services.access import get_member_for_contractor
from papeleo.services.documents import delete_extra_document, resolve_signed_url
from papeleo.services.storage import StorageClient
from papeleo.schemas.document import SignedUrlRequest, SignedUrlResponse
from papeleo.db.models.user import User

router = APIRouter(tags=["documents"])


@router.post("/documents/signed-url", response_model=SignedUrlResponse)
async def create_document_signed_url(
    request: SignedUrlRequest,
    storage: StorageClient = Depends(get_storage),
    current_user: User = Depends(get_current_user),
):
    """
    Short-lived URL to open or preview a stored document.

    Generated (docgen) documents are returned as they are.
    """
    signed_url = await resolve_signed_url(storage, request.url, preview=request.preview)
    return SignedUrlResponse(signed_url=signed_url)


@router.delete("/extra-documents/{extra_document_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_extra_document_by_id(
    extra_document_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    extra = document_repo.get_extra_document_by_id(db, extra_document_id)
    if not extra:
        raise NotFoundError("Extra document not found")
    get_member_for_contractor(db, extra.contract_member_id, current_user)
    delete_extra_document(db, extra)
