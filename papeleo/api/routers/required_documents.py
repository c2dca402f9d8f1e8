from typing import Literal

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from papeleo.api.deps import get_db, get_current_user
from papeleo.services.access import get_owned_required_document
from papeleo.services.contract import remove_required_document, suggest_required_document_names
from papeleo.db.models.user import User

router = APIRouter(prefix="/required-documents", tags=["required-documents"])


@router.get("/suggestions", response_model=list[str])
def get_required_document_suggestions(
    search: str | None = Query(None, description="At least two characters of the name"),
    type: Literal["precontractual", "contractual"] | None = Query(None),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Names already used by other requirements, most used first."""
    return suggest_required_document_names(db, search, type=type)


@router.delete("/{required_document_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_required_document_by_id(
    required_document_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    required = get_owned_required_document(db, required_document_id, current_user)
    remove_required_document(db, required)
