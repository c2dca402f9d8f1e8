from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from papeleo.api.deps import get_db, get_current_user
from papeleo.services.access import get_member_for_owner
from papeleo.services.invitation import delete_invitation
from papeleo.db.models.user import User

router = APIRouter(prefix="/invitations", tags=["invitations"])


@router.delete("/{member_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_invitation_by_id(
    member_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    member = get_member_for_owner(db, member_id, current_user)
    delete_invitation(db, member)
