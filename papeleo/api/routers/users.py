from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from papeleo.api.deps import get_db, get_current_user
from papeleo.services.invitation import search_users
from papeleo.schemas.user import User as UserSchema
from papeleo.db.models.user import User

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/search", response_model=list[UserSchema])
def search_users_by_email(
    email: str | None = Query(None, description="Part of the email to look for"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return [UserSchema.model_validate(user) for user in search_users(db, email)]
