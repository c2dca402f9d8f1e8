from sqlalchemy.orm import Session

from papeleo.db.models.user import User as UserModel
from papeleo.errors import NotFoundError


def get_user_by_id(db: Session, user_id: str) -> UserModel | None:
    """Get a user by ID."""
    return db.query(UserModel).filter(UserModel.id == user_id).first()


def search_users_by_email(db: Session, term: str, limit: int = 10) -> list[UserModel]:
    """Users whose email contains ``term`` (case-insensitive)."""
    return (
        db.query(UserModel)
        .filter(UserModel.email.ilike(f"%{term}%"))
        .order_by(UserModel.email)
        .limit(limit)
        .all()
    )


def update_user(db: Session, user_id: str, **kwargs) -> UserModel:
    """Update a user. Only updates fields that are explicitly provided."""
    user = get_user_by_id(db, user_id)
    if not user:
        raise NotFoundError("User not found")

    if "document_id" in kwargs:
        user.document_id = kwargs["document_id"]
    if "signature" in kwargs:
        user.signature = kwargs["signature"]
    if "username" in kwargs:
        user.username = kwargs["username"]

    db.commit()
    db.refresh(user)
    return user
