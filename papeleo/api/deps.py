from fastapi import Depends, UploadFile
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from papeleo.db import SessionLocal
from papeleo.db.models.user import User
from papeleo.core.security import decode_token
from papeleo.errors import UnauthorizedError
from papeleo.services.storage import StorageClient, get_storage_client
from papeleo.services.uploads import UploadedFile

bearer_scheme = HTTPBearer(auto_error=False)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_storage() -> StorageClient:
    return get_storage_client()


def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> User:
    """Get the current authenticated user from the auth provider's JWT."""
    if credentials is None:
        raise UnauthorizedError("Not authenticated")

    payload = decode_token(credentials.credentials)
    if payload is None:
        raise UnauthorizedError("Could not validate credentials")

    user_id: str | None = payload.get("sub")
    if user_id is None:
        raise UnauthorizedError("Could not validate credentials")

    user = db.query(User).filter(User.id == user_id).first()
    if user is None:
        raise UnauthorizedError("User not found")

    return user


async def read_upload(file: UploadFile) -> UploadedFile:
    """Read a multipart file into memory for the services."""
    content = await file.read()
    return UploadedFile(
        file_name=file.filename or "",
        content=content,
        content_type=file.content_type,
    )
