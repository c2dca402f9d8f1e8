from sqlalchemy import Column, String, DateTime, JSON, func

from papeleo.db.base import Base, new_id


class User(Base):
    """Mirror of the auth provider's users; id equals the token subject."""

    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=new_id)
    email = Column(String(320), unique=True, nullable=False, index=True)
    username = Column(String(255), nullable=True)
    # Contractor details: NOMBRE, TELEFONO, DIRECCIÓN, IDENTIFICACIÓN
    document_id = Column(JSON, nullable=True)
    signature = Column(String, nullable=True)
    created_at = Column(DateTime, nullable=False, server_default=func.now())
