from sqlalchemy import Column, Date, DateTime, ForeignKey, JSON, String, func
from sqlalchemy.orm import relationship

from papeleo.db.base import Base, new_id


class Contract(Base):
    __tablename__ = "contracts"

    id = Column(String(36), primary_key=True, default=new_id)
    name = Column(String(255), nullable=False)
    project_id = Column(String(36), ForeignKey("contractual_projects.id"), nullable=False, index=True)
    # Uploaded file URL, docgen document link or Google Docs edit link
    contract_draft_url = Column(String, nullable=True)
    status = Column(String(32), nullable=False, default="draft")
    created_at = Column(DateTime, nullable=False, server_default=func.now())
    updated_at = Column(DateTime, nullable=False, server_default=func.now(), onupdate=func.now())
    deleted_at = Column(DateTime, nullable=True)

    project = relationship("ContractualProject", backref="contracts")


class RequiredDocument(Base):
    __tablename__ = "required_documents"

    id = Column(String(36), primary_key=True, default=new_id)
    contract_id = Column(String(36), ForeignKey("contracts.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    type = Column(String(32), nullable=False)  # precontractual | contractual
    due_date = Column(Date, nullable=True)
    template_id = Column(String(36), nullable=True)
    created_at = Column(DateTime, nullable=False, server_default=func.now())
    deleted_at = Column(DateTime, nullable=True)

    contract = relationship("Contract", backref="required_documents")


class GeneratedDocument(Base):
    """Document produced by the docgen editor; sections map name -> {content, type}."""

    __tablename__ = "documents"

    id = Column(String(36), primary_key=True, default=new_id)
    template_id = Column(String(36), nullable=True)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=True)
    title = Column(String(255), nullable=False)
    sections = Column(JSON, nullable=False)
    created_at = Column(DateTime, nullable=False, server_default=func.now())
