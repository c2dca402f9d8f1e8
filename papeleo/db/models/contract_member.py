from sqlalchemy import Boolean, Column, Date, DateTime, ForeignKey, JSON, String, func
from sqlalchemy.orm import relationship

from papeleo.db.base import Base, new_id


class ContractMember(Base):
    """Invitation/assignment of one user to one contract."""

    __tablename__ = "contract_members"

    id = Column(String(36), primary_key=True, default=new_id)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    contract_id = Column(String(36), ForeignKey("contracts.id"), nullable=False, index=True)
    status = Column(String(32), nullable=False, default="pending")  # pending | accepted
    value = Column(String(64), nullable=True)
    start_date = Column(Date, nullable=True)
    end_date = Column(Date, nullable=True)
    signed = Column(Boolean, nullable=False, default=False)
    contratante_signed = Column(Boolean, nullable=False, default=False)
    # {url, status: solicitud | comun}
    ending = Column(JSON, nullable=True)
    # {status: bool, novedades: [str], code}; status true means a flag was raised
    status_juridico = Column(JSON, nullable=True)
    status_seguridad_social = Column(JSON, nullable=True)
    # Per-member copy of the docgen sections after substitution
    contract = Column(JSON, nullable=True)
    invited_at = Column(DateTime, nullable=True)
    accepted_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, nullable=False, server_default=func.now())

    user = relationship("User")
    contract_ref = relationship("Contract", backref="members")


class ContractualDocument(Base):
    """Uploaded (or pending, url NULL) document for a member x requirement (x month)."""

    __tablename__ = "contractual_documents"

    id = Column(String(36), primary_key=True, default=new_id)
    contract_member_id = Column(String(36), ForeignKey("contract_members.id"), nullable=False, index=True)
    required_document_id = Column(String(36), ForeignKey("required_documents.id"), nullable=False)
    url = Column(String, nullable=True)
    month = Column(String(32), nullable=True)  # NULL for precontractual documents
    created_at = Column(DateTime, nullable=False, server_default=func.now())
    updated_at = Column(DateTime, nullable=False, server_default=func.now(), onupdate=func.now())
    deleted_at = Column(DateTime, nullable=True)

    required_document = relationship("RequiredDocument")

    @property
    def name(self) -> str | None:
        return self.required_document.name if self.required_document else None


class ContractualExtraDocument(Base):
    __tablename__ = "contractual_extra_documents"

    id = Column(String(36), primary_key=True, default=new_id)
    contract_member_id = Column(String(36), ForeignKey("contract_members.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    url = Column(String, nullable=True)
    month = Column(String(32), nullable=True)
    created_at = Column(DateTime, nullable=False, server_default=func.now())
    updated_at = Column(DateTime, nullable=False, server_default=func.now(), onupdate=func.now())
    deleted_at = Column(DateTime, nullable=True)


class ContractExtension(Base):
    __tablename__ = "contract_members_extension"

    id = Column(String(36), primary_key=True, default=new_id)
    contract_member_id = Column(String(36), ForeignKey("contract_members.id"), nullable=False, index=True)
    extension_start_date = Column(Date, nullable=False)
    extension_end_date = Column(Date, nullable=False)
    extension_url = Column(String, nullable=True)
    created_at = Column(DateTime, nullable=False, server_default=func.now())
