from datetime import date, datetime
from pydantic import BaseModel, ConfigDict, Field

from papeleo.schemas.member import BackgroundCheckBadge


class ContractualDocument(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    contract_member_id: str
    required_document_id: str
    name: str | None = None
    url: str | None = None
    month: str | None = None
    updated_at: datetime | None = None


class ExtraDocument(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    contract_member_id: str
    name: str
    url: str | None = None
    month: str | None = None
    created_at: datetime | None = None


class MonthDocuments(BaseModel):
    month: str | None
    documents: list[ContractualDocument]
    extra_documents: list[ExtraDocument]


class PrecontractualItem(BaseModel):
    required_document_id: str
    name: str
    due_date: date | None = None
    document: ContractualDocument | None = None


class PrecontractualDocuments(BaseModel):
    items: list[PrecontractualItem]
    complete: bool


class SignedUrlRequest(BaseModel):
    url: str = Field(..., min_length=1)
    preview: bool = False


class SignedUrlResponse(BaseModel):
    signed_url: str


class ProjectDocumentRow(BaseModel):
    """One member of a project on the documents overview."""

    member_id: str
    user_email: str
    contract_id: str
    contract_name: str
    document_state: str
    signed: bool
    status_juridico: BackgroundCheckBadge
    status_seguridad_social: BackgroundCheckBadge
