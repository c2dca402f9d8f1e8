from datetime import date, datetime
from typing import Literal
from pydantic import BaseModel, ConfigDict, Field

DocumentType = Literal["precontractual", "contractual"]


class Contract(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    project_id: str
    contract_draft_url: str | None = None
    status: str
    created_at: datetime | None = None
    updated_at: datetime | None = None


class ContractUpdate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)


class RequiredDocument(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    contract_id: str
    name: str
    type: DocumentType
    due_date: date | None = None
    template_id: str | None = None


class RequiredDocumentCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    type: DocumentType
    due_date: date | None = None
    template_id: str | None = None


class ContractGenerate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    contractual_object: str = Field(..., min_length=1, description="Free-text contractual object")
    required_documents: list[RequiredDocumentCreate] = Field(default_factory=list)


class BatchFailure(BaseModel):
    item: str
    error: str


class ContractGenerateResult(BaseModel):
    contract: Contract
    required_documents: list[RequiredDocument]
    failed_required_documents: list[BatchFailure]
