from datetime import date, datetime
from typing import Literal
from pydantic import BaseModel, ConfigDict, Field, model_validator

from papeleo.schemas.user import User


class Ending(BaseModel):
    url: str | None = None
    status: Literal["solicitud", "comun"] | None = None


class Member(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    contract_id: str
    status: str
    value: str | None = None
    start_date: date | None = None
    end_date: date | None = None
    signed: bool
    contratante_signed: bool
    ending: Ending | None = None
    invited_at: datetime | None = None
    accepted_at: datetime | None = None


class Invitation(Member):
    user: User | None = None


class InvitationCreate(BaseModel):
    user_id: str
    value: str | None = Field(None, max_length=64)
    start_date: date
    end_date: date

    @model_validator(mode="after")
    def validate_end_date_after_start_date(self):
        """Ensure end_date doesn't precede start_date."""
        if self.end_date < self.start_date:
            raise ValueError(f"end_date ({self.end_date}) cannot precede start_date ({self.start_date})")
        return self


class MyContract(Member):
    contract_name: str
    contract_draft_url: str | None = None
    project_id: str


class MemberContract(BaseModel):
    """A member's own copy of the contract sections."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    signed: bool
    contratante_signed: bool
    contract: dict | None = None


class BackgroundCheckBadge(BaseModel):
    status: Literal["pending", "approved", "rejected"]
    novedades: list[str] = Field(default_factory=list)
    code: str | None = None


class MemberStatus(BaseModel):
    member_id: str
    precontractual_complete: bool
    signed: bool
    contratante_signed: bool
    contractual_complete: bool
    signature_unlocked: bool
    contractual_unlocked: bool
    document_state: Literal["termination", "complete", "signed", "pending"]
    termination_requested: bool
    status_juridico: BackgroundCheckBadge
    status_seguridad_social: BackgroundCheckBadge


class BackgroundCheckUrl(BaseModel):
    url: str
