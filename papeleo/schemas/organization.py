from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field


class Organization(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    user_id: str
    created_at: datetime | None = None


class Project(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    organization_id: str
    contratante_data: dict[str, str] | None = None
    signature: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class ProjectCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)


class ProjectUpdate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)


class ContratanteData(BaseModel):
    """Free-form key/value data about the contracting party (NIT, legal representative...)."""

    data: dict[str, str] = Field(default_factory=dict)
