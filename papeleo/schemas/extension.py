from datetime import date, datetime
from pydantic import BaseModel, ConfigDict


class Extension(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    contract_member_id: str
    extension_start_date: date
    extension_end_date: date
    extension_url: str | None = None
    created_at: datetime | None = None


class ExtensionResult(BaseModel):
    extension: Extension
    created_documents: int
    expansion_error: str | None = None
