from pydantic import BaseModel, EmailStr, Field


class ContactMessage(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    company: str | None = Field(None, max_length=255)
    phone: str | None = Field(None, max_length=64)
    message: str = Field(..., min_length=1, max_length=5000)
