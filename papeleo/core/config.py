from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    database_url: str = Field(alias="DATABASE_URL")

    # Tokens issued by the hosted auth provider
    auth_jwt_secret: str = Field(alias="AUTH_JWT_SECRET")
    auth_jwt_algorithm: str = Field(default="HS256", alias="AUTH_JWT_ALGORITHM")
    auth_jwt_audience: str = Field(default="authenticated", alias="AUTH_JWT_AUDIENCE")

    # Object storage
    storage_url: str | None = Field(default=None, alias="STORAGE_URL")
    storage_service_key: str | None = Field(default=None, alias="STORAGE_SERVICE_KEY")
    storage_bucket: str = Field(default="contractual", alias="STORAGE_BUCKET")
    storage_public_bucket: str = Field(default="public", alias="STORAGE_PUBLIC_BUCKET")
    signed_url_expiry_seconds: int = Field(default=3600, alias="SIGNED_URL_EXPIRY_SECONDS")
    preview_signed_url_expiry_seconds: int = Field(
        default=60, alias="PREVIEW_SIGNED_URL_EXPIRY_SECONDS"
    )
    max_upload_size_mb: int = Field(default=10, alias="MAX_UPLOAD_SIZE_MB")

    # Outbound services
    background_check_url: str = Field(default="https://api.auco.ai", alias="BACKGROUND_CHECK_URL")
    background_check_api_key: str | None = Field(default=None, alias="BACKGROUND_CHECK_API_KEY")
    ai_generation_url: str | None = Field(default=None, alias="AI_GENERATION_URL")
    document_verification_url: str | None = Field(default=None, alias="DOCUMENT_VERIFICATION_URL")
    docs_api_url: str = Field(default="https://docs.googleapis.com/v1", alias="DOCS_API_URL")
    docs_api_token: str | None = Field(default=None, alias="DOCS_API_TOKEN")
    docgen_base_url: str = Field(default="https://papeleo.co/docgen", alias="DOCGEN_BASE_URL")

    # SMTP Configuration (optional)
    smtp_host: str | None = Field(default=None, alias="SMTP_HOST")
    smtp_port: int | None = Field(default=None, alias="SMTP_PORT")
    smtp_user: str | None = Field(default=None, alias="SMTP_USER")
    smtp_password: str | None = Field(default=None, alias="SMTP_PASSWORD")
    smtp_use_tls: bool = Field(default=True, alias="SMTP_USE_TLS")
    smtp_from_email: str | None = Field(default=None, alias="SMTP_FROM_EMAIL")
    contact_email: str | None = Field(default=None, alias="CONTACT_EMAIL")

    # Frontend URL for CORS and links in emails
    frontend_url: str | None = Field(default=None, alias="FRONTEND_URL")

    status_cache_ttl_seconds: int = Field(default=300, alias="STATUS_CACHE_TTL_SECONDS")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    @field_validator(
        "storage_url",
        "storage_service_key",
        "background_check_api_key",
        "ai_generation_url",
        "document_verification_url",
        "docs_api_token",
        "smtp_host",
        "smtp_user",
        "smtp_password",
        "smtp_from_email",
        "contact_email",
        "frontend_url",
        mode="before",
    )
    @classmethod
    def empty_str_to_none(cls, v: str | None) -> str | None:
        """Convert empty strings to None for optional string fields."""
        if v == "":
            return None
        return v

    @field_validator("smtp_port", mode="before")
    @classmethod
    def empty_str_to_none_int(cls, v: str | int | None) -> int | None:
        """Convert empty strings to None for optional integer fields."""
        if v == "":
            return None
        if isinstance(v, str):
            try:
                return int(v)
            except ValueError:
                return None
        return v

    @property
    def max_upload_size_bytes(self) -> int:
        return self.max_upload_size_mb * 1024 * 1024

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


settings = Settings()
