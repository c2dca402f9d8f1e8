from dataclasses import dataclass
from pathlib import PurePosixPath

from papeleo.core.config import settings
from papeleo.domain.paths import sanitize_file_name
from papeleo.errors import DomainValidationError

PRECONTRACTUAL_EXTENSIONS = (".pdf", ".doc", ".docx")


@dataclass(frozen=True, slots=True)
class UploadedFile:
    """A file received from a form, fully read into memory."""

    file_name: str
    content: bytes
    content_type: str | None = None

    @property
    def size(self) -> int:
        return len(self.content)

    @property
    def extension(self) -> str:
        return PurePosixPath(self.file_name.lower()).suffix


def validate_upload(
    upload: UploadedFile,
    image_only: bool = False,
    allowed_extensions: tuple[str, ...] | None = None,
) -> None:
    """
    Reject empty, oversized or wrongly typed files.

    ``image_only`` requires an image content type; ``allowed_extensions``
    restricts the file name's extension. Runs before any outbound call so a
    rejected file leaves no partial state.
    """
    if not upload.file_name or upload.size == 0:
        raise DomainValidationError("File is required")

    if not sanitize_file_name(PurePosixPath(upload.file_name).stem):
        raise DomainValidationError("File name must contain letters or numbers")

    if upload.size > settings.max_upload_size_bytes:
        raise DomainValidationError(
            f"File exceeds the maximum size of {settings.max_upload_size_mb} MB"
        )

    if image_only and not (upload.content_type or "").startswith("image/"):
        raise DomainValidationError("Signature must be an image file")

    if allowed_extensions is not None and upload.extension not in allowed_extensions:
        raise DomainValidationError(
            f"File type not allowed; use one of: {', '.join(allowed_extensions)}"
        )
