import logging

import httpx

from papeleo.core.config import settings
from papeleo.errors import ExternalServiceError

logger = logging.getLogger(__name__)


async def verify_document(
    content: bytes, file_name: str, content_type: str | None, document_name: str
) -> bool:
    """
    Check that an uploaded file really is the document it claims to be.

    Returns the endpoint's ``isValid`` verdict. When no verification endpoint
    is configured every document is accepted.
    """
    if not settings.document_verification_url:
        logger.warning("Document verification is not configured; accepting %s", document_name)
        return True

    files = {"file": (file_name, content, content_type or "application/octet-stream")}
    try:
        async with httpx.AsyncClient() as client:
            response = await client.post(
                settings.document_verification_url,
                files=files,
                data={"documentName": document_name},
                timeout=60.0,
            )
            response.raise_for_status()
            data = response.json()
    except httpx.HTTPStatusError as e:
        logger.error("Document verification failed with status %s", e.response.status_code)
        raise ExternalServiceError(
            f"Document verification failed with status {e.response.status_code}"
        )
    except httpx.RequestError as e:
        logger.error("Document verification failed: %s", e)
        raise ExternalServiceError(f"Document verification failed: {str(e)}")

    if not isinstance(data, dict) or not data.get("success", True):
        raise ExternalServiceError("Document verification returned an invalid response")
    return bool(data.get("isValid"))
