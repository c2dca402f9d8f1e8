import logging

import httpx

from papeleo.core.config import settings
from papeleo.errors import DomainValidationError, ExternalServiceError, NotFoundError

logger = logging.getLogger(__name__)


async def fetch_background_check_url(code: str) -> str:
    """
    Resolve a background-check code to the URL of its report document.

    Raises:
        DomainValidationError: If the background-check API key is not configured
        ExternalServiceError: If the provider answers non-2xx or without a URL
    """
    if not settings.background_check_api_key:
        raise DomainValidationError(
            "Background check API key is not configured. Please configure BACKGROUND_CHECK_API_KEY in .env file."
        )

    url = f"{settings.background_check_url.rstrip('/')}/v1.5/ext/validate/background"
    headers = {"Authorization": settings.background_check_api_key}

    try:
        async with httpx.AsyncClient() as client:
            response = await client.get(
                url, params={"code": code}, headers=headers, timeout=30.0
            )
            response.raise_for_status()
            data = response.json()
    except httpx.HTTPStatusError as e:
        logger.error("Background check lookup for %s failed with status %s", code, e.response.status_code)
        raise ExternalServiceError(
            f"Background check request failed with status {e.response.status_code}"
        )
    except httpx.RequestError as e:
        logger.error("Background check lookup for %s failed: %s", code, e)
        raise ExternalServiceError(f"Background check request failed: {str(e)}")

    document_url = data.get("url") if isinstance(data, dict) else None
    if not document_url:
        raise ExternalServiceError("Invalid response from background check: missing 'url' field")
    return document_url


BACKGROUND_CHECK_SOURCES = {
    "juridico": "status_juridico",
    "seguridad_social": "status_seguridad_social",
}


async def get_member_background_check_url(member, source: str) -> str:
    """Report URL of a member's judicial or social-security check."""
    field_name = BACKGROUND_CHECK_SOURCES.get(source)
    if field_name is None:
        raise DomainValidationError(
            f"Invalid source '{source}'. Allowed: {', '.join(BACKGROUND_CHECK_SOURCES)}"
        )

    record = getattr(member, field_name) or {}
    code = record.get("code")
    if not code:
        raise NotFoundError("No background check available for this member")
    return await fetch_background_check_url(str(code))
