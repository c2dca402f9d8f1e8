"""Google Docs helpers: edit links and stamping signatures into generated drafts."""

import logging
import re

import httpx

from papeleo.core.config import settings
from papeleo.errors import DomainValidationError, ExternalServiceError

logger = logging.getLogger(__name__)

_DOCUMENT_ID = re.compile(r"docs\.google\.com/document/d/([\w-]+)")


def drive_edit_url(document_id: str) -> str:
    return f"https://docs.google.com/document/d/{document_id}/edit"


def extract_document_id(url: str | None) -> str | None:
    """Document id of a Google Docs link, or None for any other URL."""
    if not url:
        return None
    match = _DOCUMENT_ID.search(url)
    return match.group(1) if match else None


def build_signature_requests(end_index: int, image_url: str, caption: str) -> list[dict]:
    """batchUpdate requests placing the image, then its caption, at the end of the body."""
    index = max(end_index - 1, 1)
    return [
        {
            "insertInlineImage": {
                "location": {"index": index},
                "uri": image_url,
                "objectSize": {
                    "height": {"magnitude": 50, "unit": "PT"},
                    "width": {"magnitude": 150, "unit": "PT"},
                },
            }
        },
        {
            "insertText": {
                "location": {"index": index + 1},
                "text": f"\n{caption}\n",
            }
        },
    ]


async def stamp_signature(document_id: str, image_url: str, caption: str) -> None:
    """Append a signature image and caption to the end of a Google Docs document."""
    if not settings.docs_api_token:
        raise DomainValidationError(
            "Docs API is not configured. Please configure DOCS_API_TOKEN in .env file."
        )

    base = f"{settings.docs_api_url.rstrip('/')}/documents/{document_id}"
    headers = {"Authorization": f"Bearer {settings.docs_api_token}"}

    try:
        async with httpx.AsyncClient() as client:
            response = await client.get(base, headers=headers, timeout=30.0)
            response.raise_for_status()
            content = response.json().get("body", {}).get("content") or []
            end_index = content[-1].get("endIndex", 1) if content else 1

            response = await client.post(
                f"{base}:batchUpdate",
                json={"requests": build_signature_requests(end_index, image_url, caption)},
                headers=headers,
                timeout=30.0,
            )
            response.raise_for_status()
    except httpx.HTTPStatusError as e:
        logger.error("Docs API call for %s failed with status %s", document_id, e.response.status_code)
        raise ExternalServiceError(f"Docs API request failed with status {e.response.status_code}")
    except httpx.RequestError as e:
        logger.error("Docs API call for %s failed: %s", document_id, e)
        raise ExternalServiceError(f"Docs API request failed: {str(e)}")
