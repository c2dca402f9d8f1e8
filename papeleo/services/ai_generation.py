import logging

import httpx

from papeleo.core.config import settings
from papeleo.errors import DomainValidationError, ExternalServiceError
from papeleo.services.google_docs import drive_edit_url

logger = logging.getLogger(__name__)


async def generate_contract_draft(contractual_object: str, contract_name: str) -> str:
    """
    Ask the AI generation endpoint for a contract draft and return its edit URL.

    Raises:
        DomainValidationError: If the generation endpoint is not configured
        ExternalServiceError: If the endpoint fails or returns no documentId
    """
    if not settings.ai_generation_url:
        raise DomainValidationError(
            "AI generation is not configured. Please configure AI_GENERATION_URL in .env file."
        )

    request_body = {
        "objetoParafraseado": contractual_object,
        "nombreContrato": contract_name,
    }

    try:
        async with httpx.AsyncClient() as client:
            response = await client.post(
                settings.ai_generation_url, json=request_body, timeout=120.0
            )
            response.raise_for_status()
            data = response.json()
    except httpx.HTTPStatusError as e:
        logger.error("Contract generation failed with status %s", e.response.status_code)
        raise ExternalServiceError(
            f"Contract generation failed with status {e.response.status_code}"
        )
    except httpx.RequestError as e:
        logger.error("Contract generation failed: %s", e)
        raise ExternalServiceError(f"Contract generation failed: {str(e)}")

    if not isinstance(data, dict) or not data.get("success") or not data.get("documentId"):
        raise ExternalServiceError("Contract generation returned no document")
    return drive_edit_url(data["documentId"])
