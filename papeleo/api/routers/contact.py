import logging

from fastapi import APIRouter, status

from papeleo.errors import ExternalServiceError
from papeleo.schemas.contact import ContactMessage
from papeleo.services.email import EMAIL_ERRORS, send_contact_email

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/contact", tags=["contact"])


@router.post("", status_code=status.HTTP_202_ACCEPTED)
async def submit_contact_message(message: ContactMessage):
    """Forward a contact-form submission to the sales inbox. No login needed."""
    try:
        await send_contact_email(
            name=message.name,
            email=message.email,
            message=message.message,
            company=message.company,
            phone=message.phone,
        )
    except EMAIL_ERRORS as e:
        logger.error("Contact message from %s could not be sent: %s", message.email, e)
        raise ExternalServiceError("Could not send the message. Please try again later.")
    return {"detail": "Message sent"}
