import logging
import aiosmtplib
from email.mime.text import MIMEText
from email.mime.multipart import MIMEMultipart
from html import escape

from papeleo.core.config import settings

logger = logging.getLogger(__name__)

# Failures a caller may treat as "email not sent" after its own work succeeded
EMAIL_ERRORS = (ValueError, aiosmtplib.SMTPException, OSError)


def _require_smtp(purpose: str, recipient: str) -> None:
    if not all([
        settings.smtp_host,
        settings.smtp_port,
        settings.smtp_user,
        settings.smtp_password,
        settings.smtp_from_email,
    ]):
        logger.warning(f"SMTP not configured - cannot send {purpose} email to {recipient}")
        raise ValueError("SMTP is not configured. Please configure SMTP settings in .env file.")


def _build_message(to: str, subject: str, text: str, html: str, reply_to: str | None = None) -> MIMEMultipart:
    message = MIMEMultipart("alternative")
    message["Subject"] = subject
    message["From"] = settings.smtp_from_email
    message["To"] = to
    if reply_to:
        message["Reply-To"] = reply_to

    message.attach(MIMEText(text, "plain"))
    message.attach(MIMEText(html, "html"))
    return message


async def _send(message: MIMEMultipart) -> None:
    send_kwargs = {
        "hostname": settings.smtp_host,
        "port": settings.smtp_port,
        "username": settings.smtp_user,
        "password": settings.smtp_password,
    }

    # Handle TLS based on smtp_use_tls configuration
    if settings.smtp_use_tls:
        # Port 587 uses STARTTLS, port 465 uses direct TLS
        if settings.smtp_port == 465:
            send_kwargs["use_tls"] = True
        else:
            send_kwargs["start_tls"] = True

    await aiosmtplib.send(message, **send_kwargs)


def _dashboard_link(path: str) -> str | None:
    if not settings.frontend_url:
        return None
    return f"{settings.frontend_url.rstrip('/')}{path}"


async def send_invitation_email(email: str, contract_name: str, project_name: str) -> None:
    """
    Tell a contractor they were invited to a contract.

    Args:
        email: Contractor's email address
        contract_name: Name of the contract they are invited to
        project_name: Name of the contracting project
    """
    _require_smtp("invitation", email)

    link = _dashboard_link("/contratista")
    text = f"""
Has sido invitado al contrato "{contract_name}" del proyecto "{project_name}".

Ingresa a tu panel de contratista para cargar tus documentos precontractuales.
{link or ""}
    """
    link_html = f'<p><a href="{link}">{link}</a></p>' if link else ""
    html = f"""
<html>
  <body>
    <p>Has sido invitado al contrato <b>{escape(contract_name)}</b> del proyecto <b>{escape(project_name)}</b>.</p>
    <p>Ingresa a tu panel de contratista para cargar tus documentos precontractuales.</p>
    {link_html}
  </body>
</html>
    """

    await _send(_build_message(email, "Invitación a contrato", text, html))


async def send_contract_signed_email(email: str, contractor_email: str, contract_name: str) -> None:
    """Notify the contratante that a contractor signed their contract."""
    _require_smtp("contract signed", email)

    text = f"""
El contratista {contractor_email} firmó el contrato "{contract_name}".

Ya puedes revisar el contrato y completar la firma del contratante.
    """
    html = f"""
<html>
  <body>
    <p>El contratista <b>{escape(contractor_email)}</b> firmó el contrato <b>{escape(contract_name)}</b>.</p>
    <p>Ya puedes revisar el contrato y completar la firma del contratante.</p>
  </body>
</html>
    """

    await _send(_build_message(email, "Contrato firmado", text, html))


async def send_contact_email(
    name: str,
    email: str,
    message: str,
    company: str | None = None,
    phone: str | None = None,
) -> None:
    """Forward a contact-form submission to the sales inbox."""
    if not settings.contact_email:
        raise ValueError("Contact email is not configured. Please configure CONTACT_EMAIL in .env file.")
    _require_smtp("contact", settings.contact_email)

    details = [("Nombre", name), ("Email", email), ("Empresa", company), ("Teléfono", phone)]
    details = [(label, value) for label, value in details if value]
    text = "\n".join(f"{label}: {value}" for label, value in details) + f"\n\n{message}\n"
    rows = "".join(f"<p><b>{label}:</b> {escape(value)}</p>" for label, value in details)
    html = f"""
<html>
  <body>
    {rows}
    <p>{escape(message)}</p>
  </body>
</html>
    """

    await _send(
        _build_message(settings.contact_email, f"Nuevo contacto: {name}", text, html, reply_to=email)
    )
