from unittest.mock import AsyncMock, patch

import aiosmtplib
from sqlalchemy.orm import Session

import papeleo.repositories.contract as contract_repo
import papeleo.repositories.document as document_repo
import papeleo.repositories.member as member_repo
import papeleo.repositories.organization as organization_repo
from papeleo.core.config import settings
from papeleo.db.models.contract import GeneratedDocument
from papeleo.domain.placeholders import SIGNATURE_MARKER, SIGNATURES_SECTION

PROJECT_SIGNATURE = "https://storage.test/storage/v1/object/public/public/signatures/p/firma.png"


def _invite(client, contract, user, token, **overrides):
    payload = {
        "user_id": user.id,
        "value": "5.000.000",
        "start_date": "2024-01-15",
        "end_date": "2024-03-10",
        **overrides,
    }
    return client.post(
        f"/api/v1/contracts/{contract.id}/invitations",
        json=payload,
        headers={"Authorization": f"Bearer {token}"},
    )


def _docgen_contract(db: Session, contract, **extra_sections):
    document = GeneratedDocument(
        title="Contrato de prestación de servicios",
        sections={
            **extra_sections,
            "1. OBJETO": {"content": "Por valor de ${value} hasta ${endDate}.", "type": "text"},
            "3. NOTIFICACIONES": {"content": "Correo: ${userEmail}", "type": "text"},
            SIGNATURES_SECTION: {
                "content": f"<p>Contratista</p>{SIGNATURE_MARKER}<p>Contratante</p>{SIGNATURE_MARKER}",
                "type": "text",
            },
        },
    )
    db.add(document)
    db.commit()
    db.refresh(document)
    return contract_repo.update_contract(
        db, contract_id=contract.id, contract_draft_url=f"{settings.docgen_base_url}/{document.id}"
    )


# ============================================================================
# USER SEARCH
# ============================================================================


def test_search_users_by_email(client, owner_user, contractor_user, stranger_user, owner_token: str):
    response = client.get(
        "/api/v1/users/search",
        params={"email": "CONTRACTOR"},
        headers={"Authorization": f"Bearer {owner_token}"},
    )
    assert response.status_code == 200
    assert [user["email"] for user in response.json()] == ["contractor@example.com"]


def test_search_users_blank_term(client, contractor_user, owner_token: str):
    response = client.get(
        "/api/v1/users/search",
        params={"email": " "},
        headers={"Authorization": f"Bearer {owner_token}"},
    )
    assert response.status_code == 200
    assert response.json() == []


# ============================================================================
# CREATE INVITATION
# ============================================================================


def test_invite_contractor(client, db: Session, contract, contractual_requirement, contractor_user, owner_token: str):
    """Invitation creates a pending member and one placeholder per contract month."""
    with patch(
        "papeleo.services.invitation.send_invitation_email_service", new=AsyncMock()
    ) as send_email:
        response = _invite(client, contract, contractor_user, owner_token)

    assert response.status_code == 201
    data = response.json()
    assert data["status"] == "pending"
    assert data["signed"] is False
    assert data["user"]["email"] == "contractor@example.com"
    send_email.assert_awaited_once_with(
        email="contractor@example.com", contract_name="Interventoría", project_name="Obra Norte"
    )

    documents = document_repo.get_documents_by_member_id(db, data["id"], type="contractual")
    assert sorted(document.month for document in documents) == sorted(
        ["enero 2024", "febrero 2024", "marzo 2024"]
    )
    assert all(document.url is None for document in documents)


def test_invite_fills_docgen_contract(client, db: Session, project, contract, contractor_user, owner_token: str):
    organization_repo.update_project(db, project_id=project.id, signature=PROJECT_SIGNATURE)
    _docgen_contract(db, contract)

    with patch("papeleo.services.invitation.send_invitation_email_service", new=AsyncMock()):
        response = _invite(client, contract, contractor_user, owner_token, end_date="2024-12-31")
    assert response.status_code == 201

    member = member_repo.get_member_by_id(db, response.json()["id"])
    assert member.contract["1. OBJETO"]["content"] == "Por valor de 5.000.000 hasta 31/12/2024."
    assert member.contract["3. NOTIFICACIONES"]["content"] == "Correo: contractor@example.com"
    signatures = member.contract[SIGNATURES_SECTION]["content"]
    assert signatures.startswith(f"<p>Contratista</p>{SIGNATURE_MARKER}")
    assert PROJECT_SIGNATURE in signatures


def test_invite_warns_about_unresolved_placeholders(
    client, db: Session, contract, contractor_user, owner_token: str, caplog
):
    _docgen_contract(db, contract, anexo={"content": "Plazo: ${plazo}", "type": "text"})

    with caplog.at_level("WARNING", logger="papeleo.services.invitation"):
        with patch("papeleo.services.invitation.send_invitation_email_service", new=AsyncMock()):
            response = _invite(client, contract, contractor_user, owner_token)

    assert response.status_code == 201
    member = member_repo.get_member_by_id(db, response.json()["id"])
    assert member.contract["anexo"]["content"] == "Plazo: ${plazo}"
    assert "unresolved placeholders" in caplog.text


def test_invite_succeeds_when_email_fails(client, contract, contractor_user, owner_token: str):
    with patch(
        "papeleo.services.invitation.send_invitation_email_service",
        new=AsyncMock(side_effect=aiosmtplib.SMTPException("connection refused")),
    ):
        response = _invite(client, contract, contractor_user, owner_token)
    assert response.status_code == 201


def test_invite_without_smtp_configured_still_succeeds(client, contract, contractor_user, owner_token: str):
    response = _invite(client, contract, contractor_user, owner_token)
    assert response.status_code == 201


def test_invite_end_before_start_fails(client, contract, contractor_user, owner_token: str):
    response = _invite(client, contract, contractor_user, owner_token, start_date="2024-05-01", end_date="2024-04-30")
    assert response.status_code == 422


def test_invite_same_user_twice_is_conflict(client, contract, contractor_user, owner_token: str):
    assert _invite(client, contract, contractor_user, owner_token).status_code == 201
    response = _invite(client, contract, contractor_user, owner_token)
    assert response.status_code == 409


def test_invite_unknown_user(client, contract, owner_token: str):
    response = client.post(
        f"/api/v1/contracts/{contract.id}/invitations",
        json={"user_id": "missing", "start_date": "2024-01-01", "end_date": "2024-02-01"},
        headers={"Authorization": f"Bearer {owner_token}"},
    )
    assert response.status_code == 404


def test_invite_as_stranger_fails(client, contract, contractor_user, stranger_token: str):
    response = _invite(client, contract, contractor_user, stranger_token)
    assert response.status_code == 403


# ============================================================================
# LIST / DELETE
# ============================================================================


def test_list_project_invitations(client, project, member, owner_token: str):
    response = client.get(
        f"/api/v1/projects/{project.id}/invitations",
        headers={"Authorization": f"Bearer {owner_token}"},
    )
    assert response.status_code == 200
    data = response.json()
    assert [item["id"] for item in data] == [member.id]
    assert data[0]["user"]["email"] == "contractor@example.com"


def test_delete_invitation(client, db: Session, project, member, owner_token: str):
    response = client.delete(
        f"/api/v1/invitations/{member.id}",
        headers={"Authorization": f"Bearer {owner_token}"},
    )
    assert response.status_code == 204
    assert member_repo.get_member_by_id(db, member.id) is None


def test_delete_signed_invitation_fails(client, db: Session, member, owner_token: str):
    member_repo.update_member(db, member_id=member.id, signed=True)
    response = client.delete(
        f"/api/v1/invitations/{member.id}",
        headers={"Authorization": f"Bearer {owner_token}"},
    )
    assert response.status_code == 400


def test_contractor_cannot_delete_invitation(client, member, contractor_token: str):
    response = client.delete(
        f"/api/v1/invitations/{member.id}",
        headers={"Authorization": f"Bearer {contractor_token}"},
    )
    assert response.status_code == 403
