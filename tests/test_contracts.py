from unittest.mock import AsyncMock, patch

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

import papeleo.repositories.contract as contract_repo
from papeleo.core.config import settings
from papeleo.errors import ExternalServiceError

EDIT_URL = "https://docs.google.com/document/d/doc-123/edit"


# ============================================================================
# LIST / UPLOAD
# ============================================================================


def test_list_contracts_with_search(client, db: Session, project, contract, owner_token: str):
    contract_repo.create_contract(db, project_id=project.id, name="Suministro de cemento")

    response = client.get(
        f"/api/v1/projects/{project.id}/contracts",
        params={"search": "INTERV"},
        headers={"Authorization": f"Bearer {owner_token}"},
    )
    assert response.status_code == 200
    data = response.json()
    assert data["total"] == 1
    assert data["items"][0]["id"] == contract.id


def test_upload_contract(client, project, storage, owner_token: str):
    response = client.post(
        f"/api/v1/projects/{project.id}/contracts/upload",
        data={"name": "Obra civil"},
        files={"file": ("Contrato Obra.pdf", b"%PDF-1.4", "application/pdf")},
        headers={"Authorization": f"Bearer {owner_token}"},
    )
    assert response.status_code == 201
    data = response.json()
    assert data["name"] == "Obra civil"
    assert data["status"] == "draft"
    path = f"contracts/{project.id}/contrato-obra.pdf"
    assert data["contract_draft_url"] == storage.get_public_url(path)
    assert storage.has(path)


def test_upload_contract_too_large_stores_nothing(client, project, storage, owner_token: str):
    content = b"x" * (settings.max_upload_size_bytes + 1)
    response = client.post(
        f"/api/v1/projects/{project.id}/contracts/upload",
        data={"name": "Grande"},
        files={"file": ("grande.pdf", content, "application/pdf")},
        headers={"Authorization": f"Bearer {owner_token}"},
    )
    assert response.status_code == 400
    assert "maximum size" in response.json()["detail"]
    assert storage.objects == {}


def test_upload_contract_as_stranger_fails(client, project, stranger_token: str):
    response = client.post(
        f"/api/v1/projects/{project.id}/contracts/upload",
        data={"name": "Obra civil"},
        files={"file": ("c.pdf", b"%PDF", "application/pdf")},
        headers={"Authorization": f"Bearer {stranger_token}"},
    )
    assert response.status_code == 403


# ============================================================================
# GENERATE
# ============================================================================


def test_generate_contract_with_required_documents(client, project, owner_token: str):
    with patch(
        "papeleo.services.contract.generate_contract_draft",
        new=AsyncMock(return_value=EDIT_URL),
    ) as generate:
        response = client.post(
            f"/api/v1/projects/{project.id}/contracts/generate",
            json={
                "name": "Consultoría ambiental",
                "contractual_object": "Prestar servicios de consultoría ambiental",
                "required_documents": [
                    {"name": "RUT", "type": "precontractual"},
                    {"name": "Informe mensual", "type": "contractual"},
                ],
            },
            headers={"Authorization": f"Bearer {owner_token}"},
        )

    assert response.status_code == 201
    generate.assert_awaited_once_with(
        "Prestar servicios de consultoría ambiental", "Consultoría ambiental"
    )
    data = response.json()
    assert data["contract"]["contract_draft_url"] == EDIT_URL
    assert [item["name"] for item in data["required_documents"]] == ["RUT", "Informe mensual"]
    assert data["failed_required_documents"] == []


def test_generate_contract_reports_failed_required_documents(
    client, db: Session, project, owner_token: str, monkeypatch
):
    """A required document that cannot be created does not undo the contract."""
    create = contract_repo.create_required_document

    def flaky_create(db, contract_id, name, type, **kwargs):
        if name == "Póliza":
            raise SQLAlchemyError("insert failed")
        return create(db, contract_id=contract_id, name=name, type=type, **kwargs)

    monkeypatch.setattr(contract_repo, "create_required_document", flaky_create)

    with patch(
        "papeleo.services.contract.generate_contract_draft",
        new=AsyncMock(return_value=EDIT_URL),
    ):
        response = client.post(
            f"/api/v1/projects/{project.id}/contracts/generate",
            json={
                "name": "Suministro",
                "contractual_object": "Suministro de materiales",
                "required_documents": [
                    {"name": "RUT", "type": "precontractual"},
                    {"name": "Póliza", "type": "precontractual"},
                ],
            },
            headers={"Authorization": f"Bearer {owner_token}"},
        )

    assert response.status_code == 201
    data = response.json()
    assert [item["name"] for item in data["required_documents"]] == ["RUT"]
    assert data["failed_required_documents"] == [
        {"item": "Póliza", "error": "Could not create required document 'Póliza'"}
    ]
    assert contract_repo.get_contract_by_id(db, data["contract"]["id"]) is not None


def test_generate_contract_generation_failure_creates_nothing(client, db: Session, project, owner_token: str):
    with patch(
        "papeleo.services.contract.generate_contract_draft",
        new=AsyncMock(side_effect=ExternalServiceError("Contract generation failed with status 500")),
    ):
        response = client.post(
            f"/api/v1/projects/{project.id}/contracts/generate",
            json={"name": "Suministro", "contractual_object": "Suministro de materiales"},
            headers={"Authorization": f"Bearer {owner_token}"},
        )

    assert response.status_code == 502
    assert response.json()["code"] == "EXTERNAL_SERVICE_ERROR"
    assert contract_repo.get_contracts_by_project_id(db, project.id) == []


def test_generate_contract_without_generation_endpoint(client, project, owner_token: str):
    response = client.post(
        f"/api/v1/projects/{project.id}/contracts/generate",
        json={"name": "Suministro", "contractual_object": "Suministro de materiales"},
        headers={"Authorization": f"Bearer {owner_token}"},
    )
    assert response.status_code == 400
    assert "AI_GENERATION_URL" in response.json()["detail"]


# ============================================================================
# UPDATE / DELETE
# ============================================================================


def test_rename_contract(client, contract, owner_token: str):
    response = client.patch(
        f"/api/v1/contracts/{contract.id}",
        json={"name": "Interventoría técnica"},
        headers={"Authorization": f"Bearer {owner_token}"},
    )
    assert response.status_code == 200
    assert response.json()["name"] == "Interventoría técnica"


def test_replace_draft_removes_previous_upload(client, project, contract, storage, owner_token: str):
    response = client.put(
        f"/api/v1/contracts/{contract.id}/draft",
        files={"file": ("v2.pdf", b"%PDF-1.7", "application/pdf")},
        headers={"Authorization": f"Bearer {owner_token}"},
    )
    assert response.status_code == 200
    assert response.json()["contract_draft_url"] == storage.get_public_url(f"contracts/{project.id}/v2.pdf")
    assert storage.removed == ["contracts/p/borrador.pdf"]


def test_replace_draft_keeps_generated_documents(client, db: Session, contract, storage, owner_token: str):
    contract_repo.update_contract(db, contract_id=contract.id, contract_draft_url=EDIT_URL)

    response = client.put(
        f"/api/v1/contracts/{contract.id}/draft",
        files={"file": ("v2.pdf", b"%PDF-1.7", "application/pdf")},
        headers={"Authorization": f"Bearer {owner_token}"},
    )
    assert response.status_code == 200
    assert storage.removed == []


def test_delete_contract_hides_it(client, project, contract, owner_token: str):
    headers = {"Authorization": f"Bearer {owner_token}"}

    response = client.delete(f"/api/v1/contracts/{contract.id}", headers=headers)
    assert response.status_code == 204

    response = client.get(f"/api/v1/projects/{project.id}/contracts", headers=headers)
    assert response.json()["total"] == 0

    response = client.patch(f"/api/v1/contracts/{contract.id}", json={"name": "x"}, headers=headers)
    assert response.status_code == 404


# ============================================================================
# REQUIRED DOCUMENTS
# ============================================================================


def test_add_and_list_required_documents(client, contract, owner_token: str):
    headers = {"Authorization": f"Bearer {owner_token}"}

    response = client.post(
        f"/api/v1/contracts/{contract.id}/required-documents",
        json={"name": "Cédula", "type": "precontractual", "due_date": "2024-02-01"},
        headers=headers,
    )
    assert response.status_code == 201
    assert response.json()["due_date"] == "2024-02-01"

    response = client.post(
        f"/api/v1/contracts/{contract.id}/required-documents",
        json={"name": "Planilla", "type": "contractual"},
        headers=headers,
    )
    assert response.status_code == 201

    response = client.get(
        f"/api/v1/contracts/{contract.id}/required-documents",
        params={"type": "contractual"},
        headers=headers,
    )
    assert response.status_code == 200
    assert [item["name"] for item in response.json()] == ["Planilla"]


def test_duplicate_required_document_is_conflict(client, contract, precontractual_requirement, owner_token: str):
    response = client.post(
        f"/api/v1/contracts/{contract.id}/required-documents",
        json={"name": "rut", "type": "precontractual"},
        headers={"Authorization": f"Bearer {owner_token}"},
    )
    assert response.status_code == 409
    assert response.json()["code"] == "DUPLICATE_RESOURCE"


def test_required_document_invalid_type(client, contract, owner_token: str):
    response = client.post(
        f"/api/v1/contracts/{contract.id}/required-documents",
        json={"name": "Otro", "type": "postcontractual"},
        headers={"Authorization": f"Bearer {owner_token}"},
    )
    assert response.status_code == 422


def test_delete_required_document(client, contract, precontractual_requirement, owner_token: str):
    headers = {"Authorization": f"Bearer {owner_token}"}

    response = client.delete(f"/api/v1/required-documents/{precontractual_requirement.id}", headers=headers)
    assert response.status_code == 204

    response = client.get(f"/api/v1/contracts/{contract.id}/required-documents", headers=headers)
    assert response.json() == []


def test_required_document_suggestions(client, db: Session, project, contract, owner_token: str):
    other = contract_repo.create_contract(db, project_id=project.id, name="Otro")
    for contract_id, name in [
        (contract.id, "Certificado bancario"),
        (other.id, "Certificado bancario"),
        (contract.id, "Certificado de estudios"),
        (other.id, "RUT"),
    ]:
        contract_repo.create_required_document(db, contract_id=contract_id, name=name, type="precontractual")

    headers = {"Authorization": f"Bearer {owner_token}"}
    response = client.get("/api/v1/required-documents/suggestions", params={"search": "cert"}, headers=headers)
    assert response.status_code == 200
    assert response.json() == ["Certificado bancario", "Certificado de estudios"]

    response = client.get("/api/v1/required-documents/suggestions", params={"search": "c"}, headers=headers)
    assert response.json() == []
