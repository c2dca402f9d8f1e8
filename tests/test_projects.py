from sqlalchemy.orm import Session

import papeleo.repositories.organization as organization_repo
from papeleo.core.config import settings


# ============================================================================
# ORGANIZATIONS
# ============================================================================


def test_list_my_organizations(client, organization, owner_token: str, stranger_token: str):
    """Only the owner sees their organization."""
    response = client.get(
        "/api/v1/organizations",
        headers={"Authorization": f"Bearer {owner_token}"},
    )
    assert response.status_code == 200
    assert [item["id"] for item in response.json()] == [organization.id]

    response = client.get(
        "/api/v1/organizations",
        headers={"Authorization": f"Bearer {stranger_token}"},
    )
    assert response.status_code == 200
    assert response.json() == []


def test_create_project(client, organization, owner_token: str):
    response = client.post(
        f"/api/v1/organizations/{organization.id}/projects",
        json={"name": "  Puente Sur  "},
        headers={"Authorization": f"Bearer {owner_token}"},
    )
    assert response.status_code == 201
    data = response.json()
    assert data["name"] == "Puente Sur"
    assert data["organization_id"] == organization.id


def test_create_project_in_foreign_organization_fails(client, organization, stranger_token: str):
    response = client.post(
        f"/api/v1/organizations/{organization.id}/projects",
        json={"name": "Intruso"},
        headers={"Authorization": f"Bearer {stranger_token}"},
    )
    assert response.status_code == 403
    assert response.json()["code"] == "FORBIDDEN"


def test_list_projects_search_and_pagination(client, db: Session, organization, owner_token: str):
    for name in ["Obra Norte", "Puente Sur", "Vía Norte", "Colegio Norte"]:
        organization_repo.create_project(db, organization.id, name)

    response = client.get(
        f"/api/v1/organizations/{organization.id}/projects",
        params={"search": "norte", "page": 1, "page_size": 2},
        headers={"Authorization": f"Bearer {owner_token}"},
    )
    assert response.status_code == 200
    data = response.json()
    assert data["total"] == 3
    assert data["pages"] == 2
    assert len(data["items"]) == 2
    assert all("Norte" in item["name"] for item in data["items"])

    response = client.get(
        f"/api/v1/organizations/{organization.id}/projects",
        params={"search": "norte", "page": 5, "page_size": 2},
        headers={"Authorization": f"Bearer {owner_token}"},
    )
    assert response.status_code == 200
    assert response.json()["items"] == []


def test_list_projects_of_unknown_organization(client, owner_token: str):
    response = client.get(
        "/api/v1/organizations/missing/projects",
        headers={"Authorization": f"Bearer {owner_token}"},
    )
    assert response.status_code == 404
    assert response.json()["code"] == "NOT_FOUND"


# ============================================================================
# PROJECTS
# ============================================================================


def test_get_rename_and_delete_project(client, project, owner_token: str):
    headers = {"Authorization": f"Bearer {owner_token}"}

    response = client.get(f"/api/v1/projects/{project.id}", headers=headers)
    assert response.status_code == 200
    assert response.json()["name"] == "Obra Norte"

    response = client.patch(f"/api/v1/projects/{project.id}", json={"name": "Obra Norte II"}, headers=headers)
    assert response.status_code == 200
    assert response.json()["name"] == "Obra Norte II"

    response = client.delete(f"/api/v1/projects/{project.id}", headers=headers)
    assert response.status_code == 204

    response = client.get(f"/api/v1/projects/{project.id}", headers=headers)
    assert response.status_code == 404


def test_project_of_another_owner_is_forbidden(client, project, stranger_token: str):
    response = client.get(
        f"/api/v1/projects/{project.id}",
        headers={"Authorization": f"Bearer {stranger_token}"},
    )
    assert response.status_code == 403


def test_contratante_data_roundtrip(client, project, owner_token: str):
    headers = {"Authorization": f"Bearer {owner_token}"}

    response = client.get(f"/api/v1/projects/{project.id}/contratante-data", headers=headers)
    assert response.status_code == 200
    assert response.json() == {"data": {}}

    response = client.put(
        f"/api/v1/projects/{project.id}/contratante-data",
        json={"data": {" NIT ": " 900123456 ", "": "dropped", "Representante": "Luis"}},
        headers=headers,
    )
    assert response.status_code == 200
    assert response.json() == {"data": {"NIT": "900123456", "Representante": "Luis"}}


def test_upload_and_remove_project_signature(client, project, storage, owner_token: str):
    headers = {"Authorization": f"Bearer {owner_token}"}

    response = client.put(
        f"/api/v1/projects/{project.id}/signature",
        files={"file": ("Firma Gerente.png", b"\x89PNG fake", "image/png")},
        headers=headers,
    )
    assert response.status_code == 200
    signature = response.json()["signature"]
    path = f"signatures/{project.id}/firma-gerente.png"
    assert signature.endswith(f"/object/public/{settings.storage_public_bucket}/{path}")
    assert storage.has(path, bucket=settings.storage_public_bucket)

    response = client.delete(f"/api/v1/projects/{project.id}/signature", headers=headers)
    assert response.status_code == 200
    assert response.json()["signature"] is None
    assert storage.removed == [path]


def test_project_signature_must_be_an_image(client, project, owner_token: str):
    response = client.put(
        f"/api/v1/projects/{project.id}/signature",
        files={"file": ("firma.pdf", b"%PDF", "application/pdf")},
        headers={"Authorization": f"Bearer {owner_token}"},
    )
    assert response.status_code == 400
    assert response.json()["code"] == "VALIDATION_ERROR"
