import pytest
from sqlalchemy.orm import Session

from app.db.models.client import Client as ClientModel
from app.domain.catalog import ClientType


def _make_client(db: Session, company_name: str, active: bool = True) -> str:
    record = ClientModel(
        company_name=company_name,
        client_type=ClientType.DIRECT_BRAND,
        primary_contact_name="Nora West",
        primary_contact_email="nora@example.com",
        active=active,
    )
    db.add(record)
    db.commit()
    db.refresh(record)
    return record.id


@pytest.fixture
def brand(db: Session) -> str:
    return _make_client(db, "Northwind Brands")


def _create_project(client, token: str, client_id: str, name: str) -> dict:
    response = client.post(
        "/api/projects",
        json={"name": name, "type": "STILLS", "clientId": client_id},
        headers={"Authorization": f"Bearer {token}"},
    )
    assert response.status_code == 201
    return response.json()["data"]["project"]


def _stats(client, token: str) -> dict:
    response = client.get(
        "/api/dashboard/stats",
        headers={"Authorization": f"Bearer {token}"},
    )
    assert response.status_code == 200
    return response.json()["data"]


@pytest.fixture
def seeded(client, db: Session, admin_token: str, producer_token: str, brand: str):
    """Two producer projects (one archived) and one admin project."""
    _create_project(client, producer_token, brand, "Spring Campaign")
    archived = _create_project(client, producer_token, brand, "Winter Campaign")
    client.delete(
        f"/api/projects/{archived['id']}",
        headers={"Authorization": f"Bearer {producer_token}"},
    )
    _create_project(client, admin_token, brand, "Summer Campaign")
    _make_client(db, "Dormant Ltd", active=False)


def test_stats_scoped_to_owner_for_producer(client, seeded, producer_token: str):
    assert _stats(client, producer_token) == {
        "projectsActive": 1,
        "projectsTotal": 2,
        "clientsActive": 1,
    }


def test_stats_global_for_accountant(client, seeded, accountant_token: str):
    assert _stats(client, accountant_token) == {
        "projectsActive": 2,
        "projectsTotal": 3,
        "clientsActive": 1,
    }


def test_stats_include_assigned_projects(
    client, seeded, admin_token: str, coordinator_token: str, coordinator_user: dict
):
    assert _stats(client, coordinator_token)["projectsTotal"] == 0

    projects = client.get(
        "/api/projects?search=Summer",
        headers={"Authorization": f"Bearer {admin_token}"},
    ).json()["data"]["items"]
    client.post(
        f"/api/projects/{projects[0]['id']}/assignments",
        json={"userId": coordinator_user["id"], "roleOnProject": "Coordinator"},
        headers={"Authorization": f"Bearer {admin_token}"},
    )

    stats = _stats(client, coordinator_token)
    assert stats["projectsActive"] == 1
    assert stats["projectsTotal"] == 1


def test_stats_requires_authentication(client, db: Session):
    response = client.get("/api/dashboard/stats")
    assert response.status_code == 401
