import re
from datetime import datetime, timezone

import pytest
from sqlalchemy.orm import Session

import app.repositories.project as project_repo
from app.db.models.client import Client as ClientModel
from app.domain.catalog import ClientType, ProjectStatus, ProjectType
from app.domain.project_access import ProjectAccessPolicy
from app.domain.roles import UserRole


@pytest.fixture
def brand(db: Session) -> str:
    """A client to hang projects on."""
    record = ClientModel(
        company_name="Northwind Brands",
        client_type=ClientType.DIRECT_BRAND,
        primary_contact_name="Nora West",
        primary_contact_email="nora@northwind.example.com",
    )
    db.add(record)
    db.commit()
    db.refresh(record)
    return record.id


def _create_project(client, token: str, client_id: str, **overrides):
    payload = {"name": "Spring Campaign", "type": "STILLS", "clientId": client_id}
    payload.update(overrides)
    return client.post(
        "/api/projects",
        json=payload,
        headers={"Authorization": f"Bearer {token}"},
    )


# ============================================================================
# ACCESS POLICY TESTS
# ============================================================================


def test_policy_visibility_and_edit_rules():
    admin = ProjectAccessPolicy(user_id="a", role=UserRole.ADMIN_PRODUCER)
    accountant = ProjectAccessPolicy(user_id="b", role=UserRole.ACCOUNTANT)
    producer = ProjectAccessPolicy(user_id="c", role=UserRole.PRODUCER)

    assert admin.can_view(owner_id="x") and admin.can_edit(owner_id="x")
    assert accountant.can_view(owner_id="x") and not accountant.can_edit(owner_id="x")
    assert not producer.can_view(owner_id="x") and not producer.can_edit(owner_id="x")
    assert producer.can_view(owner_id="c") and producer.can_edit(owner_id="c")
    # Assignment grants visibility, never edit rights
    assert producer.can_view(owner_id="x", is_assigned=True)
    assert not producer.can_edit(owner_id="x")

    assert admin.resolve_owner("x") == "x"
    assert producer.resolve_owner("x") == "c"
    assert producer.resolve_owner(None) == "c"


# ============================================================================
# CREATE PROJECT TESTS
# ============================================================================


def test_create_project_generates_code(client, db: Session, producer_token: str, producer_user: dict, brand: str):
    response = _create_project(client, producer_token, brand)
    assert response.status_code == 201
    project = response.json()["data"]["project"]
    year = datetime.now(timezone.utc).year
    assert project["code"] == f"PRJ-{year}-001"
    assert project["status"] == "INQUIRY"
    assert project["ownerId"] == producer_user["id"]
    assert project["owner"]["fullName"] == "Pat Producer"
    assert project["client"]["companyName"] == "Northwind Brands"

    second = _create_project(client, producer_token, brand, name="Summer Campaign")
    assert second.json()["data"]["project"]["code"] == f"PRJ-{year}-002"


def test_create_project_retries_taken_code(client, db: Session, producer_token: str, producer_user: dict, brand: str):
    """A code already in use is skipped instead of failing the request."""
    year = datetime.now(timezone.utc).year
    project_repo.create_project(
        db,
        code=f"PRJ-{year}-002",
        name="Imported",
        type=ProjectType.EVENT,
        status=ProjectStatus.CONFIRMED,
        client_id=brand,
        owner_id=producer_user["id"],
    )
    # One project exists, so the first candidate is -002, which is taken
    response = _create_project(client, producer_token, brand)
    assert response.status_code == 201
    assert re.fullmatch(rf"PRJ-{year}-\d{{3}}", response.json()["data"]["project"]["code"])
    assert response.json()["data"]["project"]["code"] != f"PRJ-{year}-002"


def test_create_project_owner_ignored_for_producer(
    client, db: Session, producer_token: str, producer_user: dict, admin_user: dict, brand: str
):
    response = _create_project(client, producer_token, brand, ownerId=admin_user["id"])
    assert response.status_code == 201
    assert response.json()["data"]["project"]["ownerId"] == producer_user["id"]


def test_create_project_admin_assigns_owner(
    client, db: Session, admin_token: str, producer_user: dict, brand: str
):
    response = _create_project(client, admin_token, brand, ownerId=producer_user["id"])
    assert response.status_code == 201
    assert response.json()["data"]["project"]["ownerId"] == producer_user["id"]


def test_create_project_unknown_client(client, db: Session, producer_token: str):
    response = _create_project(client, producer_token, "00000000-0000-0000-0000-000000000000")
    assert response.status_code == 404
    assert response.json()["error"]["code"] == "NOT_FOUND"


def test_create_project_as_coordinator_fails(client, db: Session, coordinator_token: str, brand: str):
    response = _create_project(client, coordinator_token, brand)
    assert response.status_code == 403


def test_create_project_invalid_type(client, db: Session, producer_token: str, brand: str):
    response = _create_project(client, producer_token, brand, type="PODCAST")
    assert response.status_code == 400
    assert "type" in response.json()["error"]["details"]["fieldErrors"]


# ============================================================================
# VISIBILITY TESTS
# ============================================================================


def test_list_projects_scoped_to_owner(
    client,
    db: Session,
    admin_token: str,
    producer_token: str,
    accountant_token: str,
    coordinator_token: str,
    brand: str,
):
    _create_project(client, admin_token, brand, name="Admin Show")
    _create_project(client, producer_token, brand, name="Producer Show")

    def names(token: str) -> set[str]:
        response = client.get("/api/projects", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 200
        return {p["name"] for p in response.json()["data"]["items"]}

    assert names(admin_token) == {"Admin Show", "Producer Show"}
    assert names(accountant_token) == {"Admin Show", "Producer Show"}
    assert names(producer_token) == {"Producer Show"}
    assert names(coordinator_token) == set()


def test_get_project_of_other_owner_forbidden(
    client, db: Session, admin_token: str, producer_token: str, brand: str
):
    project = _create_project(client, admin_token, brand).json()["data"]["project"]
    response = client.get(
        f"/api/projects/{project['id']}",
        headers={"Authorization": f"Bearer {producer_token}"},
    )
    assert response.status_code == 403
    assert response.json()["error"]["code"] == "FORBIDDEN"


def test_get_project_not_found(client, db: Session, admin_token: str):
    response = client.get(
        "/api/projects/00000000-0000-0000-0000-000000000000",
        headers={"Authorization": f"Bearer {admin_token}"},
    )
    assert response.status_code == 404


def test_list_projects_search(client, db: Session, producer_token: str, brand: str):
    _create_project(client, producer_token, brand, name="Spring Campaign")
    _create_project(client, producer_token, brand, name="Autumn Launch")

    response = client.get(
        "/api/projects?search=autumn",
        headers={"Authorization": f"Bearer {producer_token}"},
    )
    assert [p["name"] for p in response.json()["data"]["items"]] == ["Autumn Launch"]


# ============================================================================
# UPDATE / ARCHIVE TESTS
# ============================================================================


def test_owner_updates_project(client, db: Session, producer_token: str, brand: str):
    project = _create_project(client, producer_token, brand).json()["data"]["project"]
    response = client.patch(
        f"/api/projects/{project['id']}",
        json={"status": "CONFIRMED", "name": "Spring Campaign 2"},
        headers={"Authorization": f"Bearer {producer_token}"},
    )
    assert response.status_code == 200
    updated = response.json()["data"]["project"]
    assert updated["status"] == "CONFIRMED"
    assert updated["name"] == "Spring Campaign 2"
    assert updated["code"] == project["code"]


def test_accountant_cannot_update(client, db: Session, producer_token: str, accountant_token: str, brand: str):
    project = _create_project(client, producer_token, brand).json()["data"]["project"]
    response = client.patch(
        f"/api/projects/{project['id']}",
        json={"status": "INVOICED"},
        headers={"Authorization": f"Bearer {accountant_token}"},
    )
    assert response.status_code == 403


def test_non_admin_cannot_reassign_owner(
    client, db: Session, producer_token: str, admin_user: dict, brand: str
):
    project = _create_project(client, producer_token, brand).json()["data"]["project"]
    response = client.patch(
        f"/api/projects/{project['id']}",
        json={"ownerId": admin_user["id"]},
        headers={"Authorization": f"Bearer {producer_token}"},
    )
    assert response.status_code == 403


def test_admin_reassigns_owner(
    client, db: Session, admin_token: str, producer_token: str, producer_user: dict, brand: str
):
    project = _create_project(client, admin_token, brand).json()["data"]["project"]
    response = client.patch(
        f"/api/projects/{project['id']}",
        json={"ownerId": producer_user["id"]},
        headers={"Authorization": f"Bearer {admin_token}"},
    )
    assert response.status_code == 200
    assert response.json()["data"]["project"]["ownerId"] == producer_user["id"]

    # The new owner can now see it
    response = client.get(
        f"/api/projects/{project['id']}",
        headers={"Authorization": f"Bearer {producer_token}"},
    )
    assert response.status_code == 200


def test_archive_project(client, db: Session, producer_token: str, brand: str):
    project = _create_project(client, producer_token, brand).json()["data"]["project"]
    response = client.delete(
        f"/api/projects/{project['id']}",
        headers={"Authorization": f"Bearer {producer_token}"},
    )
    assert response.status_code == 200
    archived = response.json()["data"]["project"]
    assert archived["status"] == "ARCHIVED"
    assert archived["archivedAt"] is not None


# ============================================================================
# ASSIGNMENT TESTS
# ============================================================================


def _assign(client, token: str, project_id: str, user_id: str, role_on_project: str = "Coordinator"):
    return client.post(
        f"/api/projects/{project_id}/assignments",
        json={"userId": user_id, "roleOnProject": role_on_project},
        headers={"Authorization": f"Bearer {token}"},
    )


def test_assigned_coordinator_sees_project(
    client, db: Session, producer_token: str, coordinator_token: str, coordinator_user: dict, brand: str
):
    project = _create_project(client, producer_token, brand).json()["data"]["project"]
    _create_project(client, producer_token, brand, name="Unrelated Shoot")

    response = _assign(client, producer_token, project["id"], coordinator_user["id"])
    assert response.status_code == 201
    assignment = response.json()["data"]["assignment"]
    assert assignment["userId"] == coordinator_user["id"]
    assert assignment["roleOnProject"] == "Coordinator"
    assert assignment["user"]["fullName"] == "Cory Coordinator"

    listed = client.get("/api/projects", headers={"Authorization": f"Bearer {coordinator_token}"})
    assert [p["id"] for p in listed.json()["data"]["items"]] == [project["id"]]

    fetched = client.get(
        f"/api/projects/{project['id']}",
        headers={"Authorization": f"Bearer {coordinator_token}"},
    )
    assert fetched.status_code == 200

    team = client.get(
        f"/api/projects/{project['id']}/team",
        headers={"Authorization": f"Bearer {coordinator_token}"},
    )
    assert team.status_code == 200
    assert [a["userId"] for a in team.json()["data"]] == [coordinator_user["id"]]


def test_assigned_user_cannot_edit(
    client, db: Session, admin_token: str, producer_token: str, producer_user: dict, brand: str
):
    project = _create_project(client, admin_token, brand).json()["data"]["project"]
    assert _assign(client, admin_token, project["id"], producer_user["id"], "Producer").status_code == 201

    fetched = client.get(
        f"/api/projects/{project['id']}",
        headers={"Authorization": f"Bearer {producer_token}"},
    )
    assert fetched.status_code == 200

    response = client.patch(
        f"/api/projects/{project['id']}",
        json={"status": "CONFIRMED"},
        headers={"Authorization": f"Bearer {producer_token}"},
    )
    assert response.status_code == 403

    response = client.delete(
        f"/api/projects/{project['id']}",
        headers={"Authorization": f"Bearer {producer_token}"},
    )
    assert response.status_code == 403

    # Nor may they manage the team
    response = client.get(
        f"/api/projects/{project['id']}/assignments",
        headers={"Authorization": f"Bearer {producer_token}"},
    )
    assert response.status_code == 403


def test_team_of_invisible_project_forbidden(
    client, db: Session, admin_token: str, coordinator_token: str, brand: str
):
    project = _create_project(client, admin_token, brand).json()["data"]["project"]
    response = client.get(
        f"/api/projects/{project['id']}/team",
        headers={"Authorization": f"Bearer {coordinator_token}"},
    )
    assert response.status_code == 403


def test_coordinator_cannot_manage_assignments(
    client, db: Session, producer_token: str, coordinator_token: str, coordinator_user: dict, brand: str
):
    project = _create_project(client, producer_token, brand).json()["data"]["project"]
    response = _assign(client, coordinator_token, project["id"], coordinator_user["id"])
    assert response.status_code == 403


def test_assign_twice_conflicts(
    client, db: Session, producer_token: str, coordinator_user: dict, brand: str
):
    project = _create_project(client, producer_token, brand).json()["data"]["project"]
    assert _assign(client, producer_token, project["id"], coordinator_user["id"]).status_code == 201

    response = _assign(client, producer_token, project["id"], coordinator_user["id"])
    assert response.status_code == 409
    assert response.json()["error"]["code"] == "ASSIGNMENT_EXISTS"


def test_assign_unknown_user(client, db: Session, producer_token: str, brand: str):
    project = _create_project(client, producer_token, brand).json()["data"]["project"]
    response = _assign(client, producer_token, project["id"], "00000000-0000-0000-0000-000000000000")
    assert response.status_code == 404


def test_assign_to_unknown_project(client, db: Session, producer_token: str, coordinator_user: dict):
    response = _assign(
        client, producer_token, "00000000-0000-0000-0000-000000000000", coordinator_user["id"]
    )
    assert response.status_code == 404


def test_assign_missing_role_on_project(client, db: Session, producer_token: str, coordinator_user: dict, brand: str):
    project = _create_project(client, producer_token, brand).json()["data"]["project"]
    response = client.post(
        f"/api/projects/{project['id']}/assignments",
        json={"userId": coordinator_user["id"]},
        headers={"Authorization": f"Bearer {producer_token}"},
    )
    assert response.status_code == 400
    assert "roleOnProject" in response.json()["error"]["details"]["fieldErrors"]


def test_unassign_removes_visibility(
    client, db: Session, producer_token: str, coordinator_token: str, coordinator_user: dict, brand: str
):
    project = _create_project(client, producer_token, brand).json()["data"]["project"]
    _assign(client, producer_token, project["id"], coordinator_user["id"])

    listed = client.get(
        f"/api/projects/{project['id']}/assignments",
        headers={"Authorization": f"Bearer {producer_token}"},
    )
    assert len(listed.json()["data"]) == 1

    response = client.delete(
        f"/api/projects/{project['id']}/assignments/{coordinator_user['id']}",
        headers={"Authorization": f"Bearer {producer_token}"},
    )
    assert response.status_code == 204

    response = client.get(
        f"/api/projects/{project['id']}",
        headers={"Authorization": f"Bearer {coordinator_token}"},
    )
    assert response.status_code == 403

    again = client.delete(
        f"/api/projects/{project['id']}/assignments/{coordinator_user['id']}",
        headers={"Authorization": f"Bearer {producer_token}"},
    )
    assert again.status_code == 404
