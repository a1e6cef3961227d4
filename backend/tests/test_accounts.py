import logging

import pytest
from httpx import AsyncClient

from app.models.role import RoleName

from conftest import bearer, register_account, student_profile


# ============================================
# Account list (Admin only)
# ============================================

@pytest.mark.asyncio
async def test_admin_lists_accounts(client: AsyncClient, admin_headers, teacher_auth, student_auth):
    response = await client.get("/api/v1/accounts", headers=admin_headers)

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["total"] == 3
    assert {a["role"] for a in data["items"]} == {"Admin", "Teacher", "Student"}


@pytest.mark.asyncio
async def test_admin_filters_accounts_by_role(client: AsyncClient, admin_headers, teacher_auth, student_auth):
    response = await client.get("/api/v1/accounts", headers=admin_headers, params={"role": "Teacher"})

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["total"] == 1
    assert data["items"][0]["id"] == teacher_auth.account.id


@pytest.mark.asyncio
async def test_account_list_pagination(client: AsyncClient, db_session, admin_headers):
    for _ in range(3):
        await register_account(db_session, RoleName.PARENT)

    response = await client.get("/api/v1/accounts", headers=admin_headers, params={"page": 2, "page_size": 3})

    data = response.json()["data"]
    assert data["total"] == 4
    assert data["page"] == 2
    assert len(data["items"]) == 1


@pytest.mark.asyncio
@pytest.mark.parametrize("role", [RoleName.TEACHER, RoleName.PARENT, RoleName.STUDENT])
async def test_non_admin_cannot_list_accounts(client: AsyncClient, db_session, role):
    auth = await register_account(db_session, role)

    response = await client.get("/api/v1/accounts", headers=bearer(auth.access_token))

    assert response.status_code == 403
    assert response.json()["message"] == "Access denied. Insufficient permissions."


@pytest.mark.asyncio
async def test_request_log_names_caller_and_denials(client: AsyncClient, db_session, admin_headers, caplog):
    teacher = await register_account(db_session, RoleName.TEACHER)

    with caplog.at_level(logging.INFO, logger="school"):
        await client.get("/api/v1/accounts", headers=admin_headers)
        await client.get("/api/v1/accounts", headers=bearer(teacher.access_token))

    requests = [r.getMessage() for r in caplog.records if getattr(r, "event_type", None) == "http_request"]
    denials = [r for r in caplog.records if getattr(r, "event_type", None) == "access_denied"]
    assert requests[0].endswith("(Admin)")
    assert requests[1].endswith(f"account {teacher.account.id} (Teacher)")
    assert len(denials) == 1
    assert denials[0].http_status == 403


@pytest.mark.asyncio
async def test_account_list_requires_token(client: AsyncClient):
    response = await client.get("/api/v1/accounts")

    assert response.status_code == 401
    assert response.json()["success"] is False


# ============================================
# Student directory (Teacher or Admin)
# ============================================

@pytest.mark.asyncio
async def test_teacher_sees_student_directory(client: AsyncClient, db_session, teacher_headers):
    await register_account(db_session, RoleName.STUDENT, profile=student_profile(last_name="Zimmer"))
    await register_account(db_session, RoleName.STUDENT, profile=student_profile(last_name="Abbott"))

    response = await client.get("/api/v1/accounts/students", headers=teacher_headers)

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["total"] == 2
    assert [s["profile"]["last_name"] for s in data["items"]] == ["Abbott", "Zimmer"]


@pytest.mark.asyncio
async def test_student_directory_search(client: AsyncClient, db_session, admin_headers):
    await register_account(db_session, RoleName.STUDENT, profile=student_profile(first_name="Priya"))
    await register_account(db_session, RoleName.STUDENT, profile=student_profile(first_name="Marcus"))

    response = await client.get("/api/v1/accounts/students", headers=admin_headers, params={"search": "priy"})

    data = response.json()["data"]
    assert data["total"] == 1
    assert data["items"][0]["profile"]["first_name"] == "Priya"


@pytest.mark.asyncio
async def test_student_cannot_see_directory(client: AsyncClient, student_headers):
    response = await client.get("/api/v1/accounts/students", headers=student_headers)

    assert response.status_code == 403


# ============================================
# Account detail (owner or Admin)
# ============================================

@pytest.mark.asyncio
async def test_owner_sees_own_account(client: AsyncClient, student_auth, student_headers):
    response = await client.get(f"/api/v1/accounts/{student_auth.account.id}", headers=student_headers)

    assert response.status_code == 200
    assert response.json()["data"]["profile"]["admission_number"] == student_auth.profile.admission_number


@pytest.mark.asyncio
async def test_other_account_is_forbidden(client: AsyncClient, student_headers, teacher_auth):
    response = await client.get(f"/api/v1/accounts/{teacher_auth.account.id}", headers=student_headers)

    assert response.status_code == 403


@pytest.mark.asyncio
async def test_admin_sees_any_account(client: AsyncClient, admin_headers, teacher_auth):
    response = await client.get(f"/api/v1/accounts/{teacher_auth.account.id}", headers=admin_headers)

    assert response.status_code == 200
    assert response.json()["data"]["account"]["role"] == "Teacher"


@pytest.mark.asyncio
async def test_admin_missing_account(client: AsyncClient, admin_headers):
    response = await client.get("/api/v1/accounts/9999", headers=admin_headers)

    assert response.status_code == 404
    assert response.json()["code"] == "ACCOUNT_NOT_FOUND"


# ============================================
# Deactivate / activate (Admin only)
# ============================================

@pytest.mark.asyncio
async def test_deactivation_revokes_access(client: AsyncClient, admin_headers, student_auth, student_headers):
    response = await client.post(
        f"/api/v1/accounts/{student_auth.account.id}/deactivate",
        headers=admin_headers,
    )
    assert response.status_code == 200
    assert response.json()["data"]["is_active"] is False

    # Token is still correctly signed, but the account no longer authenticates
    rejected = await client.get("/api/v1/auth/profile", headers=student_headers)
    assert rejected.status_code == 401
    assert rejected.json()["message"] == "Invalid token. Account not found."

    restored = await client.post(
        f"/api/v1/accounts/{student_auth.account.id}/activate",
        headers=admin_headers,
    )
    assert restored.status_code == 200
    assert restored.json()["data"]["is_active"] is True

    accepted = await client.get("/api/v1/auth/profile", headers=student_headers)
    assert accepted.status_code == 200


@pytest.mark.asyncio
async def test_admin_cannot_deactivate_self(client: AsyncClient, admin_auth, admin_headers):
    response = await client.post(
        f"/api/v1/accounts/{admin_auth.account.id}/deactivate",
        headers=admin_headers,
    )

    assert response.status_code == 400
    assert response.json()["message"] == "You cannot deactivate your own account"


@pytest.mark.asyncio
async def test_teacher_cannot_deactivate(client: AsyncClient, teacher_headers, student_auth):
    response = await client.post(
        f"/api/v1/accounts/{student_auth.account.id}/deactivate",
        headers=teacher_headers,
    )

    assert response.status_code == 403

