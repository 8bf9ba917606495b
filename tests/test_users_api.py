"""
Tests for clinic staff management endpoints
"""

import uuid

import pytest

from app.core.auth import verify_password
from app.models.user import User, UserRole

NEW_STAFF = {
    "email": "New.Doctor@example.com",
    "password": "s3cure-password",
    "first_name": "Laura",
    "last_name": "Mendez",
    "role": "DOCTOR",
}


@pytest.mark.asyncio
async def test_admin_creates_staff_in_own_clinic(client, db, create_clinic, create_user, headers_for):
    clinic = await create_clinic()
    admin = await create_user(UserRole.CLINIC_ADMIN, clinic)

    response = await client.post("/api/v1/users/", json=NEW_STAFF, headers=headers_for(admin))

    assert response.status_code == 201
    body = response.json()
    assert body["clinic_id"] == str(clinic.id)
    assert body["email"] == "new.doctor@example.com"
    assert body["email_verified"] is True
    assert "password_hash" not in body

    user = await db.get(User, uuid.UUID(body["id"]))
    assert verify_password(NEW_STAFF["password"], user.password_hash)


@pytest.mark.asyncio
async def test_clinic_in_body_is_ignored(client, create_clinic, create_user, headers_for):
    """Test staff cannot be planted in another clinic through the payload"""
    clinic = await create_clinic()
    other = await create_clinic()
    admin = await create_user(UserRole.CLINIC_ADMIN, clinic)

    response = await client.post(
        "/api/v1/users/",
        json={**NEW_STAFF, "clinic_id": str(other.id)},
        headers=headers_for(admin),
    )

    assert response.status_code == 201
    assert response.json()["clinic_id"] == str(clinic.id)


@pytest.mark.asyncio
async def test_super_admin_role_cannot_be_assigned(client, create_clinic, create_user, headers_for):
    admin = await create_user(UserRole.CLINIC_ADMIN, await create_clinic())

    created = await client.post("/api/v1/users/", json={**NEW_STAFF, "role": "SUPER_ADMIN"}, headers=headers_for(admin))

    assert created.status_code == 422


@pytest.mark.asyncio
async def test_duplicate_email_rejected(client, create_clinic, create_user, headers_for):
    clinic = await create_clinic()
    admin = await create_user(UserRole.CLINIC_ADMIN, clinic)
    await create_user(UserRole.DOCTOR, await create_clinic(), email="new.doctor@example.com")

    response = await client.post("/api/v1/users/", json=NEW_STAFF, headers=headers_for(admin))

    assert response.status_code == 400


@pytest.mark.asyncio
@pytest.mark.parametrize("role", [UserRole.SECRETARY, UserRole.DOCTOR])
async def test_only_admins_manage_staff(client, create_clinic, create_user, headers_for, role):
    user = await create_user(role, await create_clinic())

    listed = await client.get("/api/v1/users/", headers=headers_for(user))
    created = await client.post("/api/v1/users/", json=NEW_STAFF, headers=headers_for(user))

    assert listed.status_code == 403
    assert created.status_code == 403
    assert created.json()["reason_code"] == "ROLE_NOT_PERMITTED"


@pytest.mark.asyncio
async def test_list_filters_by_role_and_clinic(client, create_clinic, create_user, headers_for):
    clinic = await create_clinic()
    admin = await create_user(UserRole.CLINIC_ADMIN, clinic)
    doctor = await create_user(UserRole.DOCTOR, clinic)
    await create_user(UserRole.SECRETARY, clinic)
    await create_user(UserRole.DOCTOR, clinic, is_active=False)
    await create_user(UserRole.DOCTOR, await create_clinic())

    everyone = await client.get("/api/v1/users/", headers=headers_for(admin))
    doctors = await client.get("/api/v1/users/", params={"role": "DOCTOR"}, headers=headers_for(admin))

    assert len(everyone.json()) == 3
    assert [u["id"] for u in doctors.json()] == [str(doctor.id)]


@pytest.mark.asyncio
async def test_secretary_lists_doctors(client, create_clinic, create_user, headers_for):
    clinic = await create_clinic()
    secretary = await create_user(UserRole.SECRETARY, clinic)
    doctor = await create_user(UserRole.DOCTOR, clinic)
    await create_user(UserRole.DOCTOR, await create_clinic())

    response = await client.get("/api/v1/users/doctors", headers=headers_for(secretary))

    assert response.status_code == 200
    assert [d["id"] for d in response.json()] == [str(doctor.id)]


@pytest.mark.asyncio
async def test_doctor_cannot_list_doctors(client, create_clinic, create_user, headers_for):
    doctor = await create_user(UserRole.DOCTOR, await create_clinic())

    response = await client.get("/api/v1/users/doctors", headers=headers_for(doctor))

    assert response.status_code == 403


class TestCrossClinicStaff:
    """Staff of another clinic is invisible to an admin"""

    @pytest.mark.asyncio
    async def test_get_update_delete_are_not_found(self, client, db, create_clinic, create_user, headers_for):
        admin = await create_user(UserRole.CLINIC_ADMIN, await create_clinic())
        outsider = await create_user(UserRole.DOCTOR, await create_clinic())
        headers = headers_for(admin)

        fetched = await client.get(f"/api/v1/users/{outsider.id}", headers=headers)
        updated = await client.patch(f"/api/v1/users/{outsider.id}", json={"first_name": "X"}, headers=headers)
        deleted = await client.delete(f"/api/v1/users/{outsider.id}", headers=headers)

        assert [fetched.status_code, updated.status_code, deleted.status_code] == [404, 404, 404]
        await db.refresh(outsider)
        assert outsider.first_name == "Test"
        assert outsider.is_active is True


@pytest.mark.asyncio
async def test_update_staff(client, create_clinic, create_user, headers_for):
    clinic = await create_clinic()
    admin = await create_user(UserRole.CLINIC_ADMIN, clinic)
    secretary = await create_user(UserRole.SECRETARY, clinic)

    response = await client.patch(
        f"/api/v1/users/{secretary.id}",
        json={"phone": "555-0100", "role": "CLINIC_ADMIN"},
        headers=headers_for(admin),
    )

    assert response.status_code == 200
    assert response.json()["phone"] == "555-0100"
    assert response.json()["role"] == "CLINIC_ADMIN"


@pytest.mark.asyncio
async def test_deleted_staff_token_stops_working(client, create_clinic, create_user, headers_for):
    clinic = await create_clinic()
    admin = await create_user(UserRole.CLINIC_ADMIN, clinic)
    doctor = await create_user(UserRole.DOCTOR, clinic)

    response = await client.delete(f"/api/v1/users/{doctor.id}", headers=headers_for(admin))
    assert response.status_code == 200

    response = await client.get("/api/v1/patients/", headers=headers_for(doctor))
    assert response.status_code == 401
