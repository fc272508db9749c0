# tests/test_access_control.py

import uuid

import pytest


async def test_root_is_public(client):
    response = await client.get("/")

    assert response.status_code == 200
    assert response.json() == {"message": "AfyaLink HMS Backend is Running"}


@pytest.mark.parametrize(
    "method, path",
    [
        ("get", "/api/patients"),
        ("get", "/api/appointments"),
        ("get", "/api/users"),
        ("get", "/api/admin/stats"),
        ("get", f"/api/clinical-notes/patient/{uuid.uuid4()}"),
    ],
)
async def test_protected_routes_need_a_token(client, method, path):
    response = await getattr(client, method)(path)

    assert response.status_code == 401


async def test_malformed_token_is_forbidden(client):
    response = await client.get("/api/patients", headers={"Authorization": "Bearer not-a-jwt"})

    assert response.status_code == 403
    assert response.json()["detail"] == "Not authorized, token failed or expired."


@pytest.mark.parametrize(
    "role, expected",
    [("admin", 201), ("receptionist", 201), ("doctor", 403), ("nurse", 403)],
)
async def test_front_desk_registers_patients(client, staff, role, expected):
    response = await client.post(
        "/api/patients",
        json={"first_name": "A", "last_name": "B", "date_of_birth": "2000-05-05",
              "gender": "Male", "contact_phone": "555-0101"},
        headers=staff[role]["headers"],
    )

    assert response.status_code == expected


async def test_role_denial_names_the_role(client, staff):
    response = await client.get("/api/admin/stats", headers=staff["nurse"]["headers"])

    assert response.status_code == 403
    assert response.json()["detail"] == "User role 'nurse' is not authorized to access this route."


@pytest.mark.parametrize(
    "role, expected",
    [("admin", 200), ("doctor", 200), ("nurse", 200), ("receptionist", 403)],
)
async def test_clinical_staff_read_notes(client, staff, create_patient, role, expected):
    patient = await create_patient()

    response = await client.get(
        f"/api/clinical-notes/patient/{patient['id']}", headers=staff[role]["headers"]
    )

    assert response.status_code == expected


@pytest.mark.parametrize("role", ["nurse", "receptionist"])
async def test_only_doctors_and_admins_write_notes(client, staff, create_patient, role):
    patient = await create_patient()

    response = await client.post(
        "/api/clinical-notes",
        json={"patient_id": patient["id"], "chief_complaint": "Cough"},
        headers=staff[role]["headers"],
    )

    assert response.status_code == 403


@pytest.mark.parametrize("role", ["doctor", "nurse", "receptionist"])
async def test_only_admins_delete_appointments(client, staff, create_patient, book, role):
    patient = await create_patient()
    booked = await book(patient["id"], staff["doctor"]["user"]["id"])
    appointment_id = booked.json()["appointment"]["id"]

    response = await client.delete(f"/api/appointments/{appointment_id}", headers=staff[role]["headers"])

    assert response.status_code == 403


async def test_every_role_can_read_schedules(client, staff):
    for account in staff.values():
        response = await client.get("/api/appointments", headers=account["headers"])
        assert response.status_code == 200
