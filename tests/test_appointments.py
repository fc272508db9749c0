# tests/test_appointments.py

import asyncio
import uuid

import pytest

from afyalink.modules.appointments import appointments_service


@pytest.fixture
async def patient(create_patient):
    return await create_patient()


@pytest.fixture
def doctor_id(staff):
    return staff["doctor"]["user"]["id"]


async def test_booking_starts_scheduled(book, patient, doctor_id):
    response = await book(patient["id"], doctor_id)

    assert response.status_code == 201
    body = response.json()
    assert body["message"] == "Appointment created successfully."
    appointment = body["appointment"]
    assert appointment["status"] == "Scheduled"
    assert appointment["appointment_date"] == "2025-03-01"
    assert appointment["appointment_time"] == "09:00"
    assert appointment["patient_first_name"] == "Jane"
    assert appointment["doctor_username"] == "doctor1"


async def test_double_booking_is_rejected(book, patient, doctor_id):
    first = await book(patient["id"], doctor_id)
    second = await book(patient["id"], doctor_id)

    assert first.status_code == 201
    assert second.status_code == 409
    assert second.json()["detail"] == "Doctor is already booked at this time."


async def test_same_slot_with_another_doctor_is_fine(book, register, patient, doctor_id):
    other, _ = await register("doctor2", role="doctor")

    assert (await book(patient["id"], doctor_id)).status_code == 201
    assert (await book(patient["id"], other["id"])).status_code == 201


async def test_booking_requires_fields(client, staff, patient):
    response = await client.post(
        "/api/appointments",
        json={"patient_id": patient["id"], "appointment_date": "2025-03-01"},
        headers=staff["receptionist"]["headers"],
    )

    assert response.status_code == 400
    assert response.json()["detail"] == "Missing required appointment fields: patient, doctor, date, time."


async def test_booking_unknown_patient(book, doctor_id):
    response = await book(str(uuid.uuid4()), doctor_id)

    assert response.status_code == 400
    assert response.json()["detail"] == "Patient not found."


@pytest.mark.parametrize("who", ["nurse", "missing"])
async def test_booking_requires_a_doctor(book, staff, patient, who):
    doctor = staff["nurse"]["user"]["id"] if who == "nurse" else str(uuid.uuid4())

    response = await book(patient["id"], doctor)

    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid doctor ID or user is not a doctor."


async def test_cancelled_slot_can_be_rebooked(client, staff, book, patient, doctor_id):
    first = (await book(patient["id"], doctor_id)).json()["appointment"]

    cancel = await client.put(
        f"/api/appointments/{first['id']}",
        json={"status": "Cancelled"},
        headers=staff["receptionist"]["headers"],
    )
    rebook = await book(patient["id"], doctor_id)

    assert cancel.status_code == 200
    assert cancel.json()["appointment"]["status"] == "Cancelled"
    assert rebook.status_code == 201


async def test_reactivating_into_a_taken_slot_conflicts(client, staff, book, patient, doctor_id):
    headers = staff["receptionist"]["headers"]
    first = (await book(patient["id"], doctor_id)).json()["appointment"]
    await client.put(f"/api/appointments/{first['id']}", json={"status": "Cancelled"}, headers=headers)
    await book(patient["id"], doctor_id)

    response = await client.put(
        f"/api/appointments/{first['id']}", json={"status": "Scheduled"}, headers=headers
    )

    assert response.status_code == 409
    assert response.json()["detail"] == "Doctor is already booked at this new time slot."


async def test_update_keeping_own_slot_is_allowed(client, staff, book, patient, doctor_id):
    appointment = (await book(patient["id"], doctor_id)).json()["appointment"]

    response = await client.put(
        f"/api/appointments/{appointment['id']}",
        json={"appointment_date": "2025-03-01", "appointment_time": "09:00", "reason": "Follow-up"},
        headers=staff["receptionist"]["headers"],
    )

    assert response.status_code == 200
    assert response.json()["appointment"]["reason"] == "Follow-up"


async def test_moving_into_an_occupied_slot_conflicts(client, staff, book, patient, doctor_id):
    await book(patient["id"], doctor_id, time="09:00")
    later = (await book(patient["id"], doctor_id, time="10:00")).json()["appointment"]

    response = await client.put(
        f"/api/appointments/{later['id']}",
        json={"appointment_time": "09:00"},
        headers=staff["receptionist"]["headers"],
    )

    assert response.status_code == 409


async def test_update_is_a_merge_patch(client, staff, book, patient, doctor_id):
    appointment = (await book(patient["id"], doctor_id, reason="Checkup")).json()["appointment"]

    response = await client.put(
        f"/api/appointments/{appointment['id']}",
        json={"appointment_time": "11:30"},
        headers=staff["admin"]["headers"],
    )

    updated = response.json()["appointment"]
    assert updated["appointment_time"] == "11:30"
    assert updated["appointment_date"] == "2025-03-01"
    assert updated["reason"] == "Checkup"
    assert updated["status"] == "Scheduled"
    assert updated["doctor_id"] == doctor_id


async def test_any_status_may_follow_any_other(client, staff, book, patient, doctor_id):
    headers = staff["receptionist"]["headers"]
    appointment = (await book(patient["id"], doctor_id)).json()["appointment"]
    url = f"/api/appointments/{appointment['id']}"

    for status in ("Completed", "Scheduled", "Rescheduled", "Confirmed", "Cancelled"):
        response = await client.put(url, json={"status": status}, headers=headers)
        assert response.status_code == 200
        assert response.json()["appointment"]["status"] == status


async def test_update_to_non_doctor_is_rejected(client, staff, book, patient, doctor_id):
    appointment = (await book(patient["id"], doctor_id)).json()["appointment"]

    response = await client.put(
        f"/api/appointments/{appointment['id']}",
        json={"doctor_id": staff["receptionist"]["user"]["id"]},
        headers=staff["receptionist"]["headers"],
    )

    assert response.status_code == 400


async def test_update_to_unknown_patient_is_404(client, staff, book, patient, doctor_id):
    appointment = (await book(patient["id"], doctor_id)).json()["appointment"]

    response = await client.put(
        f"/api/appointments/{appointment['id']}",
        json={"patient_id": str(uuid.uuid4())},
        headers=staff["receptionist"]["headers"],
    )

    assert response.status_code == 404


async def test_unknown_appointment_is_404(client, staff):
    missing = uuid.uuid4()
    headers = staff["admin"]["headers"]

    assert (await client.get(f"/api/appointments/{missing}", headers=headers)).status_code == 404
    assert (await client.put(f"/api/appointments/{missing}", json={}, headers=headers)).status_code == 404
    assert (await client.delete(f"/api/appointments/{missing}", headers=headers)).status_code == 404


async def test_delete_frees_the_slot(client, staff, book, patient, doctor_id):
    appointment = (await book(patient["id"], doctor_id)).json()["appointment"]

    response = await client.delete(f"/api/appointments/{appointment['id']}", headers=staff["admin"]["headers"])

    assert response.status_code == 200
    assert response.json()["id"] == appointment["id"]
    assert (await book(patient["id"], doctor_id)).status_code == 201


async def test_listing_filters_and_ordering(client, staff, register, book, create_patient, patient, doctor_id):
    other_doctor, _ = await register("doctor2", role="doctor")
    other_patient = await create_patient(first_name="John")
    await book(patient["id"], doctor_id, date="2025-03-01", time="10:00")
    await book(patient["id"], doctor_id, date="2025-03-01", time="08:00")
    await book(patient["id"], doctor_id, date="2025-03-02", time="09:00")
    await book(other_patient["id"], other_doctor["id"], date="2025-03-01", time="10:00")
    headers = staff["nurse"]["headers"]

    everything = (await client.get("/api/appointments", headers=headers)).json()
    assert [(a["appointment_date"], a["appointment_time"]) for a in everything] == [
        ("2025-03-02", "09:00"),
        ("2025-03-01", "08:00"),
        ("2025-03-01", "10:00"),
        ("2025-03-01", "10:00"),
    ]

    by_doctor_and_date = (await client.get(
        "/api/appointments",
        params={"doctor_id": doctor_id, "date": "2025-03-01"},
        headers=headers,
    )).json()
    assert [a["appointment_time"] for a in by_doctor_and_date] == ["08:00", "10:00"]

    by_patient = (await client.get(
        "/api/appointments", params={"patient_id": other_patient["id"]}, headers=headers
    )).json()
    assert len(by_patient) == 1
    assert by_patient[0]["patient_first_name"] == "John"


async def test_listing_by_status(client, staff, book, patient, doctor_id):
    headers = staff["receptionist"]["headers"]
    cancelled = (await book(patient["id"], doctor_id, time="08:00")).json()["appointment"]
    await book(patient["id"], doctor_id, time="09:00")
    await client.put(f"/api/appointments/{cancelled['id']}", json={"status": "Cancelled"}, headers=headers)

    response = await client.get("/api/appointments", params={"status": "Cancelled"}, headers=headers)

    assert [a["id"] for a in response.json()] == [cancelled["id"]]


async def test_storage_keeps_a_single_winner(monkeypatch, book, patient, doctor_id):
    """Even when the early lookup misses a rival booking, only one Scheduled row survives."""
    async def no_conflict(*args, **kwargs):
        return None

    monkeypatch.setattr(appointments_service, "find_conflicting_appointment", no_conflict)

    first = await book(patient["id"], doctor_id)
    second = await book(patient["id"], doctor_id)

    assert first.status_code == 201
    assert second.status_code == 409
    assert second.json()["detail"] == "Doctor is already booked at this time."


async def test_seconds_do_not_split_a_slot(book, patient, doctor_id):
    first = await book(patient["id"], doctor_id, time="09:00:30")
    second = await book(patient["id"], doctor_id, time="09:00:00")

    assert first.status_code == 201
    assert first.json()["appointment"]["appointment_time"] == "09:00"
    assert second.status_code == 409


async def test_moving_to_seconds_within_a_taken_minute_conflicts(client, staff, book, patient, doctor_id):
    await book(patient["id"], doctor_id, time="09:00")
    later = (await book(patient["id"], doctor_id, time="10:00")).json()["appointment"]

    response = await client.put(
        f"/api/appointments/{later['id']}",
        json={"appointment_time": "09:00:45"},
        headers=staff["receptionist"]["headers"],
    )

    assert response.status_code == 409


async def test_concurrent_bookings_have_one_winner(client, staff, book, patient, doctor_id):
    results = await asyncio.gather(
        book(patient["id"], doctor_id),
        book(patient["id"], doctor_id),
    )

    assert sorted(r.status_code for r in results) == [201, 409]
    listing = await client.get(
        "/api/appointments",
        params={"doctor_id": doctor_id, "status": "Scheduled"},
        headers=staff["receptionist"]["headers"],
    )
    assert len(listing.json()) == 1
