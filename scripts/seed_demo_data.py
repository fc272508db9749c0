# scripts/seed_demo_data.py
"""
Demo seed script for AfyaLink HMS.
Creates one account per staff role, a patient, an appointment and a clinical note.

Run: python -m scripts.seed_demo_data
"""

import asyncio
from datetime import date, datetime, time, timedelta, timezone

from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession

from afyalink.common.database.database import async_session, create_tables
from afyalink.auth.auth_service import hash_password
from afyalink.models.models import (
    User, Patient, Appointment, ClinicalNote, UserRole, AppointmentStatus,
)


# =============================================================================
# CONSTANTS - Demo Credentials
# =============================================================================

DEMO_PASSWORD = "Demo1234!"  # Same password for all demo users

DEMO_STAFF = [
    {"username": "admin", "role": UserRole.ADMIN, "first_name": "Amina", "last_name": "Otieno"},
    {"username": "dr.mwangi", "role": UserRole.DOCTOR, "first_name": "Daniel", "last_name": "Mwangi"},
    {"username": "nurse.achieng", "role": UserRole.NURSE, "first_name": "Grace", "last_name": "Achieng"},
    {"username": "reception", "role": UserRole.RECEPTIONIST, "first_name": "Brian", "last_name": "Kiprop"},
]


async def clear_existing_data(db: AsyncSession):
    """Clear all demo data (if needed for re-seeding)."""
    print("🧹 Clearing existing data...")

    # Delete in reverse order of dependencies
    for table in (ClinicalNote, Appointment, Patient, User):
        await db.execute(delete(table))
    await db.flush()

    print("✅ Data cleared")


async def create_staff(db: AsyncSession) -> dict:
    """Create one user per role and return them keyed by role."""
    print("👥 Creating staff accounts...")
    hashed = hash_password(DEMO_PASSWORD)

    staff = {}
    for member in DEMO_STAFF:
        user = User(password_hash=hashed, **member)
        db.add(user)
        staff[member["role"]] = user
    await db.flush()

    return staff


async def create_patient(db: AsyncSession) -> Patient:
    print("🧑 Creating patient: Jane Doe...")
    patient = Patient(
        first_name="Jane",
        last_name="Doe",
        date_of_birth=date(1990, 1, 1),
        gender="Female",
        national_id="12345678",
        contact_phone="555-0100",
        email="jane.doe@example.com",
        address="14 Moi Avenue, Nairobi",
    )
    db.add(patient)
    await db.flush()
    return patient


async def create_visit(db: AsyncSession, patient: Patient, doctor: User):
    """Book tomorrow's check-up and record today's consultation note."""
    print("📅 Creating appointment and clinical note...")
    db.add(Appointment(
        patient_id=patient.id,
        doctor_id=doctor.id,
        appointment_date=date.today() + timedelta(days=1),
        appointment_time=time(9, 0),
        status=AppointmentStatus.SCHEDULED,
        reason="Checkup",
    ))
    db.add(ClinicalNote(
        patient_id=patient.id,
        doctor_id=doctor.id,
        visit_datetime=datetime.now(timezone.utc),
        chief_complaint="Persistent headache for three days",
        diagnosis="Tension headache",
        medications_prescribed="Paracetamol 500mg, twice daily for 3 days",
        vitals="BP 124/82, HR 76, Temp 36.8C",
        notes="Advised rest and hydration. Review if symptoms persist.",
    ))
    await db.flush()


async def seed_all_data(db: AsyncSession):
    """Main seeding function."""
    print("\n🌱 Starting AfyaLink Demo Data Seed")
    print("=" * 50)

    await clear_existing_data(db)
    staff = await create_staff(db)
    patient = await create_patient(db)
    await create_visit(db, patient, staff[UserRole.DOCTOR])

    await db.commit()

    print("\n" + "=" * 50)
    print("✅ Seed complete! Demo credentials:")
    for member in DEMO_STAFF:
        print(f"   {member['role'].value:<13} {member['username']} / {DEMO_PASSWORD}")
    print("=" * 50 + "\n")


# =============================================================================
# MAIN
# =============================================================================

async def main():
    """Run the seed script."""
    await create_tables()
    async with async_session() as db:
        try:
            await seed_all_data(db)
        except Exception as e:
            await db.rollback()
            print(f"\n❌ Error during seeding: {e}")
            raise


if __name__ == "__main__":
    asyncio.run(main())
