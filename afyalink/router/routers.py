# afyalink/router/routers.py

from fastapi import FastAPI
from afyalink.auth.auth_controller import router as auth_router
from afyalink.modules.user.user_controller import router as user_router
from afyalink.modules.patients.patients_controller import router as patients_router
from afyalink.modules.appointments.appointments_controller import router as appointments_router
from afyalink.modules.clinical_notes.clinical_notes_controller import router as clinical_notes_router
from afyalink.modules.dashboard.dashboard_controller import router as dashboard_router

def include_routers(app: FastAPI) -> None:
    """Include all API routers in the FastAPI application."""
    app.include_router(auth_router)
    app.include_router(user_router)
    app.include_router(patients_router)
    app.include_router(appointments_router)
    app.include_router(clinical_notes_router)
    app.include_router(dashboard_router)
