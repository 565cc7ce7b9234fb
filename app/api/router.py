"""API router configuration."""

from fastapi import APIRouter

from app.api.endpoints import (
    appointments,
    auth,
    doctors,
    health,
    medical_records,
    notifications,
    prescriptions,
    reviews,
    users,
)

api_router = APIRouter()

# Include routers
api_router.include_router(health.router, tags=["Health"])
api_router.include_router(auth.router, prefix="/auth", tags=["Authentication"])
api_router.include_router(users.router, tags=["Users"])
api_router.include_router(appointments.router, prefix="/appointments", tags=["Appointments"])
api_router.include_router(reviews.router, tags=["Reviews"])
api_router.include_router(doctors.router, prefix="/doctors", tags=["Doctors"])
api_router.include_router(prescriptions.router, tags=["Prescriptions"])
api_router.include_router(medical_records.router, tags=["Medical Records"])
api_router.include_router(notifications.router, tags=["Notifications"])
