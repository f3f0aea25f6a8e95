from fastapi import APIRouter

from telecare.api.v1.endpoints import appointments
from telecare.api.v1.endpoints import availability
from telecare.api.v1.endpoints import recommendations

api_router = APIRouter()

api_router.include_router(recommendations.router, prefix="/recommendations", tags=["recommendations"])
api_router.include_router(availability.router, prefix="/doctors", tags=["availability"])
api_router.include_router(appointments.router, prefix="/appointments", tags=["appointments"])
