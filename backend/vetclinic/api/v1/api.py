"""Module: api."""

# backend/vetclinic/api/v1/api.py
from fastapi import APIRouter

# Core operational routes (health/auth).
from vetclinic.api.v1.routes.health import router as health_router
from vetclinic.api.v1.routes.auth import router as auth_router

# Clinic domain routes.
from vetclinic.api.v1.routes.pets import router as pets_router
from vetclinic.api.v1.routes.records import router as records_router
from vetclinic.api.v1.routes.users import router as users_router
from vetclinic.api.v1.routes.vaccines import router as vaccines_router


api_router = APIRouter()

# Register operational endpoints first for service-level concerns.
api_router.include_router(health_router, prefix="/health", tags=["health"])
api_router.include_router(auth_router, prefix="/auth", tags=["auth"])
api_router.include_router(users_router, prefix="/users", tags=["users"])

# Register business/domain endpoints consumed by the clinic UI.
api_router.include_router(pets_router, prefix="/pets", tags=["pets"])
api_router.include_router(records_router, prefix="/records", tags=["records"])
api_router.include_router(vaccines_router, prefix="/vaccines", tags=["vaccines"])
