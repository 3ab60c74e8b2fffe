# freightlink/api/v1/router.py
from fastapi import APIRouter
from freightlink.api.v1.auth import router as auth_router
from freightlink.modules.shipments import router as shipments_router
from freightlink.modules.profiles import driver_router, business_router


# Main API v1 router
api_router = APIRouter()

api_router.include_router(auth_router, prefix="/auth", tags=["Authentication"])

api_router.include_router(
    shipments_router,
    prefix="/shipments",
    tags=["Shipments"]
)

api_router.include_router(
    driver_router,
    prefix="/driver",
    tags=["Driver"]
)

api_router.include_router(
    business_router,
    prefix="/business",
    tags=["Business"]
)


@api_router.get("/")
async def api_root():
    """API v1 root"""
    return {
        "message": "FreightLink API v1",
        "status": "active",
        "docs": "/docs",
        "available_endpoints": {
            "authentication": "/api/v1/auth",
            "shipments": "/api/v1/shipments",
            "driver": "/api/v1/driver",
            "business": "/api/v1/business"
        }
    }
