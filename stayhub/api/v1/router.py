from fastapi import APIRouter

from stayhub.api.v1.endpoints.health import router as health_router
from stayhub.api.v1.endpoints.users import router as users_router
from stayhub.api.v1.endpoints.me import router as me_router
from stayhub.api.v1.endpoints.listings import router as listings_router
from stayhub.api.v1.endpoints.public_listings import router as public_listings_router
from stayhub.api.v1.endpoints.admin_listings import router as admin_listings_router
from stayhub.api.v1.endpoints.discounts import router as discounts_router


router = APIRouter(prefix="/v1")
router.include_router(health_router, tags=["health"])
router.include_router(users_router, tags=["users"])
router.include_router(me_router, tags=["me"])
router.include_router(listings_router, tags=["listings"])
router.include_router(public_listings_router, tags=["public"])
router.include_router(admin_listings_router, tags=["admin"])
router.include_router(discounts_router, tags=["discounts"])
