from fastapi import APIRouter

from estate_market.interfaces.http.routers import admin, marketplace, membership, properties, rpc, wallet


def create_api_router(prefix: str = "") -> APIRouter:
    router = APIRouter(prefix=prefix)
    router.include_router(wallet.router, prefix="/wallet", tags=["wallet"])
    router.include_router(properties.router, prefix="/properties", tags=["properties"])
    router.include_router(marketplace.router, prefix="/marketplace", tags=["marketplace"])
    router.include_router(membership.router, prefix="/membership", tags=["membership"])
    router.include_router(admin.router, prefix="/admin", tags=["admin"])
    router.include_router(rpc.router, prefix="/rpc", tags=["procedures"])
    return router


__all__ = [
    "create_api_router",
]
