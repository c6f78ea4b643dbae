"""Console API routers."""

from praefectus.console.routers.admins import router as admins_router
from praefectus.console.routers.invitations import router as invitations_router
from praefectus.console.routers.tenants import router as tenants_router

ROUTERS = [tenants_router, admins_router, invitations_router]

__all__ = [
    "ROUTERS",
    "admins_router",
    "invitations_router",
    "tenants_router",
]
