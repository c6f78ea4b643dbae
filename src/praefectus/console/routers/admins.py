"""Administrator routes, nested under their tenant."""

from __future__ import annotations

from fastapi import APIRouter, status

from praefectus.console.dependencies import ActorId, Services  # noqa: TC001
from praefectus.console.schemas import (
    CreateAdminRequest,
    CreatedResponse,
    SetAdminStatusRequest,
)
from praefectus.foundation.domain.models import Administrator, AdminUpdate

router = APIRouter(prefix="/tenants/{tenant_id}/admins", tags=["administrators"])


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_admin(
    tenant_id: str, body: CreateAdminRequest, services: Services
) -> CreatedResponse:
    """Create an administrator in ``invite`` or ``direct`` mode.

    Invite mode sends no e-mail; use the invitations route for that.
    """
    admin_id = await services.admins.create(
        tenant_id, body.profile(), body.mode, password=body.password
    )
    return CreatedResponse(id=admin_id)


@router.get("")
async def list_admins(tenant_id: str, services: Services) -> list[Administrator]:
    return await services.admins.list_admins(tenant_id)


@router.get("/{admin_id}")
async def get_admin(tenant_id: str, admin_id: str, services: Services) -> Administrator:
    return await services.admins.get_admin(admin_id, tenant_id)


@router.patch("/{admin_id}")
async def update_admin(
    tenant_id: str, admin_id: str, body: AdminUpdate, services: Services
) -> Administrator:
    return await services.admins.update(admin_id, tenant_id, body)


@router.put("/{admin_id}/status")
async def set_admin_status(
    tenant_id: str, admin_id: str, body: SetAdminStatusRequest, services: Services
) -> Administrator:
    return await services.admins.advance_status(admin_id, tenant_id, body.status)


@router.delete("/{admin_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_admin(
    tenant_id: str, admin_id: str, services: Services, actor: ActorId
) -> None:
    await services.admins.delete(admin_id, tenant_id, actor_admin_id=actor)
