"""Tenant routes: CRUD, activation, module licensing and license history."""

from __future__ import annotations

from fastapi import APIRouter, Query, Response, status

from praefectus.console.dependencies import ActorId, Services  # noqa: TC001
from praefectus.console.schemas import (
    CreatedResponse,
    CreateTenantRequest,
    DeletionResponse,
    SetActiveRequest,
    SetModuleRequest,
)
from praefectus.foundation.domain.models import (
    LicenseHistoryEntry,
    ModuleAssignment,
    Tenant,
    TenantUpdate,
)
from praefectus.foundation.domain.outcomes import DeletionOutcome

router = APIRouter(prefix="/tenants", tags=["tenants"])


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_tenant(body: CreateTenantRequest, services: Services) -> CreatedResponse:
    """Create a tenant. Initialization continues in the background."""
    tenant_id = await services.tenants.create_tenant(
        body.profile(), creator_email=body.creator_email
    )
    return CreatedResponse(id=tenant_id)


@router.get("")
async def list_tenants(
    services: Services,
    active_only: bool = Query(default=False),
) -> list[Tenant]:
    return await services.tenants.list_tenants(active_only=active_only)


@router.get("/{tenant_id}")
async def get_tenant(tenant_id: str, services: Services) -> Tenant:
    return await services.tenants.get_tenant(tenant_id)


@router.patch("/{tenant_id}")
async def update_tenant(tenant_id: str, body: TenantUpdate, services: Services) -> Tenant:
    return await services.tenants.update_tenant(tenant_id, body)


@router.put("/{tenant_id}/active")
async def set_tenant_active(
    tenant_id: str, body: SetActiveRequest, services: Services
) -> Tenant:
    return await services.tenants.set_active(tenant_id, body.is_active)


@router.delete("/{tenant_id}")
async def delete_tenant(tenant_id: str, services: Services, response: Response) -> DeletionResponse:
    """Delete a tenant with everything it owns.

    Answers 202 when a deletion of the same tenant is already running.
    """
    outcome = await services.tenants.delete_tenant(tenant_id)
    if outcome is DeletionOutcome.ALREADY_IN_PROGRESS:
        response.status_code = status.HTTP_202_ACCEPTED
    return DeletionResponse(tenant_id=tenant_id.strip().lower(), outcome=outcome)


@router.get("/{tenant_id}/modules")
async def list_modules(tenant_id: str, services: Services) -> list[ModuleAssignment]:
    return await services.modules.list_modules(tenant_id)


@router.put("/{tenant_id}/modules/{module_key}")
async def set_module(
    tenant_id: str,
    module_key: str,
    body: SetModuleRequest,
    services: Services,
    actor: ActorId,
) -> ModuleAssignment:
    return await services.modules.set_module_enabled(
        tenant_id, module_key, body.is_enabled, performed_by=actor, notes=body.notes
    )


@router.get("/{tenant_id}/license-history")
async def license_history(tenant_id: str, services: Services) -> list[LicenseHistoryEntry]:
    return await services.modules.license_history(tenant_id)
