"""Invitation route: (re-)send an activation e-mail to an administrator."""

from __future__ import annotations

from fastapi import APIRouter

from praefectus.console.dependencies import Services  # noqa: TC001
from praefectus.console.schemas import InvitationResponse, SendInvitationRequest

router = APIRouter(prefix="/tenants/{tenant_id}/invitations", tags=["invitations"])


@router.post("")
async def send_invitation(
    tenant_id: str, body: SendInvitationRequest, services: Services
) -> InvitationResponse:
    tenant = await services.tenants.get_tenant(tenant_id)
    result = await services.invitations.send(
        body.email, tenant.id, tenant.name, recipient_name=body.recipient_name
    )
    return InvitationResponse(
        email=result.email,
        tenant_id=result.tenant_id,
        invited_at=result.invited_at,
        bookkeeping_recorded=result.bookkeeping_recorded,
        warning=result.warning,
        message_id=result.message_id,
    )
