"""Request and response bodies of the console API.

Request bodies accept raw strings; validation happens in the managers so
that every malformed field surfaces as one domain ``ValidationError``.
Read models from ``praefectus.foundation.domain.models`` are returned as-is.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel

from praefectus.foundation.domain.models import AdminProfile, TenantProfile
from praefectus.foundation.domain.outcomes import DeletionOutcome


class CreateTenantRequest(TenantProfile):
    creator_email: str | None = None

    def profile(self) -> TenantProfile:
        return TenantProfile.model_validate(self.model_dump(exclude={"creator_email"}))


class SetActiveRequest(BaseModel):
    is_active: bool


class SetModuleRequest(BaseModel):
    is_enabled: bool
    notes: str | None = None


class CreateAdminRequest(AdminProfile):
    mode: str = "invite"
    password: str | None = None

    def profile(self) -> AdminProfile:
        return AdminProfile.model_validate(self.model_dump(exclude={"mode", "password"}))


class SetAdminStatusRequest(BaseModel):
    status: str


class SendInvitationRequest(BaseModel):
    email: str
    recipient_name: str | None = None


class CreatedResponse(BaseModel):
    id: str


class DeletionResponse(BaseModel):
    tenant_id: str
    outcome: DeletionOutcome


class InvitationResponse(BaseModel):
    email: str
    tenant_id: str
    invited_at: datetime
    bookkeeping_recorded: bool
    warning: str | None = None
    message_id: str | None = None
