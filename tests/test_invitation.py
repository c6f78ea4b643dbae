"""Unit tests for InvitationDispatcher."""

from __future__ import annotations

from typing import TYPE_CHECKING

import httpx
import pytest

from praefectus.domain.identity import build_activation_link
from praefectus.foundation.domain import (
    AdminProfile,
    AdminStatus,
    DeliveryReceipt,
    NotFoundError,
    TransportError,
    ValidationError,
)

if TYPE_CHECKING:
    from praefectus.domain.identity import AdminLifecycleManager, InvitationDispatcher
    from praefectus.foundation.domain import Tenant

    from .conftest import FakeAdminStore, FakeGateway


async def _invitee(admin_manager: AdminLifecycleManager, tenant: Tenant) -> str:
    return await admin_manager.create(
        tenant.id,
        AdminProfile(
            email="erika@acme.de", first_name="Erika", last_name="Musterfrau", salutation="Frau"
        ),
        "invite",
    )


@pytest.mark.unit
class TestActivationLink:
    def test_query_is_encoded(self) -> None:
        link = build_activation_link(
            "https://console.example.com/", "6f1c2a10-8d7e-4c5b-9a3f-2e1d0c9b8a76", "a+b@acme.de"
        )

        assert link == (
            "https://console.example.com/activate"
            "?tenant=6f1c2a10-8d7e-4c5b-9a3f-2e1d0c9b8a76&email=a%2Bb%40acme.de"
        )


@pytest.mark.unit
class TestSendInvitation:
    @pytest.mark.asyncio
    async def test_delivery_and_bookkeeping(
        self,
        dispatcher: InvitationDispatcher,
        admin_manager: AdminLifecycleManager,
        admin_store: FakeAdminStore,
        gateway: FakeGateway,
        tenant: Tenant,
    ) -> None:
        admin_id = await _invitee(admin_manager, tenant)

        result = await dispatcher.send(
            " Erika@Acme.de ", tenant.id, tenant.name, recipient_name="Frau Erika Musterfrau"
        )

        assert result.bookkeeping_recorded is True
        assert result.warning is None
        assert result.message_id == "msg-1"
        [(_, args)] = gateway.calls
        email, tenant_id, tenant_name, link, recipient = args
        assert email == "erika@acme.de"
        assert tenant_id == tenant.id
        assert tenant_name == "Acme GmbH"
        assert link == (
            f"https://console.example.com/activate?tenant={tenant.id}&email=erika%40acme.de"
        )
        assert recipient == "Frau Erika Musterfrau"
        admin = admin_store.admins[admin_id]
        assert admin.last_invited_at == result.invited_at
        assert admin.invitation_count == 1

    @pytest.mark.asyncio
    async def test_status_is_not_changed(
        self,
        dispatcher: InvitationDispatcher,
        admin_manager: AdminLifecycleManager,
        tenant: Tenant,
    ) -> None:
        admin_id = await _invitee(admin_manager, tenant)

        await dispatcher.send("erika@acme.de", tenant.id, tenant.name)

        admin = await admin_manager.get_admin(admin_id, tenant.id)
        assert admin.status is AdminStatus.CREATED

    @pytest.mark.asyncio
    async def test_resending_is_allowed(
        self,
        dispatcher: InvitationDispatcher,
        admin_manager: AdminLifecycleManager,
        admin_store: FakeAdminStore,
        tenant: Tenant,
    ) -> None:
        admin_id = await _invitee(admin_manager, tenant)

        first = await dispatcher.send("erika@acme.de", tenant.id, tenant.name)
        second = await dispatcher.send("erika@acme.de", tenant.id, tenant.name)

        assert second.invited_at > first.invited_at
        assert admin_store.admins[admin_id].invitation_count == 2

    @pytest.mark.asyncio
    async def test_bookkeeping_failure_is_reported_not_raised(
        self,
        dispatcher: InvitationDispatcher,
        admin_store: FakeAdminStore,
        gateway: FakeGateway,
        tenant: Tenant,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        admin_store.failures["mark_invited"] = RuntimeError("admin store offline")

        with caplog.at_level("WARNING"):
            result = await dispatcher.send("erika@acme.de", tenant.id, tenant.name)

        assert result.bookkeeping_recorded is False
        assert result.warning == "admin store offline"
        assert gateway.count("send_invitation") == 1
        assert "invitation_bookkeeping_failed" in [r.getMessage() for r in caplog.records]

    @pytest.mark.asyncio
    async def test_unknown_recipient_still_counts_as_delivered(
        self, dispatcher: InvitationDispatcher, tenant: Tenant
    ) -> None:
        result = await dispatcher.send("stranger@acme.de", tenant.id, tenant.name)

        assert result.bookkeeping_recorded is False
        assert result.warning is not None
        assert "Administrator" in result.warning

    @pytest.mark.asyncio
    async def test_rejected_delivery_raises(
        self,
        dispatcher: InvitationDispatcher,
        admin_store: FakeAdminStore,
        gateway: FakeGateway,
        tenant: Tenant,
    ) -> None:
        gateway.receipt = DeliveryReceipt(success=False, error="mailbox unavailable")

        with pytest.raises(TransportError, match="mailbox unavailable"):
            await dispatcher.send("erika@acme.de", tenant.id, tenant.name)
        assert admin_store.count("mark_invited") == 0

    @pytest.mark.asyncio
    async def test_gateway_exception_becomes_transport_error(
        self,
        dispatcher: InvitationDispatcher,
        admin_store: FakeAdminStore,
        gateway: FakeGateway,
        tenant: Tenant,
    ) -> None:
        gateway.failures["send_invitation"] = httpx.ConnectError("connection refused")

        with pytest.raises(TransportError) as exc_info:
            await dispatcher.send("erika@acme.de", tenant.id, tenant.name)
        assert exc_info.value.context["operation"] == "send_invitation"
        assert admin_store.count("mark_invited") == 0

    @pytest.mark.asyncio
    async def test_gateway_domain_error_passes_through(
        self, dispatcher: InvitationDispatcher, gateway: FakeGateway, tenant: Tenant
    ) -> None:
        gateway.failures["send_invitation"] = NotFoundError("Tenant", tenant.id)

        with pytest.raises(NotFoundError):
            await dispatcher.send("erika@acme.de", tenant.id, tenant.name)

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("email", "tenant_id", "tenant_name", "field"),
        [
            ("not-an-email", "6f1c2a10-8d7e-4c5b-9a3f-2e1d0c9b8a76", "Acme", "email"),
            ("erika@acme.de", "acme", "Acme", "tenant_id"),
            ("erika@acme.de", "6f1c2a10-8d7e-4c5b-9a3f-2e1d0c9b8a76", "   ", "tenant_name"),
        ],
    )
    async def test_invalid_input_makes_no_remote_call(
        self,
        dispatcher: InvitationDispatcher,
        gateway: FakeGateway,
        email: str,
        tenant_id: str,
        tenant_name: str,
        field: str,
    ) -> None:
        with pytest.raises(ValidationError) as exc_info:
            await dispatcher.send(email, tenant_id, tenant_name)

        assert exc_info.value.field == field
        assert gateway.calls == []
