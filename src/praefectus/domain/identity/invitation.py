"""Invitation dispatch for administrators.

Sending an invitation is two separate operations with different failure
weight:

(a) delivery through the notification gateway: a failure is a hard error
    (``TransportError``); re-sending is always allowed.
(b) recording "last invited at" in the administrator store: best effort.
    The e-mail is already out, so a failure here is logged and reported on
    the result but never raised.

The administrator's status is not touched. Re-sending to an administrator
who is already ``active`` is permitted.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING
from urllib.parse import urlencode

from praefectus.foundation.application.port_calls import call_port
from praefectus.foundation.application.settings import get_lifecycle_settings
from praefectus.foundation.domain import validation
from praefectus.foundation.domain.exceptions import TransportError
from praefectus.foundation.domain.outcomes import InvitationResult
from praefectus.foundation.domain.tenant_value_objects import TenantName

if TYPE_CHECKING:
    from collections.abc import Callable

    from praefectus.foundation.application.settings import LifecycleSettings
    from praefectus.foundation.domain.ports import AdminStorePort, NotificationGatewayPort

logger = logging.getLogger(__name__)


def build_activation_link(base_url: str, tenant_id: str, email: str) -> str:
    """Return the activation URL embedded in the invitation e-mail.

    Example:
        >>> build_activation_link("https://app.example", "550e...", "a@acme.de")
        'https://app.example/activate?tenant=550e...&email=a%40acme.de'
    """
    query = urlencode({"tenant": tenant_id, "email": email})
    return f"{base_url.rstrip('/')}/activate?{query}"


class InvitationDispatcher:
    """Composes and sends one administrator invitation.

    Args:
        gateway: Outbound e-mail delivery.
        admins: Administrator store, for the "last invited at" bookkeeping.
        settings: Supplies the activation page base URL.
        clock: Source of the recorded invitation timestamp.
    """

    def __init__(
        self,
        gateway: NotificationGatewayPort,
        admins: AdminStorePort,
        *,
        settings: LifecycleSettings | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._gateway = gateway
        self._admins = admins
        self._settings = settings or get_lifecycle_settings()
        self._clock = clock or (lambda: datetime.now(UTC))

    async def send(
        self,
        email: str,
        tenant_id: str,
        tenant_name: str,
        *,
        recipient_name: str | None = None,
    ) -> InvitationResult:
        """Deliver an invitation and record that it was issued.

        Args:
            email: Recipient address.
            tenant_id: Tenant the recipient administers.
            tenant_name: Display name used in the e-mail.
            recipient_name: Optional greeting name, e.g. "Herr Max Mustermann".

        Returns:
            The result; ``bookkeeping_recorded`` is False when step (b) failed.

        Raises:
            ValidationError: On a malformed email, tenant id or empty tenant
                name. No remote call is made.
            TransportError: If delivery failed or was rejected.
        """
        address = validation.email(email)
        tid = validation.tenant_id(tenant_id)
        name = validation.validated("tenant_name", TenantName, tenant_name).value

        link = build_activation_link(self._settings.activation_base_url, tid, address)
        receipt = await call_port(
            "send_invitation",
            self._gateway.send_invitation(
                address, tid, name, link, recipient_name=validation.optional_text(recipient_name)
            ),
            tenant_id=tid,
        )
        if not receipt.success:
            reason = receipt.error or "Delivery rejected by gateway"
            logger.warning(
                "invitation_delivery_failed",
                extra={"tenant_id": tid, "error": reason},
            )
            raise TransportError("send_invitation", reason, tenant_id=tid)

        invited_at = self._clock()
        bookkeeping_recorded = True
        warning: str | None = None
        try:
            await self._admins.mark_invited(tid, address, invited_at)
        except Exception as exc:
            bookkeeping_recorded = False
            warning = str(exc) or type(exc).__name__
            logger.warning(
                "invitation_bookkeeping_failed",
                extra={"tenant_id": tid, "error": warning},
                exc_info=exc,
            )

        logger.info(
            "invitation_sent",
            extra={
                "tenant_id": tid,
                "message_id": receipt.message_id,
                "bookkeeping_recorded": bookkeeping_recorded,
            },
        )
        return InvitationResult(
            email=address,
            tenant_id=tid,
            invited_at=invited_at,
            bookkeeping_recorded=bookkeeping_recorded,
            warning=warning,
            message_id=receipt.message_id,
        )
