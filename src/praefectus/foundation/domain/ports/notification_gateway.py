"""Port interface for outbound invitation delivery.

The gateway gives no idempotency guarantee per ``(recipient, tenant)``:
every call may produce a new e-mail.

Example:
    >>> from praefectus.foundation.domain.models import DeliveryReceipt
    >>> from praefectus.foundation.domain.ports import NotificationGatewayPort
    >>> class NullGateway:
    ...     async def send_invitation(self, email, tenant_id, tenant_name,
    ...                               activation_link, recipient_name=None):
    ...         return DeliveryReceipt(success=True)
    >>> isinstance(NullGateway(), NotificationGatewayPort)
    True
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from praefectus.foundation.domain.models import DeliveryReceipt


@runtime_checkable
class NotificationGatewayPort(Protocol):
    """Port for sending invitation and activation e-mails."""

    async def send_invitation(
        self,
        email: str,
        tenant_id: str,
        tenant_name: str,
        activation_link: str,
        recipient_name: str | None = None,
    ) -> DeliveryReceipt:
        """Deliver one invitation.

        Returns:
            A receipt whose ``success`` flag tells whether the message was
            accepted for delivery, with an ``error`` description otherwise.
        """
        ...
