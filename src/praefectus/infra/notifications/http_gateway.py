"""Async HTTP client implementing ``NotificationGatewayPort``.

Posts one JSON request per invitation to the notification service. HTTP
error statuses are reported on the returned receipt; network failures are
raised as ``TransportError``.

Supports both shared and lazily-created ``httpx.AsyncClient`` instances:
- If ``client`` is provided, it is reused across calls (caller manages lifecycle).
- If ``client`` is omitted, an internal client is created on first use.
  Call :meth:`aclose` to release it.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from praefectus.foundation.domain.exceptions import TransportError
from praefectus.foundation.domain.models import DeliveryReceipt
from praefectus.infra.notifications.settings import NotificationSettings, get_notification_settings

logger = logging.getLogger(__name__)


class HttpNotificationGateway:
    """Sends invitation e-mails through an HTTP notification service.

    Args:
        settings: Service URL, credentials and timeout.
        client: Optional shared httpx.AsyncClient instance.
    """

    def __init__(
        self,
        settings: NotificationSettings | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._settings = settings or get_notification_settings()
        self._base_url = self._settings.base_url.rstrip("/")
        self._external_client = client is not None
        self._client: httpx.AsyncClient | None = client

    @property
    def invitation_url(self) -> str:
        return f"{self._base_url}/{self._settings.invitation_path.lstrip('/')}"

    async def send_invitation(
        self,
        email: str,
        tenant_id: str,
        tenant_name: str,
        activation_link: str,
        recipient_name: str | None = None,
    ) -> DeliveryReceipt:
        """POST the invitation to the notification service.

        Returns:
            A successful receipt for 2xx responses, otherwise a failed
            receipt carrying the service's error message.

        Raises:
            TransportError: If the service could not be reached.
        """
        payload: dict[str, Any] = {
            "email": email,
            "name": recipient_name,
            "companyName": tenant_name,
            "companyId": tenant_id,
            "activationLink": activation_link,
        }
        headers = {"Content-Type": "application/json"}
        if self._settings.api_key:
            headers["Authorization"] = f"Bearer {self._settings.api_key}"

        client = self._get_client()
        try:
            response = await client.post(
                self.invitation_url,
                json=payload,
                headers=headers,
                timeout=self._settings.timeout,
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            error = _error_message(exc.response)
            logger.error(
                "invitation_gateway_rejected",
                extra={"status": exc.response.status_code, "tenant_id": tenant_id},
            )
            return DeliveryReceipt(success=False, error=error)
        except httpx.HTTPError as exc:
            logger.error(
                "invitation_gateway_unreachable",
                extra={"tenant_id": tenant_id, "error": type(exc).__name__},
            )
            raise TransportError(
                "send_invitation", str(exc) or type(exc).__name__, tenant_id=tenant_id
            ) from exc

        body = _json_body(response)
        if body.get("success") is False:
            return DeliveryReceipt(success=False, error=str(body.get("error") or "unknown"))
        message_id = body.get("id") or body.get("messageId")
        return DeliveryReceipt(success=True, message_id=str(message_id) if message_id else None)

    def _get_client(self) -> httpx.AsyncClient:
        """Return the shared or lazily-created httpx.AsyncClient."""
        if self._client is None:
            self._client = httpx.AsyncClient()
        return self._client

    async def aclose(self) -> None:
        """Close the internal httpx.AsyncClient if we own it.

        No-op if the client was provided externally or not yet created.
        """
        if self._client is not None and not self._external_client:
            await self._client.aclose()
            self._client = None


def _json_body(response: httpx.Response) -> dict[str, Any]:
    if not response.headers.get("content-type", "").startswith("application/json"):
        return {}
    body = response.json()
    return body if isinstance(body, dict) else {}


def _error_message(response: httpx.Response) -> str:
    body = _json_body(response)
    error = body.get("error") or body.get("message")
    if error:
        return str(error)
    return f"HTTP {response.status_code}"
