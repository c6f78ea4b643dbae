"""Tests for the app factory, request-id middleware and RFC 7807 handlers."""

from __future__ import annotations

import uuid
from contextlib import asynccontextmanager
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

import pytest
from fastapi import APIRouter
from fastapi.testclient import TestClient
from pydantic import BaseModel

from praefectus.foundation.application import LifespanContribution
from praefectus.foundation.domain import (
    ConflictError,
    DomainError,
    FatalInconsistencyError,
    InvalidStateTransitionError,
    NotFoundError,
    TransportError,
    ValidationError,
)
from praefectus.infra.fastapi import AppSettings, create_app, get_request_id
from praefectus.infra.fastapi.error_handlers import _sanitize_context

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from fastapi import FastAPI

TENANT_ID = "6f1c2a10-8d7e-4c5b-9a3f-2e1d0c9b8a76"

_ERRORS: dict[str, DomainError] = {
    "validation": ValidationError("email", "Invalid email format"),
    "not-found": NotFoundError("Tenant", TENANT_ID),
    "transition": InvalidStateTransitionError(
        "Cannot move administrator from active to created", current_status="active"
    ),
    "conflict": ConflictError("Tenant name is already in use", slug="acme"),
    "fatal": FatalInconsistencyError("cascade stopped midway", tenant_id=TENANT_ID),
    "transport": TransportError(
        "create_tenant", "postgresql+psycopg://admin:pw@db:5432/console refused"
    ),
    "domain": DomainError("Generic failure"),
}


class _Body(BaseModel):
    count: int


def _router() -> APIRouter:
    router = APIRouter()

    @router.get("/raise/{kind}")
    async def raise_domain(kind: str) -> None:
        raise _ERRORS[kind]

    @router.get("/boom")
    async def boom() -> None:
        msg = "unexpected"
        raise RuntimeError(msg)

    @router.post("/body")
    async def body(payload: _Body) -> dict[str, int]:
        return {"count": payload.count}

    @router.get("/request-id")
    async def request_id() -> dict[str, str]:
        return {"request_id": get_request_id()}

    return router


def _app(**settings: Any) -> FastAPI:
    return create_app(AppSettings(**settings), routers=[_router()])


@pytest.fixture()
def client() -> TestClient:
    return TestClient(_app(), raise_server_exceptions=False)


class TestDomainErrorHandler:
    @pytest.mark.unit
    @pytest.mark.parametrize(
        ("kind", "status", "problem_type", "error_code"),
        [
            ("validation", 422, "/errors/validation-error", "VALIDATION_ERROR"),
            ("not-found", 404, "/errors/not-found", "RESOURCE_NOT_FOUND"),
            ("transition", 409, "/errors/invalid-state-transition", "INVALID_STATE_TRANSITION"),
            ("conflict", 409, "/errors/conflict", "CONFLICT"),
            ("fatal", 500, "/errors/fatal-inconsistency", "FATAL_INCONSISTENCY"),
            ("transport", 503, "/errors/service-unavailable", "TRANSPORT_ERROR"),
            ("domain", 400, "/errors/domain-error", "DOMAIN_ERROR"),
        ],
    )
    def test_status_mapping(
        self, client: TestClient, kind: str, status: int, problem_type: str, error_code: str
    ) -> None:
        response = client.get(f"/raise/{kind}")

        assert response.status_code == status
        assert response.headers["content-type"] == "application/problem+json"
        body = response.json()
        assert body["type"] == problem_type
        assert body["status"] == status
        assert body["error_code"] == error_code
        assert body["instance"] == f"/raise/{kind}"

    @pytest.mark.unit
    def test_client_errors_carry_no_correlation_id(self, client: TestClient) -> None:
        body = client.get("/raise/not-found").json()

        assert "correlation_id" not in body
        assert body["context"]["resource_id"] == TENANT_ID

    @pytest.mark.unit
    def test_fatal_inconsistency_is_logged_critical(
        self, client: TestClient, caplog: pytest.LogCaptureFixture
    ) -> None:
        request_id = str(uuid.uuid4())
        with caplog.at_level("ERROR"):
            response = client.get("/raise/fatal", headers={"X-Request-ID": request_id})

        body = response.json()
        assert body["title"] == "Fatal Inconsistency"
        assert body["correlation_id"] == request_id
        [record] = [r for r in caplog.records if r.getMessage() == "domain_error_response"]
        assert record.levelname == "CRITICAL"
        assert record.correlation_id == request_id

    @pytest.mark.unit
    def test_transport_error_is_retryable_and_sanitized(self, client: TestClient) -> None:
        response = client.get("/raise/transport")

        assert response.headers["retry-after"] == "30"
        body = response.json()
        assert "admin:pw" not in body["detail"]
        assert "admin:pw" not in body["context"]["reason"]
        assert "[REDACTED]" in body["context"]["reason"]


class TestOtherHandlers:
    @pytest.mark.unit
    def test_request_validation_is_422(self, client: TestClient) -> None:
        response = client.post("/body", json={"count": "many"})

        assert response.status_code == 422
        body = response.json()
        assert body["error_code"] == "REQUEST_VALIDATION_ERROR"
        assert body["context"]["errors"][0]["loc"] == ["body", "count"]

    @pytest.mark.unit
    def test_unhandled_exception_is_opaque(self, client: TestClient) -> None:
        response = client.get("/boom")

        assert response.status_code == 500
        body = response.json()
        assert body["error_code"] == "INTERNAL_ERROR"
        assert "unexpected" not in body["detail"]
        assert "correlation_id" in body

    @pytest.mark.unit
    def test_unhandled_exception_detail_in_debug(self) -> None:
        client = TestClient(_app(debug=True), raise_server_exceptions=False)

        body = client.get("/boom").json()

        assert body["detail"] == "RuntimeError: unexpected"


class TestSanitizeContext:
    @pytest.mark.unit
    def test_drops_secret_keys_and_coerces_values(self) -> None:
        stamp = datetime(2026, 3, 1, tzinfo=UTC)
        ident = uuid.UUID(TENANT_ID)

        result = _sanitize_context(
            {
                "password": "hunter22",
                "api_key": "k",
                "tenant_id": ident,
                "at": stamp,
                "nested": {"token": "t", "keys": ("a", "b")},
                "obj": object,
            }
        )

        assert result is not None
        assert set(result) == {"tenant_id", "at", "nested", "obj"}
        assert result["tenant_id"] == TENANT_ID
        assert result["at"] == stamp.isoformat()
        assert result["nested"] == {"keys": ["a", "b"]}
        assert isinstance(result["obj"], str)

    @pytest.mark.unit
    def test_empty_context(self) -> None:
        assert _sanitize_context({}) is None
        assert _sanitize_context({"secret": "x"}) is None


class TestRequestIdMiddleware:
    @pytest.mark.unit
    def test_valid_incoming_id_is_propagated(self, client: TestClient) -> None:
        request_id = str(uuid.uuid4())

        response = client.get("/request-id", headers={"X-Request-ID": request_id})

        assert response.json() == {"request_id": request_id}
        assert response.headers["x-request-id"] == request_id

    @pytest.mark.unit
    def test_invalid_incoming_id_is_replaced(self, client: TestClient) -> None:
        response = client.get("/request-id", headers={"X-Request-ID": "not-a-uuid"})

        minted = response.headers["x-request-id"]
        assert minted != "not-a-uuid"
        assert uuid.UUID(minted)
        assert response.json() == {"request_id": minted}


class TestLifespanComposition:
    @pytest.mark.unit
    def test_hooks_run_in_priority_order_and_unwind_in_reverse(self) -> None:
        events: list[str] = []

        def hook(label: str) -> Any:
            @asynccontextmanager
            async def _hook(app: Any) -> AsyncIterator[None]:
                events.append(f"start:{label}")
                yield
                events.append(f"stop:{label}")

            return _hook

        app = create_app(
            AppSettings(),
            lifespan_hooks=[
                LifespanContribution(hook=hook("services"), priority=150),
                LifespanContribution(hook=hook("logging"), priority=50),
            ],
        )
        with TestClient(app):
            assert events == ["start:logging", "start:services"]

        assert events == [
            "start:logging",
            "start:services",
            "stop:services",
            "stop:logging",
        ]
