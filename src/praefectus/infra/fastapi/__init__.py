"""Praefectus Infra FastAPI -- app factory, RFC 7807 errors, request-id middleware."""

from praefectus.infra.fastapi.app_factory import create_app
from praefectus.infra.fastapi.error_handlers import ProblemDetail, register_exception_handlers
from praefectus.infra.fastapi.lifespan import compose_lifespan
from praefectus.infra.fastapi.middleware import RequestIdMiddleware, get_request_id
from praefectus.infra.fastapi.settings import AppSettings, CORSSettings

__all__ = [
    "AppSettings",
    "CORSSettings",
    "ProblemDetail",
    "RequestIdMiddleware",
    "compose_lifespan",
    "create_app",
    "get_request_id",
    "register_exception_handlers",
]
