"""FastAPI application factory.

:func:`create_app` wires explicitly supplied routers, middleware and lifespan
hooks together with CORS and the RFC 7807 exception handlers.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from fastapi import FastAPI
from starlette.middleware.cors import CORSMiddleware

from praefectus.infra.fastapi.error_handlers import register_exception_handlers
from praefectus.infra.fastapi.lifespan import compose_lifespan
from praefectus.infra.fastapi.middleware.request_id import contribution as request_id_contribution
from praefectus.infra.fastapi.settings import AppSettings

if TYPE_CHECKING:
    from fastapi import APIRouter

    from praefectus.foundation.application import LifespanContribution, MiddlewareContribution

logger = logging.getLogger(__name__)


def create_app(
    settings: AppSettings | None = None,
    *,
    routers: list[APIRouter] | None = None,
    middleware: list[MiddlewareContribution] | None = None,
    lifespan_hooks: list[LifespanContribution] | None = None,
) -> FastAPI:
    """Create a FastAPI application from explicit contributions.

    Args:
        settings: Application settings. If ``None``, loaded from environment.
        routers: Routers to include, in order.
        middleware: Middleware in addition to the request-id middleware.
        lifespan_hooks: Lifespan hooks, composed by priority.

    Returns:
        Configured FastAPI application instance.
    """
    settings = settings or AppSettings()

    app = FastAPI(
        title=settings.title,
        version=settings.version,
        description=settings.description,
        docs_url=settings.docs_url,
        redoc_url=settings.redoc_url,
        openapi_url=settings.openapi_url,
        lifespan=compose_lifespan(list(lifespan_hooks or [])),
    )
    # Starlette debug mode stays off: it bypasses the problem+json 500 handler.
    app.state.expose_error_details = settings.debug

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors.allow_origins,
        allow_credentials=settings.cors.allow_credentials,
        allow_methods=settings.cors.allow_methods,
        allow_headers=settings.cors.allow_headers,
        expose_headers=settings.cors.expose_headers,
    )

    # Starlette wraps in reverse registration order: lowest priority ends up outermost.
    contributions = sorted(
        [request_id_contribution, *(middleware or [])],
        key=lambda m: m.priority,
    )
    for mw in reversed(contributions):
        app.add_middleware(mw.middleware_class, **mw.kwargs)
        logger.debug(
            "middleware_registered",
            extra={"middleware": mw.middleware_class.__name__, "priority": mw.priority},
        )

    register_exception_handlers(app)

    for router in routers or []:
        app.include_router(router)

    return app
