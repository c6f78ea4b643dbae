"""FastAPI dependencies for the console routers."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Header, Request

from praefectus.console.services import ConsoleServices


def get_services(request: Request) -> ConsoleServices:
    """Return the services wired onto ``app.state`` by ``create_console_app``."""
    services: ConsoleServices = request.app.state.services
    return services


def get_actor_id(x_user_id: Annotated[str | None, Header()] = None) -> str | None:
    """The acting operator, taken from the ``X-User-ID`` header."""
    if x_user_id is None:
        return None
    return x_user_id.strip() or None


Services = Annotated[ConsoleServices, Depends(get_services)]
ActorId = Annotated[str | None, Depends(get_actor_id)]
