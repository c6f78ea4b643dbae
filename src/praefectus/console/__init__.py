"""Praefectus Console -- FastAPI routes over the tenant and administrator managers."""

from praefectus.console.app import create_console_app
from praefectus.console.services import ConsoleServices, build_services, build_sql_services

__all__ = [
    "ConsoleServices",
    "build_services",
    "build_sql_services",
    "create_console_app",
]
