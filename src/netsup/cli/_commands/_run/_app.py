"""Control application factory for the run command.

This module provides a factory function for creating the in-process
FastAPI control application that exposes supervisor control endpoints.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import FastAPI

from netsup.supervisor import create_control_router

if TYPE_CHECKING:
    from netsup.supervisor import Supervisor


def create_control_app(supervisor: Supervisor) -> FastAPI:
    """Create the FastAPI control application.

    Args:
        supervisor: The Supervisor instance to expose.

    Returns:
        A FastAPI application with supervisor control endpoints.
    """
    app = FastAPI(
        title="netsup control",
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.include_router(create_control_router(supervisor))
    return app
