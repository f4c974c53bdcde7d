"""
Main entrypoint for the Mailing List API.

This module assembles the FastAPI application.  ``create_app`` sets up
logging, builds the subscriber store for the configured database,
installs the error handlers and includes the router.  The store is kept
on ``app.state`` and handed to each route through the ``get_store``
dependency.  The default instance is created at import time as ``app``
so it can be served directly, e.g.::

    uvicorn mailinglist_api.app.main:app

The subscriber table is created when the application starts.  Startup
fails if the table cannot be created for any reason other than it
already existing.
"""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from .api.router import router
from .core.config import Settings, settings as default_settings
from .core.db import get_database_path
from .core.errors import register_exception_handlers
from .core.logging_config import setup_logging
from .services.email_service import EmailStore


@asynccontextmanager
async def lifespan(app: FastAPI):
    app.state.store.ensure_schema()
    yield


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Create and configure a FastAPI application.

    Parameters
    ----------
    settings : Optional[Settings]
        Settings to build the app from.  Defaults to the module level
        settings read from the environment.

    Returns
    -------
    FastAPI
        A configured application whose store points at
        ``settings.database_url``.
    """
    settings = settings or default_settings
    setup_logging(settings.log_level, settings.log_file)

    app = FastAPI(title=settings.project_name, version=settings.api_version, lifespan=lifespan)
    app.state.settings = settings
    app.state.store = EmailStore(get_database_path(settings.database_url))

    register_exception_handlers(app)
    app.include_router(router)
    return app


app = create_app()
