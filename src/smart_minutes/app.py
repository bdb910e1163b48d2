"""FastAPI application factory."""

from contextlib import asynccontextmanager

from fastapi import FastAPI

from smart_minutes.dependencies import init_dependencies, shutdown_dependencies
from smart_minutes.routes import minutes_router


@asynccontextmanager
async def _lifespan(app: FastAPI):
    init_dependencies()
    yield
    shutdown_dependencies()


def create_app(initialize: bool = True) -> FastAPI:
    """
    Creates the API application.

    Args:
        initialize: Build the pipeline's external clients on startup. Tests
            pass False and override the pipeline dependency instead.
    """
    app = FastAPI(title="Smart Minutes Service", lifespan=_lifespan if initialize else None)
    app.include_router(minutes_router)
    return app
