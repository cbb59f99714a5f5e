"""VulnShop - Insecure Microservices Demo

FastAPI application factory for the users, products, orders and gateway
services.
"""
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from . import __version__
from .api import gateway_routes, orders_routes, products_routes, users_routes
from .core.config import SEEDS_DIR, Settings
from .core.database import Database
from .core.logging import get_logger, setup_logging
from .core.middleware import APIKeyMiddleware, RequestIdMiddleware
from .services import ServiceProxy, SnapshotClient

SERVICES = {
    "users": {"router": users_routes.router, "port": 8081, "seed": SEEDS_DIR / "users.sql"},
    "products": {"router": products_routes.router, "port": 8082, "seed": SEEDS_DIR / "products.sql"},
    "orders": {"router": orders_routes.router, "port": 8083, "seed": None},
    "gateway": {"router": gateway_routes.router, "port": 8080, "seed": None},
}

DATABASE_SERVICES = {"users", "products", "orders"}


def create_app(
    service: str,
    settings: Optional[Settings] = None,
    database: Optional[Database] = None,
) -> FastAPI:
    """
    Build the FastAPI application for one service.

    Args:
        service: One of users, products, orders or gateway.
        settings: Settings to use; read from the environment when omitted.
        database: Pre-built store. When omitted, database-backed services
            open their own on startup and close it on shutdown.
    """
    if service not in SERVICES:
        raise ValueError(f"Unknown service: {service}")

    service_info = SERVICES[service]
    settings = settings or Settings()
    if service_info["seed"] is not None:
        settings = settings.with_seed_defaults(service_info["seed"])
    logger = get_logger(f"vulnshop.{service}")

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        owned = None
        if service in DATABASE_SERVICES and app.state.db is None:
            owned = Database(settings)
            app.state.db = owned
        logger.info(f"{service} service starting", service=service)

        yield

        if owned is not None:
            owned.close()
            app.state.db = None
        logger.info(f"{service} service stopped", service=service)

    app = FastAPI(
        title=f"VulnShop {service} service",
        description="Deliberately vulnerable demo service. Do not deploy.",
        version=__version__,
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.db = database
    app.state.snapshots = SnapshotClient(
        settings.USERS_SERVICE_URL,
        settings.PRODUCTS_SERVICE_URL,
        timeout=settings.SNAPSHOT_TIMEOUT,
    )
    app.state.proxy = ServiceProxy()

    if service == "gateway":
        app.add_middleware(APIKeyMiddleware, api_key=settings.API_KEY)
    app.add_middleware(RequestIdMiddleware)
    app.include_router(service_info["router"])

    @app.get("/health")
    async def health_check():
        return {"status": "healthy", "service": service}

    return app


def default_port(service: str, settings: Settings) -> int:
    """PORT wins over the per-service default."""
    return settings.PORT or SERVICES[service]["port"]


def run(service: str, port: Optional[int] = None):
    """Serve one service with uvicorn."""
    import uvicorn

    settings = Settings()
    setup_logging(json_format=settings.LOG_JSON, level=settings.LOG_LEVEL)
    app = create_app(service, settings)
    port = port or default_port(service, settings)
    get_logger(f"vulnshop.{service}").info(f"{service} service listening on port {port}")
    uvicorn.run(app, host="0.0.0.0", port=port)


if __name__ == "__main__":
    import sys
    run(sys.argv[1] if len(sys.argv) > 1 else "gateway")
