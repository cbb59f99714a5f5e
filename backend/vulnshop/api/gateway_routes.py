"""API gateway routes."""
import os

import httpx
from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import RedirectResponse, Response
from starlette.concurrency import run_in_threadpool

from ..core.logging import get_logger
from ..services.proxy import build_target_url

router = APIRouter(tags=["gateway"])
logger = get_logger("vulnshop.gateway")

# (method, gateway path, settings attribute of the upstream, upstream path template)
PROXY_ROUTES = [
    ("POST", "/api/users", "USERS_SERVICE_URL", "/users"),
    ("GET", "/api/users/search", "USERS_SERVICE_URL", "/search"),
    ("GET", "/api/users/{username}", "USERS_SERVICE_URL", "/users/:username"),
    ("POST", "/api/login", "USERS_SERVICE_URL", "/login"),
    ("POST", "/api/products", "PRODUCTS_SERVICE_URL", "/products"),
    ("GET", "/api/products/{id}", "PRODUCTS_SERVICE_URL", "/products/:id"),
    ("PUT", "/api/products/{id}", "PRODUCTS_SERVICE_URL", "/products/:id"),
    ("DELETE", "/api/products/{id}", "PRODUCTS_SERVICE_URL", "/products/:id"),
    ("GET", "/api/products", "PRODUCTS_SERVICE_URL", "/products"),
    ("POST", "/api/orders", "ORDERS_SERVICE_URL", "/orders"),
    ("GET", "/api/orders/{id}", "ORDERS_SERVICE_URL", "/orders/:id"),
    ("GET", "/api/orders", "ORDERS_SERVICE_URL", "/orders"),
    ("PUT", "/api/orders/{id}/status", "ORDERS_SERVICE_URL", "/orders/:id/status"),
]


def proxy_endpoint(service_setting: str, upstream_path: str):
    """Build an endpoint that forwards to one upstream route."""

    async def forward(request: Request):
        settings = request.app.state.settings
        target_url = build_target_url(
            getattr(settings, service_setting),
            upstream_path,
            dict(request.path_params),
            request.url.query,
        )
        body = await request.body()

        # VULNERABILITY: all client headers, credentials included, are forwarded
        proxy = request.app.state.proxy
        try:
            upstream = await run_in_threadpool(
                proxy.forward, request.method, target_url, request.headers.items(), body
            )
        except httpx.HTTPError as e:
            logger.error(f"Proxy request failed: {e}", url=target_url)
            raise HTTPException(status_code=502, detail="Service unavailable")

        return Response(
            content=upstream.content,
            status_code=upstream.status_code,
            headers=proxy.response_headers(upstream),
            media_type=upstream.headers.get("content-type"),
        )

    return forward


for method, path, service_setting, upstream_path in PROXY_ROUTES:
    router.add_api_route(path, proxy_endpoint(service_setting, upstream_path), methods=[method])


@router.get("/api/debug")
def debug_info(request: Request):
    """
    Report service wiring.

    VULNERABILITY: Information disclosure - secrets and the full process
    environment are returned to any caller.
    """
    settings = request.app.state.settings
    return {
        "services": {
            "users": settings.USERS_SERVICE_URL,
            "products": settings.PRODUCTS_SERVICE_URL,
            "orders": settings.ORDERS_SERVICE_URL,
        },
        "config": {
            "database_host": settings.DATABASE_HOST,
            "database_user": settings.DATABASE_USER,
            "database_pass": settings.DATABASE_PASSWORD,
            "api_key": settings.API_KEY,
            "jwt_secret": settings.JWT_SECRET,
        },
        "environment": dict(os.environ),
    }


@router.get("/api/redirect")
def open_redirect(url: str = ""):
    # VULNERABILITY: Open redirect - the target is not checked
    if not url:
        raise HTTPException(status_code=400, detail="URL parameter required")
    return RedirectResponse(url=url, status_code=302)
