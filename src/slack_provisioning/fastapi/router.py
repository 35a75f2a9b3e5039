"""Router factory for the provisioning API.

Registers every provisioning endpoint on a FastAPI APIRouter, each wrapped
with the auth middleware of its strategy.
"""

import logging
from collections.abc import Callable, Sequence
from typing import Any

from fastapi import APIRouter, FastAPI
from fastapi.routing import APIRoute

from slack_provisioning.config import ProvisioningSettings
from slack_provisioning.core.bridge import AppService, Bridge
from slack_provisioning.core.middleware import Middleware, build_middleware_chain
from slack_provisioning.fastapi import debug, handlers
from slack_provisioning.fastapi.auth import ServerTokenAuth, SharedSecretAuth, auth_middleware

logger = logging.getLogger(__name__)

# (path, method, handler, status code) relative to the configured prefix
PROVISIONING_ROUTES: tuple[tuple[str, str, Callable[..., Any], int], ...] = (
    ("/v1/ping", "get", handlers.ping, 200),
    ("/v1/login", "post", handlers.login, 201),
    ("/v1/logout", "post", handlers.logout, 200),
)

BRIDGE_STATE_PATHS: tuple[str, ...] = (
    "/_matrix/app/com.beeper.asmux/ping",
    "/_matrix/app/com.beeper.bridge_state",
)

DEBUG_PREFIX = "/debug"


def create_provisioning_router(
    bridge: Bridge,
    appservice: AppService,
    settings: ProvisioningSettings,
) -> APIRouter:
    """Create an APIRouter with all provisioning endpoints.

    The ``/v1`` endpoints live under ``settings.prefix`` and require the
    shared secret. The bridge state endpoints are registered without the
    prefix and require the homeserver token instead.

    Args:
        bridge: Resolves users from the ``user_id`` query parameter.
        appservice: Validates the homeserver token.
        settings: Provisioning configuration.

    Returns:
        A FastAPI APIRouter with the provisioning routes registered.

    Example:
        from fastapi import FastAPI
        from slack_provisioning import create_provisioning_router

        app = FastAPI()
        app.include_router(create_provisioning_router(bridge, appservice, settings))
    """
    router = APIRouter()

    shared_secret_route = _make_middleware_route(
        (auth_middleware(SharedSecretAuth(settings.shared_secret), bridge),)
    )
    server_token_route = _make_middleware_route(
        (auth_middleware(ServerTokenAuth(appservice), bridge),)
    )

    logger.debug("Enabling provisioning API", extra={"prefix": settings.prefix or "(none)"})

    for path, method, handler, status_code in PROVISIONING_ROUTES:
        _add_route(
            router=router,
            path=settings.prefix + path,
            method=method,
            handler=handler,
            tags=["provisioning"],
            status_code=status_code,
            route_class=shared_secret_route,
        )

    for path in BRIDGE_STATE_PATHS:
        _add_route(
            router=router,
            path=path,
            method="post",
            handler=handlers.bridge_state_ping,
            tags=["bridge-state"],
            status_code=200,
            route_class=server_token_route,
        )

    if settings.debug_endpoints:
        logger.debug("Enabling debug API", extra={"prefix": DEBUG_PREFIX})
        _add_route(
            router=router,
            path=f"{DEBUG_PREFIX}/stacks",
            method="get",
            handler=debug.stacks,
            tags=["debug"],
            status_code=200,
            route_class=shared_secret_route,
        )

    logger.info(
        "Provisioning route registration complete",
        extra={"route_count": len(router.routes), "prefix": settings.prefix or "(none)"},
    )

    return router


def create_app(
    bridge: Bridge,
    appservice: AppService,
    settings: ProvisioningSettings,
) -> FastAPI:
    """Build a FastAPI app serving the provisioning API.

    The router is left out when the shared secret is ``disable``.
    """
    app = FastAPI(title="Slack bridge provisioning API")
    if settings.enabled:
        app.include_router(create_provisioning_router(bridge, appservice, settings))
    else:
        logger.info("Provisioning API disabled by configuration")
    return app


def _add_route(
    router: APIRouter,
    path: str,
    method: str,
    handler: Callable[..., Any],
    tags: list[str],
    status_code: int,
    route_class: type[APIRoute],
) -> None:
    """Add an HTTP route to the router with metadata.

    Args:
        router: The APIRouter to add the route to.
        path: The URL path for the route.
        method: The HTTP method (lowercase).
        handler: The handler function.
        tags: List of OpenAPI tags.
        status_code: Documented success status code.
        route_class: APIRoute subclass wrapping the handler with middleware.
    """
    router.add_api_route(
        path=path,
        endpoint=handler,
        methods=[method.upper()],
        tags=tags,
        description=handler.__doc__,
        status_code=status_code,
        route_class_override=route_class,
    )

    logger.debug(
        "Registered route",
        extra={"method": method.upper(), "path": path, "handler": handler.__name__},
    )


def _make_middleware_route(middleware_stack: Sequence[Middleware]) -> type[APIRoute]:
    """Create a custom APIRoute subclass that wraps handlers with middleware.

    The middleware runs before FastAPI resolves the handler's dependencies,
    so values it stores on ``request.state`` are visible to them.

    Args:
        middleware_stack: Ordered sequence of middleware (outermost first).

    Returns:
        A subclass of APIRoute with middleware wrapping.
    """

    class MiddlewareRoute(APIRoute):
        def get_route_handler(self) -> Callable[..., Any]:
            original_handler = super().get_route_handler()
            return build_middleware_chain(original_handler, middleware_stack)

    return MiddlewareRoute
