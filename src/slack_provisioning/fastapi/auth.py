"""Authentication middleware for provisioning routes.

Two strategies exist: the shared secret guarding the provisioning API, and the
homeserver token guarding the bridge state callback. Both resolve the acting
user from the ``user_id`` query parameter once authorized.
"""

import hmac
import logging
import time
from collections.abc import Awaitable, Callable
from typing import Any, Protocol

from starlette.concurrency import run_in_threadpool
from starlette.requests import Request
from starlette.responses import Response

from slack_provisioning.core.bridge import AppService, Bridge
from slack_provisioning.core.capture import ResponseWrap
from slack_provisioning.exceptions import APIError, ForbiddenError
from slack_provisioning.fastapi.context import set_user
from slack_provisioning.fastapi.responses import error_response

logger = logging.getLogger(__name__)


class AuthStrategy(Protocol):
    def authorize(self, request: Request) -> Response | None:
        """Return a rejection response, or None to let the request through."""
        ...


class SharedSecretAuth:
    """Accept requests whose bearer token equals the configured secret."""

    def __init__(self, shared_secret: str) -> None:
        self._secret = shared_secret.encode()

    def authorize(self, request: Request) -> Response | None:
        token = request.headers.get("authorization", "").removeprefix("Bearer ")
        # Starlette decodes header bytes as latin-1; compare the raw bytes.
        if not hmac.compare_digest(token.encode("latin-1"), self._secret):
            return error_response(ForbiddenError())
        return None


class ServerTokenAuth:
    """Accept requests carrying the homeserver's appservice token."""

    def __init__(self, appservice: AppService) -> None:
        self._appservice = appservice

    def authorize(self, request: Request) -> Response | None:
        return self._appservice.check_server_token(request)


def auth_middleware(
    strategy: AuthStrategy,
    bridge: Bridge,
) -> Callable[[Request, Any], Awaitable[Any]]:
    """Build a middleware that authorizes, resolves the user and logs the outcome.

    Rejected requests get the strategy's response and never reach the handler.
    Accepted requests have their user injected (absent if the bridge returned
    None), and one summary line is logged after the response has been written.
    Any other exception from the handler is logged and answered with a JSON 500.

    Args:
        strategy: How to authorize the request.
        bridge: Resolves ``user_id`` into a user.

    Returns:
        An async ``(request, call_next)`` middleware.
    """

    async def middleware(request: Request, call_next: Any) -> Any:
        rejection = strategy.authorize(request)
        if rejection is not None:
            return rejection

        user = await run_in_threadpool(bridge.get_user_by_mxid, request.query_params.get("user_id", ""))
        set_user(request, user)
        mxid = user.mxid if user is not None else ""

        start = time.monotonic()

        def log_outcome(status_code: int) -> None:
            duration = time.monotonic() - start
            logger.info(
                "%s %s from %s took %.2f seconds and returned status %d",
                request.method,
                request.url.path,
                mxid,
                duration,
                status_code,
                extra={
                    "method": request.method,
                    "path": request.url.path,
                    "mxid": mxid,
                    "duration": duration,
                    "status_code": status_code,
                },
            )

        try:
            response = await call_next(request)
        except APIError as exc:
            response = error_response(exc)
        except Exception as exc:
            logger.exception(
                "Unhandled error in %s %s",
                request.method,
                request.url.path,
                extra={"mxid": mxid},
            )
            response = error_response(APIError(str(exc)))
        return ResponseWrap(response, on_complete=log_outcome)

    middleware.__name__ = f"auth_{type(strategy).__name__}"
    return middleware
