"""Web-socket upgrade parameters for provisioning clients."""

from collections.abc import Callable, Iterable

from starlette.websockets import WebSocket

SEC_WEBSOCKET_PROTOCOL = "com.gitlab.beeper.slack"


def check_origin(origin: str | None) -> bool:
    """Provisioning clients connect from arbitrary origins; accept them all."""
    return True


def select_subprotocol(offered: Iterable[str]) -> str | None:
    """Pick the bridge subprotocol if the client offered it."""
    if SEC_WEBSOCKET_PROTOCOL in offered:
        return SEC_WEBSOCKET_PROTOCOL
    return None


async def accept(
    websocket: WebSocket,
    origin_allowed: Callable[[str | None], bool] = check_origin,
) -> str | None:
    """Complete the upgrade handshake, negotiating the bridge subprotocol.

    Connections whose ``Origin`` is refused by ``origin_allowed`` are closed
    with code 1008 (policy violation) instead of being accepted.

    Returns:
        The negotiated subprotocol, or None if the client offered none we speak
        or the connection was refused.
    """
    if not origin_allowed(websocket.headers.get("origin")):
        await websocket.close(code=1008)
        return None
    subprotocol = select_subprotocol(websocket.scope.get("subprotocols", ()))
    await websocket.accept(subprotocol=subprotocol)
    return subprotocol
