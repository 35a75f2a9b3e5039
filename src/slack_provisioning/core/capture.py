"""Response wrapper that records the status code written to the client."""

from collections.abc import Callable
from typing import Any

from slack_provisioning.exceptions import HijackUnsupportedError

Message = dict[str, Any]


class ResponseWrap:
    """Wrap an ASGI response to observe the final status code.

    Every ASGI message is forwarded to the real ``send`` unchanged. The status
    of the ``http.response.start`` message is kept in ``status_code`` so the
    caller can log it once the response has gone out.

    Attributes:
        response: The wrapped ASGI response callable.
        status_code: Last status written, or the wrapped response's own
            status (200 if it has none) before anything was sent.
    """

    def __init__(
        self,
        response: Any,
        on_complete: Callable[[int], None] | None = None,
    ) -> None:
        self.response = response
        self.status_code: int = getattr(response, "status_code", 200)
        self._on_complete = on_complete

    async def __call__(self, scope: Any, receive: Any, send: Any) -> None:
        async def send_wrapper(message: Message) -> None:
            if message["type"] == "http.response.start":
                self.status_code = message["status"]
            await send(message)

        try:
            await self.response(scope, receive, send_wrapper)
        finally:
            if self._on_complete is not None:
                self._on_complete(self.status_code)

    def hijack(self) -> Any:
        """Hand over the underlying connection, if the wrapped response can.

        Returns:
            Whatever the wrapped response's ``hijack()`` returns.

        Raises:
            HijackUnsupportedError: If the wrapped response has no ``hijack``.
        """
        hijack = getattr(self.response, "hijack", None)
        if not callable(hijack):
            raise HijackUnsupportedError("response does not implement hijack")
        return hijack()
