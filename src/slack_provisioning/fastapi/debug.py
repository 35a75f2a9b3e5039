"""Debug endpoints, mounted only when ``debug_endpoints`` is enabled."""

import sys
import threading
import traceback

from starlette.responses import JSONResponse

from slack_provisioning.fastapi.responses import json_response


def stacks() -> JSONResponse:
    """Dump the current stack of every live thread."""
    names = {thread.ident: thread.name for thread in threading.enumerate()}
    threads = [
        {
            "id": ident,
            "name": names.get(ident, ""),
            "stack": traceback.format_stack(frame),
        }
        for ident, frame in sys._current_frames().items()
    ]
    return json_response(200, {"threads": threads})
