"""JSON response helpers shared by every provisioning endpoint."""

from typing import Any

from fastapi.encoders import jsonable_encoder
from starlette.responses import JSONResponse

from slack_provisioning.exceptions import APIError


def json_response(status_code: int, payload: Any) -> JSONResponse:
    """Serialize ``payload`` as ``application/json`` with the given status."""
    return JSONResponse(jsonable_encoder(payload), status_code=status_code)


def error_response(exc: APIError) -> JSONResponse:
    return json_response(exc.status_code, exc.to_body())
