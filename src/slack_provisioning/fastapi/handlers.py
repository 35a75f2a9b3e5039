"""Provisioning endpoint handlers.

Each handler receives the user injected by the auth middleware and answers
with a JSON document. Failures are raised as ``APIError`` subclasses and
rendered by the middleware.
"""

import logging
import re
from typing import Any
from urllib.parse import unquote

from fastapi import Request
from starlette.concurrency import run_in_threadpool
from starlette.responses import JSONResponse

from slack_provisioning.core.bridge import User, UserTeam
from slack_provisioning.core.status import BridgeState, GlobalBridgeState, StateEvent
from slack_provisioning.exceptions import (
    InvalidRequestError,
    LoginFailedError,
    LogoutFailedError,
    NotLoggedInError,
)
from slack_provisioning.fastapi.context import CurrentUser
from slack_provisioning.fastapi.responses import json_response

logger = logging.getLogger(__name__)

_BAD_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")


def ping(user: CurrentUser) -> JSONResponse:
    """Report the user's logged in teams and management room."""
    with user.lock:
        puppets = [_puppet(user, team) for team in user.get_logged_in_teams()]
        resp = {
            "puppets": puppets,
            "management_room": user.management_room,
            "mxid": user.mxid,
        }

    return json_response(200, resp)


def _puppet(user: User, team: UserTeam) -> dict[str, Any]:
    key = str(team.key)
    return {
        "puppetId": key,
        "puppetMxid": user.mxid,
        "userId": team.key.slack_id,
        "data": {
            "team": {"id": team.key.team_id, "name": team.team_name},
            "self": {"id": key, "name": team.slack_email},
        },
    }


def logout(user: CurrentUser, slack_team_id: str = "") -> JSONResponse:
    """Log the user out of one team."""
    # Some clients send the team session key ("T123-U456") instead of the team ID.
    team_id = slack_team_id.split("-", 1)[0]

    user_team = user.get_user_team(team_id)
    if user_team is None or not user_team.is_logged_in():
        raise NotLoggedInError()

    try:
        user.logout_user_team(user_team)
    except Exception as exc:
        logger.warning(
            "Error while logging out: %s",
            exc,
            extra={"mxid": user.mxid, "team_id": team_id},
        )
        raise LogoutFailedError(exc) from exc

    return json_response(200, {"success": True, "status": "Logged out successfully."})


async def login(request: Request, user: CurrentUser) -> JSONResponse:
    """Log the user into a team with a client token and its ``d`` cookie."""
    try:
        data = await request.json()
    except ValueError as exc:
        raise InvalidRequestError("Invalid JSON") from exc

    token = _string_field(data, "Token")
    cookie_token = _string_field(data, "Cookietoken")

    if not token:
        raise InvalidRequestError("Missing field token")
    if not cookie_token:
        raise InvalidRequestError("Missing field cookietoken")

    try:
        info = await run_in_threadpool(user.token_login, token, path_unescape(cookie_token))
    except Exception as exc:
        raise LoginFailedError(exc) from exc

    return json_response(201, {"success": True, "teamid": info.team_id, "userid": info.user_id})


def _string_field(data: Any, name: str) -> str:
    """Read a string field, matching the key exactly first, then case-insensitively."""
    if data is None:
        return ""
    if not isinstance(data, dict):
        raise InvalidRequestError("Invalid JSON")

    if name in data:
        value = data[name]
    else:
        value = next((v for k, v in data.items() if k.lower() == name.lower()), None)

    if value is None:
        return ""
    if not isinstance(value, str):
        raise InvalidRequestError("Invalid JSON")
    return value


def path_unescape(value: str) -> str:
    """Percent-decode ``value`` like a URL path segment (``+`` is kept).

    Returns the raw value when it holds a malformed escape or the decoded
    bytes are not UTF-8.
    """
    if _BAD_ESCAPE.search(value):
        return value
    try:
        return unquote(value, errors="strict")
    except UnicodeDecodeError:
        return value


def bridge_state_ping(user: CurrentUser) -> JSONResponse:
    """Report the bridge state and the connection state of each team."""
    resp = GlobalBridgeState(bridge_state=BridgeState(StateEvent.RUNNING).fill(None))

    for user_team in user.get_logged_in_teams():
        if user_team.is_logged_in():
            remote = BridgeState(StateEvent.CONNECTED)
        else:
            remote = BridgeState(StateEvent.LOGGED_OUT)
        remote = remote.fill(user_team)
        resp.remote_states[remote.remote_id] = remote

    logger.debug(
        "Responding bridge state in bridge status endpoint: %s",
        resp,
        extra={"mxid": user.mxid},
    )
    return json_response(200, resp.to_dict())
