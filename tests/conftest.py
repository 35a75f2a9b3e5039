"""Shared pytest fixtures for slack-provisioning tests.

Provides in-memory fakes for the bridge collaborators and a FastAPI app
wired to them.
"""

import threading
from dataclasses import dataclass, field
from typing import Any

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from slack_provisioning import ProvisioningSettings, create_provisioning_router
from slack_provisioning.core.bridge import LoginInfo, UserTeamKey

SHARED_SECRET = "s3cret"
SERVER_TOKEN = "hs-token"
PREFIX = "/_matrix/provision"


@dataclass
class FakeUserTeam:
    key: UserTeamKey
    mxid: str
    team_name: str = "Example Team"
    slack_email: str = "user@example.com"
    logged_in: bool = True

    def is_logged_in(self) -> bool:
        return self.logged_in

    def get_mxid(self) -> str:
        return self.mxid

    def get_remote_id(self) -> str:
        return self.key.team_id

    def get_remote_name(self) -> str:
        return self.team_name


@dataclass
class FakeUser:
    mxid: str
    management_room: str = "!management:example.com"
    lock: Any = field(default_factory=threading.Lock)
    teams: dict[str, FakeUserTeam] = field(default_factory=dict)
    login_result: LoginInfo | Exception = field(
        default_factory=lambda: LoginInfo(team_id="T0001", user_id="U0001")
    )
    logout_error: Exception | None = None
    login_calls: list[tuple[str, str]] = field(default_factory=list)
    logout_calls: list[FakeUserTeam] = field(default_factory=list)

    def add_team(self, team_id: str, slack_id: str, **kwargs: Any) -> FakeUserTeam:
        team = FakeUserTeam(key=UserTeamKey(team_id, slack_id), mxid=self.mxid, **kwargs)
        self.teams[team_id] = team
        return team

    def get_logged_in_teams(self) -> list[FakeUserTeam]:
        return list(self.teams.values())

    def get_user_team(self, team_id: str) -> FakeUserTeam | None:
        return self.teams.get(team_id)

    def logout_user_team(self, user_team: FakeUserTeam) -> None:
        self.logout_calls.append(user_team)
        if self.logout_error is not None:
            raise self.logout_error
        user_team.logged_in = False

    def token_login(self, token: str, cookie_token: str) -> LoginInfo:
        self.login_calls.append((token, cookie_token))
        if isinstance(self.login_result, Exception):
            raise self.login_result
        return self.login_result


class FakeBridge:
    """Creates users on demand, like the real bridge does for valid MXIDs."""

    def __init__(self) -> None:
        self.users: dict[str, FakeUser] = {}
        self.lookups: list[str] = []

    def get_user_by_mxid(self, mxid: str) -> FakeUser | None:
        self.lookups.append(mxid)
        if not mxid:
            return None
        if mxid not in self.users:
            self.users[mxid] = FakeUser(mxid=mxid)
        return self.users[mxid]


class FakeAppService:
    def __init__(self, token: str = SERVER_TOKEN) -> None:
        self.token = token

    def check_server_token(self, request: Request) -> Response | None:
        if request.headers.get("authorization") != f"Bearer {self.token}":
            return JSONResponse(
                {"error": "Invalid server token", "errcode": "M_UNKNOWN_TOKEN"},
                status_code=403,
            )
        return None


@pytest.fixture
def bridge() -> FakeBridge:
    return FakeBridge()


@pytest.fixture
def appservice() -> FakeAppService:
    return FakeAppService()


@pytest.fixture
def settings() -> ProvisioningSettings:
    return ProvisioningSettings(prefix=PREFIX, shared_secret=SHARED_SECRET)


@pytest.fixture
def app(bridge: FakeBridge, appservice: FakeAppService, settings: ProvisioningSettings) -> FastAPI:
    application = FastAPI()
    application.include_router(create_provisioning_router(bridge, appservice, settings))
    return application


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    return TestClient(app)


@pytest.fixture
def auth_headers() -> dict[str, str]:
    return {"Authorization": f"Bearer {SHARED_SECRET}"}


@pytest.fixture
def server_headers() -> dict[str, str]:
    return {"Authorization": f"Bearer {SERVER_TOKEN}"}


@pytest.fixture
def user(bridge: FakeBridge) -> FakeUser:
    """The user ``@alice:example.com``, pre-registered on the bridge."""
    resolved = bridge.get_user_by_mxid("@alice:example.com")
    assert resolved is not None
    bridge.lookups.clear()
    return resolved
