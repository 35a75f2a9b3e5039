"""Interfaces of the bridge objects the provisioning API drives.

The bridge owns users and their team sessions; this package only reads and
mutates them through the methods declared here.
"""

from contextlib import AbstractContextManager
from dataclasses import dataclass
from typing import Any, Protocol

from starlette.requests import Request
from starlette.responses import Response


@dataclass(frozen=True)
class UserTeamKey:
    """Composite key of a team session.

    Attributes:
        team_id: Slack workspace ID.
        slack_id: Slack user ID inside that workspace.
    """

    team_id: str
    slack_id: str

    def __str__(self) -> str:
        return f"{self.team_id}-{self.slack_id}"


@dataclass(frozen=True)
class LoginInfo:
    """Result of a successful token login."""

    team_id: str
    user_id: str


class UserTeam(Protocol):
    """One logged in link between a Matrix user and a Slack account."""

    key: UserTeamKey
    team_name: str
    slack_email: str

    def is_logged_in(self) -> bool: ...

    def get_mxid(self) -> str: ...

    def get_remote_id(self) -> str: ...

    def get_remote_name(self) -> str: ...


class User(Protocol):
    """A bridge user.

    ``lock`` guards ``management_room`` and the team set. It is held while
    ``get_logged_in_teams`` is called, so that method must not take it.
    Login and logout synchronize on their own.
    """

    mxid: str
    management_room: str
    lock: AbstractContextManager[Any]

    def get_logged_in_teams(self) -> list[UserTeam]:
        """Teams holding credentials. Not all of them are necessarily connected."""
        ...

    def get_user_team(self, team_id: str) -> UserTeam | None: ...

    def logout_user_team(self, user_team: UserTeam) -> None: ...

    def token_login(self, token: str, cookie_token: str) -> LoginInfo: ...


class Bridge(Protocol):
    def get_user_by_mxid(self, mxid: str) -> User | None:
        """Look up (or create) the user. Must not raise for unknown IDs."""
        ...


class AppService(Protocol):
    def check_server_token(self, request: Request) -> Response | None:
        """Return the rejection response to send, or None if the token is valid."""
        ...
