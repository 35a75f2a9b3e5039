"""Typed access to the user resolved by the auth middleware."""

from typing import Annotated

from fastapi import Depends, Request

from slack_provisioning.core.bridge import User
from slack_provisioning.exceptions import MissingIdentityError

_STATE_ATTR = "_slack_provisioning_user"


def set_user(request: Request, user: User | None) -> None:
    setattr(request.state, _STATE_ATTR, user)


def get_user(request: Request) -> User | None:
    """Return the user injected for this request, or None if there is none."""
    return getattr(request.state, _STATE_ATTR, None)


def require_user(request: Request) -> User:
    """FastAPI dependency returning the injected user.

    Raises:
        MissingIdentityError: If the route is not behind the auth middleware
            or the bridge could not resolve ``user_id``.
    """
    user = get_user(request)
    if user is None:
        raise MissingIdentityError(f"no user resolved for {request.method} {request.url.path}")
    return user


CurrentUser = Annotated[User, Depends(require_user)]
