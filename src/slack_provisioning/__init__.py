"""Provisioning API for the Slack bridge."""

# Configuration
from slack_provisioning.config import ProvisioningSettings

# Collaborator interfaces, implemented by the bridge
from slack_provisioning.core.bridge import (
    AppService,
    Bridge,
    LoginInfo,
    User,
    UserTeam,
    UserTeamKey,
)
from slack_provisioning.core.capture import ResponseWrap
from slack_provisioning.core.status import BridgeState, GlobalBridgeState, StateEvent
from slack_provisioning.core.websocket import SEC_WEBSOCKET_PROTOCOL

# Exceptions
from slack_provisioning.exceptions import (
    APIError,
    ForbiddenError,
    HijackUnsupportedError,
    InvalidRequestError,
    LoginFailedError,
    LogoutFailedError,
    MissingIdentityError,
    NotLoggedInError,
    SlackProvisioningError,
)
from slack_provisioning.fastapi.router import create_app, create_provisioning_router

__all__ = [
    # Primary API
    "create_app",
    "create_provisioning_router",
    "ProvisioningSettings",
    # Collaborator interfaces
    "AppService",
    "Bridge",
    "LoginInfo",
    "User",
    "UserTeam",
    "UserTeamKey",
    # Core types
    "BridgeState",
    "GlobalBridgeState",
    "ResponseWrap",
    "SEC_WEBSOCKET_PROTOCOL",
    "StateEvent",
    # Exceptions
    "APIError",
    "ForbiddenError",
    "HijackUnsupportedError",
    "InvalidRequestError",
    "LoginFailedError",
    "LogoutFailedError",
    "MissingIdentityError",
    "NotLoggedInError",
    "SlackProvisioningError",
]

__version__ = "0.1.0"
