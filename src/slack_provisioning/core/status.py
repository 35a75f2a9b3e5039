"""Bridge state documents reported to the homeserver's status endpoint."""

import dataclasses
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Protocol

ERROR_TTL = 60
OK_TTL = 6 * 60 * 60


class StateEvent(str, Enum):
    STARTING = "STARTING"
    UNCONFIGURED = "UNCONFIGURED"
    RUNNING = "RUNNING"
    BRIDGE_UNREACHABLE = "BRIDGE_UNREACHABLE"
    CONNECTING = "CONNECTING"
    BACKFILLING = "BACKFILLING"
    CONNECTED = "CONNECTED"
    TRANSIENT_DISCONNECT = "TRANSIENT_DISCONNECT"
    BAD_CREDENTIALS = "BAD_CREDENTIALS"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"
    LOGGED_OUT = "LOGGED_OUT"


class BridgeStateFiller(Protocol):
    def get_mxid(self) -> str: ...

    def get_remote_id(self) -> str: ...

    def get_remote_name(self) -> str: ...


@dataclass(frozen=True)
class BridgeState:
    """Connection state of the bridge or of one remote login.

    Empty fields are left out of the serialized form.
    """

    state_event: StateEvent
    timestamp: int = 0
    ttl: int = 0
    source: str = ""
    error: str = ""
    message: str = ""
    user_id: str = ""
    remote_id: str = ""
    remote_name: str = ""
    reason: str = ""
    info: dict[str, Any] = field(default_factory=dict)

    def fill(self, filler: BridgeStateFiller | None) -> "BridgeState":
        """Return a copy stamped with time, source, TTL and the filler's identity."""
        changes: dict[str, Any] = {
            "timestamp": int(time.time()),
            "source": "bridge",
            "ttl": ERROR_TTL if self.error else OK_TTL,
        }
        if filler is not None:
            changes["user_id"] = filler.get_mxid()
            changes["remote_id"] = filler.get_remote_id()
            changes["remote_name"] = filler.get_remote_name()
        return dataclasses.replace(self, **changes)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "state_event": self.state_event.value,
            "timestamp": self.timestamp,
            "ttl": self.ttl,
        }
        for name in ("source", "error", "message", "user_id", "remote_id", "remote_name", "reason"):
            value = getattr(self, name)
            if value:
                data[name] = value
        if self.info:
            data["info"] = dict(self.info)
        return data


@dataclass(frozen=True)
class GlobalBridgeState:
    """The bridge's own state plus one entry per remote login, keyed by remote ID.

    Serialized in the mautrix bridge status format: the mapping is sent under
    ``remoteState`` and state events use their upper-case names
    (``CONNECTED``, ``LOGGED_OUT``).
    """

    bridge_state: BridgeState
    remote_states: dict[str, BridgeState] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "remoteState": {key: state.to_dict() for key, state in self.remote_states.items()},
            "bridgeState": self.bridge_state.to_dict(),
        }
