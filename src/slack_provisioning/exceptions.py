"""Exception hierarchy for provisioning API errors."""


class SlackProvisioningError(Exception):
    """Base exception for all provisioning errors.

    This is the parent class for all exceptions raised by the
    slack-provisioning package. Catching this exception will catch
    every provisioning-related error.
    """


class HijackUnsupportedError(SlackProvisioningError):
    """Raised when the wrapped response cannot hand over its connection.

    Example:
        HijackUnsupportedError("response does not implement hijack")
    """


class MissingIdentityError(SlackProvisioningError):
    """Raised when a handler needs a user but none was injected.

    This is a wiring bug (a handler registered without the auth middleware,
    or a bridge that failed to resolve the user), not a client error. The auth
    middleware answers it with a 500.
    """


class APIError(SlackProvisioningError):
    """An error that is rendered as a JSON body with a fixed status code.

    Attributes:
        status_code: HTTP status written to the client.
        error: Human readable message.
        errcode: Machine readable code. Frequently the raw message itself.
    """

    status_code = 500

    def __init__(self, error: str, errcode: str | None = None) -> None:
        super().__init__(error)
        self.error = error
        self.errcode = error if errcode is None else errcode

    def to_body(self) -> dict[str, object]:
        return {"success": False, "error": self.error, "errcode": self.errcode}


class ForbiddenError(APIError):
    """Raised when the shared secret does not match."""

    status_code = 403

    def __init__(self, error: str = "Invalid auth token") -> None:
        super().__init__(error, "M_FORBIDDEN")


class InvalidRequestError(APIError):
    """Raised for a malformed request body or a missing field.

    Example:
        InvalidRequestError("Missing field token")
    """

    status_code = 400


class NotLoggedInError(APIError):
    """Raised when the requested team has no logged in session."""

    status_code = 404

    def __init__(self) -> None:
        super().__init__("Not logged in")


class LoginFailedError(APIError):
    """Raised when the bridge rejects a token login."""

    status_code = 406

    def __init__(self, cause: Exception) -> None:
        super().__init__(f"Slack login error: {cause}", str(cause))


class LogoutFailedError(APIError):
    """Raised when the bridge fails to log a team out."""

    status_code = 500

    def __init__(self, cause: Exception) -> None:
        super().__init__(f"Unknown error while logging out: {cause}", str(cause))
