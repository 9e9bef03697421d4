"""Exceptions raised by clockidup.

Everything derives from ClockidupError so that the CLI can report any
failure with a single except clause.
"""
from http import HTTPStatus
from typing import Optional


class ClockidupError(Exception):
    """Base class for all clockidup errors."""


def _status_text(status: int) -> str:
    try:
        return HTTPStatus(status).phrase
    except ValueError:
        return ""


class ClockifyError(ClockidupError):
    """Clockify answered with its JSON error body.

    The body looks like this:

        {
          "message": "Full authentication is required to access this resource",
          "code": 1000
        }

    The status is the HTTP status code of the response.
    """

    def __init__(self, status: int, message: str = "", code: int = 0):
        self.status = status
        self.message = message
        self.code = code
        super().__init__(f"{status} {_status_text(status)}: {message}")


class UnexpectedResponseError(ClockidupError):
    """A non-200 response that does not carry Clockify's error body.

    These only seem to happen on routing errors (e.g. an empty path segment)
    or with empty bodies.
    """

    def __init__(self, status: int, raw_body: str = ""):
        self.status = status
        self.raw_body = raw_body
        if raw_body:
            msg = f"{status} {_status_text(status)}: (raw response body) {raw_body}"
        else:
            msg = f"{status} {_status_text(status)} (empty response body)"
        super().__init__(msg)


class TransportError(ClockidupError):
    """The request could not be sent or its response could not be read."""


class DecodeError(ClockidupError):
    """A 200 response body was not the JSON we expected."""


class EmptyWorkspaceIDError(ClockidupError):
    def __init__(self):
        super().__init__("workspaceID is empty")


class EmptyUserIDError(ClockidupError):
    def __init__(self):
        super().__init__("userID is empty")


class EmptyProjectIDError(ClockidupError):
    def __init__(self):
        super().__init__("projectID is empty")


class EmptyTaskIDError(ClockidupError):
    def __init__(self):
        super().__init__("taskID is empty")


class NoWorkspacesError(ClockidupError):
    def __init__(self):
        super().__init__("no workspaces found, check your token and re-login via 'clockidup login'")


class WorkspaceNotFoundError(ClockidupError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(
            f"unable to find workspace '{name}'. Use 'clockidup select' or pass "
            "a workspace name with '--workspace'"
        )


class NoMembershipError(ClockidupError):
    def __init__(self, workspace_name: str):
        self.workspace_name = workspace_name
        super().__init__(f"workspace '{workspace_name}' has no memberships, cannot tell which user to query")


class UnknownProjectError(ClockidupError):
    def __init__(self, project_id: str):
        self.project_id = project_id
        super().__init__(f"projectID '{project_id}' is referenced by a time entry but is not a project of this workspace")


class TaskFetchError(ClockidupError):
    """Raised from the underlying error, which stays reachable via __cause__."""


class ConfigError(ClockidupError):
    pass


class LoginError(ClockidupError):
    pass


class DateParseError(ClockidupError):
    pass


def is_status(err: Optional[BaseException], status: int) -> bool:
    """Tell whether err, or any error it was raised from, is a ClockifyError
    with the given HTTP status."""
    seen = set()
    while err is not None and id(err) not in seen:
        if isinstance(err, ClockifyError) and err.status == status:
            return True
        seen.add(id(err))
        err = err.__cause__
    return False
