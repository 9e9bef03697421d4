"""
ClockifyClient: A client for the four Clockify API endpoints clockidup needs.
"""
import logging
import shlex
from datetime import datetime
from typing import Optional, Dict, Any, List

import requests
from requests.adapters import HTTPAdapter

from ..errors import (
    ClockifyError,
    UnexpectedResponseError,
    TransportError,
    DecodeError,
    EmptyWorkspaceIDError,
    EmptyUserIDError,
    EmptyProjectIDError,
    EmptyTaskIDError,
)
from ..utils.date_utils import rfc3339_utc

logger = logging.getLogger(__name__)

DEFAULT_SERVER = "https://api.clockify.me"


def curl_command(request: requests.PreparedRequest) -> str:
    """Render a prepared request as an equivalent curl command line.

    The API key header is masked.
    """
    parts = ["curl", "-X", request.method or "GET"]
    for key, value in request.headers.items():
        if key.lower() == "x-api-key":
            value = "***"
        parts += ["-H", f"{key}: {value}"]
    if request.body:
        body = request.body.decode() if isinstance(request.body, bytes) else request.body
        parts += ["-d", body]
    parts.append(request.url or "")
    return " ".join(shlex.quote(p) for p in parts)


class ApiKeyAdapter(HTTPAdapter):
    """Transport adapter that authenticates every request with the API key
    and traces it at debug level."""

    def __init__(self, token: str, **kwargs):
        self.token = token
        super().__init__(**kwargs)

    def send(self, request, **kwargs):
        request.headers["X-Api-Key"] = self.token
        resp = super().send(request, **kwargs)
        # The body is not logged since it can only be consumed once.
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("%s [%d]", curl_command(request), resp.status_code)
        return resp


class ClockifyClient:
    """A client for interacting with the Clockify API.

    This does no network call on creation and does not check the validity
    of the token.
    """

    def __init__(self, token: str, server: str = DEFAULT_SERVER, session: Optional[requests.Session] = None):
        """Initialize the ClockifyClient.

        Args:
            token: Clockify API key
            server: Base URL of the Clockify API server
            session: Session to use (optional); the API key adapter is
                mounted on it, so it is modified in place
        """
        self.server = (server or DEFAULT_SERVER).rstrip("/")
        self.session = session or requests.Session()
        adapter = ApiKeyAdapter(token)
        self.session.mount("https://", adapter)
        self.session.mount("http://", adapter)

    def api_get(self, path: str, params: Optional[dict] = None) -> Any:
        """Make a GET request to the Clockify API.

        Args:
            path: API path, e.g. /api/v1/workspaces
            params: Query parameters (optional)

        Returns:
            Decoded JSON body of a 200 response

        Raises:
            ClockifyError: Clockify answered with its error body
            UnexpectedResponseError: any other non-200 response
            TransportError: the request failed before a response was read
            DecodeError: the 200 body is not valid JSON
        """
        try:
            resp = self.session.get(self.server + path, params=params)
        except requests.RequestException as e:
            raise TransportError(f"while calling GET {path}: {e}") from e

        if resp.status_code != 200:
            raise _error_from_response(resp)

        try:
            return resp.json()
        except ValueError as e:
            logger.debug("body: %s", resp.text)
            raise DecodeError(f"while parsing JSON from the HTTP response for GET {path}: {e}") from e

    def workspaces(self) -> List[Dict[str, Any]]:
        """Get the workspaces the token has access to."""
        return self.api_get("/api/v1/workspaces")

    def projects(self, workspace_id: str) -> List[Dict[str, Any]]:
        """Get all projects in a workspace.

        Raises:
            EmptyWorkspaceIDError: workspace_id is empty
        """
        if not workspace_id:
            raise EmptyWorkspaceIDError()
        return self.api_get(f"/api/v1/workspaces/{workspace_id}/projects")

    def time_entries(self, workspace_id: str, user_id: str, start: datetime, end: datetime) -> List[Dict[str, Any]]:
        """Get a user's time entries between start and end.

        Args:
            workspace_id: Workspace ID
            user_id: User ID
            start: Start of the window (timezone-aware)
            end: End of the window (timezone-aware)

        Returns:
            List of raw time entries, most recent first

        Raises:
            EmptyWorkspaceIDError, EmptyUserIDError
        """
        if not workspace_id:
            raise EmptyWorkspaceIDError()
        if not user_id:
            raise EmptyUserIDError()

        path = f"/api/v1/workspaces/{workspace_id}/user/{user_id}/time-entries"
        params = {
            "start": rfc3339_utc(start),
            "end": rfc3339_utc(end),
        }
        return self.api_get(path, params)

    def task(self, workspace_id: str, project_id: str, task_id: str) -> Dict[str, Any]:
        """Get a single task of a project.

        Raises:
            EmptyWorkspaceIDError, EmptyProjectIDError, EmptyTaskIDError
        """
        if not workspace_id:
            raise EmptyWorkspaceIDError()
        if not project_id:
            raise EmptyProjectIDError()
        if not task_id:
            raise EmptyTaskIDError()
        return self.api_get(f"/api/v1/workspaces/{workspace_id}/projects/{project_id}/tasks/{task_id}")


def _error_from_response(resp: requests.Response) -> Exception:
    raw = resp.text
    try:
        body = resp.json()
    except ValueError:
        return UnexpectedResponseError(resp.status_code, raw)
    if not isinstance(body, dict) or not isinstance(body.get("message"), str):
        return UnexpectedResponseError(resp.status_code, raw)
    code = body.get("code")
    if code is not None and not isinstance(code, int):
        return UnexpectedResponseError(resp.status_code, raw)
    # Routing errors carry "error", "path" and "status" instead of "code".
    if "error" in body and "code" not in body:
        return UnexpectedResponseError(resp.status_code, raw)
    return ClockifyError(resp.status_code, body["message"], code or 0)
