"""Interactive login and workspace selection."""
import getpass
import logging
from typing import Callable, Optional

from .api.client import ClockifyClient
from .config import Config
from .errors import ClockifyError, LoginError, NoWorkspacesError
from .reports.time_entry import ClockifyAPI

logger = logging.getLogger(__name__)

TOKEN_URL = "https://clockify.me/user/settings"

ClientFactory = Callable[[str], ClockifyAPI]


def check_token(token: str, new_client: ClientFactory = ClockifyClient) -> bool:
    """Tell whether the token is accepted by Clockify.

    Clockify answers 401 to unknown tokens and 403 to tokens without access.
    Any other failure is raised since it says nothing about the token.
    """
    if not token:
        return False
    try:
        new_client(token).workspaces()
    except ClockifyError as e:
        if e.status in (401, 403):
            logger.debug("token rejected: %s", e)
            return False
        raise
    return True


def confirm(question: str, ask: Optional[Callable[[str], str]] = None) -> bool:
    ask = ask or input
    answer = ask(f"{question} [y/N]: ").strip().lower()
    return answer in ("y", "yes")


def ask_token(existing: Config, new_client: ClientFactory = ClockifyClient,
              ask: Optional[Callable[[str], str]] = None,
              ask_secret: Optional[Callable[[str], str]] = None) -> Config:
    """Prompt for a Clockify API token.

    When the existing token still works, the user is asked whether to replace
    it at all.

    Returns:
        The config with the new token; the workspace is kept

    Raises:
        LoginError: the given token does not work
    """
    ask_secret = ask_secret or getpass.getpass
    logger.info("the API token is available at %s", TOKEN_URL)

    if check_token(existing.token, new_client):
        if not confirm("Existing token seems to be valid. Override it?", ask):
            return existing

    token = ""
    while not token:
        token = ask_secret("Clockify API token: ").strip()
        if not token:
            logger.error("the token cannot be empty")

    if not check_token(token, new_client):
        raise LoginError("token seems to be invalid")

    return Config(token=token, workspace=existing.workspace)


def select_workspace(client: ClockifyAPI, current: str = "",
                     ask: Optional[Callable[[str], str]] = None) -> str:
    """Let the user pick one of their workspaces.

    Returns:
        The name of the chosen workspace

    Raises:
        NoWorkspacesError: the token has access to no workspace
    """
    ask = ask or input
    workspaces = client.workspaces()
    if not workspaces:
        raise NoWorkspacesError()

    names = [w.get("name", "") for w in workspaces]
    default = names.index(current) + 1 if current in names else None
    for i, name in enumerate(names, start=1):
        print(f"  {i}) {name}")

    prompt = "Choose a workspace"
    if default is not None:
        prompt += f" [{default}]"
    while True:
        answer = ask(f"{prompt}: ").strip()
        if not answer and default is not None:
            return names[default - 1]
        if answer.isdigit() and 1 <= int(answer) <= len(names):
            return names[int(answer) - 1]
        logger.error("'%s' is not a number between 1 and %d", answer, len(names))
