"""Main module for the clockidup package."""
import argparse
import logging
import sys
from datetime import datetime
from typing import Callable, List, Optional

from . import __version__
from .api.client import ClockifyClient, DEFAULT_SERVER
from .config import (
    load_config, save_config, load_environment, resolve,
    CONFIG_PATH, TOKEN_ENV, WORKSPACE_ENV,
)
from .errors import ClockidupError, LoginError
from .logging_config import setup_logging
from .login import ask_token, check_token, select_workspace
from .reports.standup import StandupReport
from .reports.time_entry import time_entries_for_day, select_billable, merge_similar_entries
from .utils.date_utils import parse_day, local_now
from .utils.file_utils import write_markdown

logger = logging.getLogger("clockidup")

SYNOPSIS = """
synopsis:
  clockidup login
  clockidup select
  clockidup [--billable] DAY
  clockidup version

where DAY is of the form:
  today
  yesterday
  thursday
  "2 days ago"
  2021-01-28
"""

SHORT_EPILOG = SYNOPSIS + """
More help is available with the command 'clockidup help'.
"""

EXTENDED_EPILOG = SYNOPSIS + f"""
how to use it:
  To start, log in and pick a workspace:

    % clockidup login

  Each Clockify project shows up as a prefix of your time entries:

    % clockidup today
    Friday:
    - [1.2] prod/cert-manager: #3444: continue dataforcertificate unit test
      <---> <--------------->  <------------------------------------------>
     duration    project                      entry text

  Clockify tasks are shown after the project:

    - [1.2] prod/cert-manager: big refactoring for the v2: rm large defers
      <---> <--------------->  <------------------------> <-------------->
     duration    project                  task               entry text

  Entries with the same project, task and description are merged and their
  durations summed. To only show billable entries:

    % clockidup --billable today

  To switch to another workspace:

    % clockidup select

config file:
  The token and the workspace are saved to {CONFIG_PATH}:

    token: your-clockify-auth-token
    workspace: My Workspace

  {TOKEN_ENV} and {WORKSPACE_ENV} (also read from a .env file) take
  precedence over the config file; --token and --workspace take precedence
  over both.
"""


class Options:
    """Everything the command line asks for, parsed once."""

    def __init__(self, command: str = "", token: str = "", workspace: str = "", debug: bool = False,
                 billable: bool = False, server: str = DEFAULT_SERVER, md_path: Optional[str] = None,
                 overwrite: bool = False):
        self.command = command
        self.token = token
        self.workspace = workspace
        self.debug = debug
        self.billable = billable
        self.server = server
        self.md_path = md_path
        self.overwrite = overwrite

    @classmethod
    def from_args(cls, args: argparse.Namespace) -> "Options":
        return cls(
            command=args.command or "",
            token=args.token or "",
            workspace=args.workspace or "",
            debug=args.debug,
            billable=args.billable,
            server=args.server,
            md_path=args.md,
            overwrite=args.overwrite,
        )


# --- CLI Logic ---
def build_parser(extended: bool = False) -> argparse.ArgumentParser:
    """Build the argument parser; extended adds the full manual to --help."""
    parser = argparse.ArgumentParser(
        description="Generate your standup entry using your time entries from https://clockify.me.",
        epilog=EXTENDED_EPILOG if extended else SHORT_EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
        prog="clockidup"
    )
    parser.add_argument('command', nargs='?', default='', metavar='COMMAND',
                        help="'login', 'select', 'version', 'help' or a DAY")
    parser.add_argument('--token', default='', help='The Clockify API token.')
    parser.add_argument('--workspace', default='', help='Workspace name to use.')
    parser.add_argument('--debug', action='store_true', help='Show debug output, including the HTTP requests.')
    parser.add_argument('--billable', action='store_true', help='Only print the entries that are billable.')
    parser.add_argument('--server', default=DEFAULT_SERVER, help=f'Clockify API server (default: {DEFAULT_SERVER}).')
    parser.add_argument('--md', help='Also append the standup to this markdown file.')
    parser.add_argument('--overwrite', action='store_true', help='Overwrite the markdown file instead of appending to it.')
    return parser


def parse_args(argv: Optional[List[str]] = None) -> Options:
    return Options.from_args(build_parser().parse_args(argv))


def login(options: Options, new_client: Callable, config_path: Optional[str] = None):
    conf = load_config(config_path)
    try:
        conf = ask_token(conf, new_client)
        conf.workspace = select_workspace(new_client(conf.token), conf.workspace)
    except (EOFError, KeyboardInterrupt) as e:
        raise LoginError("login aborted") from e
    save_config(conf, config_path)
    logger.info("you are logged in!")
    logger.debug("config: %r", conf)


def select(options: Options, new_client: Callable, config_path: Optional[str] = None):
    conf = load_config(config_path)
    token = resolve(options.token, TOKEN_ENV, conf.token)
    if not check_token(token, new_client):
        raise LoginError("the token does not work, run 'clockidup login' first or use --token")
    try:
        conf.workspace = select_workspace(new_client(token), conf.workspace)
    except (EOFError, KeyboardInterrupt) as e:
        raise LoginError("workspace selection aborted") from e
    conf.token = token
    save_config(conf, config_path)
    logger.info("workspace '%s' selected", conf.workspace)


def standup(options: Options, new_client: Callable, config_path: Optional[str] = None,
            now: Callable[[], datetime] = local_now):
    """Print the standup for the day given as command."""
    current = now()
    day = parse_day(options.command, current)
    logger.debug("day parsed: %s", day)
    if day > current:
        raise ClockidupError(f"cannot give a future date, {day.date()} is in the future")

    conf = load_config(config_path)
    token = resolve(options.token, TOKEN_ENV, conf.token)
    if not token:
        raise LoginError(f"no configuration found in {CONFIG_PATH}, run 'clockidup login' first or use --token")
    if not check_token(token, new_client):
        raise LoginError("existing token does not work, run the 'login' command first or use --token")
    workspace_name = resolve(options.workspace, WORKSPACE_ENV, conf.workspace)

    entries = time_entries_for_day(new_client(token), now, workspace_name, day)
    if options.billable:
        entries = select_billable(entries)
    entries = merge_similar_entries(entries)

    report = StandupReport(entries, day, current)
    print(report.render(), end="")

    if options.md_path:
        write_markdown(options.md_path, report.render_markdown(), "Standup", options.overwrite)
        logger.info("markdown output written to '%s'", options.md_path)


def run(options: Options, config_path: Optional[str] = None, now: Callable[[], datetime] = local_now,
        new_client: Optional[Callable] = None):
    """Dispatch the command.

    Raises:
        ClockidupError: anything that should be reported to the user
    """
    load_environment()
    if new_client is None:
        def new_client(token):
            return ClockifyClient(token, server=options.server)

    if options.command == "login":
        login(options, new_client, config_path)
    elif options.command == "select":
        select(options, new_client, config_path)
    elif options.command == "version":
        print(__version__)
    elif options.command == "help":
        build_parser(extended=True).print_help()
    elif options.command == "":
        build_parser().print_help(sys.stderr)
        raise ClockidupError("a command is required, e.g. 'login' or 'yesterday'")
    else:
        standup(options, new_client, config_path, now)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    options = parse_args(argv)
    setup_logging(options.debug)
    try:
        run(options)
    except ClockidupError as e:
        logger.error("%s", e)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
