"""TimeEntry class and the pipeline that builds time entries for one day.

A TimeEntry is similar to a raw Clockify time entry except that it only
contains what a standup needs: names instead of IDs, and a duration instead
of start and end dates.

Some time entries in Clockify may still be going on, in which case their end
date is empty. Their duration is then estimated using the current time.
"""
import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, List, Optional, Protocol, Tuple

from ..errors import (
    ClockidupError,
    NoWorkspacesError,
    WorkspaceNotFoundError,
    NoMembershipError,
    UnknownProjectError,
    TaskFetchError,
)
from ..utils.date_utils import day_window, parse_clockify_time
from ..utils.format_utils import entry_line

logger = logging.getLogger(__name__)


class ClockifyAPI(Protocol):
    """The part of the Clockify API the pipeline relies on."""

    def workspaces(self) -> List[Dict[str, Any]]: ...

    def projects(self, workspace_id: str) -> List[Dict[str, Any]]: ...

    def time_entries(self, workspace_id: str, user_id: str, start: datetime, end: datetime) -> List[Dict[str, Any]]: ...

    def task(self, workspace_id: str, project_id: str, task_id: str) -> Dict[str, Any]: ...


class TimeEntry:
    """A time entry ready to be shown in a standup."""

    def __init__(self, project: str = "", task: str = "", description: str = "",
                 duration: timedelta = timedelta(0), billable: bool = False):
        """Initialize a TimeEntry.

        Args:
            project: Project name, empty when the entry has no project
            task: Task name, empty when the entry has no task
            description: Text of the entry
            duration: How long was spent on it
            billable: Whether the entry is billable
        """
        self.project = project
        self.task = task
        self.description = description
        self.duration = duration
        self.billable = billable

    @property
    def key(self) -> Tuple[str, str, str]:
        """Entries with the same key are the same piece of work."""
        return (self.project, self.task, self.description)

    def copy(self) -> "TimeEntry":
        return TimeEntry(self.project, self.task, self.description, self.duration, self.billable)

    def to_line(self) -> str:
        """Format as a standup line, e.g. "- [1.2] project: task: description"."""
        return entry_line(self.project, self.task, self.description, self.duration)

    def __eq__(self, other):
        if not isinstance(other, TimeEntry):
            return NotImplemented
        return (self.key, self.duration, self.billable) == (other.key, other.duration, other.billable)

    def __repr__(self):
        return (f"TimeEntry(project={self.project!r}, task={self.task!r}, "
                f"description={self.description!r}, duration={self.duration!r}, billable={self.billable!r})")


def find_workspace(workspaces: List[Dict[str, Any]], name: str) -> Optional[Dict[str, Any]]:
    """Find a workspace by its exact name.

    An empty name never matches: a workspace must be selected during login,
    with the select command, or with --workspace.
    """
    if not name:
        return None
    for workspace in workspaces:
        if workspace.get("name") == name:
            return workspace
    return None


def acting_user_id(workspace: Dict[str, Any]) -> str:
    """Get the user whose time entries are shown.

    This is the user of the first membership of the workspace.
    """
    memberships = workspace.get("memberships") or []
    if not memberships:
        raise NoMembershipError(workspace.get("name", ""))
    return memberships[0].get("userId", "")


def time_entries_for_day(client: ClockifyAPI, now: Callable[[], datetime],
                         workspace_name: str, day: datetime) -> List[TimeEntry]:
    """Fetch the time entries of one day, with project and task names resolved.

    Args:
        client: Clockify API client
        now: Returns the current instant, used for entries still running
        workspace_name: Name of the workspace to look into
        day: The day to fetch (only its date and tzinfo are used)

    Returns:
        One TimeEntry per raw time entry, in the order Clockify returned them

    Raises:
        NoWorkspacesError: the token has access to no workspace
        WorkspaceNotFoundError: no workspace is named workspace_name
        UnknownProjectError: an entry references a project that was not listed
        TaskFetchError: fetching the task of an entry failed
        ClockidupError: any other API failure, unchanged
    """
    start, end = day_window(day)

    workspaces = client.workspaces()
    if not workspaces:
        raise NoWorkspacesError()

    workspace = find_workspace(workspaces, workspace_name)
    if workspace is None:
        raise WorkspaceNotFoundError(workspace_name)
    workspace_id = workspace.get("id", "")
    user_id = acting_user_id(workspace)

    raw_entries = client.time_entries(workspace_id, user_id, start, end)
    logger.debug("found %d time entries between %s and %s", len(raw_entries), start, end)

    projects = client.projects(workspace_id) or []
    project_map = {p["id"]: p for p in projects if p.get("id")}

    entries = []
    for raw in raw_entries:
        project_id = raw.get("projectId") or ""
        description = raw.get("description") or ""

        project_name = ""
        if project_id:
            if project_id not in project_map:
                raise UnknownProjectError(project_id)
            project_name = project_map[project_id].get("name", "")

        task_name = ""
        task_id = raw.get("taskId") or ""
        if task_id:
            try:
                task = client.task(workspace_id, project_id, task_id)
            except ClockidupError as e:
                raise TaskFetchError(
                    f"while fetching task for time entry '{project_name}: {description}': {e}"
                ) from e
            task_name = task.get("name", "")

        interval = raw.get("timeInterval") or {}
        entry_start = parse_clockify_time(interval.get("start"))
        entry_end = parse_clockify_time(interval.get("end"))
        # Still ticking: the user has not stopped the timer yet.
        if entry_end is None:
            entry_end = now().astimezone(timezone.utc)

        entries.append(TimeEntry(
            project=project_name,
            task=task_name,
            description=description,
            duration=entry_end - entry_start,
            billable=bool(raw.get("billable")),
        ))

    return entries


def select_billable(entries: List[TimeEntry]) -> List[TimeEntry]:
    """Leave out the entries that are not billable."""
    return [entry for entry in entries if entry.billable]


def merge_similar_entries(entries: List[TimeEntry]) -> List[TimeEntry]:
    """Merge similar time entries by summing up their durations.

    Similar entries have the same project, task and description. For
    example, given:

        | Project   | Task   | Description              | Duration |
        |-----------|--------|--------------------------|----------|
        |           |        | "Review my emails"       | 1h       |
        | project-2 |        | "Review PR"              | 40min    |
        | project-1 |        | "Standup"                | 30min    |
        | project-2 |        | "Review PR"              | 10min    |
        | project-1 | task-1 | "Deal with unit-testing" | 30min    |
        | project-1 | task-1 | "Deal with unit-testing" | 1h30     |

    the result is:

        | Project   | Task   | Description              | Duration |
        |-----------|--------|--------------------------|----------|
        |           |        | "Review my emails"       | 1h       |
        | project-2 |        | "Review PR"              | 50min    |
        | project-1 |        | "Standup"                | 30min    |
        | project-1 | task-1 | "Deal with unit-testing" | 2h       |

    Merged entries appear where the first of them appeared, and keep the
    billable flag of that first entry. The given entries are left untouched.
    """
    seen: Dict[Tuple[str, str, str], TimeEntry] = {}
    merged = []
    for entry in entries:
        existing = seen.get(entry.key)
        if existing is not None:
            existing.duration += entry.duration
            continue
        first = entry.copy()
        seen[entry.key] = first
        merged.append(first)
    return merged
