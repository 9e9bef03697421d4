"""StandupReport: renders merged time entries as a standup entry."""
from datetime import datetime
from typing import List

from .time_entry import TimeEntry
from ..utils.date_utils import day_str


class StandupReport:
    """A standup for one day.

    Entries are printed in the reverse order of the given list.
    """

    def __init__(self, entries: List[TimeEntry], day: datetime, now: datetime):
        self.entries = entries
        self.day = day
        self.now = now

    @property
    def title(self) -> str:
        """Weekday name (e.g. "Friday") for recent days, YYYY-MM-DD otherwise."""
        return day_str(self.day, self.now)

    def lines(self) -> List[str]:
        return [entry.to_line() for entry in reversed(self.entries)]

    def render(self) -> str:
        return "\n".join([f"{self.title}:"] + self.lines()) + "\n"

    def render_markdown(self) -> str:
        return "\n".join([f"## {self.title}", ""] + self.lines()) + "\n\n"
