"""Time entry aggregation and standup rendering for clockidup."""

from .time_entry import TimeEntry, time_entries_for_day, select_billable, merge_similar_entries, find_workspace
from .standup import StandupReport

__all__ = ['TimeEntry', 'time_entries_for_day', 'select_billable', 'merge_similar_entries', 'find_workspace',
           'StandupReport']
