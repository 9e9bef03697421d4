
"""Utility modules for clockidup."""

from .date_utils import rfc3339_utc, parse_clockify_time, day_window, parse_day, day_str
from .format_utils import format_hours, entry_line
from .file_utils import write_markdown

__all__ = [
    'rfc3339_utc', 'parse_clockify_time', 'day_window', 'parse_day', 'day_str',
    'format_hours', 'entry_line',
    'write_markdown'
]
