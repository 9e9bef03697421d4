"""Formatting utility functions for clockidup."""
from datetime import timedelta


def format_hours(duration: timedelta) -> str:
    """Format a duration as hours with one decimal digit.

    The leading zero is dropped so that small amounts stand out from
    larger ones:

        0.5  -> ".5"
        0.98 -> "1.0"
        1.86 -> "1.9"

    Args:
        duration: Duration to format

    Returns:
        Formatted hours
    """
    hours = f"{duration.total_seconds() / 3600:.1f}"
    if hours.startswith("0"):
        hours = hours[1:]
    return hours


def entry_line(project: str, task: str, description: str, duration: timedelta) -> str:
    """Format one standup line, e.g. "- [1.2] project: task: description".

    Empty project and task segments are left out.
    """
    text = description
    if task:
        text = f"{task}: {text}"
    if project:
        text = f"{project}: {text}"
    return f"- [{format_hours(duration)}] {text}"
