"""
clockidup: generate your standup entry from your Clockify time entries.

- Fetches one day of time entries from the Clockify API
- Resolves project and task names, merges similar entries
- Prints them as a standup, most recent last
- Can be used as a CLI (via `python -m clockidup` or `clockidup` if installed as a package)
"""

__version__ = "0.4.0"
