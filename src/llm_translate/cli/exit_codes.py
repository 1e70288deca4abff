"""
Exit Codes - Process exit statuses for the CLI.

Every startup failure exits with ERROR (1): wrong argument count, unknown
model, missing file, unreadable API key, invalid configuration.
"""

from enum import IntEnum


class ExitCode(IntEnum):
    """Exit codes returned by main()."""

    SUCCESS = 0
    ERROR = 1
