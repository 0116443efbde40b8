"""Process exit codes for the playgate CLI.

Codes are grouped by tens, from bad input (1x) up to failed
operations (4x).
"""

from enum import IntEnum


class ExitCode(IntEnum):
    """Exit status of a playgate command."""

    SUCCESS = 0
    GENERAL_ERROR = 1

    CONFIG_ERROR = 11
    INVALID_IDENTIFIER = 12

    FILE_NOT_ACCESSIBLE = 23

    OPERATION_FAILED = 40
    DATABASE_ERROR = 42
    MIGRATION_FAILED = 43
