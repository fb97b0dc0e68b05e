"""Exit codes for CLI error paths.

Values follow sysexits.h and errno conventions so scripts can tell a missing
configuration key from a broken configuration directory.
"""

from __future__ import annotations

from enum import IntEnum


class ExitCode(IntEnum):
    """Exit codes used by the ``layerconf`` commands.

    * 0: success
    * 1: lookup found nothing (``get``/``has`` on an absent path)
    * 2: a directory given on the command line does not exist
    * 22: EINVAL, malformed arguments such as an unknown section
    * 78: EX_CONFIG, configuration files could not be loaded

    Example:
        >>> ExitCode.SUCCESS
        <ExitCode.SUCCESS: 0>
        >>> int(ExitCode.CONFIG_ERROR)
        78
    """

    SUCCESS = 0
    NOT_DEFINED = 1
    FILE_NOT_FOUND = 2
    INVALID_ARGUMENT = 22
    CONFIG_ERROR = 78


__all__ = ["ExitCode"]
