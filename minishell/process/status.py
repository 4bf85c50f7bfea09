"""
Exit Status Module

Status values returned by the engine and the translation of raw wait
statuses into them.

Author: YSNRFD
Version: 1.0.0
"""

import os


SHELL_EXIT = -100
"""Out-of-band status: the whole engine should terminate."""

STATUS_MALFORMED = -1
"""The command tree violates its structural contract."""

STATUS_FORK_FAILED = -2
"""A child process or pipe could not be created."""

STATUS_UNRESOLVED = -3
"""A verb or argument word could not be resolved; nothing was launched."""

STATUS_SUCCESS = 0
STATUS_FAILURE = 1

EXIT_CODE_MASK = 0xFF
SIGNAL_BASE = 128


def decode_wait_status(status: int) -> int:
    """
    Translate a raw ``waitpid`` status into an exit code in ``[0, 255]``.

    A normal exit yields its low-byte exit code; death by signal N yields
    ``128 + N``.
    """
    if os.WIFEXITED(status):
        return os.WEXITSTATUS(status)
    if os.WIFSIGNALED(status):
        return (SIGNAL_BASE + os.WTERMSIG(status)) & EXIT_CODE_MASK
    if os.WIFSTOPPED(status):
        return (SIGNAL_BASE + os.WSTOPSIG(status)) & EXIT_CODE_MASK
    return STATUS_FAILURE


def to_exit_code(status: int) -> int:
    """
    Map an engine status onto something ``_exit`` can carry.

    ``SHELL_EXIT`` ends only the current subprocess and maps to success;
    other statuses keep their low byte.
    """
    if status == SHELL_EXIT:
        return STATUS_SUCCESS
    return status & EXIT_CODE_MASK
