"""
MiniShell Process Module

Child process management:
- fork/exec/wait
- exit status decoding
"""

from .status import (
    SHELL_EXIT,
    STATUS_MALFORMED,
    STATUS_FORK_FAILED,
    STATUS_UNRESOLVED,
    STATUS_SUCCESS,
    STATUS_FAILURE,
    decode_wait_status,
    to_exit_code,
)
from .launcher import ProcessLauncher

__all__ = [
    # Status
    'SHELL_EXIT',
    'STATUS_MALFORMED',
    'STATUS_FORK_FAILED',
    'STATUS_UNRESOLVED',
    'STATUS_SUCCESS',
    'STATUS_FAILURE',
    'decode_wait_status',
    'to_exit_code',
    # Launcher
    'ProcessLauncher',
]
