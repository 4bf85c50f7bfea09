"""
MiniShell Exception Hierarchy

This module defines the exception hierarchy for the command engine.
Exceptions are raised at the subsystem level and converted into exit
statuses at command-node boundaries by the evaluator.

Architecture:
    ├── EngineException
    │   ├── ConfigurationError
    │   ├── MalformedCommandError
    │   │   └── UnknownOperatorError
    │   └── WordResolutionError
    ├── ProcessException
    │   ├── ForkError
    │   └── WaitError
    ├── FileSystemException
    │   ├── RedirectionError
    │   └── ChangeDirectoryError
    └── IPCException
        └── PipeError
"""

from .engine_exceptions import (
    EngineException,
    ConfigurationError,
    MalformedCommandError,
    UnknownOperatorError,
    WordResolutionError,
)

from .process_exceptions import (
    ProcessException,
    ForkError,
    WaitError,
)

from .fs_exceptions import (
    FileSystemException,
    RedirectionError,
    ChangeDirectoryError,
)

from .ipc_exceptions import (
    IPCException,
    PipeError,
)

__all__ = [
    # Engine exceptions
    "EngineException",
    "ConfigurationError",
    "MalformedCommandError",
    "UnknownOperatorError",
    "WordResolutionError",
    # Process exceptions
    "ProcessException",
    "ForkError",
    "WaitError",
    # Filesystem exceptions
    "FileSystemException",
    "RedirectionError",
    "ChangeDirectoryError",
    # IPC exceptions
    "IPCException",
    "PipeError",
]
