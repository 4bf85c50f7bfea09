"""
IPC Exceptions

Exceptions related to the anonymous pipes that connect pipeline stages.

Author: YSNRFD
Version: 1.0.0
"""

from typing import Optional, Any


class IPCException(Exception):
    """
    Base exception for all IPC-related errors.

    Attributes:
        message: Human-readable error description
        error_code: Numeric error code for programmatic handling
    """

    def __init__(
        self,
        message: str,
        error_code: Optional[int] = None,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        super().__init__(message)
        self.message = message
        self.error_code = error_code or 6000
        self.context = context or {}

    def __str__(self) -> str:
        return f"[Error {self.error_code}] {self.message}"


class PipeError(IPCException):
    """
    Error in pipe operations.

    This exception is raised when:
    - The pipe cannot be created (descriptor exhaustion)
    - An end is used after it was closed

    Example:
        >>> raise PipeError("Too many open files")
    """

    def __init__(
        self,
        message: str,
        read_fd: Optional[int] = None,
        write_fd: Optional[int] = None,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        ctx = context or {}
        if read_fd is not None:
            ctx["read_fd"] = read_fd
        if write_fd is not None:
            ctx["write_fd"] = write_fd
        super().__init__(
            message=message,
            error_code=6001,
            context=ctx
        )
        self.read_fd = read_fd
        self.write_fd = write_fd
