"""
File System Exceptions

Exceptions related to redirection targets and the working directory.

Author: YSNRFD
Version: 1.0.0
"""

from typing import Optional, Any


class FileSystemException(Exception):
    """
    Base exception for all filesystem-related errors.

    Attributes:
        message: Human-readable error description
        path: File path associated with the error
        error_code: Numeric error code for programmatic handling
    """

    def __init__(
        self,
        message: str,
        path: Optional[str] = None,
        error_code: Optional[int] = None,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        super().__init__(message)
        self.message = message
        self.path = path
        self.error_code = error_code or 4000
        self.context = context or {}
        if path:
            self.context["path"] = path

    def __str__(self) -> str:
        base = f"[Error {self.error_code}] {self.message}"
        if self.path:
            base = f"{base}: {self.path}"
        return base


class RedirectionError(FileSystemException):
    """
    A redirection target could not be opened.

    Only raised when strict redirection is enabled; otherwise the failure
    is logged and the descriptor is left as it was.

    Example:
        >>> raise RedirectionError("Permission denied", path="/etc/x", fd=1)
    """

    def __init__(
        self,
        message: str,
        path: str,
        fd: int,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        ctx = context or {}
        ctx["fd"] = fd
        super().__init__(
            message=message,
            path=path,
            error_code=4001,
            context=ctx
        )
        self.fd = fd


class ChangeDirectoryError(FileSystemException):
    """
    The working directory could not be changed.

    Example:
        >>> raise ChangeDirectoryError("No such file or directory", path="/x")
    """

    def __init__(
        self,
        message: str,
        path: Optional[str] = None,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        super().__init__(
            message=message,
            path=path,
            error_code=4002,
            context=context
        )
