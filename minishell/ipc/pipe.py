"""
Pipe Module

An anonymous one-way channel between two pipeline stages, with the close
discipline every process touching it must follow:
- the writer binds the write end to stdout and closes both originals
- the reader binds the read end to stdin and closes both originals
- the parent closes both ends once the stages are started

Author: YSNRFD
Version: 1.0.0
"""

import os
from dataclasses import dataclass
from typing import Optional

from minishell.exceptions import PipeError
from minishell.logger import get_logger


@dataclass
class Pipe:
    """A pipe for one-way communication between two processes."""
    read_fd: Optional[int] = None
    write_fd: Optional[int] = None

    @classmethod
    def open(cls) -> 'Pipe':
        """
        Create a new pipe.

        Raises:
            PipeError: If the kernel refuses to create the pipe
        """
        try:
            read_fd, write_fd = os.pipe()
        except OSError as e:
            raise PipeError(f"Cannot create pipe: {e.strerror}") from e
        get_logger('ipc').debug(
            "Pipe created",
            pid=os.getpid(),
            context={'read_fd': read_fd, 'write_fd': write_fd}
        )
        return cls(read_fd=read_fd, write_fd=write_fd)

    @property
    def closed(self) -> bool:
        return self.read_fd is None and self.write_fd is None

    def close_read(self) -> None:
        """Close the read end if still open."""
        if self.read_fd is not None:
            fd, self.read_fd = self.read_fd, None
            os.close(fd)

    def close_write(self) -> None:
        """Close the write end if still open."""
        if self.write_fd is not None:
            fd, self.write_fd = self.write_fd, None
            os.close(fd)

    def close(self) -> None:
        """Close both ends."""
        try:
            self.close_read()
        finally:
            self.close_write()

    def attach_writer(self, fd: int = 1) -> None:
        """Bind the write end to ``fd`` and drop both original descriptors."""
        if self.write_fd is None:
            raise PipeError("Write end already closed", read_fd=self.read_fd)
        if self.write_fd == fd:
            os.set_inheritable(fd, True)
            self.write_fd = None
        else:
            os.dup2(self.write_fd, fd)
        self.close()

    def attach_reader(self, fd: int = 0) -> None:
        """Bind the read end to ``fd`` and drop both original descriptors."""
        if self.read_fd is None:
            raise PipeError("Read end already closed", write_fd=self.write_fd)
        if self.read_fd == fd:
            os.set_inheritable(fd, True)
            self.read_fd = None
        else:
            os.dup2(self.read_fd, fd)
        self.close()

    def __enter__(self) -> 'Pipe':
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
