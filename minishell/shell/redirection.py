"""
Redirection Module

Rebinds the standard descriptors of the current process to the files a
simple command names.

Author: YSNRFD
Version: 1.0.0
"""

import os
from contextlib import contextmanager, suppress
from typing import Any, Iterator, Optional

from .command import IOFlags, Resolver, SimpleCommand, resolve_word
from minishell.core.config_loader import get_config
from minishell.exceptions import RedirectionError
from minishell.logger import get_logger


STDIN_FILENO = 0
STDOUT_FILENO = 1
STDERR_FILENO = 2

INPUT_FLAGS = os.O_RDONLY
OUTPUT_FLAGS = os.O_WRONLY | os.O_CREAT


class Redirector:
    """
    Applies the redirections of a simple command.

    Every target is resolved and opened afresh on each call; the temporary
    descriptor is always closed once it has been duplicated.

    Example:
        >>> redirector = Redirector()
        >>> redirector.apply(Word('out.txt'), STDOUT_FILENO, OUTPUT_FLAGS | os.O_TRUNC)
        True
    """

    def __init__(
        self,
        resolver: Resolver = resolve_word,
        file_mode: Optional[int] = None,
        strict: Optional[bool] = None
    ):
        config = get_config()
        self._resolver = resolver
        self._file_mode = config.redirection.file_mode if file_mode is None else file_mode
        self._strict = config.redirection.strict if strict is None else strict
        self._logger = get_logger('redirection')

    def apply(self, word: Any, fd: int, flags: int) -> bool:
        """
        Open the file named by ``word`` and rebind ``fd`` to it.

        Args:
            word: Target word; ``None`` means no redirection
            fd: Descriptor to rebind
            flags: ``os.open`` flags

        Returns:
            True if ``fd`` was rebound

        Raises:
            RedirectionError: In strict mode, if the target cannot be opened
        """
        if word is None:
            return False

        path = self._resolver(word)
        if path is None:
            return self._fail(f"Cannot resolve redirection target {word!r}", str(word), fd)

        try:
            src_fd = os.open(path, flags, self._file_mode)
        except OSError as e:
            return self._fail(f"Cannot open redirection target: {e.strerror}", path, fd)

        try:
            if src_fd == fd:
                os.set_inheritable(fd, True)
                src_fd = -1
            else:
                os.dup2(src_fd, fd)
        finally:
            if src_fd >= 0:
                os.close(src_fd)

        self._logger.debug(
            f"Redirected fd {fd} to {path}",
            pid=os.getpid(),
            context={'flags': flags}
        )
        return True

    def _fail(self, message: str, path: str, fd: int) -> bool:
        if self._strict:
            raise RedirectionError(message, path=path, fd=fd)
        self._logger.warning(message, pid=os.getpid(), context={'path': path, 'fd': fd})
        return False

    def apply_input(self, scmd: SimpleCommand) -> bool:
        return self.apply(scmd.input, STDIN_FILENO, INPUT_FLAGS)

    def apply_output(self, scmd: SimpleCommand) -> bool:
        flags = OUTPUT_FLAGS
        if scmd.io_flags & IOFlags.OUT_APPEND:
            flags |= os.O_APPEND
        else:
            flags |= os.O_TRUNC
        return self.apply(scmd.output, STDOUT_FILENO, flags)

    def apply_error(self, scmd: SimpleCommand) -> bool:
        flags = OUTPUT_FLAGS
        if scmd.io_flags & IOFlags.ERR_APPEND:
            flags |= os.O_APPEND
        else:
            flags |= os.O_TRUNC
        return self.apply(scmd.error, STDERR_FILENO, flags)

    def apply_merged(self, scmd: SimpleCommand) -> bool:
        """
        Send stdout and stderr into the same file.

        stderr opens the target first and truncates it, stdout reopens it
        afterwards. Both descriptors append so neither stream overwrites
        the other.
        """
        bound = self.apply(
            scmd.error, STDERR_FILENO, OUTPUT_FLAGS | os.O_TRUNC | os.O_APPEND
        )
        bound = self.apply(scmd.output, STDOUT_FILENO, OUTPUT_FLAGS | os.O_APPEND) and bound
        return bound

    def apply_command(self, scmd: SimpleCommand) -> None:
        """Apply every redirection declared on ``scmd``."""
        self.apply_input(scmd)
        if scmd.merges_output_and_error:
            self.apply_merged(scmd)
        else:
            self.apply_output(scmd)
            self.apply_error(scmd)


@contextmanager
def preserved_descriptors(*fds: int) -> Iterator[None]:
    """
    Save ``fds`` on entry and put them back on exit.

    Used around built-ins, which apply their redirections in the engine's
    own process.
    """
    saved: dict[int, Optional[int]] = {}
    try:
        for fd in fds:
            try:
                saved[fd] = os.dup(fd)
            except OSError:
                # closed on entry, close again on exit
                saved[fd] = None
        yield
    finally:
        for fd, copy in saved.items():
            if copy is None:
                with suppress(OSError):
                    os.close(fd)
                continue
            try:
                os.dup2(copy, fd)
            finally:
                os.close(copy)
