"""
Shell Built-in Commands

Implements the commands the engine runs in its own process.

Author: YSNRFD
Version: 1.0.0
"""

import os
from typing import Callable, Optional

from .command import Resolver, SimpleCommand, resolve_word
from .redirection import (
    STDERR_FILENO,
    STDIN_FILENO,
    STDOUT_FILENO,
    Redirector,
    preserved_descriptors,
)
from minishell.exceptions import ChangeDirectoryError, RedirectionError
from minishell.logger import get_logger
from minishell.process.status import SHELL_EXIT, STATUS_FAILURE, STATUS_SUCCESS


class BuiltinCommands:
    """
    Built-in shell commands.

    These commands are executed directly by the engine without
    creating a new process.
    """

    def __init__(
        self,
        resolver: Resolver = resolve_word,
        redirector: Optional[Redirector] = None
    ):
        """
        Initialize built-in commands.

        Args:
            resolver: Turns words into strings
            redirector: Applies the command's redirections
        """
        self._resolver = resolver
        self._redirector = redirector or Redirector(resolver)
        self._logger = get_logger('builtins')
        self._commands: dict[str, Callable[[SimpleCommand], int]] = {
            'cd': self.cmd_cd,
            'exit': self.cmd_exit,
            'quit': self.cmd_exit,
        }

    def is_builtin(self, name: str) -> bool:
        """Check if a command is built-in."""
        return name in self._commands

    def execute(self, name: str, scmd: SimpleCommand) -> int:
        """
        Execute a built-in command.

        Args:
            name: Resolved command name
            scmd: The command node

        Returns:
            Exit code, or ``SHELL_EXIT`` for exit/quit

        Raises:
            KeyError: If ``name`` is not a built-in
        """
        cmd = self._commands[name]
        self._logger.debug(f"Running built-in {name}", pid=os.getpid())
        return cmd(scmd)

    # Command implementations

    def cmd_cd(self, scmd: SimpleCommand) -> int:
        """
        Change directory.

        The command's redirections are applied (so ``cd > file`` still
        creates ``file``) and undone before returning.
        """
        with preserved_descriptors(STDIN_FILENO, STDOUT_FILENO, STDERR_FILENO):
            try:
                self._redirector.apply_command(scmd)
                self._change_directory(scmd.params)
            except RedirectionError as e:
                self._logger.warning(f"cd: {e}", pid=os.getpid())
                return STATUS_FAILURE
            except ChangeDirectoryError as e:
                self._report(f"cd: {e.path}: {e.message}" if e.path else f"cd: {e.message}")
                return STATUS_FAILURE
        return STATUS_SUCCESS

    def _change_directory(self, params: tuple) -> None:
        if params:
            path = self._resolver(params[0])
            if path is None:
                raise ChangeDirectoryError(f"cannot resolve {params[0]!r}")
        else:
            path = os.environ.get('HOME')
            if not path:
                raise ChangeDirectoryError("HOME not set")

        try:
            os.chdir(path)
        except OSError as e:
            raise ChangeDirectoryError(e.strerror or str(e), path=path) from e

        self._logger.debug(f"Changed directory to {path}", pid=os.getpid())

    def cmd_exit(self, scmd: SimpleCommand) -> int:
        """Exit the shell."""
        return SHELL_EXIT

    @staticmethod
    def _report(message: str) -> None:
        """Write a diagnostic to whatever stderr currently is."""
        os.write(STDERR_FILENO, f"{message}\n".encode())
