"""
Process Launcher Module

Creates, replaces and reaps child processes:
- fork a child running an arbitrary callable (isolated evaluation)
- fork/exec an external program
- wait for a specific child and decode its status

A forked child never returns into the caller's control flow; it always
leaves through ``os._exit``.

Author: YSNRFD
Version: 1.0.0
"""

import os
import sys
from typing import Any, Callable, List, Optional

from .status import STATUS_FAILURE, decode_wait_status, to_exit_code
from minishell.core.config_loader import get_config
from minishell.exceptions import ForkError, WaitError, WordResolutionError
from minishell.logger import get_logger
from minishell.shell.command import Resolver, SimpleCommand, resolve_word
from minishell.shell.redirection import STDERR_FILENO, Redirector


class ProcessLauncher:
    """
    Fork/exec/wait front end.

    Example:
        >>> launcher = ProcessLauncher()
        >>> launcher.launch(simple('true'))
        0
    """

    def __init__(
        self,
        resolver: Resolver = resolve_word,
        redirector: Optional[Redirector] = None,
        exec_failure_status: Optional[int] = None
    ):
        config = get_config()
        self._resolver = resolver
        self._redirector = redirector or Redirector(resolver)
        self._exec_failure_status = (
            config.process.exec_failure_status
            if exec_failure_status is None else exec_failure_status
        )
        self._logger = get_logger('process')

    def spawn(
        self,
        target: Callable[[], int],
        setup: Optional[Callable[[], Any]] = None,
        name: str = 'subshell'
    ) -> int:
        """
        Fork a child that runs ``setup()`` and then ``target()``.

        The child exits with the target's status. An exception in the child
        is logged and turns into status 1.

        Returns:
            The child's pid

        Raises:
            ForkError: If the child cannot be created
        """
        # buffered text would otherwise be written by both processes
        sys.stdout.flush()
        sys.stderr.flush()

        parent_pid = os.getpid()
        try:
            pid = os.fork()
        except OSError as e:
            raise ForkError(
                f"Cannot fork {name}: {e.strerror}",
                parent_pid=parent_pid,
                errno=e.errno
            ) from e

        if pid == 0:
            status = STATUS_FAILURE
            try:
                if setup is not None:
                    setup()
                status = target()
            except Exception as e:
                self._logger.exception(
                    f"{name} failed: {e}",
                    exc=e,
                    pid=os.getpid(),
                    context={'parent': parent_pid}
                )
                status = STATUS_FAILURE
            finally:
                os._exit(to_exit_code(status))

        self._logger.debug(
            f"Started {name}",
            pid=pid,
            context={'parent': parent_pid}
        )
        return pid

    def wait(self, pid: int) -> int:
        """
        Wait for ``pid`` to terminate and return its exit code.

        Raises:
            WaitError: If ``pid`` is not a child of this process
        """
        try:
            _, raw_status = os.waitpid(pid, 0)
        except ChildProcessError as e:
            raise WaitError(f"Cannot wait for child: {e.strerror}", pid=pid) from e

        status = decode_wait_status(raw_status)
        self._logger.debug("Child terminated", pid=pid, context={'status': status})
        return status

    def run_isolated(
        self,
        target: Callable[[], int],
        setup: Optional[Callable[[], Any]] = None,
        name: str = 'subshell'
    ) -> int:
        """Run ``target`` in a new process and wait for it."""
        return self.wait(self.spawn(target, setup=setup, name=name))

    def build_argv(self, scmd: SimpleCommand) -> List[str]:
        """
        Resolve the verb and every parameter.

        Raises:
            WordResolutionError: If any word cannot be resolved
        """
        verb = self._resolver(scmd.verb)
        if verb is None:
            raise WordResolutionError('verb', scmd.verb)

        argv = [verb]
        for position, param in enumerate(scmd.params, start=1):
            value = self._resolver(param)
            if value is None:
                raise WordResolutionError(
                    'argument', param, context={'position': position}
                )
            argv.append(value)
        return argv

    def launch(self, scmd: SimpleCommand) -> int:
        """
        Run an external command and return its exit code.

        Raises:
            WordResolutionError: If the command line cannot be resolved
            ForkError: If the child cannot be created
            WaitError: If the child cannot be reaped
        """
        argv = self.build_argv(scmd)
        return self.run_isolated(
            lambda: self._exec(scmd, argv),
            name=argv[0]
        )

    def _exec(self, scmd: SimpleCommand, argv: List[str]) -> int:
        """Child side of :meth:`launch`. Only returns if exec fails."""
        self._redirector.apply_command(scmd)
        try:
            os.execvp(argv[0], argv)
        except OSError as e:
            self._logger.debug(
                f"Cannot execute {argv[0]}: {e.strerror or e}",
                pid=os.getpid()
            )
            os.write(STDERR_FILENO, f"Execution failed for '{argv[0]}'\n".encode())
        return self._exec_failure_status
