"""
Command Evaluator Module

Walks a command tree and runs it:
- simple commands through the built-ins or the process launcher
- sequencing and the two conditionals in the current process
- parallel branches and pipeline stages in forked subprocesses

Author: YSNRFD
Version: 1.0.0
"""

import os
from typing import Any, Callable, List, Optional, Tuple

from .builtins import BuiltinCommands
from .command import (
    CompositeCommand,
    Operator,
    Resolver,
    SimpleCommand,
    resolve_word,
)
from .redirection import Redirector
from minishell.core.config_loader import Config, ConfigLoader, get_config
from minishell.exceptions import (
    ForkError,
    MalformedCommandError,
    PipeError,
    ProcessException,
    UnknownOperatorError,
    WordResolutionError,
)
from minishell.ipc.pipe import Pipe
from minishell.logger import Logger, get_logger
from minishell.process.launcher import ProcessLauncher
from minishell.process.status import (
    SHELL_EXIT,
    STATUS_FAILURE,
    STATUS_FORK_FAILED,
    STATUS_SUCCESS,
    STATUS_UNRESOLVED,
)


COMPOSITE_OPERATORS = frozenset({
    Operator.SEQUENTIAL,
    Operator.PARALLEL,
    Operator.CONDITIONAL_ZERO,
    Operator.CONDITIONAL_NZERO,
    Operator.PIPE,
})

# operators whose children run in the current process
SEQUENCING_OPERATORS = frozenset({
    Operator.SEQUENTIAL,
    Operator.CONDITIONAL_ZERO,
    Operator.CONDITIONAL_NZERO,
})


class CommandEvaluator:
    """
    Command tree evaluator.

    ``level`` and ``father`` describe where a node sits in the tree and are
    only used in log records.

    Example:
        >>> evaluator = CommandEvaluator()
        >>> tree = CompositeCommand(Operator.CONDITIONAL_ZERO, simple('true'), simple('echo', 'ok'))
        >>> evaluator.execute(tree)
        ok
        0
    """

    def __init__(
        self,
        resolver: Resolver = resolve_word,
        config: Optional[Config] = None
    ):
        config = config or get_config()
        self._resolver = resolver
        self._redirector = Redirector(
            resolver,
            file_mode=config.redirection.file_mode,
            strict=config.redirection.strict
        )
        self._builtins = BuiltinCommands(resolver, self._redirector)
        self._launcher = ProcessLauncher(
            resolver,
            self._redirector,
            exec_failure_status=config.process.exec_failure_status
        )
        self._pipefail = config.process.pipefail
        self._logger = get_logger('evaluator')

    def execute(
        self,
        command: Any,
        level: int = 0,
        father: Optional[CompositeCommand] = None
    ) -> int:
        """
        Validate and run a command tree.

        Args:
            command: Root of the tree
            level: Nesting level of the root
            father: Node the root hangs from, if any

        Returns:
            Exit status of the tree, ``SHELL_EXIT`` when the engine should
            stop, or a negative status for a malformed tree
        """
        try:
            self.validate(command, level)
        except MalformedCommandError as e:
            self._logger.error(f"Rejected command tree: {e}", pid=os.getpid())
            return e.status
        return self.parse_command(command, level, father)

    def validate(self, command: Any, level: int = 0) -> None:
        """
        Check the structure of the whole tree before anything runs.

        Raises:
            MalformedCommandError: For a missing child, a leaf without a
                verb, or an object that is not a command node
            UnknownOperatorError: For a composite with an unknown operator
        """
        pending = [(command, level)]
        while pending:
            node, depth = pending.pop()
            if isinstance(node, SimpleCommand):
                if node.verb is None:
                    raise MalformedCommandError("Simple command has no verb", level=depth)
            elif isinstance(node, CompositeCommand):
                if not isinstance(node.op, Operator) or node.op not in COMPOSITE_OPERATORS:
                    raise UnknownOperatorError(node.op, status=SHELL_EXIT, level=depth)
                if node.cmd1 is None or node.cmd2 is None:
                    raise MalformedCommandError(
                        f"{node.op.name} node is missing a child", level=depth
                    )
                pending.append((node.cmd2, depth + 1))
                pending.append((node.cmd1, depth + 1))
            else:
                raise MalformedCommandError(f"Not a command node: {node!r}", level=depth)

    def parse_command(
        self,
        c: Any,
        level: int,
        father: Optional[CompositeCommand]
    ) -> int:
        """
        Run one node of an already validated tree.

        Sequencing and the conditionals are unwound with an explicit stack
        of nodes still waiting for their first child, so chains of any
        length run without growing the interpreter stack. Parallel and pipe
        nodes fork, and their subtrees continue in the children.
        """
        pending: List[Tuple[CompositeCommand, int]] = []
        node, depth, parent = c, level, father
        while True:
            while node.op in SEQUENCING_OPERATORS:
                self._log_node(node, depth, parent)
                pending.append((node, depth))
                node, depth, parent = node.cmd1, depth + 1, node

            status = self._run_node(node, depth, parent)

            resume = None
            while pending and resume is None:
                owner, owner_depth = pending.pop()
                if status != SHELL_EXIT and self._runs_second(owner.op, status):
                    resume = (owner.cmd2, owner_depth + 1, owner)
            if resume is None:
                return status
            node, depth, parent = resume

    @staticmethod
    def _runs_second(op: Operator, status: int) -> bool:
        if op is Operator.CONDITIONAL_ZERO:
            return status == STATUS_SUCCESS
        if op is Operator.CONDITIONAL_NZERO:
            return status != STATUS_SUCCESS
        return True

    def _log_node(
        self,
        node: Any,
        level: int,
        father: Optional[CompositeCommand]
    ) -> None:
        self._logger.debug(
            f"Evaluating {node.op.name}",
            pid=os.getpid(),
            context={'level': level, 'father': father.op.name if father else None}
        )

    def _run_node(
        self,
        c: Any,
        level: int,
        father: Optional[CompositeCommand]
    ) -> int:
        """Run a leaf, a parallel node or a pipe node."""
        self._log_node(c, level, father)

        if c.op is Operator.NONE:
            return self.parse_simple(c, level, father)

        if c.op is Operator.PARALLEL:
            return self.run_in_parallel(c.cmd1, c.cmd2, level, c)

        if c.op is Operator.PIPE:
            return self.run_on_pipe(c.cmd1, c.cmd2, level, c)

        return SHELL_EXIT

    def parse_simple(
        self,
        s: SimpleCommand,
        level: int,
        father: Optional[CompositeCommand]
    ) -> int:
        """Run a built-in or an external command."""
        name = self._resolver(s.verb)
        if name is None:
            self._logger.warning(
                f"Cannot resolve command name {s.verb!r}",
                pid=os.getpid(),
                context={'level': level}
            )
            return STATUS_UNRESOLVED

        if self._builtins.is_builtin(name):
            return self._builtins.execute(name, s)

        try:
            return self._launcher.launch(s)
        except WordResolutionError as e:
            self._logger.warning(f"{name}: {e}", pid=os.getpid(), context={'level': level})
            return STATUS_UNRESOLVED
        except ProcessException as e:
            self._logger.error(f"{name}: {e}", pid=os.getpid(), context={'level': level})
            return STATUS_FORK_FAILED

    def _spawn_subtree(
        self,
        cmd: Any,
        level: int,
        father: CompositeCommand,
        setup: Optional[Callable[[], Any]] = None
    ) -> int:
        """Start ``cmd`` in its own process and return the child's pid."""
        return self._launcher.spawn(
            lambda: self.parse_command(cmd, level + 1, father),
            setup=setup,
            name=f"{father.op.name.lower()} branch at level {level + 1}"
        )

    def _wait_all(self, pids: List[int]) -> List[int]:
        statuses = []
        for pid in pids:
            try:
                statuses.append(self._launcher.wait(pid))
            except ProcessException as e:
                self._logger.error(str(e), pid=os.getpid())
                statuses.append(STATUS_FORK_FAILED)
        return statuses

    def run_in_parallel(
        self,
        cmd1: Any,
        cmd2: Any,
        level: int,
        father: CompositeCommand
    ) -> int:
        """
        Run two subtrees simultaneously, each in its own process.

        Returns:
            0 if both exited 0, 1 otherwise, ``STATUS_FORK_FAILED`` if a
            branch could not be started
        """
        pids: List[int] = []
        failed = False
        try:
            for cmd in (cmd1, cmd2):
                pids.append(self._spawn_subtree(cmd, level, father))
        except ForkError as e:
            self._logger.error(str(e), pid=os.getpid(), context={'level': level})
            failed = True

        statuses = self._wait_all(pids)
        if failed or STATUS_FORK_FAILED in statuses:
            return STATUS_FORK_FAILED
        if all(status == STATUS_SUCCESS for status in statuses):
            return STATUS_SUCCESS
        return STATUS_FAILURE

    def run_on_pipe(
        self,
        cmd1: Any,
        cmd2: Any,
        level: int,
        father: CompositeCommand
    ) -> int:
        """
        Run ``cmd1 | cmd2``.

        Returns:
            The status of ``cmd2``; with pipefail, the rightmost non-zero
            stage status or 0
        """
        try:
            pipe = Pipe.open()
        except PipeError as e:
            self._logger.error(str(e), pid=os.getpid(), context={'level': level})
            return STATUS_FORK_FAILED

        pids: List[int] = []
        failed = False
        with pipe:
            try:
                pids.append(self._spawn_subtree(cmd1, level, father, setup=pipe.attach_writer))
                pids.append(self._spawn_subtree(cmd2, level, father, setup=pipe.attach_reader))
            except ForkError as e:
                self._logger.error(str(e), pid=os.getpid(), context={'level': level})
                failed = True

        # both ends are closed here, so the reader sees end of input
        statuses = self._wait_all(pids)
        if failed or STATUS_FORK_FAILED in statuses:
            return STATUS_FORK_FAILED
        if self._pipefail:
            failures = [status for status in statuses if status != STATUS_SUCCESS]
            return failures[-1] if failures else STATUS_SUCCESS
        return statuses[-1]


def create_evaluator(
    resolver: Optional[Resolver] = None,
    config_path: Optional[str] = None
) -> CommandEvaluator:
    """
    Factory function to create an evaluator.

    Loads the configuration file if one is given and sets up logging from
    it before building the evaluator.
    """
    loader = ConfigLoader()
    if config_path:
        loader.load(config_path)
    config = loader.config

    Logger.initialize(
        level=config.logging.level,
        log_file=config.logging.log_file,
        use_colors=config.logging.use_colors,
        console_output=config.logging.console_output
    )
    get_logger('evaluator').info(
        f"{config.engine.name} {config.engine.version} ready",
        pid=os.getpid(),
        context={'config': config_path} if config_path else None
    )
    return CommandEvaluator(resolver or resolve_word, config)
