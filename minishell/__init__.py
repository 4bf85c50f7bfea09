"""
MiniShell - A command tree execution engine

Runs parsed shell command trees (simple commands, sequences,
conditionals, parallel branches, pipes and redirections) on top of the
operating system's process and file descriptor primitives.
"""

__version__ = "1.0.0"
__author__ = "YSNRFD"

from .shell.command import (
    Command,
    CompositeCommand,
    IOFlags,
    Operator,
    SimpleCommand,
    Word,
    simple,
)
from .shell.evaluator import CommandEvaluator, create_evaluator
from .process.status import (
    SHELL_EXIT,
    STATUS_MALFORMED,
    STATUS_FORK_FAILED,
    STATUS_UNRESOLVED,
)

__all__ = [
    'Command',
    'CompositeCommand',
    'IOFlags',
    'Operator',
    'SimpleCommand',
    'Word',
    'simple',
    'CommandEvaluator',
    'create_evaluator',
    'SHELL_EXIT',
    'STATUS_MALFORMED',
    'STATUS_FORK_FAILED',
    'STATUS_UNRESOLVED',
]
