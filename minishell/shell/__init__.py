"""
MiniShell Shell Module

Runs parsed command trees:
- Command tree model
- Redirections
- Built-in commands
- Tree evaluation
"""

from .command import (
    Command,
    CompositeCommand,
    IOFlags,
    Operator,
    SimpleCommand,
    Word,
    resolve_word,
    simple,
)
from .redirection import Redirector, preserved_descriptors
from .builtins import BuiltinCommands
from .evaluator import CommandEvaluator, create_evaluator

__all__ = [
    'Command',
    'CompositeCommand',
    'IOFlags',
    'Operator',
    'SimpleCommand',
    'Word',
    'resolve_word',
    'simple',
    'Redirector',
    'preserved_descriptors',
    'BuiltinCommands',
    'CommandEvaluator',
    'create_evaluator',
]
