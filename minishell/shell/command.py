"""
Command Tree Module

The immutable command tree handed to the engine by the parser.

A node is either a ``SimpleCommand`` (a leaf, operator ``NONE``) or a
``CompositeCommand`` joining two nodes with an operator. Dispatch is on
the ``op`` discriminant.

Author: YSNRFD
Version: 1.0.0
"""

from dataclasses import dataclass
from enum import Enum, IntFlag
from typing import Any, Callable, Optional, Tuple, Union


class Operator(Enum):
    """Operators joining the two children of a composite node."""
    NONE = "none"                          # leaf
    SEQUENTIAL = ";"
    PARALLEL = "&"
    CONDITIONAL_ZERO = "&&"                # run cmd2 if cmd1 succeeded
    CONDITIONAL_NZERO = "||"               # run cmd2 if cmd1 failed
    PIPE = "|"


class IOFlags(IntFlag):
    """Append flags for output and error redirections."""
    REGULAR = 0
    OUT_APPEND = 1
    ERR_APPEND = 2


@dataclass(frozen=True)
class Word:
    """
    A word as produced by the parser.

    The engine treats words as opaque and only ever passes them to the
    resolver. This type is the default word; callers with their own word
    representation supply their own resolver.
    """
    text: Optional[str]

    def __str__(self) -> str:
        return self.text if self.text is not None else ''


Resolver = Callable[[Any], Optional[str]]


def resolve_word(word: Any) -> Optional[str]:
    """
    Default resolver.

    Returns the literal text of a :class:`Word`, a plain string unchanged,
    and ``None`` for anything else.
    """
    if isinstance(word, Word):
        return word.text
    if isinstance(word, str):
        return word
    return None


@dataclass(frozen=True, eq=False)
class SimpleCommand:
    """
    A single program invocation.

    Attributes:
        verb: Command name word
        params: Argument words, in order
        input: Word naming the ``<`` target
        output: Word naming the ``>`` / ``>>`` target
        error: Word naming the ``2>`` / ``2>>`` target
        io_flags: Append flags for output and error

    Passing the same word object as ``output`` and ``error`` (``&>``)
    merges both streams into one file.
    """
    verb: Any
    params: Tuple[Any, ...] = ()
    input: Any = None
    output: Any = None
    error: Any = None
    io_flags: IOFlags = IOFlags.REGULAR

    @property
    def op(self) -> Operator:
        return Operator.NONE

    @property
    def merges_output_and_error(self) -> bool:
        """True when stdout and stderr go to the very same word."""
        return self.output is not None and self.error is self.output


@dataclass(frozen=True, eq=False)
class CompositeCommand:
    """
    Two commands joined by an operator.

    Example:
        >>> CompositeCommand(Operator.PIPE, ls, grep)
    """
    op: Operator
    cmd1: Any
    cmd2: Any


Command = Union[SimpleCommand, CompositeCommand]


def simple(
    verb: Any,
    *params: Any,
    input: Any = None,
    output: Any = None,
    error: Any = None,
    io_flags: IOFlags = IOFlags.REGULAR
) -> SimpleCommand:
    """
    Build a leaf from plain strings or words.

    Strings are wrapped in :class:`Word`; existing words are kept as they
    are so that a shared output/error word stays shared.
    """
    def wrap(value: Any) -> Any:
        return Word(value) if isinstance(value, str) else value

    return SimpleCommand(
        verb=wrap(verb),
        params=tuple(wrap(p) for p in params),
        input=wrap(input),
        output=wrap(output),
        error=wrap(error),
        io_flags=io_flags,
    )
