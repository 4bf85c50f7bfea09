"""
Engine Exceptions

Exceptions raised while validating and evaluating a command tree, and
while loading the engine configuration.

Author: YSNRFD
Version: 1.0.0
"""

from typing import Optional, Any


class EngineException(Exception):
    """
    Base exception for all engine-level errors.

    Attributes:
        message: Human-readable error description
        error_code: Numeric error code for programmatic handling
        context: Additional context about the error

    Example:
        >>> raise EngineException("Evaluation failed", error_code=1000)
    """

    def __init__(
        self,
        message: str,
        error_code: Optional[int] = None,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        super().__init__(message)
        self.message = message
        self.error_code = error_code or 1000
        self.context = context or {}

    def __str__(self) -> str:
        base = f"[Error {self.error_code}] {self.message}"
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            base = f"{base} ({context_str})"
        return base

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"error_code={self.error_code})"
        )


class ConfigurationError(EngineException):
    """
    Configuration could not be loaded or a key is invalid.

    Example:
        >>> raise ConfigurationError("Invalid configuration key: foo.bar")
    """

    def __init__(
        self,
        message: str,
        path: Optional[str] = None,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        ctx = context or {}
        if path:
            ctx["path"] = path
        super().__init__(
            message=message,
            error_code=1001,
            context=ctx
        )
        self.path = path


class MalformedCommandError(EngineException):
    """
    The command tree violates its structural contract.

    Raised for a composite node with a missing child, a leaf without a
    verb, or an object that is not a command node at all. The ``status``
    attribute is what the evaluation reports to its caller.

    Example:
        >>> raise MalformedCommandError("Composite node has no cmd2", level=2)
    """

    def __init__(
        self,
        message: str,
        status: int = -1,
        level: Optional[int] = None,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        ctx = context or {}
        if level is not None:
            ctx["level"] = level
        super().__init__(
            message=message,
            error_code=1002,
            context=ctx
        )
        self.status = status
        self.level = level


class UnknownOperatorError(MalformedCommandError):
    """
    A composite node carries an operator the evaluator does not know.

    Example:
        >>> raise UnknownOperatorError("bogus", status=-100)
    """

    def __init__(
        self,
        operator: Any,
        status: int,
        level: Optional[int] = None,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        super().__init__(
            message=f"Unknown operator: {operator!r}",
            status=status,
            level=level,
            context=context
        )
        self.error_code = 1003
        self.operator = operator


class WordResolutionError(EngineException):
    """
    A word could not be turned into a string by the resolver.

    Example:
        >>> raise WordResolutionError("verb", word=Word("$UNSET"))
    """

    def __init__(
        self,
        role: str,
        word: Any = None,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        ctx = context or {}
        ctx["role"] = role
        super().__init__(
            message=f"Cannot resolve {role} word {word!r}",
            error_code=1004,
            context=ctx
        )
        self.role = role
        self.word = word
