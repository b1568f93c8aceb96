"""
Engine Exceptions

Errors about the engine itself rather than about filesystem contents:
lifecycle misuse and bad configuration. These are programming or
deployment errors and always propagate.
"""

from typing import Optional, Any


class EngineException(Exception):
    """
    Base exception for engine-level errors.

    Attributes:
        message: Human-readable error description
        error_code: Numeric error code for programmatic handling
        context: Additional context about the error
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
        self.context = dict(context or {})

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


class EngineStateError(EngineException):
    """
    An operation was attempted in the wrong lifecycle state.

    Raised when the filesystem is used before init() or initialized twice.

    Example:
        >>> raise EngineStateError("filesystem not initialized", state="REGISTERED")
    """

    def __init__(
        self,
        message: str,
        state: Optional[str] = None,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        ctx = dict(context or {})
        if state:
            ctx["state"] = state
        super().__init__(message=message, error_code=1001, context=ctx)
        self.state = state


class ConfigValidationError(EngineException):
    """
    Configuration could not be loaded or failed validation.

    Example:
        >>> raise ConfigValidationError("trash must live under home", key="filesystem.trash")
    """

    def __init__(
        self,
        message: str,
        key: Optional[str] = None,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        ctx = dict(context or {})
        if key:
            ctx["key"] = key
        super().__init__(message=message, error_code=1002, context=ctx)
        self.key = key


class SeedFormatError(EngineException):
    """
    The static seed tree is malformed.

    Example:
        >>> raise SeedFormatError("unknown node type 'link'", path="/home/u/x")
    """

    def __init__(
        self,
        message: str,
        path: Optional[str] = None,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        ctx = dict(context or {})
        if path:
            ctx["path"] = path
        super().__init__(message=message, error_code=1003, context=ctx)
        self.path = path
