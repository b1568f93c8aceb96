"""
Filesystem Exceptions

Errors raised inside the mutation layer of the virtual filesystem.
The public engine operations turn them into silent no-ops unless the
engine runs with strict mutations enabled.
"""

from typing import Optional, Any


class FileSystemException(Exception):
    """
    Base exception for all filesystem-related errors.

    Attributes:
        message: Human-readable error description
        path: Canonical path associated with the error (if applicable)
        error_code: Numeric error code for programmatic handling
        context: Extra key/value data, also used as logging context
    """

    def __init__(
        self,
        message: str,
        path: Optional[str] = None,
        error_code: Optional[int] = None,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        super().__init__(message)
        self.message = message
        self.path = path
        self.error_code = error_code or 4000
        self.context = dict(context or {})
        if path:
            self.context["path"] = path

    def __str__(self) -> str:
        base = f"[Error {self.error_code}] {self.message}"
        if self.path:
            base = f"{base} (path={self.path})"
        return base


class PathNotFoundError(FileSystemException):
    """
    No node exists at the given path.

    Example:
        >>> raise PathNotFoundError("/home/u/missing.txt")
    """

    def __init__(
        self,
        path: str,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        super().__init__(
            message=f"Path not found: {path}",
            path=path,
            error_code=4001,
            context=context
        )


class NameCollisionError(FileSystemException):
    """
    The target name is already taken in the destination folder.

    Example:
        >>> raise NameCollisionError("/home/u/a.txt")
    """

    def __init__(
        self,
        path: str,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        super().__init__(
            message=f"Name already exists: {path}",
            path=path,
            error_code=4002,
            context=context
        )


class NotAFileError(FileSystemException):
    """
    Path is a folder where a file was required.

    Example:
        >>> raise NotAFileError("/home/u/docs/")
    """

    def __init__(
        self,
        path: str,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        super().__init__(
            message=f"Not a file: {path}",
            path=path,
            error_code=4008,
            context=context
        )


class NotADirectoryError(FileSystemException):
    """
    Path is a file (or missing) where a folder was required.

    Example:
        >>> raise NotADirectoryError("/home/u/a.txt")
    """

    def __init__(
        self,
        path: str,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        super().__init__(
            message=f"Not a directory: {path}",
            path=path,
            error_code=4009,
            context=context
        )


class InvalidOperationError(FileSystemException):
    """
    The operation is structurally impossible.

    Raised for moves into the node's own subtree, operations on the
    root or the Trash folder itself, and invalid entry names.

    Example:
        >>> raise InvalidOperationError("/home/u/docs/", reason="move into own subtree")
    """

    def __init__(
        self,
        path: str,
        reason: Optional[str] = None,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        ctx = dict(context or {})
        if reason:
            ctx["reason"] = reason
        super().__init__(
            message=f"Invalid operation: {reason}" if reason else "Invalid operation",
            path=path,
            error_code=4010,
            context=ctx
        )
        self.reason = reason
