"""
deskvfs Exception Hierarchy

Architecture:
    EngineException
    ├── EngineStateError
    ├── ConfigValidationError
    └── SeedFormatError
    FileSystemException
    ├── PathNotFoundError
    ├── NameCollisionError
    ├── NotAFileError
    ├── NotADirectoryError
    └── InvalidOperationError
"""

from .engine_exceptions import (
    EngineException,
    EngineStateError,
    ConfigValidationError,
    SeedFormatError,
)

from .fs_exceptions import (
    FileSystemException,
    PathNotFoundError,
    NameCollisionError,
    NotAFileError,
    NotADirectoryError,
    InvalidOperationError,
)

__all__ = [
    # Engine exceptions
    "EngineException",
    "EngineStateError",
    "ConfigValidationError",
    "SeedFormatError",
    # Filesystem exceptions
    "FileSystemException",
    "PathNotFoundError",
    "NameCollisionError",
    "NotAFileError",
    "NotADirectoryError",
    "InvalidOperationError",
]
