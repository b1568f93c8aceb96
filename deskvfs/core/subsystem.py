"""
deskvfs Subsystem Lifecycle

Base class for long-lived engine components:
- Uniform initialize/start/stop/cleanup lifecycle
- State tracking with logging of transitions
- Health checks
"""

from abc import ABC, abstractmethod
from enum import Enum, auto

from deskvfs.logger import Logger, get_logger


class SubsystemState(Enum):
    """Lifecycle state of a subsystem."""
    REGISTERED = auto()
    INITIALIZING = auto()
    INITIALIZED = auto()
    RUNNING = auto()
    STOPPED = auto()
    ERROR = auto()


class Subsystem(ABC):
    """
    Abstract base class for engine subsystems.

    Lifecycle:
        1. __init__() - Subsystem is created
        2. initialize() - Subsystem is initialized
        3. start() - Subsystem starts operation
        4. stop() - Subsystem stops operation
        5. cleanup() - Subsystem cleans up resources
    """

    def __init__(self, name: str):
        self._name = name
        self._logger = get_logger(name)
        self._state = SubsystemState.REGISTERED

    @property
    def name(self) -> str:
        """Get the subsystem name."""
        return self._name

    @property
    def state(self) -> SubsystemState:
        """Get the current state."""
        return self._state

    @property
    def logger(self) -> Logger:
        """Get the subsystem logger."""
        return self._logger

    def set_state(self, state: SubsystemState) -> None:
        """Set the subsystem state."""
        self._state = state
        self._logger.debug(f"State changed to {state.name}")

    @abstractmethod
    def initialize(self) -> None:
        """
        Initialize the subsystem.

        Called once during start-up to build in-memory state.
        """

    def start(self) -> None:
        """Start the subsystem."""
        self.set_state(SubsystemState.RUNNING)

    def stop(self) -> None:
        """Stop the subsystem."""
        self.set_state(SubsystemState.STOPPED)

    def cleanup(self) -> None:
        """Release subsystem resources. Default implementation does nothing."""

    def health_check(self) -> bool:
        """
        Check if the subsystem is healthy.

        Returns:
            True if the subsystem is initialized or running
        """
        return self._state in (
            SubsystemState.INITIALIZED,
            SubsystemState.RUNNING
        )
