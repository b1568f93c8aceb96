"""
deskvfs Core Module

Engine plumbing shared by the filesystem components:
- Configuration Loader
- Subsystem lifecycle
- Change Bus
- Bootstrap
"""

from .config_loader import (
    Config,
    ConfigLoader,
    EngineConfig,
    FilesystemConfig,
    HydrationConfig,
    LoggingConfig,
)
from .subsystem import Subsystem, SubsystemState
from .change_bus import ChangeBus, ChangeEvent, ChangeRecorder

__all__ = [
    # Config
    'Config',
    'ConfigLoader',
    'EngineConfig',
    'FilesystemConfig',
    'HydrationConfig',
    'LoggingConfig',
    # Lifecycle
    'Subsystem',
    'SubsystemState',
    # Change notification
    'ChangeBus',
    'ChangeEvent',
    'ChangeRecorder',
]
