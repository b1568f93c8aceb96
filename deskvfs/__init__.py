"""
deskvfs - Virtual Filesystem Engine for a Simulated Desktop

An in-memory hierarchical filesystem with a flat path index, a Trash
with restore, metadata, background content hydration and coarse
change notifications. It backs the file manager, text editor, settings
manager and terminal of a browser-based desktop.
"""

__version__ = "1.0.0"

from .core.bootstrap import Bootstrap, boot, create_engine
from .core.change_bus import ChangeBus, ChangeEvent
from .core.config_loader import Config, ConfigLoader
from .filesystem.vfs import VirtualFileSystem
from .shell.shell import Shell, create_shell

__all__ = [
    'Bootstrap',
    'boot',
    'create_engine',
    'ChangeBus',
    'ChangeEvent',
    'Config',
    'ConfigLoader',
    'VirtualFileSystem',
    'Shell',
    'create_shell',
]
