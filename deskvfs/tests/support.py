"""
Shared fixtures for the deskvfs tests.
"""

import copy
from typing import Any, Optional

from deskvfs.core.change_bus import ChangeBus, ChangeRecorder
from deskvfs.core.config_loader import Config, FilesystemConfig
from deskvfs.filesystem.vfs import VirtualFileSystem


HOME = '/home/u/'
TRASH = '/home/u/.Trash/'

SCENARIO_SEED: dict[str, Any] = {
    HOME: {
        'type': 'folder',
        'children': {
            'docs': {'type': 'folder', 'children': {}},
            'a.txt': {'type': 'file', 'content': 'hi'},
        },
    }
}


def make_config(**overrides: Any) -> Config:
    """Config rooted at /home/u/ with filesystem overrides applied."""
    fs = FilesystemConfig(
        home=HOME,
        desktop=HOME + 'Desktop/',
        trash=TRASH,
        settings=HOME + 'settings/',
        owner='u',
    )
    for key, value in overrides.items():
        setattr(fs, key, value)
    return Config(filesystem=fs)


def make_engine(seed: Optional[dict[str, Any]] = None, **overrides: Any) -> tuple[VirtualFileSystem, ChangeRecorder]:
    """Initialized engine plus a recorder subscribed to its bus."""
    bus = ChangeBus()
    recorder = ChangeRecorder(bus)
    vfs = VirtualFileSystem(
        config=make_config(**overrides),
        bus=bus,
        seed=copy.deepcopy(seed if seed is not None else SCENARIO_SEED),
    )
    vfs.init()
    return vfs, recorder


def visible(children) -> list[str]:
    """Entry names a file manager would show (dot entries hidden)."""
    return sorted(name for name in children if not name.startswith('.'))
