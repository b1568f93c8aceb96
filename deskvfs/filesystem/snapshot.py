"""
Settings Snapshot Module

Saves the settings folder of a running engine to a JSON file on the
host disk and loads it back into a fresh engine.

Snapshot format:
    {
        "version": 1,
        "root": "/home/victxrlarixs/settings/",
        "tree": {"themes.json": {"type": "file", "content": "..."}, ...}
    }
"""

import json
from pathlib import Path
from typing import Any, Iterator, Optional, Tuple, Union

from deskvfs.exceptions import SeedFormatError
from deskvfs.filesystem.node import NodeType
from deskvfs.filesystem.path_resolver import PathResolver
from deskvfs.filesystem.vfs import VirtualFileSystem
from deskvfs.logger import get_logger


SNAPSHOT_VERSION = 1

logger = get_logger('snapshot')


def save_settings_snapshot(vfs: VirtualFileSystem, disk_path: Union[str, Path]) -> int:
    """
    Write the settings subtree to disk_path.

    Returns:
        Number of files saved; 0 (and nothing written) if the settings
        folder does not exist
    """
    root = PathResolver.as_folder(vfs.config.filesystem.settings)
    exported = vfs.export_tree(root)
    if exported is None:
        logger.warning("Settings folder missing, snapshot skipped", context={'root': root})
        return 0

    tree = exported[root].get('children', {})
    document = {'version': SNAPSHOT_VERSION, 'root': root, 'tree': tree}

    path = Path(disk_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'w', encoding='utf-8') as f:
        json.dump(document, f, indent=2)

    count = sum(1 for _, content in _iter_entries(root, tree) if content is not None)
    logger.info("Settings snapshot saved", context={'path': str(path), 'files': count})
    return count


def load_settings_snapshot(vfs: VirtualFileSystem, disk_path: Union[str, Path]) -> int:
    """
    Apply a snapshot written by save_settings_snapshot().

    Missing folders and files are created; existing files get the saved
    content. Entries that exist in the engine but not in the snapshot
    are left alone.

    Returns:
        Number of files whose content was written

    Raises:
        SeedFormatError: If the file cannot be read or is not a snapshot
    """
    path = Path(disk_path)
    try:
        with open(path, 'r', encoding='utf-8') as f:
            document = json.load(f)
    except OSError as e:
        raise SeedFormatError(f"Cannot read snapshot: {e}", path=str(path))
    except json.JSONDecodeError as e:
        raise SeedFormatError(f"Invalid JSON in snapshot: {e}", path=str(path))

    if not isinstance(document, dict) or document.get('version') != SNAPSHOT_VERSION:
        raise SeedFormatError("Unsupported snapshot document", path=str(path))
    tree = document.get('tree')
    if not isinstance(tree, dict):
        raise SeedFormatError("Snapshot tree must be an object", path=str(path))

    root = PathResolver.as_folder(vfs.config.filesystem.settings)
    _ensure_folder(vfs, root)

    written = 0
    for entry_path, content in _iter_entries(root, tree):
        if content is None:
            _ensure_folder(vfs, entry_path)
            continue
        parent, name = PathResolver.split(entry_path)
        _ensure_folder(vfs, parent)
        if not vfs.is_file(entry_path):
            vfs.touch(parent, name)
        if vfs.write(entry_path, content):
            written += 1

    logger.info("Settings snapshot loaded", context={'path': str(path), 'files': written})
    return written


def _ensure_folder(vfs: VirtualFileSystem, folder: str) -> None:
    home = vfs.home
    if not folder.startswith(home):
        raise SeedFormatError("Snapshot root outside home", path=folder)

    current = home
    for component in folder[len(home):].split('/'):
        if not component:
            continue
        child = PathResolver.join(current, component, True)
        if not vfs.is_directory(child):
            if vfs.is_file(PathResolver.join(current, component)):
                raise SeedFormatError("Snapshot folder collides with a file", path=child)
            vfs.mkdir(current, component)
        current = child


def _iter_entries(base: str, children: dict[str, Any]) -> Iterator[Tuple[str, Optional[str]]]:
    # Yields (folder_path, None) for folders and (file_path, content) for files
    stack = [(base, children)]
    while stack:
        folder, entries = stack.pop()
        for name, entry in entries.items():
            if not isinstance(entry, dict) or not name or '/' in name or name in ('.', '..'):
                raise SeedFormatError(f"Invalid snapshot entry: {name!r}", path=folder)
            kind = entry.get('type')
            if kind == NodeType.FOLDER.value:
                child = PathResolver.join(folder, name, True)
                yield child, None
                stack.append((child, entry.get('children') or {}))
            elif kind == NodeType.FILE.value:
                content = entry.get('content', '')
                if not isinstance(content, str):
                    raise SeedFormatError("File content must be a string", path=folder + name)
                yield PathResolver.join(folder, name), content
            else:
                raise SeedFormatError(f"Unknown node type: {kind!r}", path=folder + name)
