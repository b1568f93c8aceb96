"""
Seed Module

The static nested tree the node store is initialized from, and the
bundled text bodies that are hydrated into it after start-up.

Seed format:
    {
        "/home/victxrlarixs/": {
            "type": "folder",
            "children": {
                "notes.txt": {"type": "file", "content": "..."},
                "docs": {"type": "folder", "children": {}}
            }
        }
    }

Any node may carry an optional "metadata" object with owner,
permissions and mtime.
"""

import json
from pathlib import Path
from typing import Any

from deskvfs.exceptions import SeedFormatError
from deskvfs.filesystem.node import File, Folder, Node, NodeMetadata, NodeType
from deskvfs.filesystem.path_resolver import PathResolver


# Files whose real bodies are hydrated after init, relative to home
READ_ME = 'Desktop/readme.md'
LINUX_BIBLE = 'man-pages/linux-bible.md'
BASH_BIBLE = 'man-pages/pure-bash-bible.md'
SH_BIBLE = 'man-pages/pure-sh-bible.md'
THEMES = 'settings/themes.json'
FONTS = 'settings/fonts.json'


README_TEXT = """# CDE Desktop

A recreation of the Common Desktop Environment running in a browser tab.

- Drag windows by their title bars
- Open the File Manager from the front panel
- Deleted files go to the Trash and can be restored from there
"""

DEFAULT_TUTORIAL = [
    [
        {'user': 'victxrlarixs', 'command': 'pwd', 'output': '/home/victxrlarixs'},
        {'user': 'victxrlarixs', 'command': 'ls', 'output': 'Desktop  Documents  man-pages  settings'},
    ],
    [
        {'user': 'victxrlarixs', 'command': 'mkdir projects', 'output': ''},
        {'user': 'victxrlarixs', 'command': 'cd projects && touch notes.txt', 'output': ''},
    ],
]

DEFAULT_THEMES = {
    'default': {'background': '#6a8ba5', 'window': '#aeb2c3', 'titlebar': '#4d648d'},
    'solaris': {'background': '#9397a5', 'window': '#c5c5c5', 'titlebar': '#6b7b8c'},
}

DEFAULT_FONTS = {
    'classic': {'family': 'Helvetica', 'size': 12},
    'terminal': {'family': 'Courier', 'size': 13},
}


def _file(content: str = '') -> dict[str, Any]:
    return {'type': 'file', 'content': content}


def _folder(**children: dict[str, Any]) -> dict[str, Any]:
    return {'type': 'folder', 'children': dict(children)}


def build_default_seed(home: str) -> dict[str, Any]:
    """
    Build the stock desktop tree rooted at home.

    Long documents are empty placeholders here; the hydrator fills
    them in after init.
    """
    return {
        PathResolver.as_folder(home): {
            'type': 'folder',
            'children': {
                'Desktop': _folder(**{
                    'readme.md': _file(),
                    'welcome.txt': _file('Welcome to the CDE desktop.\n'),
                }),
                'Documents': _folder(**{
                    'notes.txt': _file('Remember to empty the trash.\n'),
                }),
                'Downloads': _folder(),
                'man-pages': _folder(**{
                    'linux-bible.md': _file(),
                    'pure-bash-bible.md': _file(),
                    'pure-sh-bible.md': _file(),
                }),
                'settings': _folder(**{
                    'themes.json': _file(),
                    'fonts.json': _file(),
                    'session.json': _file('{}'),
                }),
                '.Trash': _folder(),
            },
        }
    }


def node_from_dict(data: Any, path: str = '') -> Node:
    """
    Build a node tree from its seed representation.

    Args:
        data: Seed entry ({"type": "file"|"folder", ...})
        path: Canonical path of the entry, for error messages

    Returns:
        The constructed File or Folder

    Raises:
        SeedFormatError: If an entry is malformed
    """
    if not isinstance(data, dict):
        raise SeedFormatError("Seed entry must be an object", path=path)

    try:
        node_type = NodeType(data.get('type'))
    except ValueError:
        raise SeedFormatError(f"Unknown node type: {data.get('type')!r}", path=path) from None

    metadata = None
    if 'metadata' in data:
        if not isinstance(data['metadata'], dict):
            raise SeedFormatError("Metadata must be an object", path=path)
        metadata = NodeMetadata.from_dict(data['metadata'])

    if node_type is NodeType.FILE:
        content = data.get('content', '')
        if not isinstance(content, str):
            raise SeedFormatError("File content must be a string", path=path)
        return File(content=content, metadata=metadata)

    children = data.get('children', {})
    if not isinstance(children, dict):
        raise SeedFormatError("Folder children must be an object", path=path)

    folder = Folder(metadata=metadata)
    for name, child in children.items():
        if not name or '/' in name or name in ('.', '..'):
            raise SeedFormatError(f"Invalid entry name: {name!r}", path=path)
        child_path = PathResolver.join(path, name, isinstance(child, dict) and child.get('type') == 'folder')
        folder.children[name] = node_from_dict(child, child_path)
    return folder


def root_from_seed(seed: dict[str, Any], home: str) -> Folder:
    """
    Pick the home folder out of a seed document.

    Raises:
        SeedFormatError: If the seed has no folder at home
    """
    home = PathResolver.as_folder(home)
    if home not in seed:
        raise SeedFormatError("Root path not found in seed data", path=home)

    root = node_from_dict(seed[home], home)
    if not isinstance(root, Folder):
        raise SeedFormatError("Seed root must be a folder", path=home)
    return root


def load_seed(seed_path: str) -> dict[str, Any]:
    """
    Read a seed document from a JSON file.

    Raises:
        SeedFormatError: If the file is missing or not valid JSON
    """
    path = Path(seed_path)
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except OSError as e:
        raise SeedFormatError(f"Cannot read seed file: {e}", path=str(path))
    except json.JSONDecodeError as e:
        raise SeedFormatError(f"Invalid JSON in seed file: {e}", path=str(path))

    if not isinstance(data, dict):
        raise SeedFormatError("Seed document must be an object", path=str(path))
    return data


DEFAULT_SEED = build_default_seed('/home/victxrlarixs/')
