"""
Metadata Engine Module

Per-node metadata with engine defaults, and on-demand size computation.

Sizes are recomputed on every call instead of being cached, so they are
always correct after any mutation.
"""

import time
from dataclasses import replace
from typing import Optional, Any

from deskvfs.core.config_loader import FilesystemConfig, is_permission_string
from deskvfs.filesystem.node import File, Folder, Node, NodeMetadata
from deskvfs.filesystem.path_resolver import PathResolver
from deskvfs.filesystem.store import NodeStore


SIZE_UNITS = ('B', 'KB', 'MB', 'GB', 'TB')


def content_size(content: str) -> int:
    """Size of a text body in UTF-8 bytes."""
    return len(content.encode('utf-8'))


def node_size(node: Node) -> int:
    """
    Size of a node: its content for a file, the sum of all
    descendant files for a folder.
    """
    if isinstance(node, File):
        return content_size(node.content)

    total = 0
    stack: list[Node] = [node]
    while stack:
        current = stack.pop()
        if isinstance(current, Folder):
            stack.extend(current.children.values())
        else:
            total += content_size(current.content)
    return total


def format_size(size: int) -> str:
    """
    Human readable size.

    Example:
        >>> format_size(1536)
        '1.5 KB'
    """
    value = float(size)
    for unit in SIZE_UNITS:
        if value < 1024 or unit == SIZE_UNITS[-1]:
            if unit == 'B':
                return f"{int(value)} B"
            return f"{value:.1f} {unit}"
        value /= 1024
    return f"{size} B"


class MetadataEngine:
    """
    Reads and updates node metadata through the node store.

    Args:
        store: Node store to read from
        config: Filesystem settings supplying owner and permission defaults
        epoch: Timestamp reported for nodes without their own mtime
    """

    def __init__(self, store: NodeStore, config: FilesystemConfig, epoch: Optional[float] = None):
        self._store = store
        self._config = config
        self._epoch = epoch if epoch is not None else time.time()

    def get_size(self, path: str) -> int:
        """
        Get the size of the node at path.

        Returns:
            Size in bytes; 0 for a missing path or an empty folder
        """
        node = self._store.get_node(path)
        if node is None:
            return 0
        return node_size(node)

    def defaults_for(self, node: Node) -> NodeMetadata:
        return NodeMetadata(
            owner=self._config.owner,
            permissions=self._config.folder_permissions if node.is_folder else self._config.file_permissions,
            mtime=self._epoch,
        )

    def get_metadata(self, path: str) -> Optional[NodeMetadata]:
        """
        Get the effective metadata of a node.

        Fields the node does not set are filled from the defaults. The
        result is a copy; use set_metadata() to change a node.
        """
        node = self._store.get_node(path)
        if node is None:
            return None

        effective = self.defaults_for(node)
        if node.metadata is None:
            return effective

        own = node.metadata
        return replace(
            effective,
            owner=own.owner if own.owner is not None else effective.owner,
            permissions=own.permissions if own.permissions is not None else effective.permissions,
            mtime=own.mtime if own.mtime is not None else effective.mtime,
            trashed_from=own.trashed_from,
            trashed_name=own.trashed_name,
        )

    def set_metadata(
        self,
        path: str,
        owner: Optional[str] = None,
        permissions: Optional[str] = None,
        mtime: Optional[float] = None
    ) -> bool:
        """
        Update metadata fields in place.

        Args:
            path: Canonical node path
            owner: New owner identifier
            permissions: New 9-character permission string, e.g. 'rw-r-----'
            mtime: New modification timestamp

        Returns:
            False if the node is missing or the permission string is invalid
        """
        node = self._store.get_node(path)
        if node is None:
            return False
        if permissions is not None and not is_permission_string(permissions):
            return False

        if node.metadata is None:
            node.metadata = NodeMetadata()
        if owner is not None:
            node.metadata.owner = owner
        if permissions is not None:
            node.metadata.permissions = permissions
        if mtime is not None:
            node.metadata.mtime = mtime
        return True

    def stat(self, path: str) -> Optional[dict[str, Any]]:
        """
        Build a display record for a node.

        Returns:
            Dictionary with name, type, size, owner, mode and times,
            or None if the path is missing
        """
        node = self._store.get_node(path)
        metadata = self.get_metadata(path)
        if node is None or metadata is None:
            return None

        size = node_size(node)
        record = {
            'path': path,
            'name': PathResolver.basename(path) or path,
            'type': node.type.value,
            'size': size,
            'size_display': format_size(size),
            'owner': metadata.owner,
            'permissions': metadata.permissions,
            'mode': ('d' if node.is_folder else '-') + metadata.permissions,
            'mtime': metadata.mtime,
            'modified': time.strftime('%Y-%m-%d %H:%M', time.localtime(metadata.mtime)),
        }
        if isinstance(node, Folder):
            record['entries'] = len(node.children)
        if metadata.trashed_from:
            record['trashed_from'] = metadata.trashed_from
        return record
