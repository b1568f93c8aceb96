"""
Mutation Operations Module

touch, mkdir, rename, move, copy, rm (soft delete into the Trash),
restore, empty_trash and write.

Each public operation returns True when it changed the tree and False
when it was a no-op. A no-op leaves state untouched and publishes no
change event. Structural problems are raised internally as
FileSystemException subclasses; outside strict mode they are logged
and swallowed at the public boundary.
"""

import time
from typing import Callable, List, Optional

from deskvfs.core.change_bus import ChangeBus
from deskvfs.core.config_loader import FilesystemConfig
from deskvfs.exceptions import (
    FileSystemException,
    InvalidOperationError,
    NameCollisionError,
    NotAFileError,
    PathNotFoundError,
)
from deskvfs.filesystem.node import File, Folder, Node, NodeMetadata, new_metadata
from deskvfs.filesystem.path_resolver import PathResolver
from deskvfs.filesystem.store import NodeStore
from deskvfs.logger import get_logger


def suffixed_name(name: str, n: int) -> str:
    """
    Insert a counter before the extension.

    Example:
        >>> suffixed_name('a.txt', 2)
        'a (2).txt'
        >>> suffixed_name('.bashrc', 1)
        '.bashrc (1)'
    """
    stem, dot, ext = name.rpartition('.')
    if not dot or not stem:
        return f"{name} ({n})"
    return f"{stem} ({n}).{ext}"


class MutationOperations:
    """
    Structural mutations over a NodeStore.

    Args:
        store: The node store to mutate
        bus: Bus that receives one event per affected directory
        config: Filesystem settings (home, trash, collision policy, strictness)
    """

    def __init__(self, store: NodeStore, bus: ChangeBus, config: FilesystemConfig):
        self._store = store
        self._bus = bus
        self._config = config
        self._logger = get_logger('mutations')
        self._home = PathResolver.as_folder(config.home)
        self._trash = PathResolver.as_folder(config.trash)

    @property
    def trash_path(self) -> str:
        return self._trash

    def in_trash(self, path: str) -> bool:
        """Whether path is the Trash folder or lies inside it."""
        return PathResolver.is_within(path, self._trash)

    def _apply(self, operation: str, action: Callable[..., List[str]], *args) -> bool:
        try:
            with self._store.lock:
                affected = action(*args)
        except FileSystemException as e:
            self._logger.debug(
                f"{operation} rejected: {e.message}",
                context={'operation': operation, 'error_code': e.error_code, **e.context}
            )
            if self._config.strict_mutations:
                raise
            return False

        if not affected:
            return False

        for path in dict.fromkeys(affected):
            self._bus.publish(path)
        return True

    def _lookup(self, path: str) -> tuple[str, Node]:
        # Accept folder paths with or without the trailing separator
        node = self._store.get_node(path)
        if node is None and not path.endswith('/'):
            path = PathResolver.as_folder(path)
            node = self._store.get_node(path)
        if node is None:
            raise PathNotFoundError(path)
        return path, node

    def _check_movable(self, path: str) -> None:
        if path == self._home:
            raise InvalidOperationError(path, reason="cannot move or delete the root folder")
        if PathResolver.is_within(self._trash, path):
            raise InvalidOperationError(path, reason="cannot move or delete the Trash folder")

    # Creation

    def touch(self, directory: str, name: str) -> bool:
        """Create an empty file called name in directory."""
        return self._apply('touch', self._touch, PathResolver.as_folder(directory), name)

    def _touch(self, directory: str, name: str) -> List[str]:
        path = self._store.attach(directory, name, File(metadata=new_metadata()))
        self._logger.debug(f"touch: {path}")
        return [directory]

    def mkdir(self, directory: str, name: str) -> bool:
        """Create an empty folder called name in directory."""
        return self._apply('mkdir', self._mkdir, PathResolver.as_folder(directory), name)

    def _mkdir(self, directory: str, name: str) -> List[str]:
        path = self._store.attach(directory, name, Folder(metadata=new_metadata()))
        self._logger.debug(f"mkdir: {path}")
        return [directory]

    # Relocation

    def rename(self, directory: str, old_name: str, new_name: str) -> bool:
        """
        Rename an entry in place.

        A no-op if old_name is missing or new_name is taken; the
        renamed node keeps its identity, content and metadata.
        """
        return self._apply('rename', self._rename, PathResolver.as_folder(directory), old_name, new_name)

    def _rename(self, directory: str, old_name: str, new_name: str) -> List[str]:
        old_path = self._store.child_path(directory, old_name)
        if old_path is None:
            self._store.require_folder(directory)
            raise PathNotFoundError(PathResolver.join(directory, old_name))

        self._check_movable(old_path)
        self._store.check_attachable(directory, new_name)

        node = self._store.detach(directory, old_name)
        new_path = self._store.attach(directory, new_name, node)
        self._logger.debug(f"rename: {old_path} -> {new_path}")
        return [directory]

    def move(self, src: str, dest: str) -> bool:
        """
        Move the node at src to dest (parent folder + final name).

        Rejected when dest exists, when dest's parent is not a folder,
        or when dest lies inside src.
        """
        return self._apply('move', self._move, src, dest)

    def _move(self, src: str, dest: str) -> List[str]:
        src, node = self._lookup(src)
        self._check_movable(src)

        dest_parent, dest_name = PathResolver.split(dest)
        dest_path = PathResolver.join(dest_parent, dest_name, node.is_folder)
        if node.is_folder and PathResolver.is_within(dest_path, src):
            raise InvalidOperationError(dest_path, reason="cannot move a folder into itself")

        self._store.check_attachable(dest_parent, dest_name)

        src_parent, src_name = PathResolver.split(src)
        self._store.detach(src_parent, src_name)
        self._store.attach(dest_parent, dest_name, node)

        if not self.in_trash(dest_path):
            _clear_provenance(node)

        self._logger.debug(f"move: {src} -> {dest_path}")
        return [src_parent, dest_parent]

    def copy(self, src: str, dest: str) -> bool:
        """
        Deep-copy the node at src to dest.

        The copy shares no node objects with the source and gets fresh
        modification times.
        """
        return self._apply('copy', self._copy, src, dest)

    def _copy(self, src: str, dest: str) -> List[str]:
        src, node = self._lookup(src)

        dest_parent, dest_name = PathResolver.split(dest)
        dest_path = PathResolver.join(dest_parent, dest_name, node.is_folder)
        if node.is_folder and PathResolver.is_within(dest_path, src):
            raise InvalidOperationError(dest_path, reason="cannot copy a folder into itself")

        self._store.check_attachable(dest_parent, dest_name)
        self._store.attach(dest_parent, dest_name, node.clone())
        self._logger.debug(f"copy: {src} -> {dest_path}")
        return [dest_parent]

    # Deletion

    def rm(self, directory: str, name: str) -> bool:
        """
        Delete an entry.

        Outside the Trash the entry is moved into it and its original
        parent recorded. Inside the Trash it is removed for good.
        """
        return self._apply('rm', self._rm, PathResolver.as_folder(directory), name)

    def _rm(self, directory: str, name: str) -> List[str]:
        path = self._store.child_path(directory, name)
        if path is None:
            self._store.require_folder(directory)
            raise PathNotFoundError(PathResolver.join(directory, name))

        self._check_movable(path)

        if self.in_trash(directory):
            self._store.detach(directory, name)
            self._logger.debug(f"rm (permanent): {path}")
            return [directory]

        trash = self._store.require_folder(self._trash)
        target = self._trash_slot(trash, name, path)

        node = self._store.detach(directory, name)
        if node.metadata is None:
            node.metadata = NodeMetadata()
        node.metadata.trashed_from = directory
        node.metadata.trashed_name = name
        trashed_path = self._store.attach(self._trash, target, node)

        self._logger.debug(f"rm: {path} -> {trashed_path}")
        return [directory, self._trash]

    def _trash_slot(self, trash: Folder, name: str, path: str) -> str:
        if name not in trash.children:
            return name

        policy = self._config.trash_collision
        if policy == 'reject':
            raise NameCollisionError(PathResolver.join(self._trash, name), context={'source': path})
        if policy == 'replace':
            self._store.detach(self._trash, name)
            return name

        n = 1
        while suffixed_name(name, n) in trash.children:
            n += 1
        return suffixed_name(name, n)

    def restore(self, name: str) -> bool:
        """
        Move a Trash entry back to where rm() took it from.

        A no-op if the entry is missing, carries no provenance, or its
        original parent is gone or already holds that name.
        """
        return self._apply('restore', self._restore, name)

    def _restore(self, name: str) -> List[str]:
        trash = self._store.require_folder(self._trash)
        node = trash.children.get(name)
        if node is None:
            raise PathNotFoundError(PathResolver.join(self._trash, name))

        metadata = node.metadata
        origin = metadata.trashed_from if metadata else None
        if not origin:
            raise InvalidOperationError(
                PathResolver.join(self._trash, name, node.is_folder),
                reason="no recorded origin"
            )
        original_name = metadata.trashed_name or name

        self._store.check_attachable(origin, original_name)

        self._store.detach(self._trash, name)
        _clear_provenance(node)
        restored_path = self._store.attach(origin, original_name, node)

        self._logger.debug(f"restore: {name} -> {restored_path}")
        return [self._trash, origin]

    def empty_trash(self) -> bool:
        """Permanently delete everything in the Trash."""
        return self._apply('empty_trash', self._empty_trash)

    def _empty_trash(self) -> List[str]:
        trash = self._store.require_folder(self._trash)
        names = list(trash.children)
        for name in names:
            self._store.detach(self._trash, name)

        if names:
            self._logger.debug("empty_trash", context={'removed': len(names)})
            return [self._trash]
        return []

    # Content

    def write(self, path: str, content: str) -> bool:
        """Replace a file's content and refresh its modification time."""
        return self._apply('write', self._write, path, content)

    def _write(self, path: str, content: str) -> List[str]:
        node = self._store.get_node(path)
        if node is None:
            raise PathNotFoundError(path)
        if not isinstance(node, File):
            raise NotAFileError(path)

        node.content = content
        if node.metadata is None:
            node.metadata = new_metadata()
        else:
            node.metadata.mtime = time.time()

        self._logger.debug(f"write: {path}", context={'length': len(content)})
        return [PathResolver.parent(path)]

    def notify_change(self, path: str) -> Optional[str]:
        """
        Publish a change for the folder containing path.

        For collaborators that edited a node in place.

        Returns:
            The directory that was announced, or None if path is unknown
        """
        node = self._store.get_node(path)
        if node is None:
            return None
        directory = path if isinstance(node, Folder) else PathResolver.parent(path)
        self._bus.publish(directory)
        return directory


def _clear_provenance(node: Node) -> None:
    if node.metadata is not None:
        node.metadata.trashed_from = None
        node.metadata.trashed_name = None
