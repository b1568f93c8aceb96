"""
Virtual File System (VFS) Module

The engine facade used by every desktop collaborator:
- Hierarchical tree with an O(1) flat path index
- touch/mkdir/rename/move/copy and soft deletion into a Trash
- Metadata defaults and recursive sizes
- Asynchronous hydration of large documents
- Coarse change notifications

One instance is constructed at start-up and handed to the file
manager, editor, settings manager and terminal.
"""

import time
from typing import Optional, Any, List, Mapping

from deskvfs.core.change_bus import ChangeBus
from deskvfs.core.config_loader import Config
from deskvfs.core.subsystem import Subsystem, SubsystemState
from deskvfs.exceptions import EngineStateError, SeedFormatError
from deskvfs.filesystem.hydrator import ContentHydrator
from deskvfs.filesystem.metadata import MetadataEngine, node_size
from deskvfs.filesystem.mutations import MutationOperations
from deskvfs.filesystem.node import File, Folder, Node, NodeMetadata, new_metadata
from deskvfs.filesystem.path_resolver import PathResolver
from deskvfs.filesystem.seed import build_default_seed, root_from_seed
from deskvfs.filesystem.store import NodeStore


class VirtualFileSystem(Subsystem):
    """
    Virtual File System Subsystem.

    Mutations return True when they changed something and False for a
    no-op; no-ops publish no change event. Lookups return None for
    missing paths. Every operation except resolve_path() requires
    init() to have been called exactly once.

    Example:
        >>> vfs = VirtualFileSystem()
        >>> vfs.init()
        >>> vfs.touch('/home/victxrlarixs/', 'a.txt')
        True
        >>> vfs.get_node('/home/victxrlarixs/a.txt').content
        ''
    """

    def __init__(
        self,
        config: Optional[Config] = None,
        bus: Optional[ChangeBus] = None,
        seed: Optional[dict[str, Any]] = None
    ):
        super().__init__('vfs')
        self._config = config or Config()
        self._fs_config = self._config.filesystem
        self._home = PathResolver.as_folder(self._fs_config.home)
        self._bus = bus or ChangeBus()
        self._seed = seed

        self._store = NodeStore()
        self._mutations = MutationOperations(self._store, self._bus, self._fs_config)
        self._metadata = MetadataEngine(self._store, self._fs_config)
        self._hydrator = ContentHydrator(self._store, self._bus)

    # Lifecycle

    def initialize(self) -> None:
        """
        Build the tree and index from the seed.

        Raises:
            EngineStateError: If called more than once
            SeedFormatError: If the seed is malformed or lacks the home folder
        """
        if self._state is not SubsystemState.REGISTERED:
            raise EngineStateError("Virtual filesystem already initialized", state=self._state.name)

        self.set_state(SubsystemState.INITIALIZING)
        try:
            seed = self._seed if self._seed is not None else build_default_seed(self._home)
            self._store.init(root_from_seed(seed, self._home), self._home)
            self._ensure_folder(self._mutations.trash_path)
        except SeedFormatError:
            self.set_state(SubsystemState.ERROR)
            raise

        self._metadata = MetadataEngine(self._store, self._fs_config, epoch=time.time())
        self.set_state(SubsystemState.INITIALIZED)
        self._logger.info(
            "Virtual filesystem initialized",
            context={'root': self._home, 'entries': len(self._store)}
        )

    def init(self) -> None:
        """Alias of initialize()."""
        self.initialize()

    def _ensure_folder(self, path: str) -> None:
        # Create missing intermediate folders silently; used for the Trash at init
        current = self._home
        for component in path[len(self._home):].split('/'):
            if not component:
                continue
            folder = self._store.get_folder(current)
            child = folder.children.get(component) if folder is not None else None
            if child is None:
                self._store.attach(current, component, Folder(metadata=new_metadata()))
            elif not isinstance(child, Folder):
                raise SeedFormatError("Reserved folder is a file in the seed", path=current + component)
            current = PathResolver.join(current, component, True)

    def start(self) -> None:
        """
        Start the subsystem and, when an event loop is running and
        hydration is enabled, schedule background hydration.
        """
        self._require_ready()
        super().start()
        if self._config.hydration.enabled and self._hydrator.pending:
            try:
                self._hydrator.start()
            except RuntimeError:
                self._logger.info(
                    "No running event loop; hydration left to the caller",
                    context={'pending': len(self._hydrator.pending)}
                )

    def stop(self) -> None:
        super().stop()
        self._logger.info("Virtual filesystem stopped")

    def cleanup(self) -> None:
        self._hydrator.cancel()

    def _require_ready(self) -> None:
        if self._state not in (SubsystemState.INITIALIZED, SubsystemState.RUNNING):
            raise EngineStateError("Virtual filesystem is not initialized", state=self._state.name)

    # Properties

    @property
    def config(self) -> Config:
        return self._config

    @property
    def bus(self) -> ChangeBus:
        return self._bus

    @property
    def hydrator(self) -> ContentHydrator:
        return self._hydrator

    @property
    def home(self) -> str:
        return self._home

    @property
    def trash_path(self) -> str:
        return self._mutations.trash_path

    # Lookups

    def resolve_path(self, cwd: str, path: str) -> str:
        """Resolve a raw path against cwd, expanding '~' to home."""
        return PathResolver.resolve(cwd, path, home=self._home)

    def get_node(self, path: str) -> Optional[Node]:
        """Get the node at a canonical path, or None."""
        self._require_ready()
        return self._store.get_node(path)

    def get_children(self, path: str) -> Optional[Mapping[str, Node]]:
        """Get a folder's children (read-only view), or None."""
        self._require_ready()
        return self._store.get_children(path)

    def exists(self, path: str) -> bool:
        self._require_ready()
        return path in self._store

    def is_directory(self, path: str) -> bool:
        self._require_ready()
        return self._store.get_folder(path) is not None

    def is_file(self, path: str) -> bool:
        self._require_ready()
        return isinstance(self._store.get_node(path), File)

    def search(self, pattern: str, path: Optional[str] = None) -> List[str]:
        """Find file paths whose name matches a case-insensitive regex."""
        self._require_ready()
        return self._store.search(pattern, path)

    def list_trash(self) -> List[dict[str, Any]]:
        """Describe the entries currently in the Trash."""
        self._require_ready()
        children = self._store.get_children(self.trash_path) or {}
        entries = []
        for name, node in children.items():
            metadata = node.metadata or NodeMetadata()
            entries.append({
                'name': name,
                'path': PathResolver.join(self.trash_path, name, node.is_folder),
                'type': node.type.value,
                'trashed_from': metadata.trashed_from,
                'original_name': metadata.trashed_name or name,
            })
        return entries

    def check_consistency(self) -> List[str]:
        """Problems found comparing tree and index; empty when consistent."""
        self._require_ready()
        return self._store.check_consistency()

    def export_tree(self, path: Optional[str] = None) -> Optional[dict[str, Any]]:
        """Serialize a subtree (default: everything) in seed format."""
        self._require_ready()
        return self._store.export_tree(path or self._home)

    # Mutations

    def touch(self, path: str, name: str) -> bool:
        self._require_ready()
        return self._mutations.touch(path, name)

    def mkdir(self, path: str, name: str) -> bool:
        self._require_ready()
        return self._mutations.mkdir(path, name)

    def rename(self, path: str, old_name: str, new_name: str) -> bool:
        self._require_ready()
        return self._mutations.rename(path, old_name, new_name)

    def move(self, src: str, dest: str) -> bool:
        self._require_ready()
        return self._mutations.move(src, dest)

    def copy(self, src: str, dest: str) -> bool:
        self._require_ready()
        return self._mutations.copy(src, dest)

    def rm(self, path: str, name: str) -> bool:
        self._require_ready()
        return self._mutations.rm(path, name)

    def restore(self, name: str) -> bool:
        self._require_ready()
        return self._mutations.restore(name)

    def empty_trash(self) -> bool:
        self._require_ready()
        return self._mutations.empty_trash()

    def write(self, path: str, content: str) -> bool:
        """Replace a file's content; the text editor's save path."""
        self._require_ready()
        return self._mutations.write(path, content)

    def notify_change(self, path: str) -> Optional[str]:
        """Announce an in-place edit of the node at path."""
        self._require_ready()
        return self._mutations.notify_change(path)

    # Metadata

    def get_size(self, path: str) -> int:
        """Size in bytes; folders sum their descendants, missing paths are 0."""
        self._require_ready()
        return self._metadata.get_size(path)

    def get_metadata(self, path: str) -> Optional[NodeMetadata]:
        self._require_ready()
        return self._metadata.get_metadata(path)

    def set_metadata(
        self,
        path: str,
        owner: Optional[str] = None,
        permissions: Optional[str] = None,
        mtime: Optional[float] = None
    ) -> bool:
        """Update owner, permissions or mtime; announces the change on success."""
        self._require_ready()
        changed = self._metadata.set_metadata(path, owner=owner, permissions=permissions, mtime=mtime)
        if changed:
            # A folder is listed in its parent; home has none, so it announces itself
            if PathResolver.is_folder_path(path) and path != self._home:
                path = PathResolver.parent(path)
            self._mutations.notify_change(path)
        return changed

    def stat(self, path: str) -> Optional[dict[str, Any]]:
        self._require_ready()
        return self._metadata.stat(path)

    def subscribe(self, callback) -> int:
        """Shortcut for bus.subscribe()."""
        return self._bus.subscribe(callback)

    def get_stats(self) -> dict[str, Any]:
        """Get filesystem statistics."""
        self._require_ready()
        files = folders = 0
        for _, node in self._store.walk(self._home):
            if isinstance(node, Folder):
                folders += 1
            else:
                files += 1
        return {
            'entries': len(self._store),
            'files': files,
            'folders': folders,
            'trash_entries': len(self._store.get_children(self.trash_path) or {}),
            'total_size': node_size(self._store.root),
            'events_published': self._bus.published_count,
            'pending_hydrations': len(self._hydrator.pending),
        }


__all__ = ['VirtualFileSystem']
