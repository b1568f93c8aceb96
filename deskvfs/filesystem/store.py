"""
Node Store Module

Owns the canonical folder tree and the flat path index derived from it.

The tree owns its nodes (a folder owns its children); the index maps
each canonical path to a node reference for O(1) lookups. attach() and
detach() are the only structural primitives and they update both sides
in the same step by walking the affected subtree, so the index never
holds an entry the tree cannot reach and vice versa.
"""

import re
import threading
from types import MappingProxyType
from typing import Optional, Any, Iterator, List, Mapping, Tuple

from deskvfs.exceptions import (
    EngineStateError,
    InvalidOperationError,
    NameCollisionError,
    NotADirectoryError,
    PathNotFoundError,
)
from deskvfs.filesystem.node import File, Folder, Node
from deskvfs.filesystem.path_resolver import PathResolver
from deskvfs.logger import get_logger


def check_name(name: str, parent: str) -> None:
    """
    Validate a directory entry name.

    Raises:
        InvalidOperationError: For empty names, names containing '/',
            and the reserved names '.' and '..'
    """
    if not name or '/' in name or name in ('.', '..'):
        raise InvalidOperationError(parent, reason=f"invalid entry name {name!r}")


class NodeStore:
    """
    Canonical tree plus flat index.

    Lookups never raise: a missing path is an ordinary outcome and is
    reported as None. Structural primitives raise FileSystemException
    subclasses and leave both structures untouched when they do.

    Example:
        >>> store = NodeStore()
        >>> store.init(Folder(children={'a.txt': File('hi')}), '/home/u/')
        >>> store.get_node('/home/u/a.txt').content
        'hi'
    """

    def __init__(self):
        self._logger = get_logger('store')
        self._root: Optional[Folder] = None
        self._root_path: Optional[str] = None
        self._index: dict[str, Node] = {}
        self.lock = threading.RLock()

    def init(self, root: Folder, root_path: str) -> None:
        """
        Install root and build the index with a single full walk.

        Raises:
            EngineStateError: If the store already holds a tree
        """
        if self._root is not None:
            raise EngineStateError("Node store already initialized")

        with self.lock:
            self._root = root
            self._root_path = PathResolver.as_folder(root_path)
            self._flatten(self._root_path, root)

        self._logger.debug("Index built", context={'entries': len(self._index)})

    def _flatten(self, base_path: str, node: Node) -> None:
        for path, child in self._iter_subtree(base_path, node):
            self._index[path] = child

    @staticmethod
    def _iter_subtree(base_path: str, node: Node) -> Iterator[Tuple[str, Node]]:
        # Iterative pre-order walk; deep trees must not hit the recursion limit
        stack: List[Tuple[str, Node]] = [(base_path, node)]
        while stack:
            path, current = stack.pop()
            yield path, current
            if isinstance(current, Folder):
                items = list(current.children.items())
                for name, child in reversed(items):
                    stack.append((PathResolver.join(path, name, child.is_folder), child))

    @property
    def initialized(self) -> bool:
        return self._root is not None

    @property
    def root(self) -> Optional[Folder]:
        return self._root

    @property
    def root_path(self) -> Optional[str]:
        return self._root_path

    def __len__(self) -> int:
        return len(self._index)

    def __contains__(self, path: object) -> bool:
        return path in self._index

    # Lookups

    def get_node(self, path: str) -> Optional[Node]:
        """Get the node at a canonical path, or None."""
        return self._index.get(path)

    def get_folder(self, path: str) -> Optional[Folder]:
        """Get the folder at path, or None if missing or a file."""
        node = self._index.get(path)
        return node if isinstance(node, Folder) else None

    def get_children(self, path: str) -> Optional[Mapping[str, Node]]:
        """
        Get a read-only view of a folder's children.

        Returns:
            Live mapping of name -> node, or None if path is missing or a file
        """
        folder = self.get_folder(path)
        if folder is None:
            return None
        return MappingProxyType(folder.children)

    def require_folder(self, path: str) -> Folder:
        """
        Get the folder at path.

        Raises:
            PathNotFoundError: If nothing exists at path
            NotADirectoryError: If path is a file
        """
        node = self._index.get(path)
        if node is None:
            raise PathNotFoundError(path)
        if not isinstance(node, Folder):
            raise NotADirectoryError(path)
        return node

    def child_path(self, parent_path: str, name: str) -> Optional[str]:
        """Canonical path of an existing child, or None."""
        folder = self.get_folder(parent_path)
        if folder is None or name not in folder.children:
            return None
        return PathResolver.join(parent_path, name, folder.children[name].is_folder)

    # Structural primitives

    def check_attachable(self, parent_path: str, name: str) -> Folder:
        """
        Check that name could be attached under parent_path.

        Returns:
            The parent folder

        Raises:
            InvalidOperationError: If the name is invalid
            PathNotFoundError: If the parent does not exist
            NotADirectoryError: If the parent is a file
            NameCollisionError: If the name is already taken
        """
        check_name(name, parent_path)
        parent = self.require_folder(parent_path)
        if name in parent.children:
            raise NameCollisionError(self.child_path(parent_path, name) or parent_path + name)
        return parent

    def attach(self, parent_path: str, name: str, node: Node) -> str:
        """
        Insert node under parent_path and index its whole subtree.

        Returns:
            The node's new canonical path
        """
        with self.lock:
            parent = self.check_attachable(parent_path, name)
            path = PathResolver.join(parent_path, name, node.is_folder)
            parent.children[name] = node
            self._flatten(path, node)
        return path

    def detach(self, parent_path: str, name: str) -> Node:
        """
        Remove a child and drop its whole subtree from the index.

        The returned node keeps its children, so it can be attached
        elsewhere (move) or simply dropped (permanent delete).

        Raises:
            PathNotFoundError: If there is no such child
        """
        with self.lock:
            parent = self.require_folder(parent_path)
            node = parent.children.get(name)
            if node is None:
                raise PathNotFoundError(PathResolver.join(parent_path, name))

            path = PathResolver.join(parent_path, name, node.is_folder)
            del parent.children[name]
            for stale_path, _ in self._iter_subtree(path, node):
                self._index.pop(stale_path, None)
        return node

    # Queries over the tree

    def walk(self, path: str) -> Iterator[Tuple[str, Node]]:
        """
        Yield (path, node) for the subtree at path, parents first.

        Yields nothing if path does not exist.
        """
        node = self._index.get(path)
        if node is None:
            return
        yield from self._iter_subtree(path, node)

    def search(self, pattern: str, path: Optional[str] = None) -> List[str]:
        """
        Find files whose name matches a case-insensitive regex.

        Args:
            pattern: Regular expression applied to file names
            path: Folder to search in (defaults to the root)

        Returns:
            Sorted canonical paths of matching files; an invalid
            pattern matches nothing
        """
        try:
            regex = re.compile(pattern, re.IGNORECASE)
        except re.error:
            self._logger.debug("Invalid search pattern", context={'pattern': pattern})
            return []

        start = path or self._root_path
        if start is None:
            return []
        return sorted(
            node_path for node_path, node in self.walk(start)
            if isinstance(node, File) and regex.search(PathResolver.basename(node_path))
        )

    def check_consistency(self) -> List[str]:
        """
        Compare the tree with the index.

        Returns:
            Human-readable problems; empty when tree and index agree
        """
        errors: List[str] = []
        if self._root is None or self._root_path is None:
            return ["store not initialized"]

        reachable: dict[str, Node] = {}
        for path, node in self._iter_subtree(self._root_path, self._root):
            if path in reachable:
                errors.append(f"duplicate path in tree: {path}")
            reachable[path] = node
            if isinstance(node, File) and not isinstance(node.content, str):
                errors.append(f"file missing content: {path}")
            if isinstance(node, Folder) and not isinstance(node.children, dict):
                errors.append(f"folder missing children: {path}")

        for path, node in reachable.items():
            indexed = self._index.get(path)
            if indexed is None:
                errors.append(f"reachable but not indexed: {path}")
            elif indexed is not node:
                errors.append(f"index points at a different node: {path}")

        for path in self._index:
            if path not in reachable:
                errors.append(f"indexed but not reachable: {path}")

        return errors

    def export_tree(self, path: str) -> Optional[dict[str, Any]]:
        """Serialize the subtree at path in seed format, or None."""
        node = self._index.get(path)
        if node is None:
            return None
        return {path: node.to_dict()}
