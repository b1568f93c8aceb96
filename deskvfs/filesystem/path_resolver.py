"""
Path Resolver Module

Handles path resolution and manipulation in the virtual file system.

Canonical paths are absolute. Folder paths end with '/', file paths
do not; the trailing separator is what tells the two apart in the
flat index.
"""

from typing import List, Tuple


SEP = '/'


class PathResolver:
    """
    Resolves and manipulates virtual filesystem paths.

    Handles:
    - '~' expansion to the home folder
    - Absolute and relative paths
    - . and .. components (never above '/')
    - Preserving the folder marker (trailing '/')
    """

    @staticmethod
    def resolve(cwd: str, path: str, home: str = SEP) -> str:
        """
        Resolve a raw path against a current working directory.

        Never fails: the result is a best-effort canonical string and
        callers check existence through the node store.

        Args:
            cwd: Current working directory (absolute)
            path: Raw path, possibly relative or '~'-prefixed
            home: Folder that '~' expands to

        Returns:
            Canonical absolute path

        Example:
            >>> PathResolver.resolve('/home/u/docs/', '../a.txt')
            '/home/u/a.txt'
        """
        if path.startswith('~'):
            path = home.rstrip(SEP) + SEP + path[1:]

        if not path.startswith(SEP):
            path = cwd + ('' if cwd.endswith(SEP) else SEP) + path

        resolved: List[str] = []

        for component in path.split(SEP):
            if not component or component == '.':
                continue
            if component == '..':
                if resolved:
                    resolved.pop()
                continue
            resolved.append(component)

        result = SEP + SEP.join(resolved)
        if path.endswith(SEP) and resolved:
            result += SEP
        return result

    @staticmethod
    def as_folder(path: str) -> str:
        """Return path with exactly one trailing separator."""
        return path if path.endswith(SEP) else path + SEP

    @staticmethod
    def join(directory: str, name: str, is_folder: bool = False) -> str:
        """
        Build the canonical path of a child entry.

        Args:
            directory: Parent folder path (trailing '/' optional)
            name: Entry name
            is_folder: Whether the entry is a folder

        Returns:
            Canonical child path
        """
        path = PathResolver.as_folder(directory) + name
        return path + SEP if is_folder else path

    @staticmethod
    def split(path: str) -> Tuple[str, str]:
        """
        Split a canonical path into (parent folder, name).

        Example:
            >>> PathResolver.split('/home/u/docs/')
            ('/home/u/', 'docs')
        """
        stripped = path.rstrip(SEP)
        if not stripped:
            return (SEP, '')
        parent, _, name = stripped.rpartition(SEP)
        return (parent + SEP, name)

    @staticmethod
    def parent(path: str) -> str:
        """Get the parent folder path."""
        return PathResolver.split(path)[0]

    @staticmethod
    def basename(path: str) -> str:
        """Get the entry name of a path."""
        return PathResolver.split(path)[1]

    @staticmethod
    def is_folder_path(path: str) -> bool:
        return path.endswith(SEP)

    @staticmethod
    def is_within(path: str, ancestor: str) -> bool:
        """
        Check whether path equals ancestor or lies inside it.

        Args:
            path: Canonical path to test
            ancestor: Canonical folder path
        """
        ancestor = PathResolver.as_folder(ancestor)
        return PathResolver.as_folder(path).startswith(ancestor)
