"""
Content Hydrator Module

Back-fills the bodies of large documents into placeholder files after
the tree has been built synchronously.

A fetch may take any amount of time, and the user may rename or delete
the target meanwhile. The hydrator therefore never keeps a node across
an await: it resolves the path again right before writing and quietly
drops the body if the file is gone or was edited since registration.
"""

import asyncio
import inspect
import json
from pathlib import Path
from typing import Any, Awaitable, Callable, Iterable, List, Optional, Union

from deskvfs.core.change_bus import ChangeBus
from deskvfs.filesystem.node import File
from deskvfs.filesystem.path_resolver import PathResolver
from deskvfs.filesystem.store import NodeStore
from deskvfs.logger import get_logger


ContentSource = Callable[[], Union[str, Awaitable[str]]]


def text_source(text: str) -> ContentSource:
    """Source returning a fixed string."""
    return lambda: text


def json_source(data: Any) -> ContentSource:
    """Source returning data as pretty-printed JSON (2-space indent)."""
    return lambda: json.dumps(data, indent=2)


def file_source(disk_path: Union[str, Path]) -> ContentSource:
    """Source reading a UTF-8 text file from the host disk off the event loop."""
    path = Path(disk_path)

    async def fetch() -> str:
        return await asyncio.to_thread(path.read_text, encoding='utf-8')

    return fetch


def render_tutorial(sequences: Iterable[Iterable[dict[str, str]]]) -> str:
    """
    Render terminal tutorial sequences as a command reference.

    Each step is a mapping with 'user', 'command' and 'output'.
    """
    rule = '=' * 60
    parts = ['# Linux Commands Reference\n\n']
    for index, sequence in enumerate(sequences, start=1):
        parts.append(f"\n{rule}\nSEQUENCE {index}\n{rule}\n\n")
        for step in sequence:
            parts.append(f"{step['user']}@Debian:~$ {step['command']}\n")
            parts.append(f"{step['output']}\n\n")
    return ''.join(parts)


def tutorial_source(sequences: List[List[dict[str, str]]]) -> ContentSource:
    """Source rendering tutorial sequences with render_tutorial()."""
    return lambda: render_tutorial(sequences)


class ContentHydrator:
    """
    Asynchronously fills placeholder files from registered sources.

    Each registered path is hydrated at most once. A body replaces the
    placeholder content the file held when its source was registered;
    a file that is gone or was edited in the meantime is left alone.

    Example:
        >>> hydrator.register('/home/u/man-pages/bash.md', file_source('bash.md'))
        >>> written = await hydrator.hydrate_all()
    """

    def __init__(self, store: NodeStore, bus: ChangeBus):
        self._store = store
        self._bus = bus
        self._logger = get_logger('hydrator')
        self._sources: dict[str, ContentSource] = {}
        self._placeholders: dict[str, str] = {}
        self._in_flight: set[str] = set()
        self._done: set[str] = set()
        self._task: Optional[asyncio.Task] = None

    def register(self, path: str, source: ContentSource) -> bool:
        """
        Register a content source for a file path.

        The file's current content is recorded as its placeholder; a
        path registered before the file exists expects an empty one.

        Returns:
            False if the path was already hydrated or is being hydrated
        """
        if path in self._done or path in self._in_flight:
            return False
        with self._store.lock:
            node = self._store.get_node(path)
            self._placeholders[path] = node.content if isinstance(node, File) else ''
        self._sources[path] = source
        return True

    @property
    def pending(self) -> List[str]:
        """Paths registered but not hydrated yet."""
        return sorted(self._sources)

    def is_hydrated(self, path: str) -> bool:
        return path in self._done

    async def hydrate(self, path: str) -> bool:
        """
        Fetch and write the body for one path.

        Returns:
            True if the body was written into the file
        """
        source = self._sources.pop(path, None)
        if source is None:
            return False
        placeholder = self._placeholders.pop(path, '')

        self._in_flight.add(path)
        try:
            try:
                result = source()
                if inspect.isawaitable(result):
                    result = await result
            except Exception as e:
                self._logger.warning(
                    f"Content fetch failed: {e}",
                    context={'path': path, 'error': type(e).__name__}
                )
                return False

            if not isinstance(result, str):
                self._logger.warning(
                    "Content source returned non-text body",
                    context={'path': path, 'type': type(result).__name__}
                )
                return False

            return self._write(path, result, placeholder)
        finally:
            self._in_flight.discard(path)
            self._done.add(path)

    def _write(self, path: str, body: str, placeholder: str) -> bool:
        with self._store.lock:
            # Re-resolve: the file may have been deleted or renamed during the fetch
            node = self._store.get_node(path)
            if not isinstance(node, File):
                self._logger.debug("Hydration target vanished, discarding", context={'path': path})
                return False
            if node.content != placeholder:
                self._logger.debug("Hydration target was edited, discarding", context={'path': path})
                return False
            node.content = body

        self._logger.debug("Hydrated", context={'path': path, 'length': len(body)})
        self._bus.publish(PathResolver.parent(path))
        return True

    async def hydrate_all(self) -> int:
        """
        Hydrate every pending path concurrently.

        Returns:
            Number of files actually written
        """
        paths = list(self._sources)
        if not paths:
            return 0

        results = await asyncio.gather(*(self.hydrate(path) for path in paths))
        written = sum(1 for result in results if result)
        self._logger.info(
            "Content hydration finished",
            context={'requested': len(paths), 'written': written}
        )
        return written

    def start(self) -> asyncio.Task:
        """
        Schedule hydrate_all() on the running event loop.

        Returns:
            The scheduled task

        Raises:
            RuntimeError: If no event loop is running
        """
        if self._task is None or self._task.done():
            self._task = asyncio.get_running_loop().create_task(self.hydrate_all())
        return self._task

    @property
    def task(self) -> Optional[asyncio.Task]:
        return self._task

    def cancel(self) -> None:
        """Cancel a scheduled hydrate_all() task, if any."""
        if self._task is not None and not self._task.done():
            self._task.cancel()
