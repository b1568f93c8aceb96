"""
deskvfs Virtual File System Module

Provides the in-memory filesystem engine:
- Canonical tree with a flat path index
- Structural mutations and a Trash with restore
- Metadata and recursive sizes
- Asynchronous content hydration
"""

from .node import File, Folder, Node, NodeMetadata, NodeType
from .path_resolver import PathResolver
from .store import NodeStore
from .mutations import MutationOperations
from .metadata import MetadataEngine, format_size
from .hydrator import ContentHydrator, file_source, json_source, text_source, tutorial_source
from .seed import DEFAULT_SEED, build_default_seed, load_seed
from .vfs import VirtualFileSystem
from .snapshot import save_settings_snapshot, load_settings_snapshot

__all__ = [
    # Nodes
    'File',
    'Folder',
    'Node',
    'NodeMetadata',
    'NodeType',
    # Path Resolver
    'PathResolver',
    # Engine parts
    'NodeStore',
    'MutationOperations',
    'MetadataEngine',
    'format_size',
    # Hydration
    'ContentHydrator',
    'file_source',
    'json_source',
    'text_source',
    'tutorial_source',
    # Seed
    'DEFAULT_SEED',
    'build_default_seed',
    'load_seed',
    # VFS
    'VirtualFileSystem',
    'save_settings_snapshot',
    'load_settings_snapshot',
]
