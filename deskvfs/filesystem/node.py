"""
Node Module

The two node variants of the virtual file system, File and Folder,
plus the optional per-node metadata record.

Nodes compare by identity: two files with the same content are still
different nodes. Moving or renaming keeps the node object; copying
makes new ones.
"""

import time
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Optional, Any, Union


class NodeType(Enum):
    """Node variant tag, spelled as in the seed format."""
    FILE = 'file'
    FOLDER = 'folder'


@dataclass
class NodeMetadata:
    """
    Optional metadata attached to a node.

    Unset fields fall back to engine defaults (see MetadataEngine).
    trashed_from/trashed_name are only set on entries sitting in the
    Trash and record where rm() took them from.
    """
    owner: Optional[str] = None
    permissions: Optional[str] = None
    mtime: Optional[float] = None
    trashed_from: Optional[str] = None
    trashed_name: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return {k: v for k, v in vars(self).items() if v is not None}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> 'NodeMetadata':
        known = {k: data[k] for k in ('owner', 'permissions', 'mtime', 'trashed_from', 'trashed_name') if k in data}
        return cls(**known)


@dataclass(eq=False)
class File:
    """A file node holding text content."""
    content: str = ''
    metadata: Optional[NodeMetadata] = None

    type = NodeType.FILE

    @property
    def is_folder(self) -> bool:
        return False

    @property
    def is_file(self) -> bool:
        return True

    def clone(self) -> 'File':
        """Independent copy with the same content and a fresh mtime."""
        return File(content=self.content, metadata=_cloned_metadata(self.metadata))

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {'type': NodeType.FILE.value, 'content': self.content}
        if self.metadata is not None:
            data['metadata'] = self.metadata.to_dict()
        return data


@dataclass(eq=False)
class Folder:
    """A folder node; children are keyed by entry name."""
    children: dict[str, 'Node'] = field(default_factory=dict)
    metadata: Optional[NodeMetadata] = None

    type = NodeType.FOLDER

    @property
    def is_folder(self) -> bool:
        return True

    @property
    def is_file(self) -> bool:
        return False

    def clone(self) -> 'Folder':
        """Deep, independent copy of the whole subtree with fresh mtimes."""
        return Folder(
            children={name: child.clone() for name, child in self.children.items()},
            metadata=_cloned_metadata(self.metadata),
        )

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            'type': NodeType.FOLDER.value,
            'children': {name: child.to_dict() for name, child in self.children.items()},
        }
        if self.metadata is not None:
            data['metadata'] = self.metadata.to_dict()
        return data


Node = Union[File, Folder]


def _cloned_metadata(metadata: Optional[NodeMetadata]) -> NodeMetadata:
    # A copy is a new node: fresh timestamp, no trash provenance
    if metadata is None:
        return NodeMetadata(mtime=time.time())
    return replace(metadata, mtime=time.time(), trashed_from=None, trashed_name=None)


def new_metadata() -> NodeMetadata:
    """Metadata for a freshly created node."""
    return NodeMetadata(mtime=time.time())
