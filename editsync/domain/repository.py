"""Query contract the identity and history services read through."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from editsync.domain.enums import NodeProperty


@dataclass(frozen=True)
class Node:
    id: str
    parent_id: str | None
    position: int
    name: str
    mime_type: str | None
    version_label: str | None
    checked_out: bool
    working_copy_id: str | None
    working_copy_of: str | None
    created_at: str
    modified_at: str


@dataclass(frozen=True)
class VersionRecord:
    node_id: str
    label: str
    modifier: str
    created_at: str
    initial_version: bool


@dataclass(frozen=True)
class Person:
    username: str
    first_name: str
    last_name: str


class Repository(Protocol):
    def get(self, node_id: str) -> Node: ...

    def is_checked_out(self, node_id: str) -> bool: ...

    def get_working_copy(self, node_id: str) -> Node | None: ...

    def get_property(self, node_id: str, prop: NodeProperty) -> str | None: ...

    def set_property(self, node_id: str, prop: NodeProperty, value: str) -> None: ...

    def remove_property(self, node_id: str, prop: NodeProperty) -> None: ...

    def current_version_label(self, node_id: str) -> str | None: ...

    def enable_versioning(self, node_id: str, modifier: str) -> None:
        """Idempotent. Raises RepositoryUnavailableError when the store cannot write."""
        ...

    def get_version_history(self, node_id: str) -> list[VersionRecord]: ...

    def child_artifacts(self, node_id: str) -> list[Node]: ...

    def nested_child(self, node_id: str) -> Node | None: ...


class UserDirectory(Protocol):
    def resolve_user(self, username: str) -> Person | None: ...


class ContentLocator(Protocol):
    def content_url(self, node_id: str) -> str: ...
