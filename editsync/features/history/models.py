from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class UserBlock:
    id: str
    name: str

    def to_json(self) -> dict[str, Any]:
        return {"id": self.id, "name": self.name}


def _user_json(user: UserBlock | None) -> dict[str, Any]:
    return {} if user is None else user.to_json()


@dataclass(frozen=True)
class HistoryEntry:
    created: str
    user: UserBlock | None
    key: str
    version: str
    has_changes: bool

    def to_json(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "created": self.created,
            "user": _user_json(self.user),
            "key": self.key,
            "version": self.version,
        }
        if self.has_changes:
            out["changes"] = {"user": _user_json(self.user), "created": self.created}
        return out


@dataclass(frozen=True)
class PreviousRef:
    key: str
    url: str


@dataclass(frozen=True)
class HistoryData:
    version: str
    key: str
    url: str
    changes_url: str | None = None
    previous: PreviousRef | None = None

    def to_json(self) -> dict[str, Any]:
        out: dict[str, Any] = {"version": self.version, "key": self.key, "url": self.url}
        if self.changes_url is not None:
            out["changesUrl"] = self.changes_url
        if self.previous is not None:
            out["previous"] = {"key": self.previous.key, "url": self.previous.url}
        return out


@dataclass(frozen=True)
class HistoryView:
    history: list[HistoryEntry]
    data: list[HistoryData]

    def to_json(self) -> dict[str, Any]:
        return {
            "history": [h.to_json() for h in self.history],
            "data": [d.to_json() for d in self.data],
        }
