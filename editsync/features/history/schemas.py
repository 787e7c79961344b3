from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class HistoryUser(BaseModel):
    id: str | None = None
    name: str | None = None


class HistoryChanges(BaseModel):
    user: HistoryUser
    created: str


class HistoryItem(BaseModel):
    created: str
    user: HistoryUser
    key: str
    version: str
    changes: HistoryChanges | None = None


class PreviousVersion(BaseModel):
    key: str
    url: str


class HistoryDataItem(BaseModel):
    model_config = ConfigDict(extra="forbid")

    version: str
    key: str
    url: str
    changesUrl: str | None = None
    previous: PreviousVersion | None = None


class HistoryResponse(BaseModel):
    history: list[HistoryItem]
    data: list[HistoryDataItem]
