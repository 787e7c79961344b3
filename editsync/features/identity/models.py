from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class EditingSession:
    """Identity of one checkout session, persisted on the working copy."""

    working_copy_id: str
    editing_key: str
    integrity_hash: str
