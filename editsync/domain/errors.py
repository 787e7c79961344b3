from __future__ import annotations

from editsync.domain.enums import ErrorCode


class IdentityResolutionError(Exception):
    """The document has no version label and versioning could not provide one."""

    def __init__(self, node_id: str, code: ErrorCode, message: str):
        super().__init__(message)
        self.node_id = node_id
        self.code = code


class HistoryReconstructionError(Exception):
    """Repository data does not describe a consistent edit history."""

    def __init__(self, node_id: str | None, code: ErrorCode, message: str):
        super().__init__(message)
        self.node_id = node_id
        self.code = code

    def to_json(self) -> dict[str, object]:
        return {"code": self.code.value, "node_id": self.node_id, "message": str(self)}


class LabelParseError(HistoryReconstructionError):
    def __init__(self, name: str):
        super().__init__(None, ErrorCode.label_unparseable, f"no version label in artifact name: {name!r}")
        self.name = name


class SessionAuthError(Exception):
    def __init__(self, node_id: str):
        super().__init__("callback_hash_mismatch")
        self.node_id = node_id


class RepositoryUnavailableError(Exception):
    """The backing store failed to complete a write."""
