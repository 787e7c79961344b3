from __future__ import annotations

import base64
import logging
import secrets

from editsync.domain.enums import ErrorCode, NodeProperty
from editsync.domain.errors import IdentityResolutionError, RepositoryUnavailableError
from editsync.domain.repository import Repository
from editsync.features.identity.models import EditingSession

logger = logging.getLogger(__name__)

HASH_BYTES = 32


def generate_hash() -> str:
    token = secrets.token_bytes(HASH_BYTES)
    return base64.urlsafe_b64encode(token).rstrip(b"=").decode("ascii")


class IdentityDeriver:
    """Stable editing keys and session hashes for a document's editable state.

    While a document is checked out, the key stored on its working copy wins,
    so the editor sees one key for the whole session. Otherwise the key is
    `<id>_<version label>`, enabling versioning first if the document has none.
    """

    def __init__(self, repo: Repository, *, actor: str = "system") -> None:
        self._repo = repo
        self._actor = actor

    def get_session(self, node_id: str) -> EditingSession | None:
        if not self._repo.is_checked_out(node_id):
            return None
        working_copy = self._repo.get_working_copy(node_id)
        if working_copy is None:
            return None
        key = self._repo.get_property(working_copy.id, NodeProperty.editing_key)
        hash_ = self._repo.get_property(working_copy.id, NodeProperty.editing_hash)
        if key is None or hash_ is None:
            return None
        return EditingSession(working_copy_id=working_copy.id, editing_key=key, integrity_hash=hash_)

    def get_key(self, node_id: str) -> str:
        key = None
        if self._repo.is_checked_out(node_id):
            working_copy = self._repo.get_working_copy(node_id)
            if working_copy is not None:
                key = self._repo.get_property(working_copy.id, NodeProperty.editing_key)
        if key:
            return key

        label = self._repo.current_version_label(node_id)
        if not label:
            self.ensure_versioning_enabled(node_id)
            label = self._repo.current_version_label(node_id)
            if not label:
                raise IdentityResolutionError(
                    node_id, ErrorCode.version_label_missing, "no version label after enabling versioning"
                )
        return f"{node_id}_{label}"

    def get_hash(self, node_id: str) -> str | None:
        if not self._repo.is_checked_out(node_id):
            return None
        working_copy = self._repo.get_working_copy(node_id)
        if working_copy is None:
            return None
        return self._repo.get_property(working_copy.id, NodeProperty.editing_hash)

    def ensure_versioning_enabled(self, node_id: str) -> None:
        try:
            self._repo.enable_versioning(node_id, modifier=self._actor)
        except RepositoryUnavailableError as e:
            raise IdentityResolutionError(
                node_id, ErrorCode.versioning_unavailable, str(e)
            ) from e
        logger.info("versioning enabled for node %s", node_id)

    def generate_hash(self) -> str:
        return generate_hash()
