from __future__ import annotations

import hmac
import logging

from editsync.domain.enums import NodeProperty
from editsync.domain.errors import SessionAuthError
from editsync.domain.repository import VersionRecord
from editsync.features.history.labels import artifact_name
from editsync.features.identity.models import EditingSession
from editsync.features.identity.service import IdentityDeriver
from editsync.infra.repo_nodes import NodeRepo

logger = logging.getLogger(__name__)


class EditingService:
    """Checkout, save callback and check-in for collaborative editing sessions."""

    def __init__(self, repo: NodeRepo, identity: IdentityDeriver) -> None:
        self._repo = repo
        self._identity = identity

    def check_out(self, node_id: str) -> EditingSession:
        key = self._identity.get_key(node_id)
        hash_ = self._identity.generate_hash()
        working_copy = self._repo.check_out(
            node_id,
            properties={NodeProperty.editing_key: key, NodeProperty.editing_hash: hash_},
        )
        logger.info("editing session opened for node %s with key %s", node_id, key)
        return EditingSession(working_copy_id=working_copy.id, editing_key=key, integrity_hash=hash_)

    def authenticate(self, node_id: str, cb_key: str | None) -> EditingSession:
        session = self._identity.get_session(node_id)
        if session is None or not cb_key or not hmac.compare_digest(session.integrity_hash, cb_key):
            logger.warning("rejected save callback for node %s", node_id)
            raise SessionAuthError(node_id)
        return session

    def save(
        self,
        node_id: str,
        cb_key: str | None,
        content: bytes,
        changes: bytes,
        actor: str,
        major: bool = False,
    ) -> VersionRecord:
        """Store one editor save as a conversion artifact plus a new version.

        The artifact is named after the version being replaced and keeps that
        version's content as its only child; the document then takes the new
        content under the next version label.
        """

        session = self.authenticate(node_id, cb_key)
        label = self._repo.current_version_label(node_id)
        if not label:
            self._identity.ensure_versioning_enabled(node_id)
            label = self._repo.current_version_label(node_id) or ""

        version = self._repo.record_save(
            node_id,
            session.working_copy_id,
            artifact_name=artifact_name(label),
            changes=changes,
            content=content,
            modifier=actor,
            major=major,
        )
        logger.info("node %s saved as version %s by %s", node_id, version.label, actor)
        return version

    def check_in(self, node_id: str, cb_key: str | None) -> None:
        self.authenticate(node_id, cb_key)
        self._repo.check_in(node_id)
        logger.info("editing session closed for node %s", node_id)
