from __future__ import annotations

import logging

from editsync.domain.enums import ErrorCode
from editsync.domain.errors import HistoryReconstructionError
from editsync.domain.repository import ContentLocator, Node, Repository, UserDirectory, VersionRecord
from editsync.features.history.labels import parse_version_label
from editsync.features.history.models import (
    HistoryData,
    HistoryEntry,
    HistoryView,
    PreviousRef,
    UserBlock,
)
from editsync.features.identity.service import IdentityDeriver

logger = logging.getLogger(__name__)

FIRST_VERSION_LABEL = "1.0"


class HistoryReconstructor:
    """Edit history of a document for the editor's version panel.

    `history` lists the native versions in creation order. `data` links each
    version to the content it was diffed from, using the document's ordered
    conversion artifacts: artifact i holds the changes of the transition into
    version i+1 and, one level down, the content of version i.
    """

    def __init__(
        self,
        repo: Repository,
        users: UserDirectory,
        locator: ContentLocator,
        identity: IdentityDeriver,
    ) -> None:
        self._repo = repo
        self._users = users
        self._locator = locator
        self._identity = identity

    def build(self, node_id: str) -> HistoryView:
        # Resolving the key first initializes versioning on never-versioned documents.
        doc_key = self._identity.get_key(node_id)
        versions = self._repo.get_version_history(node_id)
        history = [self._history_entry(v, doc_key) for v in versions]
        artifacts = self._repo.child_artifacts(node_id)
        if len(artifacts) != max(len(versions) - 1, 0):
            logger.error(
                "node %s has %d versions but %d conversion artifacts",
                node_id,
                len(versions),
                len(artifacts),
            )
            raise HistoryReconstructionError(
                node_id,
                ErrorCode.artifact_count_mismatch,
                f"expected {max(len(versions) - 1, 0)} conversion artifacts, found {len(artifacts)}",
            )

        if len(versions) <= 1:
            data = [
                HistoryData(
                    version=FIRST_VERSION_LABEL,
                    key=doc_key,
                    url=self._locator.content_url(node_id),
                )
            ]
            return HistoryView(history=history, data=data)

        try:
            data = self._walk_artifacts(node_id, doc_key, artifacts)
        except HistoryReconstructionError as e:
            if e.node_id is None:
                e.node_id = node_id
            logger.error("history reconstruction failed for node %s: %s", node_id, e)
            raise
        return HistoryView(history=history, data=data)

    def _history_entry(self, version: VersionRecord, key: str) -> HistoryEntry:
        return HistoryEntry(
            created=version.created_at,
            user=self._user_block(version.modifier),
            key=key,
            version=version.label,
            has_changes=version.label != FIRST_VERSION_LABEL,
        )

    def _user_block(self, username: str) -> UserBlock | None:
        person = self._users.resolve_user(username)
        if person is None:
            logger.warning("no person found for modifier %r", username)
            return None
        return UserBlock(id=person.username, name=person.first_name + person.last_name)

    def _nested(self, artifact: Node) -> Node:
        child = self._repo.nested_child(artifact.id)
        if child is None:
            raise HistoryReconstructionError(
                None,
                ErrorCode.nested_child_missing,
                f"conversion artifact {artifact.name!r} has no content child",
            )
        return child

    def _walk_artifacts(self, node_id: str, doc_key: str, artifacts: list[Node]) -> list[HistoryData]:
        baseline = self._nested(artifacts[0])
        data = [
            HistoryData(
                version=FIRST_VERSION_LABEL,
                key=self._identity.get_key(baseline.id),
                url=self._locator.content_url(baseline.id),
            )
        ]

        last = len(artifacts) - 1
        for i, artifact in enumerate(artifacts):
            if i == last:
                version = self._repo.current_version_label(node_id) or ""
                key = doc_key
                url = self._locator.content_url(node_id)
            else:
                following = artifacts[i + 1]
                version = parse_version_label(following.name)
                content = self._nested(following)
                key = self._identity.get_key(content.id)
                url = self._locator.content_url(content.id)

            previous = self._nested(artifact)
            data.append(
                HistoryData(
                    version=version,
                    key=key,
                    url=url,
                    changes_url=self._locator.content_url(artifact.id),
                    previous=PreviousRef(
                        key=self._identity.get_key(previous.id),
                        url=self._locator.content_url(previous.id),
                    ),
                )
            )
        return data
