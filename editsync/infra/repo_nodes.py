import sqlite3
import uuid
from datetime import datetime, timezone

from editsync.domain.enums import NodeProperty
from editsync.domain.errors import RepositoryUnavailableError
from editsync.domain.repository import Node, VersionRecord

INITIAL_VERSION_LABEL = "1.0"
ARTIFACT_MIME = "application/zip"


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def next_version_label(label: str, major: bool = False) -> str:
    head, _, tail = label.partition(".")
    if major:
        return f"{int(head) + 1}.0"
    return f"{int(head)}.{int(tail or 0) + 1}"


def _row_to_node(row: sqlite3.Row) -> Node:
    return Node(
        id=str(row["id"]),
        parent_id=row["parent_id"],
        position=int(row["position"]),
        name=str(row["name"]),
        mime_type=row["mime_type"],
        version_label=row["version_label"],
        checked_out=bool(row["checked_out"]),
        working_copy_id=row["working_copy_id"],
        working_copy_of=row["working_copy_of"],
        created_at=str(row["created_at"]),
        modified_at=str(row["modified_at"]),
    )


class NodeRepo:
    """sqlite-backed node store: content, children, checkout state and versions."""

    def __init__(self, conn: sqlite3.Connection) -> None:
        self._conn = conn

    def create(
        self,
        name: str,
        parent_id: str | None = None,
        content: bytes | None = None,
        mime_type: str | None = None,
        working_copy_of: str | None = None,
    ) -> Node:
        with self._conn:
            node_id = self._insert_node(name, parent_id, content, mime_type, working_copy_of)
        return self.get(node_id)

    def _insert_node(
        self,
        name: str,
        parent_id: str | None,
        content: bytes | None,
        mime_type: str | None,
        working_copy_of: str | None = None,
    ) -> str:
        # Caller owns the transaction.
        node_id = str(uuid.uuid4())
        now = utc_now_iso()
        row = self._conn.execute(
            "SELECT COALESCE(MAX(position), -1) + 1 AS pos FROM nodes WHERE parent_id IS ?",
            (parent_id,),
        ).fetchone()
        self._conn.execute(
            """
            INSERT INTO nodes(
              id, parent_id, position, name, mime_type, content,
              version_label, checked_out, working_copy_id, working_copy_of,
              created_at, modified_at
            )
            VALUES(?, ?, ?, ?, ?, ?, NULL, 0, NULL, ?, ?, ?)
            """,
            (node_id, parent_id, int(row["pos"]), name, mime_type, content, working_copy_of, now, now),
        )
        return node_id

    def _delete_node(self, node_id: str) -> None:
        self._conn.execute("DELETE FROM node_properties WHERE node_id = ?", (node_id,))
        self._conn.execute("DELETE FROM versions WHERE node_id = ?", (node_id,))
        self._conn.execute("DELETE FROM nodes WHERE id = ?", (node_id,))

    def get(self, node_id: str) -> Node:
        row = self._conn.execute("SELECT * FROM nodes WHERE id = ?", (node_id,)).fetchone()
        if row is None:
            raise KeyError(f"Node not found: {node_id}")
        return _row_to_node(row)

    def get_content(self, node_id: str) -> bytes:
        row = self._conn.execute("SELECT content FROM nodes WHERE id = ?", (node_id,)).fetchone()
        if row is None:
            raise KeyError(f"Node not found: {node_id}")
        return bytes(row["content"] or b"")

    def list_children(self, node_id: str) -> list[Node]:
        rows = self._conn.execute(
            "SELECT * FROM nodes WHERE parent_id = ? ORDER BY position ASC",
            (node_id,),
        ).fetchall()
        return [_row_to_node(r) for r in rows]

    def child_artifacts(self, node_id: str) -> list[Node]:
        return self.list_children(node_id)

    def nested_child(self, node_id: str) -> Node | None:
        children = self.list_children(node_id)
        return children[0] if children else None

    def get_child_by_name(self, parent_id: str | None, name: str) -> Node | None:
        row = self._conn.execute(
            "SELECT * FROM nodes WHERE parent_id IS ? AND name = ?", (parent_id, name)
        ).fetchone()
        return None if row is None else _row_to_node(row)

    def correct_name(self, folder_id: str | None, title: str, ext: str) -> str:
        name = f"{title}.{ext}"
        i = 0
        while self.get_child_by_name(folder_id, name) is not None:
            i += 1
            name = f"{title} ({i}).{ext}"
        return name

    # checkout state

    def is_checked_out(self, node_id: str) -> bool:
        return self.get(node_id).checked_out

    def get_working_copy(self, node_id: str) -> Node | None:
        node = self.get(node_id)
        if not node.checked_out or node.working_copy_id is None:
            return None
        return self.get(node.working_copy_id)

    def check_out(self, node_id: str, properties: dict[NodeProperty, str] | None = None) -> Node:
        """Create the working copy and store `properties` on it in one transaction."""

        node = self.get(node_id)
        if node.checked_out:
            raise ValueError("already_checked_out")
        content = self.get_content(node_id)
        with self._conn:
            working_copy_id = self._insert_node(
                f"{node.name} (Working Copy)",
                node.parent_id,
                content,
                node.mime_type,
                working_copy_of=node_id,
            )
            self._conn.execute(
                "UPDATE nodes SET checked_out = 1, working_copy_id = ? WHERE id = ?",
                (working_copy_id, node_id),
            )
            for prop, value in (properties or {}).items():
                self._conn.execute(
                    "INSERT INTO node_properties(node_id, name, value) VALUES(?, ?, ?)",
                    (working_copy_id, prop.value, value),
                )
        return self.get(working_copy_id)

    def check_in(self, node_id: str) -> None:
        """Close the checkout: drop the working copy with its session properties."""

        node = self.get(node_id)
        if not node.checked_out or node.working_copy_id is None:
            raise ValueError("not_checked_out")
        with self._conn:
            self._conn.execute(
                "UPDATE nodes SET checked_out = 0, working_copy_id = NULL WHERE id = ?", (node_id,)
            )
            self._delete_node(node.working_copy_id)

    # properties

    def get_property(self, node_id: str, prop: NodeProperty) -> str | None:
        row = self._conn.execute(
            "SELECT value FROM node_properties WHERE node_id = ? AND name = ?",
            (node_id, prop.value),
        ).fetchone()
        return None if row is None else row["value"]

    def set_property(self, node_id: str, prop: NodeProperty, value: str) -> None:
        self._conn.execute(
            """
            INSERT INTO node_properties(node_id, name, value)
            VALUES(?, ?, ?)
            ON CONFLICT(node_id, name) DO UPDATE SET value=excluded.value
            """,
            (node_id, prop.value, value),
        )
        self._conn.commit()

    def remove_property(self, node_id: str, prop: NodeProperty) -> None:
        self._conn.execute(
            "DELETE FROM node_properties WHERE node_id = ? AND name = ?", (node_id, prop.value)
        )
        self._conn.commit()

    # versions

    def current_version_label(self, node_id: str) -> str | None:
        return self.get(node_id).version_label

    def enable_versioning(self, node_id: str, modifier: str) -> None:
        """Record the initial version unless one exists. Safe to call concurrently."""

        try:
            with self._conn:
                self._conn.execute(
                    """
                    INSERT OR IGNORE INTO versions(node_id, label, modifier, initial_version, created_at)
                    VALUES(?, ?, ?, 1, ?)
                    """,
                    (node_id, INITIAL_VERSION_LABEL, modifier, utc_now_iso()),
                )
                self._conn.execute(
                    "UPDATE nodes SET version_label = ? WHERE id = ? AND (version_label IS NULL OR version_label = '')",
                    (INITIAL_VERSION_LABEL, node_id),
                )
        except sqlite3.Error as e:
            raise RepositoryUnavailableError(f"enable versioning failed: {e}") from e

    def create_version(self, node_id: str, modifier: str, major: bool = False) -> VersionRecord:
        with self._conn:
            return self._insert_version(node_id, modifier, major)

    def _insert_version(self, node_id: str, modifier: str, major: bool) -> VersionRecord:
        current = self.current_version_label(node_id)
        if not current:
            raise ValueError("versioning_not_enabled")
        label = next_version_label(current, major=major)
        now = utc_now_iso()
        self._conn.execute(
            """
            INSERT INTO versions(node_id, label, modifier, initial_version, created_at)
            VALUES(?, ?, ?, 0, ?)
            """,
            (node_id, label, modifier, now),
        )
        self._conn.execute(
            "UPDATE nodes SET version_label = ?, modified_at = ? WHERE id = ?", (label, now, node_id)
        )
        return VersionRecord(
            node_id=node_id, label=label, modifier=modifier, created_at=now, initial_version=False
        )

    def record_save(
        self,
        node_id: str,
        working_copy_id: str,
        artifact_name: str,
        changes: bytes,
        content: bytes,
        modifier: str,
        major: bool = False,
    ) -> VersionRecord:
        """Store one editor save atomically.

        Adds a conversion artifact holding `changes`, with the pre-save content
        as its only child, replaces the document and working copy content, and
        records the next version. Nothing is written if any step fails.
        """

        doc = self.get(node_id)
        previous = self.get_content(node_id)
        now = utc_now_iso()
        with self._conn:
            artifact_id = self._insert_node(artifact_name, node_id, changes, ARTIFACT_MIME)
            self._insert_node(doc.name, artifact_id, previous, doc.mime_type)
            self._conn.execute(
                "UPDATE nodes SET content = ?, modified_at = ? WHERE id IN (?, ?)",
                (content, now, node_id, working_copy_id),
            )
            return self._insert_version(node_id, modifier, major)

    def get_version_history(self, node_id: str) -> list[VersionRecord]:
        rows = self._conn.execute(
            "SELECT * FROM versions WHERE node_id = ? ORDER BY id ASC", (node_id,)
        ).fetchall()
        return [
            VersionRecord(
                node_id=str(r["node_id"]),
                label=str(r["label"]),
                modifier=str(r["modifier"]),
                created_at=str(r["created_at"]),
                initial_version=bool(r["initial_version"]),
            )
            for r in rows
        ]
