import sqlite3
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class DbConfig:
    path: Path


def connect(cfg: DbConfig) -> sqlite3.Connection:
    cfg.path.parent.mkdir(parents=True, exist_ok=True)
    # FastAPI threadpool shares a single connection; writes are serialized by sqlite.
    conn = sqlite3.connect(cfg.path, check_same_thread=False)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    return conn


def migrate(conn: sqlite3.Connection) -> None:
    conn.executescript(
        """
        CREATE TABLE IF NOT EXISTS nodes (
          id TEXT PRIMARY KEY,
          parent_id TEXT,
          position INTEGER NOT NULL,
          name TEXT NOT NULL,
          mime_type TEXT,
          content BLOB,
          version_label TEXT,
          checked_out INTEGER NOT NULL DEFAULT 0,
          working_copy_id TEXT,
          working_copy_of TEXT,
          created_at TEXT NOT NULL,
          modified_at TEXT NOT NULL,
          FOREIGN KEY (parent_id) REFERENCES nodes(id)
        );

        CREATE INDEX IF NOT EXISTS idx_nodes_parent ON nodes(parent_id, position);

        CREATE TABLE IF NOT EXISTS node_properties (
          node_id TEXT NOT NULL,
          name TEXT NOT NULL,
          value TEXT,
          FOREIGN KEY (node_id) REFERENCES nodes(id),
          PRIMARY KEY (node_id, name)
        );

        CREATE TABLE IF NOT EXISTS versions (
          id INTEGER PRIMARY KEY,
          node_id TEXT NOT NULL,
          label TEXT NOT NULL,
          modifier TEXT NOT NULL,
          initial_version INTEGER NOT NULL DEFAULT 0,
          created_at TEXT NOT NULL,
          FOREIGN KEY (node_id) REFERENCES nodes(id),
          UNIQUE(node_id, label)
        );

        CREATE TABLE IF NOT EXISTS persons (
          username TEXT PRIMARY KEY,
          first_name TEXT NOT NULL,
          last_name TEXT NOT NULL
        );
        """
    )
    conn.commit()
