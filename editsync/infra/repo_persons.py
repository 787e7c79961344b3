import sqlite3

from editsync.domain.repository import Person


class PersonRepo:
    def __init__(self, conn: sqlite3.Connection) -> None:
        self._conn = conn

    def create(self, username: str, first_name: str, last_name: str) -> Person:
        self._conn.execute(
            """
            INSERT INTO persons(username, first_name, last_name)
            VALUES(?, ?, ?)
            ON CONFLICT(username) DO UPDATE SET
              first_name=excluded.first_name,
              last_name=excluded.last_name
            """,
            (username, first_name, last_name),
        )
        self._conn.commit()
        person = self.resolve_user(username)
        if person is None:
            raise RuntimeError(f"Failed to create person: {username}")
        return person

    def resolve_user(self, username: str) -> Person | None:
        row = self._conn.execute("SELECT * FROM persons WHERE username = ?", (username,)).fetchone()
        if row is None:
            return None
        return Person(
            username=str(row["username"]),
            first_name=str(row["first_name"]),
            last_name=str(row["last_name"]),
        )
