import sqlite3
import sys
from collections.abc import Iterator
from pathlib import Path

import pytest


def pytest_configure() -> None:
    # Ensure `import editsync...` works without installing the package.
    repo_root = Path(__file__).resolve().parents[1]
    sys.path.insert(0, str(repo_root))


@pytest.fixture
def conn(tmp_path: Path) -> Iterator[sqlite3.Connection]:
    from editsync.infra.db import DbConfig, connect, migrate

    c = connect(DbConfig(path=tmp_path / "test.sqlite3"))
    migrate(c)
    yield c
    c.close()


@pytest.fixture
def nodes(conn):
    from editsync.infra.repo_nodes import NodeRepo

    return NodeRepo(conn)


@pytest.fixture
def persons(conn):
    from editsync.infra.repo_persons import PersonRepo

    return PersonRepo(conn)


@pytest.fixture
def cfg(tmp_path: Path):
    from editsync.config import AppConfig

    return AppConfig(data_dir=tmp_path, repository_url="http://repo.test/")
