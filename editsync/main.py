from fastapi import FastAPI

from editsync.config import load_config
from editsync.features.documents.api import router as documents_router
from editsync.features.editing.api import router as editing_router
from editsync.features.history.api import router as history_router
from editsync.infra.db import DbConfig, connect, migrate
from editsync.web.errors import install_error_handlers
from editsync.web.health import router as health_router


def create_app() -> FastAPI:
    cfg = load_config()
    conn = connect(DbConfig(path=cfg.db_path))
    migrate(conn)

    app = FastAPI(title="editsync", version="0.1.0")
    app.state.cfg = cfg
    app.state.db = conn
    install_error_handlers(app)
    app.include_router(health_router)
    app.include_router(documents_router)
    app.include_router(editing_router)
    app.include_router(history_router)
    return app


app = create_app()
