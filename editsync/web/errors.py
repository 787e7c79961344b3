import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from editsync.domain.errors import HistoryReconstructionError, IdentityResolutionError, SessionAuthError

logger = logging.getLogger(__name__)


async def _history_error(request: Request, exc: HistoryReconstructionError) -> JSONResponse:
    return JSONResponse(
        status_code=409,
        content={"detail": {"error": "history_unavailable", **exc.to_json()}},
    )


async def _identity_error(request: Request, exc: IdentityResolutionError) -> JSONResponse:
    logger.error("identity resolution failed for node %s: %s", exc.node_id, exc)
    return JSONResponse(
        status_code=503,
        content={"detail": {"error": "identity_unavailable", "code": exc.code.value}},
    )


async def _session_error(request: Request, exc: SessionAuthError) -> JSONResponse:
    return JSONResponse(status_code=403, content={"detail": "callback_unauthorized"})


def install_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(HistoryReconstructionError, _history_error)
    app.add_exception_handler(IdentityResolutionError, _identity_error)
    app.add_exception_handler(SessionAuthError, _session_error)
