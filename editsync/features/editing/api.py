from fastapi import APIRouter, HTTPException, Request, UploadFile

from editsync.features.editing.service import EditingService
from editsync.features.identity.service import IdentityDeriver
from editsync.infra.repo_nodes import NodeRepo
from editsync.infra.urls import RepositoryLocator

router = APIRouter(prefix="/documents", tags=["editing"])


def _actor(request: Request) -> str:
    return request.headers.get("X-Actor", "anonymous")


def _service(request: Request) -> EditingService:
    nodes = NodeRepo(request.app.state.db)
    return EditingService(nodes, IdentityDeriver(nodes, actor=_actor(request)))


@router.post("/{node_id}/checkout")
def check_out(request: Request, node_id: str) -> dict[str, object]:
    try:
        session = _service(request).check_out(node_id)
    except KeyError:
        raise HTTPException(status_code=404, detail="node_not_found")
    except ValueError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return {
        "node_id": node_id,
        "working_copy_id": session.working_copy_id,
        "key": session.editing_key,
        "callback_url": RepositoryLocator(request.app.state.cfg).callback_url(
            node_id, session.integrity_hash
        ),
    }


@router.post("/{node_id}/callback")
async def save_callback(
    request: Request,
    node_id: str,
    file: UploadFile,
    changes: UploadFile,
    cb_key: str | None = None,
    major: bool = False,
) -> dict[str, object]:
    content = await file.read()
    diff = await changes.read()
    try:
        version = _service(request).save(
            node_id, cb_key, content=content, changes=diff, actor=_actor(request), major=major
        )
    except KeyError:
        raise HTTPException(status_code=404, detail="node_not_found")
    return {"node_id": node_id, "version": version.label, "created": version.created_at}


@router.post("/{node_id}/checkin")
def check_in(request: Request, node_id: str, cb_key: str | None = None) -> dict[str, object]:
    try:
        _service(request).check_in(node_id, cb_key)
    except KeyError:
        raise HTTPException(status_code=404, detail="node_not_found")
    except ValueError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return {"node_id": node_id, "checked_out": False}
