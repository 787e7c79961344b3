from typing import Any

from fastapi import APIRouter, HTTPException, Request

from editsync.features.history.schemas import HistoryResponse
from editsync.features.history.service import HistoryReconstructor
from editsync.features.identity.service import IdentityDeriver
from editsync.infra.repo_nodes import NodeRepo
from editsync.infra.repo_persons import PersonRepo
from editsync.infra.urls import RepositoryLocator

router = APIRouter(prefix="/documents", tags=["history"])


@router.get("/{node_id}/history", response_model=HistoryResponse, response_model_exclude_none=True)
def get_history(request: Request, node_id: str) -> dict[str, Any]:
    conn = request.app.state.db
    nodes = NodeRepo(conn)
    reconstructor = HistoryReconstructor(
        nodes,
        PersonRepo(conn),
        RepositoryLocator(request.app.state.cfg),
        IdentityDeriver(nodes, actor=request.headers.get("X-Actor", "anonymous")),
    )
    try:
        return reconstructor.build(node_id).to_json()
    except KeyError:
        raise HTTPException(status_code=404, detail="node_not_found")
