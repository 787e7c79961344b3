from fastapi import APIRouter, Request, Response, UploadFile

from editsync.features.documents.service import DocumentsService

router = APIRouter(prefix="/documents", tags=["documents"])


def _service(request: Request) -> DocumentsService:
    return DocumentsService(
        conn=request.app.state.db,
        cfg=request.app.state.cfg,
        actor=request.headers.get("X-Actor", "anonymous"),
    )


@router.post("")
async def create_document(
    request: Request, title: str, file: UploadFile, folder_id: str | None = None
) -> dict[str, object]:
    return await _service(request).create(title=title, file=file, folder_id=folder_id)


@router.get("/{node_id}/content")
async def download_content(request: Request, node_id: str) -> Response:
    data, mime = await _service(request).content(node_id=node_id)
    return Response(content=data, media_type=mime)


@router.get("/{node_id}/editor-config")
async def editor_config(request: Request, node_id: str) -> dict[str, object]:
    return await _service(request).editor_config(node_id=node_id)
