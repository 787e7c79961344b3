from fastapi import HTTPException, UploadFile

from editsync.config import AppConfig
from editsync.features.documents.formats import file_extension, get_doc_type, is_editable
from editsync.features.identity.service import IdentityDeriver
from editsync.infra.repo_nodes import NodeRepo
from editsync.infra.urls import EditorUrls, RepositoryLocator


class DocumentsService:
    def __init__(self, *, conn, cfg: AppConfig, actor: str = "system") -> None:
        self._cfg = cfg
        self._nodes = NodeRepo(conn)
        self._identity = IdentityDeriver(self._nodes, actor=actor)
        self._locator = RepositoryLocator(cfg)

    def _get(self, node_id: str):
        try:
            return self._nodes.get(node_id)
        except KeyError:
            raise HTTPException(status_code=404, detail="node_not_found")

    async def create(self, *, title: str, file: UploadFile, folder_id: str | None) -> dict[str, object]:
        data = await file.read()
        if not data:
            raise HTTPException(status_code=400, detail="empty_file")
        if folder_id is not None:
            self._get(folder_id)

        ext = (file_extension(file.filename) or "").lstrip(".")
        if not ext:
            raise HTTPException(status_code=400, detail="missing_extension")
        name = self._nodes.correct_name(folder_id, title, ext)
        node = self._nodes.create(
            name=name, parent_id=folder_id, content=data, mime_type=file.content_type
        )
        return {
            "id": node.id,
            "name": node.name,
            "key": self._identity.get_key(node.id),
        }

    async def content(self, *, node_id: str) -> tuple[bytes, str]:
        node = self._get(node_id)
        return self._nodes.get_content(node_id), node.mime_type or "application/octet-stream"

    async def editor_config(self, *, node_id: str) -> dict[str, object]:
        node = self._get(node_id)
        ext = file_extension(node.name)
        doc_type = get_doc_type(self._cfg, ext)
        if doc_type is None:
            raise HTTPException(status_code=415, detail="unsupported_format")

        editable = is_editable(self._cfg, node.mime_type)
        hash_ = self._identity.get_hash(node_id)
        editor_config: dict[str, object] = {"mode": "edit" if editable else "view"}
        if hash_ is not None:
            editor_config["callbackUrl"] = self._locator.callback_url(node_id, hash_)
        return {
            "editorUrl": EditorUrls(self._cfg).editor_url(),
            "documentType": doc_type.value,
            "document": {
                "title": node.name,
                "fileType": (ext or "").lstrip("."),
                "key": self._identity.get_key(node_id),
                "url": self._locator.content_url(node_id),
            },
            "editorConfig": editor_config,
        }
