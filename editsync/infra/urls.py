from editsync.config import DEMO_EDITOR_URL, AppConfig, ConfigKey

LOCAL_BASE_URL = "http://127.0.0.1:8000/"


def _with_slash(url: str) -> str:
    return url if url.endswith("/") else url + "/"


class EditorUrls:
    def __init__(self, cfg: AppConfig) -> None:
        self._cfg = cfg

    def editor_url(self) -> str:
        if self._cfg.get(ConfigKey.demo, False):
            return DEMO_EDITOR_URL
        return str(self._cfg.get(ConfigKey.url, "http://127.0.0.1/"))

    def editor_inner_url(self) -> str:
        inner = str(self._cfg.get(ConfigKey.innerurl, ""))
        if not inner or self._cfg.get(ConfigKey.demo, False):
            return self.editor_url()
        return inner


class RepositoryLocator:
    """Builds the URLs the editor uses to fetch content and post save callbacks."""

    def __init__(self, cfg: AppConfig) -> None:
        self._cfg = cfg

    def repository_url(self) -> str:
        return _with_slash(str(self._cfg.get(ConfigKey.alfurl, LOCAL_BASE_URL)))

    def content_url(self, node_id: str) -> str:
        return f"{self.repository_url()}documents/{node_id}/content"

    def callback_url(self, node_id: str, hash_: str | None) -> str:
        return f"{self.repository_url()}documents/{node_id}/callback?cb_key={hash_ or ''}"
