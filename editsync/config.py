import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

DEMO_EDITOR_URL = "https://onlinedocs.onlyoffice.com/"


class ConfigKey(str, Enum):
    url = "url"
    innerurl = "innerurl"
    alfurl = "alfurl"
    demo = "demo"
    word_formats = "docservice.type.word"
    cell_formats = "docservice.type.cell"
    slide_formats = "docservice.type.slide"
    editable_mimes = "docservice.mime.edit"


def _env(key: str, default: str = "") -> str:
    return os.environ.get(key, default)


def _env_list(key: str, default: tuple[str, ...]) -> tuple[str, ...]:
    raw = os.environ.get(key)
    if raw is None:
        return default
    return tuple(s.strip() for s in raw.split(",") if s.strip())


@dataclass(frozen=True)
class AppConfig:
    data_dir: Path
    editor_url: str = "http://127.0.0.1/"
    editor_inner_url: str = ""
    repository_url: str = ""
    demo: bool = False
    word_formats: tuple[str, ...] = (".doc", ".docx", ".docm", ".dot", ".dotx", ".odt", ".rtf", ".txt")
    cell_formats: tuple[str, ...] = (".xls", ".xlsx", ".xlsm", ".ods", ".csv")
    slide_formats: tuple[str, ...] = (".ppt", ".pptx", ".pptm", ".odp")
    editable_mimes: tuple[str, ...] = (
        "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
        "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        "application/vnd.openxmlformats-officedocument.presentationml.presentation",
    )
    extra_editable_mimes: frozenset[str] = field(default_factory=frozenset)

    @property
    def db_path(self) -> Path:
        return self.data_dir / "editsync.sqlite3"

    def get(self, key: ConfigKey, default: object = None) -> object:
        values: dict[ConfigKey, object] = {
            ConfigKey.url: self.editor_url,
            ConfigKey.innerurl: self.editor_inner_url,
            ConfigKey.alfurl: self.repository_url,
            ConfigKey.demo: self.demo,
            ConfigKey.word_formats: list(self.word_formats),
            ConfigKey.cell_formats: list(self.cell_formats),
            ConfigKey.slide_formats: list(self.slide_formats),
            ConfigKey.editable_mimes: list(self.editable_mimes),
        }
        value = values.get(key)
        return default if value in (None, "") else value

    def get_list(self, key: ConfigKey) -> list[str]:
        value = self.get(key, [])
        return list(value) if isinstance(value, list) else []


def load_config() -> AppConfig:
    defaults = AppConfig(data_dir=Path("data"))
    return AppConfig(
        data_dir=Path(_env("EDITSYNC_DATA_DIR", "data")),
        editor_url=_env("EDITSYNC_EDITOR_URL", defaults.editor_url),
        editor_inner_url=_env("EDITSYNC_EDITOR_INNER_URL"),
        repository_url=_env("EDITSYNC_REPOSITORY_URL"),
        demo=_env("EDITSYNC_DEMO").lower() in ("1", "true", "yes"),
        word_formats=_env_list("EDITSYNC_WORD_FORMATS", defaults.word_formats),
        cell_formats=_env_list("EDITSYNC_CELL_FORMATS", defaults.cell_formats),
        slide_formats=_env_list("EDITSYNC_SLIDE_FORMATS", defaults.slide_formats),
        editable_mimes=_env_list("EDITSYNC_EDITABLE_MIMES", defaults.editable_mimes),
        extra_editable_mimes=frozenset(_env_list("EDITSYNC_EXTRA_EDITABLE_MIMES", ())),
    )
