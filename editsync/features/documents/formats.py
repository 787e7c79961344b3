from editsync.config import AppConfig, ConfigKey
from editsync.domain.enums import DocType


def file_name(url: str | None) -> str:
    if not url:
        return ""
    return url[url.rfind("/") + 1 :].split("?")[0]


def file_extension(url: str | None) -> str | None:
    name = file_name(url)
    dot = name.rfind(".")
    if dot < 0:
        return None
    return name[dot:].lower()


def get_doc_type(cfg: AppConfig, ext: str | None) -> DocType | None:
    if ext is None:
        return None
    if ext in cfg.get_list(ConfigKey.word_formats):
        return DocType.text
    if ext in cfg.get_list(ConfigKey.cell_formats):
        return DocType.spreadsheet
    if ext in cfg.get_list(ConfigKey.slide_formats):
        return DocType.presentation
    return None


def is_editable(cfg: AppConfig, mime: str | None) -> bool:
    if not mime:
        return False
    return mime in cfg.get_list(ConfigKey.editable_mimes) or mime in cfg.extra_editable_mimes
