from enum import Enum


class NodeProperty(str, Enum):
    editing_key = "onlyoffice:editing-key"
    editing_hash = "onlyoffice:editing-hash"


class DocType(str, Enum):
    text = "text"
    spreadsheet = "spreadsheet"
    presentation = "presentation"


class ErrorCode(str, Enum):
    label_unparseable = "label_unparseable"
    artifact_count_mismatch = "artifact_count_mismatch"
    nested_child_missing = "nested_child_missing"
    version_label_missing = "version_label_missing"
    versioning_unavailable = "versioning_unavailable"
