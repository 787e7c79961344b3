import re

from editsync.domain.errors import LabelParseError

_LABEL_RE = re.compile(r"^\d+\.\d+$")
_ARCHIVE_SUFFIX = ".zip"


def parse_version_label(name: str) -> str:
    """Extract the version label from an artifact name like `diff_2.3.zip`.

    The prefix may itself contain underscores; the label follows the last one.
    """

    stem = name[: -len(_ARCHIVE_SUFFIX)] if name.endswith(_ARCHIVE_SUFFIX) else name
    _, sep, label = stem.rpartition("_")
    if not sep or not _LABEL_RE.match(label):
        raise LabelParseError(name)
    return label


def artifact_name(label: str, prefix: str = "diff") -> str:
    return f"{prefix}_{label}{_ARCHIVE_SUFFIX}"
