import pytest

from editsync.domain.errors import HistoryReconstructionError, LabelParseError
from editsync.features.history.labels import artifact_name, parse_version_label


def test_parses_label_after_last_underscore() -> None:
    assert parse_version_label("foo_2.3.zip") == "2.3"
    assert parse_version_label("my_report_final_1.12.zip") == "1.12"


def test_artifact_name_round_trips_through_parser() -> None:
    assert artifact_name("4.0") == "diff_4.0.zip"
    assert parse_version_label(artifact_name("4.0")) == "4.0"


@pytest.mark.parametrize("name", ["foo.zip", "foo_.zip", "foo_bar.zip", "foo_2.zip", "", "foo_2.3.4.zip"])
def test_unparseable_names_raise(name: str) -> None:
    with pytest.raises(LabelParseError) as exc:
        parse_version_label(name)
    assert isinstance(exc.value, HistoryReconstructionError)
    assert exc.value.name == name
