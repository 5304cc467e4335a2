from unittest.mock import patch

import pytest

from directory_etl.errors import OutputWriteError
from directory_etl.models import PipelineOutput, RejectionEntry
from directory_etl.tables import OutputPaths, format_cell, load_source_records, write_outputs


def test_format_cell():
    assert format_cell(None) == ""
    assert format_cell(False) == "false"
    assert format_cell(True) == "true"
    assert format_cell([]) == "[]"
    assert format_cell(0.0) == "0.0"
    assert format_cell("Guntur") == "Guntur"


def test_missing_columns_become_empty_strings(tmp_path):
    path = tmp_path / "source.csv"
    path.write_text("CompanyName,CompanyStatus\nNA,Active\n")

    records = load_source_records(str(path))

    assert len(records) == 1
    assert records[0].company_name == "NA"
    assert records[0].address == ""
    assert records[0].registration_date == ""


def test_empty_source_has_no_records(tmp_path):
    path = tmp_path / "empty.csv"
    path.write_text("")
    assert load_source_records(str(path)) == []


def test_rejection_log_is_newline_separated(tmp_path):
    output = PipelineOutput(rejections=[
        RejectionEntry("A", "x", "is not active."),
        RejectionEntry("B", "y", "is not active."),
    ])
    written = write_outputs(output, OutputPaths.in_directory(str(tmp_path)))

    assert str(tmp_path / "category_errors.log") in written
    assert (tmp_path / "category_errors.log").read_text() == (
        'Business "A" with address "x" is not active.\n'
        'Business "B" with address "y" is not active.'
    )


def test_failed_replace_keeps_previous_outputs(tmp_path):
    paths = OutputPaths.in_directory(str(tmp_path))
    (tmp_path / "businesses.csv").write_text("previous run")

    with patch("directory_etl.tables.os.replace", side_effect=PermissionError("read-only")):
        with pytest.raises(OutputWriteError):
            write_outputs(PipelineOutput(), paths)

    assert (tmp_path / "businesses.csv").read_text() == "previous run"
    assert sorted(p.name for p in tmp_path.iterdir()) == ["businesses.csv"]


def test_failed_table_write_removes_temp_files(tmp_path):
    paths = OutputPaths.in_directory(str(tmp_path))

    with patch("directory_etl.tables.write_table", side_effect=ValueError("unencodable cell")):
        with pytest.raises(OutputWriteError, match="unencodable cell"):
            write_outputs(PipelineOutput(), paths)

    assert list(tmp_path.iterdir()) == []
