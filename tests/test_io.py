"""Tests for table loading and persistence sinks."""

from __future__ import annotations

from pathlib import Path

import pandas as pd
import pytest
from pytest_mock import MockerFixture

from mindiff.errors import PersistenceError
from mindiff.io import CsvSink, read_table, write_table


def test_read_table_sniffs_separator(tmp_path: Path) -> None:
    """Test the separator is detected when not given."""
    path = tmp_path / "items.csv"
    path.write_text("id;value\na;1\nb;2\n")
    table = read_table(path)
    assert table.columns.tolist() == ["id", "value"]
    assert table["value"].tolist() == [1, 2]


def test_read_table_explicit_separator(tmp_path: Path) -> None:
    """Test an explicit separator is used."""
    path = tmp_path / "items.tsv"
    path.write_text("id\tvalue\na\t1\n")
    assert read_table(path, sep="\t")["id"].tolist() == ["a"]


def test_read_missing_table(tmp_path: Path) -> None:
    """Test missing input files raise FileNotFoundError."""
    with pytest.raises(FileNotFoundError, match="Input file not found"):
        read_table(tmp_path / "missing.csv")


def test_write_table_without_index(tmp_path: Path) -> None:
    """Test tables are written without the index."""
    path = tmp_path / "out.csv"
    write_table(pd.DataFrame({"x": [1.5, 2.0]}), path)
    assert path.read_text().splitlines() == ["x", "1.5", "2.0"]


def test_write_table_failure(tmp_path: Path) -> None:
    """Test unwritable paths raise PersistenceError."""
    with pytest.raises(PersistenceError, match="Failed to write"):
        write_table(pd.DataFrame({"x": [1]}), tmp_path / "missing" / "out.csv")


def test_write_table_multi_character_separator(tmp_path: Path) -> None:
    """Test a separator pandas cannot use raises PersistenceError."""
    with pytest.raises(PersistenceError, match="Failed to write"):
        write_table(pd.DataFrame({"x": [1], "y": [2]}), tmp_path / "out.csv", sep=";;")


class TestCsvSink:
    """Tests for CsvSink."""

    def test_defaults(self) -> None:
        """Test the default snapshot layout."""
        sink = CsvSink()
        assert sink.path == Path("newSet.csv")
        assert sink.sep == ";"
        assert sink.decimal == ","
        assert sink.writes == 0

    def test_write_overwrites(self, tmp_path: Path) -> None:
        """Test each write replaces the previous snapshot."""
        path = tmp_path / "best.csv"
        sink = CsvSink(path)
        sink.write(pd.DataFrame({"x": [0.5], "new_set": [1]}))
        sink.write(pd.DataFrame({"x": [1.5], "new_set": [2]}))

        assert sink.writes == 2
        assert path.read_text().splitlines() == ["x;new_set", "1,5;2"]

    def test_failed_write_is_not_counted(
        self, tmp_path: Path, mocker: MockerFixture
    ) -> None:
        """Test a failing write raises and leaves the counter unchanged."""
        mocker.patch.object(pd.DataFrame, "to_csv", side_effect=OSError("read-only"))
        sink = CsvSink(tmp_path / "best.csv")
        with pytest.raises(PersistenceError, match="read-only"):
            sink.write(pd.DataFrame({"x": [1]}))
        assert sink.writes == 0
