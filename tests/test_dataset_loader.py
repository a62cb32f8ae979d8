import pytest

from player_profiling.config import DatasetConfig, LEGACY_LAYOUT
from player_profiling.data_layer.dataset_loader import DatasetLoader, load_dataset

from conftest import SEPARABLE_ROWS, make_row, write_dataset


def test_load_preserves_order_and_flags_reference_group(dataset_path):
    records = load_dataset(dataset_path)

    assert len(records) == len(SEPARABLE_ROWS)
    assert records[0].is_reference_group is True
    assert records[1].is_reference_group is False
    assert records[0].feature_a == 1.5
    assert records[0].feature_b == 2.0
    assert records[-1].feature_b == 6.0


def test_malformed_rows_are_skipped(tmp_path):
    extra = [
        make_row(100, "Down", "n/a", 2.0),
        make_row(101, "TD", 3.0, ""),
        "102,Down,too,short",
        make_row(103, "TD", "nan", 1.0),
    ]
    path = write_dataset(tmp_path / "data.csv", SEPARABLE_ROWS, extra)
    total_lines = len(path.read_text(encoding="utf-8").splitlines())

    loader = DatasetLoader()
    records = loader.load(path)

    stats = loader.statistics
    assert stats['rows_skipped'] == 4
    assert len(records) == total_lines - 1 - stats['rows_skipped']


def test_blank_lines_are_ignored(tmp_path):
    path = write_dataset(tmp_path / "data.csv", SEPARABLE_ROWS[:2], ["", "   "])

    loader = DatasetLoader()
    records = loader.load(path)

    assert len(records) == 2
    assert loader.statistics['blank_lines'] == 2
    assert loader.statistics['rows_skipped'] == 0


def test_duplicates_are_kept(tmp_path):
    path = write_dataset(tmp_path / "data.csv", [("Down", 1.0, 1.0)] * 3)
    assert len(load_dataset(path)) == 3


def test_marker_match_is_case_insensitive_by_default(tmp_path):
    path = write_dataset(tmp_path / "data.csv", [("down", 1.0, 1.0), (" DOWN ", 2.0, 2.0)])

    relaxed = load_dataset(path)
    strict = load_dataset(path, DatasetConfig(case_sensitive=True))

    assert [r.is_reference_group for r in relaxed] == [True, True]
    assert [r.is_reference_group for r in strict] == [False, False]


def test_legacy_layout_reads_memory_column(tmp_path):
    path = write_dataset(tmp_path / "data.csv", [("Down", 1.5, 2.0)])

    records = load_dataset(path, DatasetConfig(layout=LEGACY_LAYOUT))

    assert records[0].feature_a == 3.0
    assert records[0].feature_b == 1.5


def test_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_dataset(tmp_path / "missing.csv")


def test_header_only_file_yields_no_records(tmp_path):
    path = write_dataset(tmp_path / "data.csv", [])
    assert load_dataset(path) == []
