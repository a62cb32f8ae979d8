"""
Dataset Loader - Parse the reference CSV into typed records.
"""

import logging
import math
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Union

from ..config import DatasetConfig, DEFAULT_CONFIG

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DatasetRecord:
    """A single row of the reference dataset."""
    is_reference_group: bool
    feature_a: float
    feature_b: float


def _parse_float(raw: str) -> Optional[float]:
    try:
        value = float(raw)
    except ValueError:
        return None
    if math.isnan(value) or math.isinf(value):
        return None
    return value


class DatasetLoader:
    """
    Reads the reference dataset from a delimited text file.

    The first line is always treated as a header. Rows whose feature
    columns are missing or non-numeric are skipped individually.
    """

    def __init__(self, config: DatasetConfig = None):
        """
        Initialize the loader.

        Args:
            config: Dataset configuration (column layout, marker, delimiter)
        """
        self.config = config or DEFAULT_CONFIG.dataset
        self._rows_read = 0
        self._rows_loaded = 0
        self._rows_skipped = 0
        self._blank_lines = 0

    def _is_reference(self, raw_group: str) -> bool:
        group = raw_group.strip()
        marker = self.config.reference_marker
        if self.config.case_sensitive:
            return group == marker
        return group.casefold() == marker.casefold()

    def parse_line(self, line: str) -> Optional[DatasetRecord]:
        """
        Parse one data line.

        Returns:
            DatasetRecord, or None if the row is malformed
        """
        layout = self.config.layout
        cols = line.split(self.config.delimiter)

        if len(cols) < layout.min_columns:
            return None

        feature_a = _parse_float(cols[layout.feature_a])
        feature_b = _parse_float(cols[layout.feature_b])
        if feature_a is None or feature_b is None:
            return None

        return DatasetRecord(
            is_reference_group=self._is_reference(cols[layout.group]),
            feature_a=feature_a,
            feature_b=feature_b
        )

    def load(self, path: Union[str, Path] = None) -> List[DatasetRecord]:
        """
        Load every valid record from the file, preserving file order.

        Args:
            path: CSV file path (default: config.csv_path)

        Returns:
            List of DatasetRecord

        Raises:
            FileNotFoundError: if the file does not exist
        """
        path = Path(path or self.config.csv_path)
        if not path.is_file():
            raise FileNotFoundError(f"CSV file not found at: {path}")

        self._rows_read = 0
        self._rows_loaded = 0
        self._rows_skipped = 0
        self._blank_lines = 0

        records: List[DatasetRecord] = []
        with path.open("r", encoding="utf-8") as handle:
            next(handle, None)  # header
            for line_no, line in enumerate(handle, start=2):
                line = line.rstrip("\r\n")
                if not line.strip():
                    self._blank_lines += 1
                    continue

                self._rows_read += 1
                record = self.parse_line(line)
                if record is None:
                    self._rows_skipped += 1
                    logger.debug(f"Skipping malformed row {line_no} in {path.name}")
                    continue

                records.append(record)

        self._rows_loaded = len(records)
        logger.info(
            f"Loaded {self._rows_loaded} records from {path} "
            f"({self._rows_skipped} malformed rows skipped)"
        )
        return records

    @property
    def statistics(self) -> Dict:
        return {
            'rows_read': self._rows_read,
            'rows_loaded': self._rows_loaded,
            'rows_skipped': self._rows_skipped,
            'blank_lines': self._blank_lines
        }


def load_dataset(
    path: Union[str, Path],
    config: DatasetConfig = None
) -> List[DatasetRecord]:
    """Convenience wrapper around DatasetLoader.load."""
    return DatasetLoader(config).load(path)
