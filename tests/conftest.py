import pytest

from player_profiling.config import (
    DatasetConfig,
    NetworkConfig,
    ProfilingConfig,
    ScoringConfig,
    TrainingConfig
)

HEADER = ",".join(
    ["id", "group", "age", "sex", "iq", "c5", "c6", "c7", "c8",
     "wm_matr_sequential", "c10", "floor_matrix_map", "floor_matrix_obs"]
)


def make_row(idx, group, feature_a, feature_b, memory="3"):
    cols = [str(idx), group, "12", "M", "70", "0", "0", "0", "0", memory, "0",
            str(feature_a), str(feature_b)]
    return ",".join(cols)


# Reference group scores low on both features, the rest scores high
SEPARABLE_ROWS = [
    ("Down", 1.5, 2.0),
    ("TD", 4.5, 5.5),
    ("Down", 2.0, 1.5),
    ("TD", 4.0, 5.0),
    ("Down", 1.0, 2.5),
    ("TD", 5.0, 4.5),
    ("Down", 2.5, 2.0),
    ("TD", 4.5, 6.0),
]


def write_dataset(path, rows, extra_lines=()):
    lines = [HEADER]
    lines.extend(make_row(i, *row) for i, row in enumerate(rows))
    lines.extend(extra_lines)
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path


@pytest.fixture
def dataset_path(tmp_path):
    return write_dataset(tmp_path / "floor_matrix.csv", SEPARABLE_ROWS)


@pytest.fixture
def small_config(dataset_path):
    return ProfilingConfig(
        dataset=DatasetConfig(csv_path=str(dataset_path)),
        network=NetworkConfig(),
        training=TrainingConfig(epochs=200),
        scoring=ScoringConfig(total_checkpoints=3)
    )
