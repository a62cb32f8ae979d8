import numpy as np

from player_profiling.ai_layer.neural_network import NeuralNetwork
from player_profiling.ai_layer.profile_scorer import (
    ProfileScorer,
    average_checkpoint_interval,
    clamp,
    life_loss_rate
)
from player_profiling.config import ScoringCalibration, ScoringConfig
from player_profiling.data_layer.dataset_loader import load_dataset
from player_profiling.data_layer.statistics import DatasetStatistics


def _ready_scorer(dataset_path, config=None):
    stats = DatasetStatistics.from_records(load_dataset(dataset_path))
    scorer = ProfileScorer(config or ScoringConfig())
    scorer.mark_ready(NeuralNetwork(), stats)
    return scorer


def test_average_checkpoint_interval():
    assert average_checkpoint_interval([10.0, 25.0, 45.0]) == 15.0
    assert average_checkpoint_interval([12.0]) == 12.0
    assert average_checkpoint_interval([]) == 0.0


def test_life_loss_rate_per_minute():
    assert life_loss_rate(2, 60.0) == 2.0
    assert life_loss_rate(3, 0.0) == 0.0


def test_clamp_bounds():
    assert clamp(7.0, 1.0, 5.0) == 5.0
    assert clamp(-3.0, 1.0, 5.0) == 1.0
    assert clamp(2.5, 1.0, 5.0) == 2.5


def test_checkpoint_features(dataset_path):
    scorer = _ready_scorer(dataset_path)
    for ts in (10.0, 25.0, 45.0):
        evaluation = scorer.record_checkpoint(ts)

    assert evaluation.avg_checkpoint_interval == 15.0
    assert evaluation.life_loss_rate == 0.0
    assert np.isclose(evaluation.feature_a, 4.0)
    assert evaluation.feature_b == 6.0
    assert np.isclose(evaluation.similarity, scorer.predict(evaluation.feature_a, 6.0))
    assert scorer.current_similarity == evaluation.similarity


def test_life_loss_features(dataset_path):
    scorer = _ready_scorer(dataset_path)
    scorer.record_life_lost(30.0)
    evaluation = scorer.record_life_lost(60.0)

    assert evaluation.life_loss_rate == 2.0
    assert evaluation.feature_a == 5.0
    assert np.isclose(evaluation.feature_b, 2.0)


def test_feature_b_is_clamped_for_heavy_losses(dataset_path):
    scorer = _ready_scorer(dataset_path)
    for ts in (5.0, 6.0, 7.0, 8.0):
        evaluation = scorer.record_life_lost(ts)
    assert evaluation.feature_b == 1.0


def test_calibration_constants_are_configurable(dataset_path):
    config = ScoringConfig(calibration=ScoringCalibration(a_offset=3.0, a_interval_scale=10.0))
    scorer = _ready_scorer(dataset_path, config)
    evaluation = scorer.record_checkpoint(10.0)
    assert np.isclose(evaluation.feature_a, 2.0)


def test_evaluation_deferred_until_ready(dataset_path):
    scorer = ProfileScorer()
    assert scorer.record_checkpoint(20.0) is None
    assert scorer.current_similarity == 0.5

    stats = DatasetStatistics.from_records(load_dataset(dataset_path))
    scorer.mark_ready(NeuralNetwork(), stats)

    assert scorer.last_evaluation is not None
    assert scorer.last_evaluation.avg_checkpoint_interval == 20.0


def test_predict_without_model_is_neutral():
    assert ProfileScorer().predict(3.0, 4.0) == 0.5


def test_listeners_notified_on_change(dataset_path):
    scorer = _ready_scorer(dataset_path)
    seen = []
    scorer.subscribe(seen.append)

    scorer.record_checkpoint(10.0)
    scorer.record_checkpoint(200.0)

    assert len(seen) >= 1
    assert seen[-1] == scorer.current_similarity
    assert all(0.0 <= s <= 1.0 for s in seen)


def test_assessment_issued_once_at_final_checkpoint(dataset_path):
    scorer = _ready_scorer(dataset_path, ScoringConfig(total_checkpoints=3))
    verdicts = []
    scorer.subscribe_assessment(verdicts.append)

    scorer.record_checkpoint(10.0)
    scorer.record_checkpoint(20.0)
    assert scorer.assessment is None

    scorer.record_checkpoint(30.0)
    scorer.record_checkpoint(40.0)

    assert len(verdicts) == 1
    verdict = verdicts[0]
    assert verdict.checkpoint_count == 3
    assert np.isclose(verdict.dissimilarity_pct, (1.0 - verdict.similarity) * 100.0)
    assert verdict.confident == (verdict.dissimilarity_pct > 50.0)


def test_failing_listener_does_not_stop_other_listeners(dataset_path):
    scorer = _ready_scorer(dataset_path, ScoringConfig(total_checkpoints=1))
    seen = []
    verdicts = []

    def broken(_value):
        raise RuntimeError("listener failure")

    scorer.subscribe(broken)
    scorer.subscribe(seen.append)
    scorer.subscribe_assessment(broken)
    scorer.subscribe_assessment(verdicts.append)

    evaluation = scorer.record_checkpoint(40.0)

    assert evaluation is not None
    assert seen == [evaluation.similarity]
    assert verdicts == [scorer.assessment]
