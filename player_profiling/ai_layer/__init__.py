"""
AI Layer - Classifier, training loop, and online profile scoring.
"""

from .neural_network import NeuralNetwork, NetworkWeights, sigmoid
from .trainer import TrainingController, TrainingReport
from .profile_scorer import (
    ProfileScorer,
    ProfileState,
    ProfileEvaluation,
    ProfileAssessment
)

__all__ = [
    "NeuralNetwork",
    "NetworkWeights",
    "sigmoid",
    "TrainingController",
    "TrainingReport",
    "ProfileScorer",
    "ProfileState",
    "ProfileEvaluation",
    "ProfileAssessment"
]
