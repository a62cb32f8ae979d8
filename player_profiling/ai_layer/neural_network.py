"""
Neural Network - Fixed-topology two-layer sigmoid classifier.
"""

import logging
from dataclasses import dataclass
from typing import Sequence

import numpy as np

from ..config import NetworkConfig, DEFAULT_CONFIG

logger = logging.getLogger(__name__)


def sigmoid(x):
    """Logistic function, clipped to keep exp() finite."""
    return 1.0 / (1.0 + np.exp(-np.clip(x, -500.0, 500.0)))


def sigmoid_derivative(activation):
    """Derivative of the logistic function, taken from its output."""
    return activation * (1.0 - activation)


@dataclass(frozen=True)
class NetworkWeights:
    """Snapshot of both weight matrices."""
    input_hidden: np.ndarray
    hidden_output: np.ndarray


class NeuralNetwork:
    """
    Fully-connected input -> hidden -> output network without biases.

    Trained with online (per-sample) gradient descent. Weights are drawn
    uniformly from [-1, 1) with a fixed seed so runs are reproducible.
    """

    def __init__(self, config: NetworkConfig = None):
        """
        Initialize the network.

        Args:
            config: Topology, seed and learning rate
        """
        self.config = config or DEFAULT_CONFIG.network
        self.input_nodes = self.config.input_nodes
        self.hidden_nodes = self.config.hidden_nodes
        self.output_nodes = self.config.output_nodes
        self.learning_rate = self.config.learning_rate

        rng = np.random.default_rng(self.config.seed)
        self._weights_ih = rng.random((self.input_nodes, self.hidden_nodes)) * 2 - 1
        self._weights_ho = rng.random((self.hidden_nodes, self.output_nodes)) * 2 - 1

        logger.info(
            f"NeuralNetwork initialized "
            f"({self.input_nodes}-{self.hidden_nodes}-{self.output_nodes}, seed={self.config.seed})"
        )

    def _as_vector(self, values: Sequence[float], size: int, name: str) -> np.ndarray:
        vector = np.asarray(values, dtype=np.float64).reshape(-1)
        if vector.size != size:
            raise ValueError(f"Expected {size} {name}, got {vector.size}")
        return vector

    def _forward(self, inputs: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
        hidden = sigmoid(inputs @ self._weights_ih)
        output = sigmoid(hidden @ self._weights_ho)
        return hidden, output

    def feed_forward(self, inputs: Sequence[float]) -> np.ndarray:
        """
        Compute the network output for one input vector.

        Returns:
            Array of output activations, each in (0, 1)
        """
        x = self._as_vector(inputs, self.input_nodes, "inputs")
        _, output = self._forward(x)
        return output

    def train(self, inputs: Sequence[float], targets: Sequence[float]) -> float:
        """
        Run one backpropagation step on a single sample.

        Output weights are updated first; the hidden error is then
        back-propagated through the updated output weights.

        Returns:
            Sum of squared output errors before the update
        """
        x = self._as_vector(inputs, self.input_nodes, "inputs")
        y = self._as_vector(targets, self.output_nodes, "targets")

        hidden, output = self._forward(x)

        output_errors = y - output
        total_sq_error = float(np.sum(output_errors ** 2))

        output_delta = output_errors * sigmoid_derivative(output)
        self._weights_ho += self.learning_rate * np.outer(hidden, output_delta)

        hidden_errors = self._weights_ho @ output_errors
        hidden_delta = hidden_errors * sigmoid_derivative(hidden)
        self._weights_ih += self.learning_rate * np.outer(x, hidden_delta)

        return total_sq_error

    @property
    def weights(self) -> NetworkWeights:
        return NetworkWeights(
            input_hidden=self._weights_ih.copy(),
            hidden_output=self._weights_ho.copy()
        )
