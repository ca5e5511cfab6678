import logging
from collections import namedtuple

import numpy as np

from tinymlp.matrix import Matrix, DimensionError

logger = logging.getLogger(__name__)

# exp() overflows float64 just past 709
SIGMOID_CLIP = 500.0

EpochReport = namedtuple("EpochReport", ["epoch", "train_loss", "val_loss"])


def sigmoid(m: Matrix) -> Matrix:
    x = np.clip(m.data.astype(np.float64), -SIGMOID_CLIP, SIGMOID_CLIP)
    return Matrix(1.0 / (1.0 + np.exp(-x)))


def sigmoid_derivative(s: Matrix) -> Matrix:
    """Derivative of the sigmoid expressed through its output: s * (1 - s)."""
    return Matrix(s.data * (1.0 - s.data))


class Network:
    """Fully-connected feed-forward network with sigmoid activations.

    Trained with full-batch gradient descent on the squared error. Layer ``i``
    holds a ``layer_sizes[i+1] x layer_sizes[i]`` weight matrix and a
    ``layer_sizes[i+1] x 1`` bias column.
    """

    def __init__(self, layer_sizes, learning_rate=0.01, rng=None):
        layer_sizes = [int(n) for n in layer_sizes]
        if len(layer_sizes) < 2:
            raise ValueError(f"Need at least an input and an output layer, got {layer_sizes}")
        if any(n <= 0 for n in layer_sizes):
            raise ValueError(f"Layer sizes must be positive, got {layer_sizes}")

        self.layer_sizes = layer_sizes
        self.learning_rate = learning_rate
        rng = rng if rng is not None else np.random.default_rng()

        self.weights = []
        self.biases = []
        for n_in, n_out in zip(layer_sizes[:-1], layer_sizes[1:]):
            self.weights.append(Matrix.random(n_out, n_in, rng=rng))
            self.biases.append(Matrix.random(n_out, 1, rng=rng))

        logger.debug("Built network %s with learning rate %s", layer_sizes, learning_rate)

    def parameters(self):
        for w, b in zip(self.weights, self.biases):
            yield w
            yield b

    def _check_input(self, x: Matrix):
        if x.shape != (self.layer_sizes[0], 1):
            raise DimensionError(
                f"Expected a {self.layer_sizes[0]}x1 input column, got {x.rows}x{x.cols}"
            )

    def _check_target(self, y: Matrix):
        if y.shape != (self.layer_sizes[-1], 1):
            raise DimensionError(
                f"Expected a {self.layer_sizes[-1]}x1 target column, got {y.rows}x{y.cols}"
            )

    @staticmethod
    def _check_dataset(inputs, targets):
        if len(inputs) != len(targets):
            raise DimensionError(
                f"Got {len(inputs)} inputs but {len(targets)} targets"
            )
        if not inputs:
            raise DimensionError("Dataset is empty")

    def forward(self, x: Matrix) -> Matrix:
        self._check_input(x)
        activation = x
        for w, b in zip(self.weights, self.biases):
            activation = sigmoid(w * activation + b)
        return activation

    def _forward_cached(self, x: Matrix):
        """Forward pass keeping every layer's activation, input included."""
        activations = [x]
        activation = x
        for w, b in zip(self.weights, self.biases):
            linear = w * activation + b
            activation = sigmoid(linear)
            activations.append(activation)
        return activations

    def _backward(self, activations, error):
        """Per-layer deltas (dLoss/dPreActivation) for a single sample."""
        deltas = [None] * len(self.weights)
        out = activations[-1]
        deltas[-1] = 2.0 * error.data * sigmoid_derivative(out).data

        for i in range(len(self.weights) - 2, -1, -1):
            upstream = self.weights[i + 1].data.T @ deltas[i + 1]
            deltas[i] = upstream * sigmoid_derivative(activations[i + 1]).data
        return deltas

    def train_with_validation(self, train_inputs, train_targets, val_inputs, val_targets,
                              epochs, verbose=True, log_every=100, on_progress=None):
        """
        Run ``epochs`` rounds of full-batch gradient descent.

        Every epoch walks the training samples in order, sums the per-sample
        gradients and applies one update with the averaged gradient. When
        ``verbose`` is set, every ``log_every`` epochs the mean training loss
        and the validation loss are recorded.

        Returns:
            List of EpochReport records, empty unless ``verbose``.
        """
        self._check_dataset(train_inputs, train_targets)
        for x, y in zip(train_inputs, train_targets):
            self._check_input(x)
            self._check_target(y)
        if verbose:
            self._check_dataset(val_inputs, val_targets)
            for x, y in zip(val_inputs, val_targets):
                self._check_input(x)
                self._check_target(y)

        n_samples = len(train_inputs)
        history = []

        for epoch in range(epochs):
            total_loss = 0.0
            weight_grads = [np.zeros(w.shape) for w in self.weights]
            bias_grads = [np.zeros(b.shape) for b in self.biases]

            for x, y in zip(train_inputs, train_targets):
                activations = self._forward_cached(x)
                error = activations[-1] - y
                total_loss += float(np.sum(error.data * error.data))

                deltas = self._backward(activations, error)
                for i, delta in enumerate(deltas):
                    weight_grads[i] += delta @ activations[i].data.T
                    bias_grads[i] += delta

            for w, b, gw, gb in zip(self.weights, self.biases, weight_grads, bias_grads):
                w.data -= self.learning_rate * (gw / n_samples)
                b.data -= self.learning_rate * (gb / n_samples)

            if verbose and epoch % log_every == 0:
                report = EpochReport(
                    epoch=epoch,
                    train_loss=total_loss / n_samples,
                    val_loss=self.evaluate(val_inputs, val_targets),
                )
                history.append(report)
                if on_progress is not None:
                    on_progress(report)

        return history

    def evaluate(self, inputs, targets):
        """Mean over samples of the summed squared error."""
        self._check_dataset(inputs, targets)
        total_loss = 0.0
        for x, y in zip(inputs, targets):
            self._check_target(y)
            error = self.forward(x) - y
            total_loss += float(np.sum(error.data * error.data))
        return total_loss / len(inputs)

    def calculate_accuracy(self, inputs, targets, threshold=0.5):
        """Fraction of samples whose every thresholded output matches its target."""
        self._check_dataset(inputs, targets)
        correct = 0
        for x, y in zip(inputs, targets):
            self._check_target(y)
            output = self.forward(x)
            predicted = np.where(output.data > threshold, 1.0, 0.0)
            if np.all(np.abs(predicted - y.data) <= 0.1):
                correct += 1
        return correct / len(inputs)
