"""Fully-connected feed-forward network trained by online gradient descent."""

from __future__ import annotations

from dataclasses import dataclass, field
from numbers import Real
from typing import Any, List, Mapping, MutableSequence, Sequence

import numpy as np

from .activations import Activation
from .errors import CheckpointParseError, DimensionMismatch
from .matrix import Matrix
from .types import ActivationState, Array, ModelDescription

_FIELDS = ("layers", "weights", "biases", "activation", "learning_rate")

Vector = Sequence[float]


def _as_column(value: Matrix | Vector | Array, size: int, what: str) -> Matrix:
    matrix = value if isinstance(value, Matrix) else Matrix.from_vector(value)
    if matrix.cols != 1 or matrix.rows != size:
        raise DimensionMismatch(
            f"{what} must be a column of {size} values, got shape {matrix.shape}"
        )
    return matrix


def validate_training_data(
    layers: Sequence[int], inputs: Sequence[Vector], targets: Sequence[Vector]
) -> None:
    """Check that ``inputs``/``targets`` fit a network with ``layers``."""

    if len(inputs) != len(targets):
        raise DimensionMismatch(
            f"Got {len(inputs)} inputs but {len(targets)} targets"
        )
    if len(inputs) == 0:
        raise DimensionMismatch("Training data must contain at least one sample")
    for idx, (x, y) in enumerate(zip(inputs, targets)):
        if len(x) != layers[0]:
            raise DimensionMismatch(
                f"Input {idx} has {len(x)} values, network expects {layers[0]}"
            )
        if len(y) != layers[-1]:
            raise DimensionMismatch(
                f"Target {idx} has {len(y)} values, network expects {layers[-1]}"
            )


@dataclass
class Network:
    """Layered weights and biases with a sigmoid-family activation.

    ``weights[i]`` maps layer ``i`` to layer ``i + 1`` and has shape
    ``(layers[i + 1], layers[i])``; ``biases[i]`` has shape
    ``(layers[i + 1], 1)``.  Use :meth:`new` for a randomly initialised
    network.
    """

    layers: List[int]
    weights: MutableSequence[Matrix] = field(repr=False)
    biases: MutableSequence[Matrix] = field(repr=False)
    activation: Activation = Activation.SIGMOID
    learning_rate: float = 0.5

    def __post_init__(self) -> None:
        layers = list(self.layers)
        if len(layers) < 2:
            raise ValueError(f"A network needs at least 2 layers, got {layers}")
        for size in layers:
            if isinstance(size, bool) or not isinstance(size, (int, np.integer)) or size <= 0:
                raise ValueError(f"Layer sizes must be positive integers, got {layers}")
        self.layers = [int(size) for size in layers]
        if not isinstance(self.activation, Activation):
            self.activation = Activation.parse(self.activation)
        if isinstance(self.learning_rate, bool) or not isinstance(self.learning_rate, Real):
            raise ValueError(f"learning_rate must be a number, got {self.learning_rate!r}")
        if not self.learning_rate > 0:
            raise ValueError(f"learning_rate must be > 0, got {self.learning_rate}")
        self.learning_rate = float(self.learning_rate)
        self.weights = list(self.weights)
        self.biases = list(self.biases)
        self._check_parameters()

    def _check_parameters(self) -> None:
        transitions = len(self.layers) - 1
        if len(self.weights) != transitions or len(self.biases) != transitions:
            raise DimensionMismatch(
                f"Expected {transitions} weight and bias matrices, got "
                f"{len(self.weights)} and {len(self.biases)}"
            )
        for idx, (fan_in, fan_out) in enumerate(zip(self.layers[:-1], self.layers[1:])):
            if self.weights[idx].shape != (fan_out, fan_in):
                raise DimensionMismatch(
                    f"weights[{idx}] has shape {self.weights[idx].shape}, "
                    f"expected {(fan_out, fan_in)}"
                )
            if self.biases[idx].shape != (fan_out, 1):
                raise DimensionMismatch(
                    f"biases[{idx}] has shape {self.biases[idx].shape}, "
                    f"expected {(fan_out, 1)}"
                )

    @classmethod
    def new(
        cls,
        layers: Sequence[int],
        activation: Activation | str = Activation.SIGMOID,
        learning_rate: float = 0.5,
        seed: int | None = None,
    ) -> "Network":
        """Create a network with weights and biases drawn from ``[-1, 1]``."""

        layers = list(layers)
        if len(layers) < 2:
            raise ValueError(f"A network needs at least 2 layers, got {layers}")
        rng = np.random.default_rng(seed)
        weights: list[Matrix] = []
        biases: list[Matrix] = []
        for fan_in, fan_out in zip(layers[:-1], layers[1:]):
            weights.append(Matrix.random(fan_out, fan_in, rng))
            biases.append(Matrix.random(fan_out, 1, rng))
        return cls(
            layers=layers,
            weights=weights,
            biases=biases,
            activation=activation,
            learning_rate=learning_rate,
        )

    # ------------------------------------------------------------------
    # Forward / backward

    def forward(self, inputs: Matrix | Vector | Array) -> tuple[Matrix, ActivationState]:
        """Run a forward pass and return the output with the captured layer outputs."""

        current = _as_column(inputs, self.layers[0], "Input")
        layer_outputs = [current]
        for weight, bias in zip(self.weights, self.biases):
            current = weight.dot(current).add(bias).apply(self.activation.function)
            layer_outputs.append(current)
        return current, ActivationState(layer_outputs=layer_outputs)

    def feed_forward(self, inputs: Matrix | Vector | Array) -> Matrix:
        output, _ = self.forward(inputs)
        return output

    def back_propagate(self, state: ActivationState, targets: Matrix | Vector | Array) -> None:
        """Apply one gradient-descent step for the sample that produced ``state``."""

        outputs = state.layer_outputs
        if len(outputs) != len(self.layers):
            raise DimensionMismatch(
                f"Activation state has {len(outputs)} layers, network has {len(self.layers)}"
            )
        target = _as_column(targets, self.layers[-1], "Target")
        error = target.subtract(state.output)
        derivative = self.activation.derivative
        for idx in reversed(range(len(self.weights))):
            gradient = error.multiply(outputs[idx + 1].apply(derivative))
            delta = gradient.dot(outputs[idx].transpose()).scale(self.learning_rate)
            self.weights[idx] = self.weights[idx].add(delta)
            self.biases[idx] = self.biases[idx].add(gradient.scale(self.learning_rate))
            error = self.weights[idx].transpose().dot(gradient)

    def train(
        self, inputs: Sequence[Vector], targets: Sequence[Vector], epochs: int
    ) -> None:
        """Run ``epochs`` online passes over the samples in their given order."""

        validate_training_data(self.layers, inputs, targets)
        for _ in range(epochs):
            for x, y in zip(inputs, targets):
                _, state = self.forward(x)
                self.back_propagate(state, y)

    # ------------------------------------------------------------------
    # Introspection and persistence

    def clone(self) -> "Network":
        return Network(
            layers=list(self.layers),
            weights=[w.copy() for w in self.weights],
            biases=[b.copy() for b in self.biases],
            activation=self.activation,
            learning_rate=self.learning_rate,
        )

    def parameter_count(self) -> int:
        return int(
            sum(w.rows * w.cols for w in self.weights)
            + sum(b.rows * b.cols for b in self.biases)
        )

    def describe(self) -> ModelDescription:
        return ModelDescription(
            layer_dims=list(self.layers),
            activation=self.activation.value,
            learning_rate=self.learning_rate,
            weight_shapes=[w.shape for w in self.weights],
            bias_shapes=[b.shape for b in self.biases],
            parameter_count=self.parameter_count(),
        )

    def to_dict(self) -> dict:
        return {
            "layers": list(self.layers),
            "weights": [w.to_dict() for w in self.weights],
            "biases": [b.to_dict() for b in self.biases],
            "activation": self.activation.value,
            "learning_rate": self.learning_rate,
        }

    @classmethod
    def from_dict(cls, doc: Mapping[str, Any]) -> "Network":
        """Decode a network document, raising :class:`CheckpointParseError` if malformed."""

        if not isinstance(doc, Mapping):
            raise CheckpointParseError(
                f"Network document must be an object, got {type(doc).__name__}"
            )
        keys = set(doc)
        if keys != set(_FIELDS):
            missing = sorted(set(_FIELDS) - keys)
            unknown = sorted(keys - set(_FIELDS))
            raise CheckpointParseError(
                f"Malformed network document (missing={missing}, unknown={unknown})"
            )
        layers = doc["layers"]
        if not isinstance(layers, list):
            raise CheckpointParseError("Network 'layers' must be a list")
        for name in ("weights", "biases"):
            if not isinstance(doc[name], list):
                raise CheckpointParseError(f"Network {name!r} must be a list")
        weights = [Matrix.from_dict(item) for item in doc["weights"]]
        biases = [Matrix.from_dict(item) for item in doc["biases"]]
        if not isinstance(doc["activation"], str):
            raise CheckpointParseError("Network 'activation' must be a string")
        try:
            return cls(
                layers=layers,
                weights=weights,
                biases=biases,
                activation=doc["activation"],
                learning_rate=doc["learning_rate"],
            )
        except ValueError as exc:
            raise CheckpointParseError(f"Invalid network document: {exc}") from exc


__all__ = ["Network", "validate_training_data"]
