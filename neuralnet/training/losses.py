"""Loss functions reported by the training controller."""

from __future__ import annotations

from typing import Sequence

from ..core.matrix import Matrix
from ..core.network import Network


def squared_error(output: Matrix, target: Matrix) -> float:
    """Return the sum over outputs of ``(target - output) ** 2``."""

    diff = target.subtract(output).to_numpy()
    return float((diff * diff).sum())


def mean_squared_error(
    network: Network,
    inputs: Sequence[Sequence[float]],
    targets: Sequence[Sequence[float]],
) -> float:
    """Mean over samples of the per-sample summed squared error."""

    total = 0.0
    for x, y in zip(inputs, targets):
        output = network.feed_forward(x)
        total += squared_error(output, Matrix.from_vector(y))
    return total / len(inputs)


__all__ = ["squared_error", "mean_squared_error"]
