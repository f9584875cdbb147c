"""Core typing contracts for the network engine."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, List

import numpy as np

if TYPE_CHECKING:  # pragma: no cover
    from .matrix import Matrix

Array = np.ndarray


@dataclass(frozen=True)
class ActivationState:
    """Layer outputs captured during one forward pass.

    ``layer_outputs[0]`` is the input column and ``layer_outputs[-1]`` the
    network output.  The state belongs to the call that produced it and is
    never stored on the network.
    """

    layer_outputs: List["Matrix"]

    @property
    def output(self) -> "Matrix":
        return self.layer_outputs[-1]


@dataclass(frozen=True)
class ModelDescription:
    """Description of the feed-forward network architecture."""

    layer_dims: List[int]
    activation: str
    learning_rate: float
    weight_shapes: List[tuple[int, int]]
    bias_shapes: List[tuple[int, int]]
    parameter_count: int
