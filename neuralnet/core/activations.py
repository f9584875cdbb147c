"""Activation functions supported by the network engine."""

from __future__ import annotations

from enum import Enum

import numpy as np

from .types import Array


def sigmoid(x: Array) -> Array:
    """Return the logistic sigmoid of ``x``, elementwise."""

    return 1.0 / (1.0 + np.exp(-x))


def sigmoid_deriv(a: Array) -> Array:
    """Sigmoid derivative written in terms of the activated value ``a``."""

    return a * (1.0 - a)


class Activation(str, Enum):
    """Closed set of activations, persisted by name.

    ``derivative`` always takes the layer's *activated* output, not the
    pre-activation.  Any new member must follow that convention.
    """

    SIGMOID = "sigmoid"

    def function(self, x: Array) -> Array:
        return _TABLE[self][0](x)

    def derivative(self, a: Array) -> Array:
        return _TABLE[self][1](a)

    @classmethod
    def parse(cls, name: str) -> "Activation":
        try:
            return cls(name)
        except ValueError as exc:
            available = ", ".join(member.value for member in cls)
            raise ValueError(
                f"Unknown activation function {name!r}. Available: {available}"
            ) from exc


_TABLE = {
    Activation.SIGMOID: (sigmoid, sigmoid_deriv),
}

SIGMOID = Activation.SIGMOID

__all__ = ["Activation", "SIGMOID", "sigmoid", "sigmoid_deriv"]
