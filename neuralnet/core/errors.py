"""Typed failures raised by the network engine."""

from __future__ import annotations


class NeuralNetError(Exception):
    """Base class for every error raised by :mod:`neuralnet`."""


class DimensionMismatch(NeuralNetError, ValueError):
    """Data does not fit the declared dimensions of a matrix or network."""


class ShapeMismatch(NeuralNetError, ValueError):
    """Two matrix operands have incompatible shapes."""


class UnsupportedCheckpointVersion(NeuralNetError, ValueError):
    """A checkpoint was written with a format version this package cannot read."""

    def __init__(self, version: str, expected: str) -> None:
        super().__init__(
            f"Unsupported checkpoint version: {version!r}. Expected: {expected!r}"
        )
        self.version = version
        self.expected = expected


class CheckpointIOError(NeuralNetError, OSError):
    """A checkpoint file could not be read or written."""


class CheckpointParseError(NeuralNetError, ValueError):
    """A checkpoint document is malformed."""


__all__ = [
    "NeuralNetError",
    "DimensionMismatch",
    "ShapeMismatch",
    "UnsupportedCheckpointVersion",
    "CheckpointIOError",
    "CheckpointParseError",
]
