"""Core numerical primitives for the network engine."""

from . import activations, errors, matrix, network, types
from .activations import SIGMOID, Activation
from .matrix import Matrix
from .network import Network

__all__ = [
    "activations",
    "errors",
    "matrix",
    "network",
    "types",
    "Activation",
    "SIGMOID",
    "Matrix",
    "Network",
]
