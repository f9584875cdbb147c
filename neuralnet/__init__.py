"""Feed-forward neural network engine public API."""

from .core import activations, errors, types  # noqa: F401
from .core.activations import SIGMOID, Activation
from .core.errors import (
    CheckpointIOError,
    CheckpointParseError,
    DimensionMismatch,
    NeuralNetError,
    ShapeMismatch,
    UnsupportedCheckpointVersion,
)
from .core.matrix import Matrix
from .core.network import Network
from .data.examples import Example, get_example, list_examples
from .training.checkpoint import (
    CHECKPOINT_VERSION,
    Checkpoint,
    CheckpointMetadata,
    from_checkpoint,
    load_checkpoint,
    save_checkpoint,
    to_checkpoint,
)
from .training.controller import TrainingConfig, TrainingController, TrainingResult

__version__ = "1.0.0"

__all__ = [
    "Activation",
    "SIGMOID",
    "Matrix",
    "Network",
    "NeuralNetError",
    "DimensionMismatch",
    "ShapeMismatch",
    "UnsupportedCheckpointVersion",
    "CheckpointIOError",
    "CheckpointParseError",
    "CHECKPOINT_VERSION",
    "Checkpoint",
    "CheckpointMetadata",
    "to_checkpoint",
    "from_checkpoint",
    "save_checkpoint",
    "load_checkpoint",
    "TrainingConfig",
    "TrainingController",
    "TrainingResult",
    "Example",
    "get_example",
    "list_examples",
    "activations",
    "errors",
    "types",
]
