"""Multi-epoch training with per-epoch observers and periodic checkpoints."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Callable, List, Mapping, Protocol, Sequence, Union

from ..core.network import Network, validate_training_data
from .checkpoint import CheckpointMetadata, load_checkpoint, save_checkpoint
from .losses import mean_squared_error

logger = logging.getLogger(__name__)

DEFAULT_EXAMPLE_NAME = "training"


class EpochObserver(Protocol):
    """Receives ``(epoch, loss, network)`` after every epoch."""

    def on_epoch(self, epoch: int, loss: float, network: Network) -> None:
        ...


EpochCallback = Callable[[int, float, Network], None]
Callback = Union[EpochObserver, EpochCallback]


@dataclass
class TrainingConfig:
    """Settings for one :class:`TrainingController` session."""

    epochs: int
    checkpoint_interval: int | None = None
    checkpoint_path: Path | None = None
    verbose: bool = False
    example_name: str | None = None

    def __post_init__(self) -> None:
        if isinstance(self.epochs, bool) or not isinstance(self.epochs, int) or self.epochs < 0:
            raise ValueError(f"epochs must be a non-negative integer, got {self.epochs!r}")
        if self.checkpoint_interval is not None and (
            isinstance(self.checkpoint_interval, bool)
            or not isinstance(self.checkpoint_interval, int)
            or self.checkpoint_interval <= 0
        ):
            raise ValueError(
                f"checkpoint_interval must be a positive integer, got {self.checkpoint_interval!r}"
            )
        if self.checkpoint_path is not None:
            self.checkpoint_path = Path(self.checkpoint_path)

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> "TrainingConfig":
        """Build a config from a parsed JSON/YAML document."""

        allowed = {f.name for f in fields(cls)}
        unknown = sorted(set(mapping) - allowed)
        if unknown:
            raise ValueError(f"Unknown training config keys: {', '.join(unknown)}")
        if "epochs" not in mapping:
            raise ValueError("Training config requires 'epochs'")
        return cls(**dict(mapping))

    def should_checkpoint(self, epoch: int) -> bool:
        return (
            self.checkpoint_interval is not None
            and self.checkpoint_path is not None
            and epoch % self.checkpoint_interval == 0
        )

    def should_log(self, epoch: int) -> bool:
        if not self.verbose:
            return False
        return self.epochs < 100 or epoch % (self.epochs // 100) == 0


@dataclass(frozen=True)
class TrainingResult:
    """Summary returned by :meth:`TrainingController.train`."""

    epochs: int
    final_loss: float | None
    losses: tuple[float, ...] = ()
    checkpoints: tuple[str, ...] = ()


@dataclass
class TrainingController:
    """Drive a :class:`Network` through ``config.epochs`` online epochs.

    Callbacks run synchronously, in registration order, on the thread calling
    :meth:`train`.  A callback is either an object with an ``on_epoch`` method
    or a plain callable taking ``(epoch, loss, network)``.
    """

    network: Network
    config: TrainingConfig
    callbacks: List[Callback] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.callbacks = list(self.callbacks)

    def add_callback(self, callback: Callback) -> None:
        if not (hasattr(callback, "on_epoch") or callable(callback)):
            raise TypeError(f"Callback {callback!r} has no on_epoch and is not callable")
        self.callbacks.append(callback)

    @classmethod
    def from_checkpoint(cls, path: str | Path, config: TrainingConfig) -> "TrainingController":
        """Resume from ``path``; ``config.epochs`` is the number of additional epochs."""

        network, metadata = load_checkpoint(path)
        logger.info(
            "Resuming '%s' from %s (epoch %d of %d)",
            metadata.example,
            path,
            metadata.epoch,
            metadata.total_epochs,
        )
        return cls(network=network, config=config)

    def train(
        self, inputs: Sequence[Sequence[float]], targets: Sequence[Sequence[float]]
    ) -> TrainingResult:
        validate_training_data(self.network.layers, inputs, targets)
        total = self.config.epochs
        losses: list[float] = []
        written: list[str] = []

        for epoch in range(1, total + 1):
            for x, y in zip(inputs, targets):
                _, state = self.network.forward(x)
                self.network.back_propagate(state, y)

            loss = mean_squared_error(self.network, inputs, targets)
            losses.append(loss)

            if self.config.should_log(epoch):
                logger.info("Epoch %d of %d: loss = %.6f", epoch, total, loss)

            self._emit_epoch(epoch, loss)

            if self.config.should_checkpoint(epoch):
                written.append(str(self._save_checkpoint(epoch)))

        return TrainingResult(
            epochs=total,
            final_loss=losses[-1] if losses else None,
            losses=tuple(losses),
            checkpoints=tuple(written),
        )

    def into_network(self) -> Network:
        return self.network

    # ------------------------------------------------------------------
    # Internal helpers

    def _emit_epoch(self, epoch: int, loss: float) -> None:
        for callback in self.callbacks:
            if hasattr(callback, "on_epoch"):
                callback.on_epoch(epoch, loss, self.network)  # type: ignore[union-attr]
            else:
                callback(epoch, loss, self.network)  # type: ignore[operator]

    def _save_checkpoint(self, epoch: int) -> Path:
        metadata = CheckpointMetadata.create(
            example=self.config.example_name or DEFAULT_EXAMPLE_NAME,
            epoch=epoch,
            total_epochs=self.config.epochs,
            learning_rate=self.network.learning_rate,
        )
        path = save_checkpoint(self.network, self.config.checkpoint_path, metadata)
        logger.info("Checkpoint saved at epoch %d to %s", epoch, path)
        return path


__all__ = [
    "DEFAULT_EXAMPLE_NAME",
    "EpochObserver",
    "TrainingConfig",
    "TrainingController",
    "TrainingResult",
]
