"""Epoch observers that record training loss."""

from __future__ import annotations

import json
from pathlib import Path
from typing import List, Tuple

from ..core.network import Network


class LossHistory:
    """Keep every ``(epoch, loss)`` pair in memory."""

    def __init__(self) -> None:
        self.history: List[Tuple[int, float]] = []

    def on_epoch(self, epoch: int, loss: float, network: Network) -> None:
        self.history.append((int(epoch), float(loss)))

    @property
    def losses(self) -> List[float]:
        return [loss for _, loss in self.history]

    __call__ = on_epoch


class JsonlSink:
    """Append-only JSONL writer for per-epoch loss."""

    def __init__(self, path: str | Path, *, example: str | None = None) -> None:
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text("")
        self.example = example

    def on_epoch(self, epoch: int, loss: float, network: Network) -> None:
        record = {"epoch": int(epoch), "loss": float(loss)}
        if self.example is not None:
            record["example"] = self.example
        with self.path.open("a", encoding="utf-8") as handle:
            handle.write(json.dumps(record, sort_keys=True) + "\n")

    __call__ = on_epoch


__all__ = ["JsonlSink", "LossHistory"]
