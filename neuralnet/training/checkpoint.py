"""Checkpoint persistence for networks and their training metadata.

A checkpoint is a JSON document with exactly two top-level keys,
``metadata`` and ``network``.  Encoding uses sorted keys and a fixed indent so
identical inputs always produce byte-identical files, and floats are written
at full ``repr`` precision so a save/load cycle is bit-exact.
"""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from numbers import Real
from pathlib import Path
from typing import Any, Mapping

from ..core.errors import (
    CheckpointIOError,
    CheckpointParseError,
    UnsupportedCheckpointVersion,
)
from ..core.network import Network

logger = logging.getLogger(__name__)

CHECKPOINT_VERSION = "1.0"

_TOP_LEVEL = ("metadata", "network")
_METADATA_FIELDS = (
    "version",
    "example",
    "epoch",
    "total_epochs",
    "learning_rate",
    "timestamp",
)


def utc_timestamp() -> str:
    """Current UTC time as an ISO-8601 string."""

    return datetime.now(timezone.utc).isoformat()


@dataclass(frozen=True)
class CheckpointMetadata:
    """Training progress recorded alongside a network."""

    version: str
    example: str
    epoch: int
    total_epochs: int
    learning_rate: float
    timestamp: str

    @classmethod
    def create(
        cls,
        example: str,
        epoch: int,
        total_epochs: int,
        learning_rate: float,
        timestamp: str | None = None,
    ) -> "CheckpointMetadata":
        return cls(
            version=CHECKPOINT_VERSION,
            example=example,
            epoch=int(epoch),
            total_epochs=int(total_epochs),
            learning_rate=float(learning_rate),
            timestamp=timestamp if timestamp is not None else utc_timestamp(),
        )

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, doc: Mapping[str, Any]) -> "CheckpointMetadata":
        if not isinstance(doc, Mapping):
            raise CheckpointParseError(
                f"Checkpoint metadata must be an object, got {type(doc).__name__}"
            )
        keys = set(doc)
        if keys != set(_METADATA_FIELDS):
            missing = sorted(set(_METADATA_FIELDS) - keys)
            unknown = sorted(keys - set(_METADATA_FIELDS))
            raise CheckpointParseError(
                f"Malformed checkpoint metadata (missing={missing}, unknown={unknown})"
            )
        for name in ("version", "example", "timestamp"):
            if not isinstance(doc[name], str):
                raise CheckpointParseError(f"Metadata {name!r} must be a string")
        for name in ("epoch", "total_epochs"):
            value = doc[name]
            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                raise CheckpointParseError(
                    f"Metadata {name!r} must be a non-negative integer, got {value!r}"
                )
        learning_rate = doc["learning_rate"]
        if isinstance(learning_rate, bool) or not isinstance(learning_rate, Real):
            raise CheckpointParseError(
                f"Metadata 'learning_rate' must be a number, got {learning_rate!r}"
            )
        return cls(
            version=doc["version"],
            example=doc["example"],
            epoch=doc["epoch"],
            total_epochs=doc["total_epochs"],
            learning_rate=float(learning_rate),
            timestamp=doc["timestamp"],
        )


@dataclass(frozen=True)
class Checkpoint:
    """A network snapshot together with its metadata."""

    metadata: CheckpointMetadata
    network: Network

    def to_dict(self) -> dict:
        return {"metadata": self.metadata.to_dict(), "network": self.network.to_dict()}


def to_checkpoint(network: Network, metadata: CheckpointMetadata) -> Checkpoint:
    """Wrap a deep copy of ``network``; ``network`` itself is left untouched."""

    return Checkpoint(metadata=metadata, network=network.clone())


def from_checkpoint(checkpoint: Checkpoint) -> Network:
    """Return the embedded network if the checkpoint version is supported."""

    version = checkpoint.metadata.version
    if version != CHECKPOINT_VERSION:
        raise UnsupportedCheckpointVersion(version, CHECKPOINT_VERSION)
    return checkpoint.network


def encode_checkpoint(checkpoint: Checkpoint) -> str:
    return json.dumps(checkpoint.to_dict(), sort_keys=True, indent=2)


def _parse_document(text: str) -> tuple[CheckpointMetadata, Mapping[str, Any]]:
    try:
        doc = json.loads(text)
    except json.JSONDecodeError as exc:
        raise CheckpointParseError(f"Checkpoint is not valid JSON: {exc}") from exc
    if not isinstance(doc, dict):
        raise CheckpointParseError(
            f"Checkpoint must be a JSON object, got {type(doc).__name__}"
        )
    keys = set(doc)
    if keys != set(_TOP_LEVEL):
        missing = sorted(set(_TOP_LEVEL) - keys)
        unknown = sorted(keys - set(_TOP_LEVEL))
        raise CheckpointParseError(
            f"Malformed checkpoint (missing={missing}, unknown={unknown})"
        )
    return CheckpointMetadata.from_dict(doc["metadata"]), doc["network"]


def decode_checkpoint(text: str) -> Checkpoint:
    """Parse checkpoint JSON.

    The format version is checked before the network document is decoded, so
    an unsupported version is reported even if the network is unreadable.
    """

    metadata, network_doc = _parse_document(text)
    if metadata.version != CHECKPOINT_VERSION:
        raise UnsupportedCheckpointVersion(metadata.version, CHECKPOINT_VERSION)
    return Checkpoint(metadata=metadata, network=Network.from_dict(network_doc))


def save_checkpoint(
    network: Network, path: str | Path, metadata: CheckpointMetadata
) -> Path:
    """Write ``network`` and ``metadata`` to ``path``, creating parent directories."""

    path = Path(path)
    payload = encode_checkpoint(to_checkpoint(network, metadata))
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(payload, encoding="utf-8")
    except OSError as exc:
        raise CheckpointIOError(f"Failed to write checkpoint to {path}: {exc}") from exc
    logger.debug("Saved checkpoint for epoch %d to %s", metadata.epoch, path)
    return path


def load_checkpoint(path: str | Path) -> tuple[Network, CheckpointMetadata]:
    """Read a checkpoint written by :func:`save_checkpoint`."""

    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise CheckpointParseError(f"Checkpoint {path} is not UTF-8 text") from exc
    except OSError as exc:
        raise CheckpointIOError(f"Failed to read checkpoint from {path}: {exc}") from exc
    checkpoint = decode_checkpoint(text)
    network = from_checkpoint(checkpoint)
    logger.debug("Loaded checkpoint (epoch %d) from %s", checkpoint.metadata.epoch, path)
    return network, checkpoint.metadata


__all__ = [
    "CHECKPOINT_VERSION",
    "Checkpoint",
    "CheckpointMetadata",
    "decode_checkpoint",
    "encode_checkpoint",
    "from_checkpoint",
    "load_checkpoint",
    "save_checkpoint",
    "to_checkpoint",
    "utc_timestamp",
]
