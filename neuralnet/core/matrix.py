"""Dense row-major matrix used by the network engine."""

from __future__ import annotations

from numbers import Real
from typing import Any, Callable, List, Mapping, Sequence

import numpy as np

from .errors import CheckpointParseError, DimensionMismatch, ShapeMismatch
from .types import Array

_FIELDS = ("rows", "cols", "data")


def _check_dim(name: str, value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, np.integer)) or value < 0:
        raise DimensionMismatch(f"{name} must be a non-negative integer, got {value!r}")
    return int(value)


class Matrix:
    """Immutable-by-convention 2D float64 container.

    Every operation returns a new :class:`Matrix`; operands are never
    modified and results never share storage with them.
    """

    __slots__ = ("rows", "cols", "_values")

    def __init__(self, rows: int, cols: int, data: Sequence[float] | Array) -> None:
        rows = _check_dim("rows", rows)
        cols = _check_dim("cols", cols)
        try:
            flat = np.array(data, dtype=np.float64).reshape(-1)
        except (TypeError, ValueError) as exc:
            raise DimensionMismatch(
                f"Matrix data must be a flat sequence of numbers: {exc}"
            ) from exc
        if flat.size != rows * cols:
            raise DimensionMismatch(
                f"Matrix of shape ({rows}, {cols}) needs {rows * cols} values, got {flat.size}"
            )
        self.rows = rows
        self.cols = cols
        self._values = flat.reshape(rows, cols)

    # ------------------------------------------------------------------
    # Constructors

    @classmethod
    def _wrap(cls, values: Array) -> "Matrix":
        out = cls.__new__(cls)
        out.rows, out.cols = (int(n) for n in values.shape)
        out._values = np.ascontiguousarray(values, dtype=np.float64)
        return out

    @classmethod
    def random(
        cls, rows: int, cols: int, rng: np.random.Generator | None = None
    ) -> "Matrix":
        """Return a ``rows x cols`` matrix drawn uniformly from ``[-1, 1]``."""

        rows = _check_dim("rows", rows)
        cols = _check_dim("cols", cols)
        rng = rng if rng is not None else np.random.default_rng()
        return cls._wrap(rng.uniform(-1.0, 1.0, size=(rows, cols)))

    @classmethod
    def from_vector(cls, vector: Sequence[float] | Array) -> "Matrix":
        """Build a column matrix from a flat vector."""

        flat = np.array(vector, dtype=np.float64).reshape(-1)
        return cls._wrap(flat.reshape(flat.size, 1))

    @classmethod
    def zeros(cls, rows: int, cols: int) -> "Matrix":
        return cls._wrap(np.zeros((_check_dim("rows", rows), _check_dim("cols", cols))))

    # ------------------------------------------------------------------
    # Accessors

    @property
    def shape(self) -> tuple[int, int]:
        return (self.rows, self.cols)

    @property
    def data(self) -> List[float]:
        """Row-major flat copy of the values."""

        return self._values.reshape(-1).tolist()

    def to_numpy(self) -> Array:
        return self._values.copy()

    def is_column(self) -> bool:
        return self.cols == 1

    # ------------------------------------------------------------------
    # Arithmetic

    def _require_same_shape(self, other: "Matrix", op: str) -> None:
        if self.shape != other.shape:
            raise ShapeMismatch(
                f"Cannot {op} matrices of shape {self.shape} and {other.shape}"
            )

    def dot(self, other: "Matrix") -> "Matrix":
        """Matrix product ``self @ other``."""

        if self.cols != other.rows:
            raise ShapeMismatch(
                f"Cannot multiply {self.shape} by {other.shape}: "
                f"{self.cols} columns vs {other.rows} rows"
            )
        return Matrix._wrap(self._values @ other._values)

    def add(self, other: "Matrix") -> "Matrix":
        self._require_same_shape(other, "add")
        return Matrix._wrap(self._values + other._values)

    def subtract(self, other: "Matrix") -> "Matrix":
        self._require_same_shape(other, "subtract")
        return Matrix._wrap(self._values - other._values)

    def multiply(self, other: "Matrix") -> "Matrix":
        """Elementwise (Hadamard) product."""

        self._require_same_shape(other, "multiply")
        return Matrix._wrap(self._values * other._values)

    def scale(self, factor: float) -> "Matrix":
        return Matrix._wrap(self._values * float(factor))

    def transpose(self) -> "Matrix":
        return Matrix._wrap(self._values.T.copy())

    def apply(self, fn: Callable[[Array], Array]) -> "Matrix":
        """Apply an elementwise array function to all values at once."""

        mapped = np.array(fn(self._values), dtype=np.float64)
        if mapped.shape != self._values.shape:
            raise ShapeMismatch(
                f"Elementwise function changed shape {self.shape} to {mapped.shape}"
            )
        return Matrix._wrap(mapped)

    def map(self, fn: Callable[[float], float]) -> "Matrix":
        """Apply a scalar ``fn`` to every element; see :meth:`apply` for array functions."""

        if self._values.size == 0:
            return Matrix._wrap(self._values.copy())
        mapped = np.vectorize(fn, otypes=[np.float64])(self._values)
        return Matrix._wrap(mapped)

    __add__ = add
    __sub__ = subtract
    __matmul__ = dot

    # ------------------------------------------------------------------
    # Comparison and persistence

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Matrix):
            return NotImplemented
        return self.shape == other.shape and self._values.tobytes() == other._values.tobytes()

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Matrix(rows={self.rows}, cols={self.cols}, data={self.data!r})"

    def copy(self) -> "Matrix":
        return Matrix._wrap(self._values.copy())

    def to_dict(self) -> dict:
        return {"rows": self.rows, "cols": self.cols, "data": self.data}

    @classmethod
    def from_dict(cls, doc: Mapping[str, Any]) -> "Matrix":
        """Decode a ``{"rows", "cols", "data"}`` document."""

        if not isinstance(doc, Mapping):
            raise CheckpointParseError(f"Matrix document must be an object, got {type(doc).__name__}")
        keys = set(doc)
        if keys != set(_FIELDS):
            missing = sorted(set(_FIELDS) - keys)
            unknown = sorted(keys - set(_FIELDS))
            raise CheckpointParseError(
                f"Malformed matrix document (missing={missing}, unknown={unknown})"
            )
        data = doc["data"]
        if not isinstance(data, list) or not all(
            isinstance(v, Real) and not isinstance(v, bool) for v in data
        ):
            raise CheckpointParseError("Matrix 'data' must be a list of numbers")
        try:
            return cls(doc["rows"], doc["cols"], data)
        except DimensionMismatch as exc:
            raise CheckpointParseError(f"Malformed matrix document: {exc}") from exc


__all__ = ["Matrix"]
