"""Registry of the built-in logic-gate training examples."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterable, List, MutableMapping, Tuple

_BINARY_INPUTS: Tuple[Tuple[float, ...], ...] = (
    (0.0, 0.0),
    (0.0, 1.0),
    (1.0, 0.0),
    (1.0, 1.0),
)


@dataclass(frozen=True)
class Example:
    """A training problem plus the hyperparameters it is known to train with."""

    name: str
    description: str
    inputs: Tuple[Tuple[float, ...], ...]
    targets: Tuple[Tuple[float, ...], ...]
    recommended_arch: Tuple[int, ...]
    recommended_epochs: int
    recommended_lr: float

    def input_lists(self) -> List[List[float]]:
        return [list(x) for x in self.inputs]

    def target_lists(self) -> List[List[float]]:
        return [list(y) for y in self.targets]


ExampleFactory = Callable[[], Example]

_REGISTRY: MutableMapping[str, ExampleFactory] = {}


def register_example(name: str) -> Callable[[ExampleFactory], ExampleFactory]:
    """Decorator registering an example factory under ``name``."""

    def _decorator(func: ExampleFactory) -> ExampleFactory:
        _REGISTRY[name] = func
        return func

    return _decorator


def _gate(name: str, description: str, outputs: Iterable[float], arch, epochs: int) -> Example:
    return Example(
        name=name,
        description=description,
        inputs=_BINARY_INPUTS,
        targets=tuple((float(y),) for y in outputs),
        recommended_arch=tuple(arch),
        recommended_epochs=epochs,
        recommended_lr=0.5,
    )


@register_example("and")
def _and_gate() -> Example:
    return _gate(
        "and",
        "Logical AND gate - outputs 1 only when both inputs are 1. "
        "This is a linearly separable problem.",
        (0, 0, 0, 1),
        (2, 2, 1),
        5000,
    )


@register_example("or")
def _or_gate() -> Example:
    return _gate(
        "or",
        "Logical OR gate - outputs 1 when at least one input is 1. "
        "This is a linearly separable problem.",
        (0, 1, 1, 1),
        (2, 2, 1),
        5000,
    )


@register_example("xor")
def _xor_gate() -> Example:
    return _gate(
        "xor",
        "Logical XOR gate - outputs 1 when inputs are different. "
        "This is NOT linearly separable and requires a hidden layer.",
        (0, 1, 1, 0),
        (2, 3, 1),
        10000,
    )


def get_example(name: str) -> Example:
    """Return the example registered as ``name``."""

    if name not in _REGISTRY:
        available = ", ".join(list_examples())
        raise KeyError(f"Unknown example {name!r}. Available examples: {available}")
    return _REGISTRY[name]()


def list_examples() -> List[str]:
    """Example names in registration order."""

    return list(_REGISTRY)


__all__ = ["Example", "get_example", "list_examples", "register_example"]
