"""Built-in training data."""

from .examples import Example, get_example, list_examples, register_example

__all__ = ["Example", "get_example", "list_examples", "register_example"]
