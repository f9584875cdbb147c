"""Reporting utilities for training runs."""

from .metrics import JsonlSink, LossHistory
from .plots import PlotAdapter

__all__ = ["JsonlSink", "LossHistory", "PlotAdapter"]
