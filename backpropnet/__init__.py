"""backpropnet public API."""

from .core import activations  # noqa: F401
from .core import types  # noqa: F401
from .core.layers import HiddenLayer, Layer, OutputLayer
from .core.sources import InputSource, Source
from .core.types import DimensionMismatchError, UnsetDependencyError
from .network import Network, StepResult
from .pipelines import load_preset, presets, run_demo

__all__ = [
    "Layer",
    "HiddenLayer",
    "OutputLayer",
    "InputSource",
    "Source",
    "Network",
    "StepResult",
    "DimensionMismatchError",
    "UnsetDependencyError",
    "activations",
    "types",
    "load_preset",
    "presets",
    "run_demo",
]
