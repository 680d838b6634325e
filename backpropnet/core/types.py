"""Core typing contracts for backpropnet."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

import numpy as np

Array = np.ndarray


class DimensionMismatchError(ValueError):
    """Raised when a vector or matrix does not have the expected length."""


class UnsetDependencyError(RuntimeError):
    """Raised when a layer is driven before its source or sink is attached."""


@dataclass(frozen=True)
class ModelDescription:
    """Description of the feed-forward chain: input size then one entry per layer."""

    layer_dims: List[int]


@dataclass(frozen=True)
class LayerSnapshot:
    """Copies of a layer's state captured for reporting."""

    kind: str
    weight: Optional[Array]
    output: Array
    error: Array
