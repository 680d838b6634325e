"""Activation utilities for backpropnet."""

from __future__ import annotations

import numpy as np

from .types import Array


def sigmoid(x: Array) -> Array:
    """Return the logistic activation ``1 / (1 + exp(-x))`` element-wise."""

    x = np.asarray(x, dtype=np.float64)
    with np.errstate(over="ignore"):
        return 1.0 / (1.0 + np.exp(-x))


def sigmoid_deriv(output: Array) -> Array:
    """Derivative of the sigmoid expressed through its output ``o * (1 - o)``."""

    output = np.asarray(output, dtype=np.float64)
    return output * (1.0 - output)
