"""Small linear algebra helpers shared by the layers."""

from __future__ import annotations

import numpy as np

from .types import Array, DimensionMismatchError


def inner_product(matrix: Array, vector: Array) -> Array:
    """Matrix-vector product, one dot product per row of ``matrix``."""

    matrix = np.asarray(matrix, dtype=np.float64)
    vector = np.asarray(vector, dtype=np.float64)
    if matrix.ndim != 2 or vector.ndim != 1:
        raise DimensionMismatchError(
            f"Expected a matrix and a vector, got shapes {matrix.shape} and {vector.shape}"
        )
    if matrix.shape[1] != vector.shape[0]:
        raise DimensionMismatchError(
            f"Matrix has {matrix.shape[1]} columns but vector has {vector.shape[0]} entries"
        )
    return matrix @ vector


def transpose(matrix: Array) -> Array:
    """Return a ``(n, m)`` copy of an ``(m, n)`` matrix."""

    matrix = np.asarray(matrix, dtype=np.float64)
    if matrix.ndim != 2:
        raise DimensionMismatchError(f"Expected a matrix, got shape {matrix.shape}")
    return np.ascontiguousarray(matrix.T)


def uniform_weights(rng: np.random.Generator, rows: int, cols: int) -> Array:
    """Independent draws from U[-0.5, 0.5) arranged as a ``rows x cols`` matrix."""

    return rng.uniform(-0.5, 0.5, size=(rows, cols))
