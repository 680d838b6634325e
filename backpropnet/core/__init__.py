"""Core numerical primitives for backpropnet."""

from . import activations, layers, ops, sources, types

__all__ = ["activations", "layers", "ops", "sources", "types"]
