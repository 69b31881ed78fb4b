"""Trace generators for every supported algorithm family."""

from __future__ import annotations

import importlib

from ._base import TraceGenerator, TraceRecorder

# Lazy imports to avoid loading every generator at startup
_GENERATOR_CLASSES: dict[str, str] = {
    "level_order": "level_order.LevelOrderGenerator",
    "inorder": "inorder.InorderGenerator",
    "max_depth": "max_depth.MaxDepthGenerator",
    "invert": "invert.InvertGenerator",
    "symmetric": "symmetric.SymmetricGenerator",
    "kth_smallest": "kth_smallest.KthSmallestGenerator",
    "right_view": "right_view.RightViewGenerator",
    "validate_bst": "validate_bst.ValidateBSTGenerator",
    "max_subarray": "max_subarray.MaxSubarrayGenerator",
    "rotate": "rotate.RotateGenerator",
    "cycle_entry": "cycle_entry.CycleEntryGenerator",
    "intersection": "intersection.IntersectionGenerator",
    "random_copy": "random_copy.RandomCopyGenerator",
}


def get_generator(algorithm: str) -> TraceGenerator:
    """Instantiate the trace generator for *algorithm*.

    Raises ``ValueError`` if *algorithm* has no registered generator.
    """
    spec = _GENERATOR_CLASSES.get(algorithm)
    if spec is None:
        raise ValueError(f"Unknown algorithm: {algorithm}")
    module_name, class_name = spec.split(".")
    mod = importlib.import_module(f".{module_name}", package=__package__)
    cls = getattr(mod, class_name)
    return cls()


def list_algorithms() -> dict[str, tuple[str, ...]]:
    """Map each registered algorithm to its variants, default first."""
    return {name: get_generator(name).VARIANTS for name in _GENERATOR_CLASSES}


SUPPORTED_ALGORITHMS: tuple[str, ...] = tuple(_GENERATOR_CLASSES.keys())

__all__ = [
    "TraceGenerator",
    "TraceRecorder",
    "get_generator",
    "list_algorithms",
    "SUPPORTED_ALGORITHMS",
]
