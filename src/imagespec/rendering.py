"""Adapters from pipeline values to the rendering engine's native types."""

from enum import Enum
from typing import assert_never

from schemas.operation import FilterKind, SampleFilter


class NativeFilter(Enum):
    """Sampling filters understood by the rendering engine."""

    NEAREST = "nearest"
    TRIANGLE = "triangle"
    CATMULL_ROM = "catmull_rom"
    GAUSSIAN = "gaussian"
    LANCZOS3 = "lanczos3"


def to_native_filter(sample_filter: SampleFilter) -> NativeFilter:
    """Map a pipeline sampling filter to the engine's filter.

    UNDEFINED falls back to nearest-neighbor sampling.
    """
    match sample_filter:
        case SampleFilter.UNDEFINED | SampleFilter.NEAREST:
            return NativeFilter.NEAREST
        case SampleFilter.TRIANGLE:
            return NativeFilter.TRIANGLE
        case SampleFilter.CATMULL_ROM:
            return NativeFilter.CATMULL_ROM
        case SampleFilter.GAUSSIAN:
            return NativeFilter.GAUSSIAN
        case SampleFilter.LANCZOS3:
            return NativeFilter.LANCZOS3
        case _:
            assert_never(sample_filter)


def filter_name(kind: FilterKind) -> str | None:
    """Display name for a color filter, or None when no filter is applied."""
    return kind.display_name
