"""Schema definitions for image pipelines."""

from .operation import (
    UINT32_MAX,
    Filter,
    FilterKind,
    Operation,
    Resize,
    ResizeType,
    SampleFilter,
    Watermark,
)
from .pipeline import Pipeline

__all__ = [
    "UINT32_MAX",
    "Filter",
    "FilterKind",
    "Operation",
    "Pipeline",
    "Resize",
    "ResizeType",
    "SampleFilter",
    "Watermark",
]
