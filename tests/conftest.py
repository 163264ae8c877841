"""Pytest fixtures for imagespec tests."""

import pytest

from schemas import Filter, FilterKind, Pipeline, Resize, SampleFilter, Watermark


@pytest.fixture
def resize_and_filter_pipeline():
    """Resize to 600x600 with Catmull-Rom, then apply the marine filter."""
    return Pipeline.new([
        Resize.normal(600, 600, SampleFilter.CATMULL_ROM),
        Filter.of(FilterKind.MARINE),
    ])


@pytest.fixture
def watermark_pipeline():
    return Pipeline.new([Watermark.at(10, 20)])


@pytest.fixture
def mixed_pipeline():
    """Every operation kind, with repeats, in a deliberate order."""
    return Pipeline.new([
        Watermark.at(0, 0),
        Resize.seam_carve(320, 240),
        Filter.of(FilterKind.OCEANIC),
        Resize.normal(2**32 - 1, 1, SampleFilter.LANCZOS3),
        Filter.of(FilterKind.UNSPECIFIED),
        Watermark.at(5, 2**20),
        Filter.of(FilterKind.OCEANIC),
    ])


@pytest.fixture
def resize_bytes():
    """Encoding of a pipeline holding Resize.normal(600, 600, CATMULL_ROM)."""
    return bytes([
        0x0A, 0x0A,              # pipeline.operations, 10 bytes
        0x0A, 0x08,              # operation.resize, 8 bytes
        0x08, 0xD8, 0x04,        # width = 600
        0x10, 0xD8, 0x04,        # height = 600
        0x20, 0x03,              # sample_filter = CATMULL_ROM
    ])
