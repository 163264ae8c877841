"""Operation schemas for image pipelines.

An operation is one transformation step applied to an image. The set of
operations is closed: every operation is exactly one of Resize, Filter or
Watermark, distinguished by the ``op`` field.

The integer value of each enum member is the value carried on the wire.
Adding a member means adding a new integer, never reusing an existing one.
"""

from enum import IntEnum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, BeforeValidator, Field, PlainSerializer, StrictInt

UINT32_MAX = 2**32 - 1

UInt32 = Annotated[StrictInt, Field(ge=0, le=UINT32_MAX)]


class _WireEnum(IntEnum):
    """IntEnum whose zero-valued member is the fallback for unknown values."""

    @classmethod
    def resolve(cls, value: int) -> "_WireEnum":
        """Return the member for *value*, or the zero-valued default member.

        Examples:
            >>> FilterKind.resolve(3)
            <FilterKind.MARINE: 3>
            >>> FilterKind.resolve(42)
            <FilterKind.UNSPECIFIED: 0>
        """
        try:
            return cls(value)
        except ValueError:
            return cls(0)


class ResizeType(_WireEnum):
    NORMAL = 0
    SEAM_CARVE = 1


class SampleFilter(_WireEnum):
    """Interpolation used when resizing."""

    UNDEFINED = 0
    NEAREST = 1
    TRIANGLE = 2
    CATMULL_ROM = 3
    GAUSSIAN = 4
    LANCZOS3 = 5


class FilterKind(_WireEnum):
    """Named color filters."""

    UNSPECIFIED = 0
    OCEANIC = 1
    ISLANDS = 2
    MARINE = 3

    @property
    def display_name(self) -> str | None:
        """Lowercase filter name, or None when no filter is applied."""
        if self is FilterKind.UNSPECIFIED:
            return None
        return self.name.lower()


def _named(enum_type):
    """Enum field type that reads and writes member names in JSON.

    Validation accepts a member, its integer value, or its name in any case
    with ``-`` or ``_`` separators (``"catmull-rom"``). JSON output uses the
    lowercase name; Python output keeps the member.
    """

    def parse(value):
        if isinstance(value, str):
            key = value.strip().replace("-", "_").upper()
            if key not in enum_type.__members__:
                raise ValueError(f"unknown {enum_type.__name__} {value!r}")
            return enum_type[key]
        return value

    return Annotated[
        enum_type,
        BeforeValidator(parse),
        PlainSerializer(lambda member: member.name.lower(), return_type=str, when_used="json"),
    ]


ResizeTypeField = _named(ResizeType)
SampleFilterField = _named(SampleFilter)
FilterKindField = _named(FilterKind)


class Resize(BaseModel):
    """Resize the image to width x height.

    Attributes:
        width: Target width in pixels
        height: Target height in pixels
        resize_type: Plain resampling or content-aware seam carving
        sample_filter: Interpolation filter (ignored for seam carving)
    """

    op: Literal["resize"] = "resize"
    width: UInt32 = 0
    height: UInt32 = 0
    resize_type: ResizeTypeField = ResizeType.NORMAL
    sample_filter: SampleFilterField = SampleFilter.UNDEFINED

    model_config = {"frozen": True}

    @classmethod
    def normal(cls, width: int, height: int, sample_filter: SampleFilter) -> "Resize":
        return cls(
            width=width,
            height=height,
            resize_type=ResizeType.NORMAL,
            sample_filter=sample_filter,
        )

    @classmethod
    def seam_carve(cls, width: int, height: int) -> "Resize":
        """Seam-carving resize; the sampling filter is always UNDEFINED."""
        return cls(
            width=width,
            height=height,
            resize_type=ResizeType.SEAM_CARVE,
            sample_filter=SampleFilter.UNDEFINED,
        )


class Filter(BaseModel):
    """Apply a named color filter."""

    op: Literal["filter"] = "filter"
    filter: FilterKindField = FilterKind.UNSPECIFIED

    model_config = {"frozen": True}

    @classmethod
    def of(cls, kind: FilterKind) -> "Filter":
        return cls(filter=kind)

    @property
    def display_name(self) -> str | None:
        return self.filter.display_name


class Watermark(BaseModel):
    """Stamp a watermark with its top-left corner at (x, y)."""

    op: Literal["watermark"] = "watermark"
    x: UInt32 = 0
    y: UInt32 = 0

    model_config = {"frozen": True}

    @classmethod
    def at(cls, x: int, y: int) -> "Watermark":
        return cls(x=x, y=y)


Operation = Annotated[Union[Resize, Filter, Watermark], Field(discriminator="op")]
