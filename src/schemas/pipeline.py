"""Pipeline schema: an ordered sequence of operations."""

from collections.abc import Iterable

from pydantic import BaseModel

from .operation import Operation


class Pipeline(BaseModel):
    """An ordered, immutable sequence of image operations.

    Operations are applied in sequence, so order is part of the value:
    two pipelines are equal only if they hold the same operations in the
    same order.

    Attributes:
        operations: The operations, in application order
    """

    operations: tuple[Operation, ...] = ()

    model_config = {"frozen": True}

    @classmethod
    def new(cls, operations: Iterable[Operation]) -> "Pipeline":
        """Build a pipeline holding *operations* verbatim."""
        return cls(operations=tuple(operations))

    def __len__(self) -> int:
        return len(self.operations)
