"""Intermediate value model used while merging fragments."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict


class MergeKind(Enum):
    """Shape of a mergeable value."""
    OBJECT = "object"
    LIST = "list"
    PRIMITIVE = "primitive"


@dataclass
class MergeableValue:
    """
    Object, sparse list or primitive awaiting merge.

    Objects keep field insertion order. Lists map literal indices to
    values and leave gaps unfilled until ``to_value`` materializes them.
    """

    kind: MergeKind
    fields: Dict[str, "MergeableValue"] = field(default_factory=dict)
    items: Dict[int, "MergeableValue"] = field(default_factory=dict)
    value: Any = None

    @classmethod
    def object(cls, fields: Dict[str, "MergeableValue"] = None) -> "MergeableValue":
        return cls(kind=MergeKind.OBJECT, fields=dict(fields or {}))

    @classmethod
    def sparse_list(cls, items: Dict[int, "MergeableValue"] = None) -> "MergeableValue":
        return cls(kind=MergeKind.LIST, items=dict(items or {}))

    @classmethod
    def primitive(cls, value: Any) -> "MergeableValue":
        return cls(kind=MergeKind.PRIMITIVE, value=value)

    def clone(self) -> "MergeableValue":
        """Copy this node's own containers; children are shared."""
        return MergeableValue(
            kind=self.kind,
            fields=dict(self.fields),
            items=dict(self.items),
            value=self.value
        )

    def to_value(self) -> Any:
        """
        Materialize into the plain value model.

        Lists become dense over ``[0, max_index]`` with None in the gaps;
        an empty sparse list becomes ``[]``.
        """
        if self.kind == MergeKind.OBJECT:
            return {key: child.to_value() for key, child in self.fields.items()}
        if self.kind == MergeKind.LIST:
            if not self.items:
                return []
            dense = [None] * (max(self.items) + 1)
            for index, child in self.items.items():
                dense[index] = child.to_value()
            return dense
        return self.value
