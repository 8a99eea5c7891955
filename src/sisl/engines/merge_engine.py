"""Merge engine: rebuilds one document from independently parsed fragments."""

import logging
from typing import Any, Dict, Optional, Sequence, Tuple
from ..codec import ValueCodec
from ..config import SislLimits
from ..models import Element, Grouping, MergeKind, MergeableValue
from ..parser import SislParser
from ..types import ErrorCode, ErrorType, MergeEngineInterface, PathStep, SislError


class MergeEngine(MergeEngineInterface):
    """
    Left fold over fragments with a structural merge.

    Objects merge key by key (new keys appended in arrival order), lists
    merge index by index keeping the literal indices, and primitives are
    replaced by the later fragment. Merging an object with a list, or a
    container with a primitive, is a type conflict.
    """

    def __init__(self, codec: Optional[ValueCodec] = None,
                 limits: Optional[SislLimits] = None,
                 logger: Optional[logging.Logger] = None):
        """
        Initialize the merge engine.

        Args:
            codec: Optional ValueCodec used to decode scalars
            limits: Optional limits shared by the parser and codec
            logger: Optional logger instance
        """
        self.limits = limits or (codec.limits if codec else SislLimits())
        self.codec = codec or ValueCodec(self.limits)
        self.parser = SislParser(self.limits)
        self.logger = logger or logging.getLogger(__name__)

    def merge(self, fragments: Sequence[str]) -> Dict[str, Any]:
        """
        Parse, lift and merge fragments in order.

        Args:
            fragments: SISL texts, each a complete document

        Returns:
            The merged dict; ``{}`` when there are no fragments

        Raises:
            SislError: The first parse, decode or type-conflict error,
                with ``context["fragment"]`` set to the failing index
        """
        if not fragments:
            return {}

        merged: Optional[MergeableValue] = None
        for index, text in enumerate(fragments):
            try:
                lifted = self.lift(self.parser.parse(text))
                merged = lifted if merged is None else self.combine(merged, lifted)
            except SislError as e:
                e.context.setdefault("fragment", index)
                self.logger.debug(f"Fragment {index} rejected: {e}")
                raise
            self.logger.debug(f"Merged fragment {index + 1}/{len(fragments)}")

        self.logger.info(f"Merged {len(fragments)} fragments")
        return merged.to_value()

    def merge_groupings(self, groupings: Sequence[Grouping]) -> Dict[str, Any]:
        """Merge already parsed groupings."""
        merged = MergeableValue.object()
        for grouping in groupings:
            merged = self.combine(merged, self.lift(grouping))
        return merged.to_value()

    def lift(self, grouping: Grouping) -> MergeableValue:
        """
        Turn a top-level grouping into a mergeable object.

        Within a single fragment a repeated name replaces the earlier
        value, matching a plain decode.
        """
        fields: Dict[str, MergeableValue] = {}
        for element in grouping:
            fields[element.name] = self._lift_element(element)
        return MergeableValue.object(fields)

    def _lift_element(self, element: Element) -> MergeableValue:
        if element.type_tag == "obj" and isinstance(element.value, Grouping):
            return self.lift(element.value)

        if element.type_tag == "list" and isinstance(element.value, Grouping):
            items: Dict[int, MergeableValue] = {}
            for child in element.value:
                items[self.codec.list_index(child)] = self._lift_element(child)
            return MergeableValue.sparse_list(items)

        # raises for unknown tags and tag/value shape mismatches
        return MergeableValue.primitive(self.codec.decode_element(element))

    def combine(self, left: MergeableValue, right: MergeableValue,
                path: Tuple[PathStep, ...] = ()) -> MergeableValue:
        """
        Merge ``right`` into ``left`` without mutating either.

        Raises:
            SislError: If the two values have different kinds
        """
        if left.kind != right.kind:
            raise SislError(
                f"Type conflict during merge at {format_path(path)}: "
                f"{left.kind.value} vs {right.kind.value}",
                ErrorType.MERGE, ErrorCode.TYPE_CONFLICT,
                context={"path": list(path)}
            )

        if left.kind == MergeKind.OBJECT:
            result = left.clone()
            for key, value in right.fields.items():
                if key in result.fields:
                    result.fields[key] = self.combine(result.fields[key], value, path + (key,))
                else:
                    result.fields[key] = value
            return result

        if left.kind == MergeKind.LIST:
            result = left.clone()
            for index, value in right.items.items():
                if index in result.items:
                    result.items[index] = self.combine(result.items[index], value, path + (index,))
                else:
                    result.items[index] = value
            return result

        return right


def format_path(path: Tuple[PathStep, ...]) -> str:
    """Render a path like ``$.users[3].name``."""
    rendered = "$"
    for step in path:
        if isinstance(step, int):
            rendered += f"[{step}]"
        else:
            rendered += f".{step}"
    return rendered
