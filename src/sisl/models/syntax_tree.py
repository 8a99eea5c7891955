"""Ordered syntax tree produced by the parser."""

from dataclasses import dataclass, field
from typing import Iterator, List, Union


@dataclass
class StringValue:
    """
    Quoted string exactly as written in the source.

    ``raw`` keeps escape sequences unprocessed; the value codec
    unescapes it once the type tag is known.
    """

    raw: str


@dataclass
class Grouping:
    """Brace-delimited, ordered sequence of elements."""

    elements: List["Element"] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.elements)

    def __iter__(self) -> Iterator["Element"]:
        return iter(self.elements)

    def names(self) -> List[str]:
        """Element names in source order, duplicates included."""
        return [element.name for element in self.elements]


@dataclass
class Element:
    """A ``name: !type value`` triple."""

    name: str
    type_tag: str
    value: Union[StringValue, Grouping]
    line: int = 0
    column: int = 0

    @property
    def is_grouping(self) -> bool:
        return isinstance(self.value, Grouping)
