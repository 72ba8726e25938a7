"""Section store and line classifier shared by every topology reader.

A topology file is a flat stream of lines. Bracketed headers such as
``[ atoms ]`` switch the section that following lines are routed into.
``classify`` is the transition function of that small state machine: it
takes the current section and one raw line and returns a ``Decision``
holding the next section and what to do with the line.
"""

import re
from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from enum import Enum

from topflow.typing import TopologyField

# Content that shows up before the first header is stored under this key
HEADLINE_KEY = "_____begin_____"

SECTION_HEADER_PAT = re.compile(r"^\[\s*(\w+)\s*\]$")
INCLUDE_PREFIX = "#include"


class LineKind(Enum):
    IGNORE = "ignore"
    SECTION = "section"
    CONTENT = "content"


@dataclass(frozen=True)
class Decision:
    """Outcome of classifying one line.

    Attributes:
        kind: What the line is.
        section: The current section *after* this line.
        line: The trimmed line for CONTENT decisions, None otherwise.
        is_include: True for CONTENT lines starting with ``#include``.
    """

    kind: LineKind
    section: str
    line: str | None = None
    is_include: bool = False


def classify(line: str, current_section: str) -> Decision:
    """Classifies a raw input line against the current section."""
    trimmed = line.strip()

    if not trimmed:
        return Decision(LineKind.IGNORE, current_section)

    header_match = SECTION_HEADER_PAT.match(trimmed)
    if header_match:
        return Decision(LineKind.SECTION, header_match.group(1).strip())

    return Decision(
        LineKind.CONTENT,
        current_section,
        line=trimmed,
        is_include=trimmed.startswith(INCLUDE_PREFIX),
    )


class SectionStore:
    """Insertion-ordered mapping of section name to its raw lines."""

    def __init__(self) -> None:
        self._data: dict[str, TopologyField] = {}

    def get(self, name: str) -> TopologyField:
        """Returns the lines of ``name`` or an empty list if the section was never written."""
        return self._data.get(name, [])

    def set(self, name: str, lines: Sequence[str]) -> None:
        """Replaces (or creates) a section wholesale."""
        self._data[name] = list(lines)

    def append(self, name: str, line: str) -> None:
        if name in self._data:
            self._data[name].append(line)
        else:
            self._data[name] = [line]

    def clear(self) -> None:
        self._data = {}

    def items(self) -> Iterator[tuple[str, TopologyField]]:
        yield from self._data.items()

    def __contains__(self, name: object) -> bool:
        return name in self._data

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(sections={list(self._data)})"
