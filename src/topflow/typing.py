import os
from collections.abc import AsyncIterable, Iterable
from typing import TextIO, TypeAlias

# --- Shared type aliases --- #
TopologyField: TypeAlias = list[str]  # raw, trimmed lines of one section

# A file path, an open text stream, or anything yielding lines (sync or async)
LineSource: TypeAlias = str | os.PathLike[str] | TextIO | Iterable[str] | AsyncIterable[str]
