"""Adapters turning the supported line sources into plain line iterators."""

import asyncio
import os
from collections.abc import AsyncIterable, AsyncIterator, Iterable, Iterator
from pathlib import Path

from topflow.exceptions import ConfigurationError
from topflow.typing import LineSource
from topflow.utils import logger


def describe_source(source: LineSource | None) -> str:
    """Short human readable label of a line source, used in log messages."""
    if source is None:
        return "<in-memory>"
    if isinstance(source, str | os.PathLike):
        return f"'{os.fspath(source)}'"
    name = getattr(source, "name", None)
    if isinstance(name, str):
        return f"'{name}'"
    return f"<{type(source).__name__}>"


def iter_lines(source: LineSource, encoding: str = "utf-8") -> Iterator[str]:
    """Yields the raw lines of a synchronous line source.

    Args:
        source: A file path, an open text stream or any iterable of strings.
        encoding: Encoding used to open file paths.

    Raises:
        FileNotFoundError: If a path source does not exist.
        ConfigurationError: If the source is async-only or of an unsupported type.
    """
    if isinstance(source, str | os.PathLike):
        file_path = Path(source)
        if not file_path.is_file():
            raise FileNotFoundError(f"Topology file not found: {file_path}")
        logger.debug(f"Opening topology file {file_path} ({encoding}).")
        with file_path.open("r", encoding=encoding) as f:
            yield from f
        return

    if isinstance(source, AsyncIterable) and not isinstance(source, Iterable):
        raise ConfigurationError(
            f"Line source {describe_source(source)} is asynchronous; use the async read() instead."
        )

    if isinstance(source, Iterable):
        yield from source
        return

    raise ConfigurationError(f"Unsupported line source type: {type(source).__name__}")


async def aiter_lines(source: LineSource, encoding: str = "utf-8") -> AsyncIterator[str]:
    """Yields the raw lines of any line source, handing control back to the event loop on every fetch."""
    if isinstance(source, AsyncIterable) and not isinstance(source, str | os.PathLike):
        async for line in source:
            yield line
        return

    for line in iter_lines(source, encoding):
        yield line
        await asyncio.sleep(0)
