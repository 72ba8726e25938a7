import asyncio
from collections.abc import AsyncIterator, Iterable, Iterator, Sequence

from topflow.parsers.sections import HEADLINE_KEY

SectionItems = Iterable[tuple[str, Sequence[str]]]


def render_section(name: str, lines: Sequence[str]) -> str:
    """Renders one section as ``[name]`` followed by its lines, newline terminated.

    The headline section (content found before any header) has no header line.
    """
    header = "" if name == HEADLINE_KEY else f"[{name}]\n"
    return header + "".join(f"{line}\n" for line in lines)


def iter_chunks(sections: SectionItems) -> Iterator[str]:
    """Yields the rendered document one section at a time."""
    for name, lines in sections:
        yield render_section(name, lines)


def dumps(sections: SectionItems) -> str:
    """Renders a whole document eagerly."""
    return "".join(iter_chunks(sections))


async def aiter_chunks(sections: SectionItems, delay: float = 0.0) -> AsyncIterator[str]:
    """Yields rendered sections, pausing ``delay`` seconds between two sections.

    The concatenated chunks are identical to ``dumps(sections)``.
    """
    first = True
    for chunk in iter_chunks(sections):
        if not first:
            await asyncio.sleep(delay)
        first = False
        yield chunk
