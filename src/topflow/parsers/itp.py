"""Reader for GROMACS molecule topologies (``.itp`` files).

An ``ItpFile`` keeps every non-blank line of its input, trimmed, grouped by the
section it appeared in. Nothing is interpreted while reading; the few derived
values (molecule name and count) are computed on access from the stored lines.
"""

import re
from collections.abc import AsyncIterator, Iterable, Iterator, Sequence
from pathlib import Path
from typing import TypeVar

from topflow.config import DEFAULT_OPTIONS, ParserOptions
from topflow.exceptions import ConfigurationError, DisposedError, MalformedCountError
from topflow.parsers import serialization
from topflow.parsers.sections import HEADLINE_KEY, Decision, LineKind, SectionStore, classify
from topflow.parsers.sources import aiter_lines, describe_source, iter_lines
from topflow.typing import LineSource, TopologyField
from topflow.utils import logger

T_Itp = TypeVar("T_Itp", bound="ItpFile")

MOLECULETYPE = "moleculetype"
ATOMS = "atoms"
BONDS = "bonds"
VIRTUAL_SITES = "virtual_sitesn"

BLANK_PAT = re.compile(r"\s+")
COMMENT_CHAR = ";"
DIRECTIVE_CHAR = "#"


def data_lines(lines: Iterable[str]) -> Iterator[str]:
    """Yields the lines carrying data, with trailing ``; comments`` removed.

    Comment-only and preprocessor lines are skipped. Used only to interpret
    ``[ moleculetype ]`` and ``[ molecules ]``; stored lines are never altered.
    """
    for line in lines:
        content = line.split(COMMENT_CHAR, 1)[0].strip()
        if not content or content.startswith(DIRECTIVE_CHAR):
            continue
        yield content


def split_name_and_count(line: str) -> tuple[str, str | None]:
    """Splits a ``<name> <count>`` line on whitespace runs."""
    tokens = BLANK_PAT.split(line.strip())
    return tokens[0], tokens[1] if len(tokens) > 1 else None


def parse_count(token: str | None, *, context: str, strict: bool = True) -> int:
    """Parses a molecule count, accepting integer-valued floats such as ``3.0``.

    Args:
        token: The raw count token, None if the line had no second column.
        context: Description of where the token comes from, for messages.
        strict: Raise on failure instead of falling back to 0.

    Raises:
        MalformedCountError: If the token is not an integer-valued number and ``strict`` is set.
    """
    if token is not None:
        try:
            return int(token)
        except ValueError:
            pass
        try:
            value = float(token)
        except ValueError:
            pass
        else:
            if value.is_integer():
                return int(value)

    message = f"Could not parse molecule count {token!r} in {context}."
    if strict:
        logger.error(message)
        raise MalformedCountError(message)
    logger.warning(f"{message} Using 0 instead.")
    return 0


class _MoleculeSplitter:
    """Routes the lines of one stream into a new ItpFile at each ``[ moleculetype ]`` but the first."""

    def __init__(self, options: ParserOptions):
        self.options = options
        self.documents: list[ItpFile] = [ItpFile(options=options)]
        self.current = 0
        self.field = HEADLINE_KEY
        self.seen_moleculetype = False
        self.seen_content = False

    def feed(self, line: str) -> None:
        decision = classify(line, self.field)

        if decision.kind is LineKind.SECTION:
            self.seen_content = True
            if decision.section == MOLECULETYPE:
                if self.seen_moleculetype:
                    self.documents.append(ItpFile(options=self.options))
                    self.current = len(self.documents) - 1
                    logger.debug(f"New [ moleculetype ] found, starting molecule #{self.current + 1}.")
                else:
                    self.seen_moleculetype = True
        elif decision.kind is LineKind.CONTENT:
            self.seen_content = True
            self.documents[self.current]._store_content(decision)

        self.field = decision.section

    def finish(self) -> list["ItpFile"]:
        if not self.seen_content:
            return []
        logger.info(f"Split input into {len(self.documents)} molecule(s).")
        return self.documents


class ItpFile:
    """A molecule topology: raw lines per section plus the ``#include`` directives.

    ``#include`` lines are recorded in ``includes`` and also kept in their
    section, so that serialization reproduces them in place.
    """

    HEADLINE_KEY = HEADLINE_KEY

    def __init__(self, source: LineSource | None = None, *, options: ParserOptions | None = None):
        self.source = source
        self.options = options or DEFAULT_OPTIONS
        self._store = SectionStore()
        self._includes: list[str] = []
        self._disposed = False

    # --- Reading --- #

    @classmethod
    def from_string(cls: type[T_Itp], data: str, *, options: ParserOptions | None = None) -> T_Itp:
        """Parses an in-memory topology synchronously."""
        document = cls(options=options)
        field = HEADLINE_KEY
        for line in data.split("\n"):
            field = document._read_line(line, field)
        return document

    @classmethod
    async def read_many(cls, source: LineSource, *, options: ParserOptions | None = None) -> list["ItpFile"]:
        """Reads a stream holding several molecules, one ItpFile per ``[ moleculetype ]``.

        Content found before the first ``[ moleculetype ]`` belongs to the first molecule.
        An input without any non-blank line gives an empty list.
        """
        splitter = _MoleculeSplitter(options or DEFAULT_OPTIONS)
        async for line in aiter_lines(source, splitter.options.encoding):
            splitter.feed(line)
        return splitter.finish()

    @classmethod
    def read_many_sync(cls, source: LineSource, *, options: ParserOptions | None = None) -> list["ItpFile"]:
        """Synchronous version of :meth:`read_many`."""
        splitter = _MoleculeSplitter(options or DEFAULT_OPTIONS)
        for line in iter_lines(source, splitter.options.encoding):
            splitter.feed(line)
        return splitter.finish()

    async def read(self) -> None:
        """Reads the whole line source, yielding to the event loop between lines.

        Raises:
            ConfigurationError: If the file was created without a source.
            OSError: If the source fails; sections read so far are kept.
        """
        source = self._require_source()
        logger.info(f"Reading topology from {describe_source(source)}.")

        field = HEADLINE_KEY
        line_num = 0
        try:
            async for line in aiter_lines(source, self.options.encoding):
                line_num += 1
                field = self._read_line(line, field)
        except OSError as e:
            logger.error(f"Could not read {describe_source(source)} after line {line_num}: {e}")
            raise

        logger.debug(f"Read {line_num} lines into {len(self._store)} section(s).")

    def read_sync(self) -> None:
        """Synchronous version of :meth:`read`."""
        source = self._require_source()
        logger.info(f"Reading topology from {describe_source(source)}.")

        field = HEADLINE_KEY
        line_num = 0
        try:
            for line in iter_lines(source, self.options.encoding):
                line_num += 1
                field = self._read_line(line, field)
        except OSError as e:
            logger.error(f"Could not read {describe_source(source)} after line {line_num}: {e}")
            raise

        logger.debug(f"Read {line_num} lines into {len(self._store)} section(s).")

    def _require_source(self) -> LineSource:
        self._check_alive()
        if self.source is None:
            raise ConfigurationError(f"{type(self).__name__} has no line source to read from.")
        return self.source

    def _read_line(self, line: str, current_field: str) -> str:
        """Stores one line and returns the section following it."""
        decision = classify(line, current_field)
        if decision.kind is LineKind.CONTENT:
            self._store_content(decision)
        return decision.section

    def _store_content(self, decision: Decision) -> None:
        assert decision.line is not None
        if decision.is_include:
            self._includes.append(decision.line)
        self._store.append(decision.section, decision.line)

    # --- Fields --- #

    def get_field(self, name: str) -> TopologyField:
        """Returns the lines of a section, or an empty list if it was never written."""
        self._check_alive()
        return self._store.get(name)

    def set_field(self, name: str, data: Sequence[str]) -> None:
        """Replaces the lines of a section (creating it if needed)."""
        self._check_alive()
        self._store.set(name, data)

    @property
    def sections(self) -> list[str]:
        self._check_alive()
        return list(self._store)

    @property
    def headlines(self) -> TopologyField:
        """Lines found before the first section header."""
        return self.get_field(HEADLINE_KEY)

    @property
    def includes(self) -> list[str]:
        self._check_alive()
        return self._includes

    @property
    def atoms(self) -> TopologyField:
        return self.get_field(ATOMS)

    @property
    def bonds(self) -> TopologyField:
        return self.get_field(BONDS)

    @property
    def virtual_sites(self) -> TopologyField:
        return self.get_field(VIRTUAL_SITES)

    # --- Molecule identity --- #

    def _molecule_line(self) -> str | None:
        return next(data_lines(self.get_field(MOLECULETYPE)), None)

    @property
    def name(self) -> str:
        line = self._molecule_line()
        if line is None:
            return ""
        return split_name_and_count(line)[0]

    @property
    def name_and_count(self) -> tuple[str, int]:
        """Name and count from the first data line of ``[ moleculetype ]``; ``("", 0)`` if there is none.

        Raises:
            MalformedCountError: If the count is not an integer and ``options.strict_counts`` is set.
        """
        line = self._molecule_line()
        if line is None:
            return "", 0
        name, count = split_name_and_count(line)
        return name, parse_count(
            count, context=f"[ moleculetype ] of '{name}'", strict=self.options.strict_counts
        )

    @property
    def molecule_count(self) -> int:
        return self.name_and_count[1]

    @property
    def repeat_count(self) -> int:
        return self.molecule_count

    # --- Output --- #

    def to_string(self) -> str:
        self._check_alive()
        return serialization.dumps(self._store.items())

    def __str__(self) -> str:
        return self.to_string()

    def iter_chunks(self) -> Iterator[str]:
        """Yields the serialized topology one section at a time."""
        self._check_alive()
        return serialization.iter_chunks(list(self._store.items()))

    def aiter_chunks(self, delay: float | None = None) -> AsyncIterator[str]:
        """Paced async version of :meth:`iter_chunks`.

        Args:
            delay: Seconds between two sections, defaults to ``options.pace_delay``.
        """
        self._check_alive()
        pause = self.options.pace_delay if delay is None else delay
        return serialization.aiter_chunks(list(self._store.items()), delay=pause)

    def to_file(self, file_path: Path | str) -> None:
        """Writes the serialized topology to a file."""
        text = self.to_string()
        output_path = Path(file_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        with output_path.open("w", encoding=self.options.encoding) as f:
            f.write(text)
        logger.info(f"Wrote topology to {output_path}.")

    # --- Lifecycle --- #

    @property
    def disposed(self) -> bool:
        return self._disposed

    def dispose(self) -> None:
        """Drops every stored line. The file can't be read after this."""
        self._store.clear()
        self._includes = []
        self._disposed = True

    def _check_alive(self) -> None:
        if self._disposed:
            raise DisposedError(f"{type(self).__name__} was disposed; its content can't be accessed anymore.")

    def __repr__(self) -> str:
        if self._disposed:
            return f"{self.__class__.__name__}(<disposed>)"
        return f"{self.__class__.__name__}(name='{self.name}', sections={list(self._store)})"
