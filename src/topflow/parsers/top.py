"""Reader for GROMACS system topologies (``.top`` files).

A ``TopFile`` is read like an ``ItpFile`` and then resolved: the
``[ molecules ]`` table is matched against the molecule names of the
supplied ITP files, and each matched ITP is repeated as many times as the
table declares. Repeats are the same ``ItpFile`` object, not copies.
"""

from collections.abc import Iterable, Iterator, Sequence

from topflow.config import ParserOptions
from topflow.parsers.itp import ItpFile, data_lines, parse_count, split_name_and_count
from topflow.parsers.sources import describe_source
from topflow.typing import LineSource, TopologyField
from topflow.utils import logger

MOLECULES = "molecules"
SYSTEM = "system"

ItpSource = LineSource | ItpFile


def parse_molecule_counts(lines: Iterable[str], *, strict: bool = True) -> dict[str, int]:
    """Parses ``[ molecules ]`` lines into a name -> count table.

    A name declared twice keeps its last count.

    Raises:
        MalformedCountError: If a count is not an integer and ``strict`` is set.
    """
    counts: dict[str, int] = {}
    for line in data_lines(lines):
        name, count = split_name_and_count(line)
        value = parse_count(count, context=f"[ molecules ] line '{line}'", strict=strict)
        if name in counts:
            logger.debug(f"Molecule '{name}' declared again in [ molecules ]; keeping the later count {value}.")
        counts[name] = value
    return counts


class TopFile(ItpFile):
    """A system topology resolved against its molecule ITP files."""

    def __init__(
        self,
        source: LineSource | None = None,
        itp_sources: Sequence[ItpSource] = (),
        *,
        options: ParserOptions | None = None,
    ):
        super().__init__(source, options=options)
        self.itp_sources: list[ItpSource] = list(itp_sources)
        self._molecule_counts: dict[str, int] = {}
        self._molecules: dict[str, list[ItpFile]] = {}

    @classmethod
    def from_string(  # type: ignore[override]
        cls,
        data: str,
        itp_sources: Sequence[ItpSource] = (),
        *,
        options: ParserOptions | None = None,
    ) -> "TopFile":
        """Parses an in-memory system topology and resolves it against ``itp_sources`` synchronously."""
        top = super().from_string(data, options=options)
        top.itp_sources = list(itp_sources)
        top._resolve_sync()
        return top

    async def read(self) -> None:
        """Reads the system topology, then every ITP source in order, one after the other."""
        await super().read()
        self._load_molecule_counts()

        for itp, needs_read in self._itp_documents():
            if needs_read:
                await itp.read()
            self._add_molecule(itp)

        self._log_summary()

    def read_sync(self) -> None:
        """Synchronous version of :meth:`read`."""
        super().read_sync()
        self._resolve_sync()

    def _resolve_sync(self) -> None:
        self._load_molecule_counts()

        for itp, needs_read in self._itp_documents():
            if needs_read:
                itp.read_sync()
            self._add_molecule(itp)

        self._log_summary()

    def _load_molecule_counts(self) -> None:
        self._molecule_counts = parse_molecule_counts(self.get_field(MOLECULES), strict=self.options.strict_counts)
        self._molecules = {}

    def _itp_documents(self) -> Iterator[tuple[ItpFile, bool]]:
        """Yields each ITP source as a document, lazily and in order, flagging the ones still to be read."""
        for itp_source in self.itp_sources:
            if isinstance(itp_source, ItpFile):
                yield itp_source, False
            else:
                yield ItpFile(itp_source, options=self.options), True

    def _add_molecule(self, itp: ItpFile) -> None:
        # The count always comes from [ molecules ], never from the ITP itself
        name = itp.name
        if name not in self._molecule_counts:
            logger.debug(f"Skipping molecule '{name}' from {describe_source(itp.source)}: not in [ molecules ].")
            return

        count = self._molecule_counts[name]
        self._molecules.setdefault(name, []).extend(itp for _ in range(count))
        logger.debug(f"Resolved molecule '{name}' x {count}.")

    def _log_summary(self) -> None:
        unresolved = [name for name in self._molecule_counts if name not in self._molecules]
        if unresolved:
            logger.info(f"No ITP supplied for molecule(s): {', '.join(unresolved)}.")
        logger.info(f"Resolved {len(self._molecules)} of {len(self._molecule_counts)} declared molecule type(s).")

    # --- Accessors --- #

    def get_molecule(self, name: str) -> list[ItpFile]:
        """Returns the ITP repeated once per declared molecule, or an empty list if unresolved."""
        self._check_alive()
        return self._molecules.get(name, [])

    @property
    def molecule_list(self) -> list[tuple[str, list[ItpFile]]]:
        self._check_alive()
        return list(self._molecules.items())

    @property
    def molecule_counts(self) -> dict[str, int]:
        """The ``[ molecules ]`` table as declared, resolved or not."""
        self._check_alive()
        return dict(self._molecule_counts)

    @property
    def system(self) -> TopologyField:
        return self.get_field(SYSTEM)

    def dispose(self) -> None:
        """Drops the lines of this file and of every resolved ITP."""
        super().dispose()

        for itps in self._molecules.values():
            for itp in itps:
                itp.dispose()

        self._molecules = {}
        self._molecule_counts = {}
