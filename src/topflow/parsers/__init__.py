from topflow.parsers.itp import ItpFile
from topflow.parsers.sections import HEADLINE_KEY, SectionStore, classify
from topflow.parsers.top import TopFile, parse_molecule_counts

__all__ = [
    "ItpFile",
    "TopFile",
    "SectionStore",
    "classify",
    "parse_molecule_counts",
    "HEADLINE_KEY",
]
