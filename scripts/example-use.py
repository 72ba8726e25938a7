import asyncio
import logging
from pathlib import Path

from topflow.parsers import ItpFile, TopFile
from topflow.utils import logger
from topflow.visualize.composition import plot_system_composition

# logger.setLevel(logging.WARNING)
logger.setLevel(logging.DEBUG)

data_path = Path(__file__).resolve().parents[1] / "data"
system_path = data_path / "topologies" / "ala-water"

run = {
    "split": False,
    "resolve": True,
    "plot": False,
}

if run["split"]:
    # one ITP per [ moleculetype ] of a combined file
    for itp in ItpFile.read_many_sync(system_path / "ions.itp"):
        itp.to_file(system_path / "split" / f"{itp.name.lower()}.itp")

if run["resolve"]:
    top = TopFile(system_path / "topol.top", sorted(system_path.glob("*.itp")))
    asyncio.run(top.read())
    for name, itps in top.molecule_list:
        print(f"{name:<8} x {len(itps):>6}  atoms/copy={len(itps[0].atoms) if itps else 0}")

    if run["plot"]:
        plot_system_composition(top).show()

    top.dispose()
