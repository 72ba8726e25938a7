from pathlib import Path

import pytest

from topflow.parsers import ItpFile

WATER_ITP = """\
; TIP3P water
#include "tip3p_params.itp"

[ moleculetype ]
; molname   nrexcl
SOL         2

[ atoms ]
  1  OW   1  SOL  OW   1  -0.834
  2  HW1  1  SOL  HW1  1   0.417
  3  HW2  1  SOL  HW2  1   0.417

[ settles ]
1  1  0.09572  0.15139
"""

ALANINE_ITP = """\
[ moleculetype ]
ALA  3

[ atoms ]
1  CT  1  ALA  CA  1  0.0
2  HC  1  ALA  HA  1  0.0

[ bonds ]
1  2  1

[ virtual_sitesn ]
3  1  1 2
"""

SYSTEM_TOP = """\
; generated topology
#include "amber99.ff/forcefield.itp"
#include "ala.itp"
#include "water.itp"

[ system ]
Alanine in water

[ molecules ]
; Compound   #mols
ALA          1
SOL          3
NA           2
"""


@pytest.fixture
def water_itp_text() -> str:
    return WATER_ITP


@pytest.fixture
def water_itp() -> ItpFile:
    """Water topology parsed from memory."""
    return ItpFile.from_string(WATER_ITP)


@pytest.fixture
def alanine_itp() -> ItpFile:
    return ItpFile.from_string(ALANINE_ITP)


@pytest.fixture
def topology_dir(tmp_path: Path) -> Path:
    """Writes the system topology and its two ITP files to a temporary directory."""
    (tmp_path / "system.top").write_text(SYSTEM_TOP)
    (tmp_path / "ala.itp").write_text(ALANINE_ITP)
    (tmp_path / "water.itp").write_text(WATER_ITP)
    return tmp_path
