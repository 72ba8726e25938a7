import asyncio
import re
from pathlib import Path

import pytest

from topflow.config import ParserOptions
from topflow.exceptions import DisposedError
from topflow.parsers import ItpFile, TopFile
from topflow.parsers.sections import HEADLINE_KEY
from topflow.parsers.serialization import aiter_chunks, dumps, render_section

HEADER_PAT = re.compile(r"^\[\s*(\w+)\s*\]$")


def normalize(text: str) -> str:
    """Trims lines, drops blank ones and writes headers as ``[name]``."""
    lines = []
    for line in text.splitlines():
        trimmed = line.strip()
        if not trimmed:
            continue
        match = HEADER_PAT.match(trimmed)
        lines.append(f"[{match.group(1)}]" if match else trimmed)
    return "".join(f"{line}\n" for line in lines)


async def collect(chunks) -> list[str]:
    return [chunk async for chunk in chunks]


# --- Rendering ---


def test_render_section() -> None:
    assert render_section("atoms", ["1 C", "2 O"]) == "[atoms]\n1 C\n2 O\n"
    assert render_section(HEADLINE_KEY, ["; comment"]) == "; comment\n"
    assert render_section("bonds", []) == "[bonds]\n"


def test_dumps_keeps_section_order() -> None:
    text = dumps([("b", ["1"]), ("a", ["2"])])
    assert text == "[b]\n1\n[a]\n2\n"


# --- Round trips ---


def test_round_trip_normalizes_text(water_itp: ItpFile, water_itp_text: str) -> None:
    assert str(water_itp) == normalize(water_itp_text)


def test_round_trip_is_idempotent(alanine_itp: ItpFile) -> None:
    once = alanine_itp.to_string()
    twice = ItpFile.from_string(once).to_string()
    assert once == twice


def test_round_trip_of_system_topology(topology_dir: Path) -> None:
    text = (topology_dir / "system.top").read_text()
    top = TopFile(topology_dir / "system.top")
    top.read_sync()

    assert top.to_string() == normalize(text)
    assert top.to_string().startswith('; generated topology\n#include "amber99.ff/forcefield.itp"\n')


def test_set_field_is_reflected_in_output(alanine_itp: ItpFile) -> None:
    alanine_itp.set_field("bonds", ["1  2  1  0.109  284512.0"])
    assert "[bonds]\n1  2  1  0.109  284512.0\n[virtual_sitesn]" in str(alanine_itp)


# --- Chunked output ---


def test_iter_chunks_one_chunk_per_section(water_itp: ItpFile) -> None:
    chunks = list(water_itp.iter_chunks())

    assert len(chunks) == len(water_itp.sections)
    assert chunks[1] == "[moleculetype]\n; molname   nrexcl\nSOL         2\n"
    assert "".join(chunks) == water_itp.to_string()


@pytest.mark.parametrize("delay", [None, 0.0, 0.001])
def test_paced_chunks_match_eager_output(water_itp: ItpFile, delay: float | None) -> None:
    chunks = asyncio.run(collect(water_itp.aiter_chunks(delay=delay)))
    assert "".join(chunks) == str(water_itp)


def test_paced_chunks_wait_between_sections(monkeypatch: pytest.MonkeyPatch) -> None:
    sections = [("a", ["1"]), ("b", ["2"]), ("c", ["3"])]
    delays: list[float] = []
    real_sleep = asyncio.sleep

    async def recording_sleep(delay: float) -> None:
        delays.append(delay)
        await real_sleep(0)

    monkeypatch.setattr("topflow.parsers.serialization.asyncio.sleep", recording_sleep)
    chunks = asyncio.run(collect(aiter_chunks(sections, delay=0.02)))

    assert chunks == ["[a]\n1\n", "[b]\n2\n", "[c]\n3\n"]
    assert delays == [0.02, 0.02]


def test_default_pace_comes_from_options() -> None:
    itp = ItpFile.from_string("[ a ]\n1\n[ b ]\n2", options=ParserOptions(pace_delay=0.0))
    assert asyncio.run(collect(itp.aiter_chunks())) == ["[a]\n1\n", "[b]\n2\n"]


def test_to_file(alanine_itp: ItpFile, tmp_path: Path) -> None:
    output_path = tmp_path / "out" / "ala.itp"
    alanine_itp.to_file(output_path)

    assert output_path.read_text() == alanine_itp.to_string()
    assert ItpFile.from_string(output_path.read_text()).name_and_count == ("ALA", 3)


def test_to_file_on_disposed_topology_leaves_existing_file(alanine_itp: ItpFile, tmp_path: Path) -> None:
    output_path = tmp_path / "ala.itp"
    output_path.write_text("[atoms]\n1 C\n")
    missing_dir_path = tmp_path / "not_created" / "ala.itp"
    alanine_itp.dispose()

    with pytest.raises(DisposedError):
        alanine_itp.to_file(output_path)
    with pytest.raises(DisposedError):
        alanine_itp.to_file(missing_dir_path)

    assert output_path.read_text() == "[atoms]\n1 C\n"
    assert not missing_dir_path.parent.exists()


def test_round_trip_keeps_control_characters_inside_lines() -> None:
    text = "[ atoms ]\n1 C\x0c2 O\n3 N\x1c4 S\n"
    itp = ItpFile.from_string(text)

    assert itp.atoms == ["1 C\x0c2 O", "3 N\x1c4 S"]
    assert ItpFile.from_string(str(itp)).atoms == itp.atoms
