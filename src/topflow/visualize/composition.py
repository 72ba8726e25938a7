from typing import Literal

import plotly.graph_objects as go
from plotly.subplots import make_subplots

from topflow.parsers.top import TopFile
from topflow.visualize.style import apply_development_style, apply_publication_style, sample_colors


def composition_table(top: TopFile) -> list[tuple[str, int, int]]:
    """Summarizes a resolved system as ``(molecule, copies, atoms per copy)`` rows.

    Rows follow the order of ``top.molecule_list``; unresolved molecules are not included.
    """
    rows: list[tuple[str, int, int]] = []
    for name, itps in top.molecule_list:
        atoms_per_copy = len(itps[0].atoms) if itps else 0
        rows.append((name, len(itps), atoms_per_copy))
    return rows


def plot_system_composition(
    top: TopFile,
    title: str = "System Composition",
    style: Literal["development", "publication"] = "development",
) -> go.Figure:
    """
    Plots the number of copies and the total atom count of each resolved molecule type.

    Args:
        top (TopFile): A system topology that has been read.
        title (str, optional): Title of the plot. Defaults to "System Composition".
        style (str, optional): "development" (dark) or "publication". Defaults to "development".

    Returns:
        plotly.graph_objects.Figure: The generated Plotly figure.
    """
    rows = composition_table(top)
    names = [name for name, _, _ in rows]
    copies = [n_copies for _, n_copies, _ in rows]
    atoms = [n_copies * per_copy for _, n_copies, per_copy in rows]
    colors = sample_colors(len(rows))

    # fmt:off
    fig = make_subplots(rows=1, cols=2, subplot_titles=["Molecules", "Atoms"])
    fig.add_trace(go.Bar(x=names, y=copies, marker=dict(color=colors), name="Molecules"), row=1, col=1)
    fig.add_trace(go.Bar(x=names, y=atoms, marker=dict(color=colors), name="Atoms"), row=1, col=2)
    # fmt:on

    fig.update_layout(title=title, showlegend=False)
    fig.update_yaxes(title_text="Count", row=1, col=1)
    fig.update_yaxes(title_text="Count", row=1, col=2)

    if style == "publication":
        apply_publication_style(fig)
    else:
        apply_development_style(fig)
    return fig
