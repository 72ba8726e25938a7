"""
Plotting style definitions for topology overview figures.
"""

from typing import Any

import plotly.colors
import plotly.graph_objects as go

# -----------------------------------------------------------------------------
# Style parameters
# -----------------------------------------------------------------------------

FONT_FAMILY = "Helvetica"
FONT_COLOR = "#333333"

FONT_SIZES: dict[str, int] = {
    "title": 20,
    "axis_title": 16,
    "tick_label": 14,
    "legend": 12,
    "subplot_title": 14,
}

AXIS_STYLE: dict[str, Any] = {
    "showgrid": True,
    "gridwidth": 1,
    "gridcolor": "#E7E7E7",
    "zeroline": False,
    "linewidth": 2,
    "linecolor": "#333333",
}

LAYOUT_STYLE: dict[str, Any] = {
    "plot_bgcolor": "#FBFCFF",
    "paper_bgcolor": "#FBFCFF",
    "margin": dict(t=60, b=40, r=40),
}

DEVELOPMENT_STYLE: dict[str, Any] = {
    "template": "plotly_dark",
    "plot_bgcolor": "black",
    "paper_bgcolor": "black",
    "font": dict(color="white"),
}

# -----------------------------------------------------------------------------
# Color utilities
# -----------------------------------------------------------------------------


def sample_colors(n: int, palette: str = "Plotly") -> list[str]:
    """Returns ``n`` colors from a qualitative plotly palette, cycling if needed.

    Args:
        n: Number of colors
        palette: Name of a palette in ``plotly.colors.qualitative``
    """
    colors = getattr(plotly.colors.qualitative, palette)
    return [colors[i % len(colors)] for i in range(n)]


# -----------------------------------------------------------------------------
# Styling functions
# -----------------------------------------------------------------------------


def get_font_dict(size: int, bold: bool = False) -> dict[str, Any]:
    return dict(
        family=FONT_FAMILY,
        size=size,
        color=FONT_COLOR,
        weight="bold" if bold else None,
    )


def apply_publication_style(fig: go.Figure, **kwargs: Any) -> None:
    """Apply publication-quality fonts, axes and background to a figure.

    Args:
        fig: A plotly figure
        **kwargs: Additional layout parameters to override defaults
    """
    fig.update_layout(font=get_font_dict(FONT_SIZES["tick_label"]))
    if fig.layout.annotations:
        for annotation in fig.layout.annotations:
            annotation.update(font=get_font_dict(FONT_SIZES["subplot_title"], bold=True))

    fig.update_xaxes(
        AXIS_STYLE,
        title_font=get_font_dict(FONT_SIZES["axis_title"], bold=True),
        tickfont=get_font_dict(FONT_SIZES["tick_label"]),
    )
    fig.update_yaxes(
        AXIS_STYLE,
        title_font=get_font_dict(FONT_SIZES["axis_title"], bold=True),
        tickfont=get_font_dict(FONT_SIZES["tick_label"]),
    )

    layout_style: dict[str, Any] = LAYOUT_STYLE.copy()
    layout_style.update(kwargs)
    fig.update_layout(layout_style, legend=dict(font=get_font_dict(FONT_SIZES["legend"])))


def apply_development_style(fig: go.Figure) -> None:
    """Apply dark theme development styling to a figure."""
    fig.update_layout(**DEVELOPMENT_STYLE)
