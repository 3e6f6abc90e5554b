"""Plotly figures for the four dashboard tables."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

import plotly.graph_objects as go
import plotly.io as pio

from .models import AggregateResult, MonthlyEntry, SummaryEntry

COLORS: tuple[str, ...] = ("#0088FE", "#00C49F", "#FFBB28", "#FF8042")
BAR_COLOR = "#8884d8"
CHART_HEIGHT = 300


@dataclass(frozen=True, slots=True)
class ChartPanel:
    """A titled chart ready to be placed on the page."""

    key: str
    title: str
    figure: go.Figure

    def to_html(self) -> str:
        return figure_html(self.figure)


def color_for(index: int) -> str:
    """Return the palette color for the ``index``-th category."""
    return COLORS[index % len(COLORS)]


def _apply_layout(fig: go.Figure) -> go.Figure:
    # Panel headings come from the page template
    fig.update_layout(
        height=CHART_HEIGHT,
        margin={"l": 10, "r": 10, "t": 16, "b": 24},
    )
    return fig


def pie_figure(entries: Sequence[SummaryEntry]) -> go.Figure:
    fig = go.Figure(
        go.Pie(
            labels=[entry.name for entry in entries],
            values=[entry.value for entry in entries],
            marker={"colors": [color_for(i) for i in range(len(entries))]},
            textinfo="value",
            sort=False,
            hoverinfo="label+value",
        )
    )
    return _apply_layout(fig)


def bar_figure(entries: Sequence[MonthlyEntry]) -> go.Figure:
    fig = go.Figure(
        go.Bar(
            x=[entry.name for entry in entries],
            y=[entry.registrations for entry in entries],
            name="registrations",
            marker={"color": BAR_COLOR},
        )
    )
    fig.update_layout(showlegend=True, xaxis={"type": "category"})
    fig.update_yaxes(rangemode="tozero", showgrid=True, griddash="dash")
    return _apply_layout(fig)


def build_panels(result: AggregateResult) -> list[ChartPanel]:
    """Return the four dashboard panels in display order."""
    return [
        ChartPanel("status", "User Activity", pie_figure(result.user_stats)),
        ChartPanel(
            "registrations",
            "Monthly Registrations",
            bar_figure(result.registration_stats),
        ),
        ChartPanel(
            "gender",
            "Gender Distribution",
            pie_figure(result.gender_stats),
        ),
        ChartPanel(
            "approval",
            "Approval Status",
            pie_figure(result.approval_stats),
        ),
    ]


def figure_html(fig: go.Figure) -> str:
    """Render ``fig`` as an HTML fragment; plotly.js is loaded by the page."""
    return pio.to_html(
        fig, include_plotlyjs=False, full_html=False, config={"responsive": True}
    )
