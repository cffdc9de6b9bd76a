from __future__ import annotations

import numpy as np
import pandas as pd
import plotly.graph_objects as go

from .config import GEOID_PROPERTY, LINE_COLOR, MAP_COLOR_SCALE, STATE_NAME
from .records import DerivedRecord, RecordSet


# ============================================================
# Configuration / constants
# ============================================================

HOVER_TEMPLATE_CLAIMS = (
    "Week ending: %{x}<br>"
    "Claims: %{y:,}<extra></extra>"
)

HOVER_TEMPLATE_MAP = (
    "<b>%{customdata[0]} County</b><br>"
    "Claims: %{customdata[1]:,}<br>"
    "Share of labor force: %{z:.1f}%<br>"
    "Rank: %{customdata[2]}<extra></extra>"
)


# ============================================================
# Helper functions
# ============================================================


def _claims_series(observations: pd.DataFrame, unit_key: str) -> pd.DataFrame:
    """
    Weekly totals for one county, ordered by period, invalid values dropped.
    """
    sub = observations[observations["unit_key"] == unit_key].copy()
    sub["value"] = pd.to_numeric(sub["value"], errors="coerce").astype(float)
    sub = sub[np.isfinite(sub["value"])]
    series = sub.groupby("period", as_index=False)["value"].sum()
    order = pd.to_datetime(series["period"], errors="coerce", format="mixed")
    if order.notna().all():
        series = series.assign(_order=order).sort_values("_order").drop(columns="_order")
    return series.reset_index(drop=True)


# ============================================================
# Main plotting functions
# ============================================================


def create_claims_chart(
    observations: pd.DataFrame,
    record: DerivedRecord,
    *,
    line_color: str = LINE_COLOR,
) -> go.Figure:
    """
    Line chart of weekly unemployment claims for one county.

    Parameters
    ----------
    observations : pd.DataFrame
        Normalized weekly observations with 'unit_key', 'period' and 'value'.
    record : DerivedRecord
        The county's ranked record; used for the title.
    line_color : str
        Hex colour of the line and markers.

    Returns
    -------
    go.Figure
        A single-trace Plotly figure; empty when the county has no rows.
    """
    series = _claims_series(observations, record.unit_key)
    if series.empty:
        return go.Figure()

    fig = go.Figure(
        go.Scatter(
            x=series["period"],
            y=series["value"],
            mode="lines+markers",
            line=dict(width=3, color=line_color),
            marker=dict(size=8, color=line_color),
            name=f"{record.unit_key} County",
            hovertemplate=HOVER_TEMPLATE_CLAIMS,
        )
    )

    fig.update_xaxes(title_text="Week ending")
    fig.update_yaxes(title_text="Unemployment claims", tickformat=",", rangemode="tozero")
    fig.update_layout(
        title=dict(
            text=(
                f"<b>Weekly unemployment claims, {record.unit_key} County</b><br>"
                f"<sup>{record.percent:.1f}% of the labor force, "
                f"{record.ordinal_label} in {STATE_NAME}</sup>"
            ),
            x=0.5,
        ),
        height=500,
        width=900,
        showlegend=False,
        margin=dict(t=100, l=60, r=40, b=50),
        plot_bgcolor="#f5f7fb",
    )
    return fig


def create_choropleth_map(
    record_set: RecordSet,
    geojson: dict,
    *,
    featureidkey: str = f"properties.{GEOID_PROPERTY}",
    color_scale: str = MAP_COLOR_SCALE,
) -> go.Figure:
    """
    State-wide choropleth of claims as a share of labor force.

    Counties are matched to polygons by ``composite_id``; polygons without a
    record are left unfilled.
    """
    df = record_set.to_frame()
    if df.empty:
        return go.Figure()

    fig = go.Figure(
        go.Choropleth(
            geojson=geojson,
            featureidkey=featureidkey,
            locations=df["composite_id"],
            z=df["percent"],
            colorscale=color_scale,
            marker_line_color="white",
            marker_line_width=0.5,
            colorbar=dict(title="% of labor force"),
            customdata=list(
                zip(df["unit_key"], df["total"].round().astype(int), df["ordinal_label"])
            ),
            hovertemplate=HOVER_TEMPLATE_MAP,
        )
    )
    fig.update_geos(fitbounds="locations", visible=False)
    fig.update_layout(
        title=dict(
            text=f"<b>Unemployment claims as a share of labor force, {STATE_NAME}</b>",
            x=0.5,
        ),
        height=600,
        width=1000,
        margin=dict(t=80, l=10, r=10, b=10),
    )
    return fig
