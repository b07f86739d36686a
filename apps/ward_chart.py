from __future__ import annotations

import pandas as pd
import plotly.express as px
import plotly.graph_objects as go

from apps.ward_counts import RankedExtremes
from apps.ward_styles import STYLE_LABELS, style_for


def build_ward_chart_frame(ranked: pd.Series, extremes: RankedExtremes) -> pd.DataFrame:
    chart_df = ranked.rename("request_count").reset_index()
    chart_df["ward_display"] = chart_df["ward_id"].map(lambda ward_id: f"Ward {ward_id}")
    chart_df["highlight"] = chart_df["ward_id"].map(lambda ward_id: STYLE_LABELS[style_for(ward_id, extremes)])
    return chart_df


def build_ward_chart(ranked: pd.Series, extremes: RankedExtremes, service_name: str) -> go.Figure:
    """Horizontal bar of ward counts, colored the same way as the map."""
    chart_df = build_ward_chart_frame(ranked, extremes)
    fig_bar = px.bar(
        chart_df,
        x="request_count",
        y="ward_display",
        orientation="h",
        color="highlight",
        color_discrete_map={label: style.fill_color for style, label in STYLE_LABELS.items()},
        title=f"{service_name}: requests by ward",
        labels={"request_count": "Requests", "ward_display": "Ward", "highlight": ""},
    )
    chart_height = min(1400, max(560, int(len(chart_df) * 22)))
    fig_bar.update_layout(height=chart_height)
    fig_bar.update_yaxes(type="category", categoryorder="array", categoryarray=chart_df["ward_display"].tolist())
    return fig_bar
