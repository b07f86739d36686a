from __future__ import annotations

from typing import Mapping
import logging

import plotly.graph_objects as go

from apps.dashboard_config import MAP_CENTER, MAP_STYLE, MAP_ZOOM, OUTLINE_WIDTH
from apps.errors import LayerAlreadyBuiltError, NotFoundError
from apps.ward_geometry import Ring
from apps.ward_styles import WardStyle

logger = logging.getLogger(__name__)

RegionHandle = go.Scattermap


def ward_label(ward_id: int) -> str:
    return f"Ward {ward_id}"


def _flatten_rings(rings: list[Ring]) -> tuple[list[float | None], list[float | None]]:
    lons: list[float | None] = []
    lats: list[float | None] = []
    for index, ring in enumerate(rings):
        if index:
            lons.append(None)
            lats.append(None)
        lons.extend(point[0] for point in ring)
        lats.extend(point[1] for point in ring)
    return lons, lats


def build_map_figure() -> go.Figure:
    figure = go.Figure()
    figure.update_layout(
        map={"style": MAP_STYLE, "center": MAP_CENTER, "zoom": MAP_ZOOM},
        margin={"r": 0, "t": 0, "l": 0, "b": 0},
        showlegend=False,
    )
    return figure


class LayerRegistry:
    """Ward id -> polygon trace on one map figure.

    Each ward goes Unbuilt -> Built once through ``ensure_layer``; after that
    only its style changes. Geometry is read at build time and never kept.
    """

    def __init__(self, figure: go.Figure | None = None) -> None:
        self.figure = figure if figure is not None else build_map_figure()
        self._handles: dict[int, RegionHandle] = {}
        self._styles: dict[int, WardStyle] = {}

    def __len__(self) -> int:
        return len(self._handles)

    def is_built(self, ward_id: int) -> bool:
        return ward_id in self._handles

    def built_ward_ids(self) -> list[int]:
        return sorted(self._handles)

    def style_of(self, ward_id: int) -> WardStyle:
        if ward_id not in self._styles:
            raise NotFoundError(f"ward {ward_id} has no layer")
        return self._styles[ward_id]

    def ensure_layer(self, ward_id: int, geometry: list[Ring], style: WardStyle) -> RegionHandle:
        if ward_id in self._handles:
            raise LayerAlreadyBuiltError(f"ward {ward_id} layer already built")

        lons, lats = _flatten_rings(geometry)
        self.figure.add_trace(
            go.Scattermap(
                lon=lons,
                lat=lats,
                mode="lines",
                fill="toself",
                fillcolor=style.fill_color,
                line={"color": style.color, "width": OUTLINE_WIDTH},
                opacity=1,
                name=f"Ward {ward_id}",
                meta={"ward_id": ward_id},
                hoverinfo="text",
                text=ward_label(ward_id),
            )
        )
        handle = self.figure.data[-1]
        self._handles[ward_id] = handle
        self._styles[ward_id] = style
        return handle

    def restyle(self, ward_id: int, style: WardStyle) -> None:
        handle = self._handles.get(ward_id)
        if handle is None:
            raise NotFoundError(f"ward {ward_id} was never built")
        handle.update(fillcolor=style.fill_color, line={"color": style.color})
        self._styles[ward_id] = style

    def restyle_all(self, styles: Mapping[int, WardStyle]) -> None:
        missing = sorted(ward_id for ward_id in styles if ward_id not in self._handles)
        if missing:
            raise NotFoundError(f"wards never built: {missing}")
        for ward_id, style in styles.items():
            self.restyle(ward_id, style)
        logger.debug("step=restyle_all ward_count=%s", len(styles))
