from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from plotly.colors import hex_to_rgb

from apps.dashboard_config import ALERT_COLOR, BASE_COLOR, HIGH_FILL_OPACITY, LOW_FILL_OPACITY
from apps.ward_counts import RankedExtremes


@dataclass(frozen=True)
class WardStyle:
    color: str
    fill_opacity: float

    @property
    def fill_color(self) -> str:
        red, green, blue = hex_to_rgb(self.color)
        return f"rgba({red},{green},{blue},{self.fill_opacity})"


DEFAULT_LOW = WardStyle(color=BASE_COLOR, fill_opacity=LOW_FILL_OPACITY)
DEFAULT_HIGH = WardStyle(color=BASE_COLOR, fill_opacity=HIGH_FILL_OPACITY)
EXTREME_HIGH = WardStyle(color=ALERT_COLOR, fill_opacity=HIGH_FILL_OPACITY)

STYLE_LABELS = {
    DEFAULT_LOW: "Other wards",
    DEFAULT_HIGH: "Fewest requests",
    EXTREME_HIGH: "Most requests",
}


def style_for(ward_id: int, extremes: RankedExtremes) -> WardStyle:
    # Checked first, so a single ward that is both lowest and highest gets the lowest style.
    if ward_id == extremes.lowest.ward_id:
        return DEFAULT_HIGH
    if ward_id == extremes.highest.ward_id:
        return EXTREME_HIGH
    return DEFAULT_LOW


def styles_for_wards(ward_ids: Iterable[int], extremes: RankedExtremes) -> dict[int, WardStyle]:
    return {ward_id: style_for(ward_id, extremes) for ward_id in ward_ids}
