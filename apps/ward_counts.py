from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import NamedTuple
import logging
import re

import pandas as pd

from apps.dashboard_config import NUM_DAYS, WARD_COUNT
from apps.errors import DataShapeError

logger = logging.getLogger(__name__)


class WardEntry(NamedTuple):
    ward_id: int
    count: int


@dataclass(frozen=True)
class CountSeries:
    """Raw per-ward counts for one service/week window.

    ``counts`` keeps the order of the count source response: the first entry
    is a citywide aggregate, the following entries are keyed by ward id.
    """

    service_code: str
    week_end: date
    counts: dict[str, int] = field(default_factory=dict)
    num_days: int = NUM_DAYS


@dataclass(frozen=True)
class RankedExtremes:
    lowest: WardEntry
    highest: WardEntry


def _parse_count(key: str, value: object) -> int:
    if isinstance(value, bool):
        raise DataShapeError(f"count for ward {key!r} is not an integer: {value!r}")
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    if not isinstance(value, int):
        raise DataShapeError(f"count for ward {key!r} is not an integer: {value!r}")
    if value < 0:
        raise DataShapeError(f"count for ward {key!r} is negative: {value}")
    return value


def _parse_ward_id(key: object) -> int:
    text = str(key).strip()
    if not re.fullmatch(r"[0-9]+", text):
        raise DataShapeError(f"ward key {key!r} is not an integer")
    ward_id = int(text)
    if not 1 <= ward_id <= WARD_COUNT:
        raise DataShapeError(f"ward key {key!r} outside 1..{WARD_COUNT}")
    return ward_id


def ward_entries(series: CountSeries) -> list[WardEntry]:
    """Drop the aggregate entry and parse the 50 ward entries in response order."""
    items = list(series.counts.items())
    expected = WARD_COUNT + 1
    if len(items) < expected:
        raise DataShapeError(
            f"service={series.service_code} expected {expected} entries "
            f"(aggregate + {WARD_COUNT} wards), got {len(items)}"
        )
    if len(items) > expected:
        logger.warning(
            "step=ignore_extra_entries service=%s entry_count=%s", series.service_code, len(items)
        )

    entries: list[WardEntry] = []
    seen: set[int] = set()
    for key, value in items[1:expected]:
        ward_id = _parse_ward_id(key)
        if ward_id in seen:
            raise DataShapeError(f"ward {ward_id} appears more than once (key {key!r})")
        seen.add(ward_id)
        entries.append(WardEntry(ward_id, _parse_count(key, value)))
    return entries


def ward_counts_frame(series: CountSeries) -> pd.Series:
    entries = ward_entries(series)
    return pd.Series(
        [entry.count for entry in entries],
        index=pd.Index([entry.ward_id for entry in entries], name="ward_id"),
        name="request_count",
        dtype="int64",
    )


def rank_wards(series: CountSeries) -> pd.Series:
    """Ward counts sorted ascending; equal counts keep response order."""
    return ward_counts_frame(series).sort_values(kind="stable")


def extremes_from_ranked(ranked: pd.Series) -> RankedExtremes:
    return RankedExtremes(
        lowest=WardEntry(int(ranked.index[0]), int(ranked.iloc[0])),
        highest=WardEntry(int(ranked.index[-1]), int(ranked.iloc[-1])),
    )


def rank(series: CountSeries) -> RankedExtremes:
    return extremes_from_ranked(rank_wards(series))

