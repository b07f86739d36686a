from __future__ import annotations

from datetime import date
from typing import Awaitable
import asyncio
import logging

import pandas as pd
import streamlit as st

from apps.count_sources import ApiCountSource, CountSource, DuckDBCountSource, default_week_end
from apps.dashboard_config import DB_PATH, NUM_DAYS, SERVICES_PATH, WARD_BOUNDARY_PATH
from apps.errors import CountFetchError, DataShapeError, WardPulseError
from apps.service_catalog import ServiceType, load_service_catalog, lookup_slug
from apps.view_sync import SelectionResult, ViewSynchronizer, page_title
from apps.ward_chart import build_ward_chart
from apps.ward_geometry import WardGeometry, load_ward_geometry

logger = logging.getLogger(__name__)

SOURCE_LABELS = {
    "api": "Live API",
    "snapshot": "DuckDB snapshot",
}


@st.cache_data(ttl=3600, show_spinner=False)
def load_catalog() -> list[ServiceType]:
    return load_service_catalog(SERVICES_PATH)


@st.cache_data(ttl=3600)
def load_geometry() -> WardGeometry:
    return load_ward_geometry(WARD_BOUNDARY_PATH)


def title_for_slug(slug: str | None) -> str:
    """Browser title for a service slug; falls back to the default title."""
    try:
        service = lookup_slug(load_catalog(), slug)
    except WardPulseError:
        service = None
    return page_title(service.name if service is not None else None)


def build_count_source(source_mode: str) -> CountSource:
    if source_mode == "snapshot":
        return DuckDBCountSource(DB_PATH)
    return ApiCountSource()


def render_source_controls() -> tuple[str, date]:
    st.sidebar.header("Filters")
    source_mode = st.sidebar.selectbox(
        "Count source",
        options=list(SOURCE_LABELS.keys()),
        format_func=lambda value: SOURCE_LABELS[value],
        index=0,
    )
    week_end = st.sidebar.date_input("Week ending", value=default_week_end(date.today()))
    st.sidebar.caption(f"Counts cover the {NUM_DAYS} days ending on the selected date.")
    return source_mode, week_end


def get_session(
    state_key: str,
    catalog: list[ServiceType],
    geometry: WardGeometry,
    source_mode: str,
    week_end: date,
) -> ViewSynchronizer:
    """Return the page's session object, creating it on the first run."""
    session = st.session_state.get(state_key)
    if session is None:
        session = ViewSynchronizer(
            catalog=catalog,
            count_source=build_count_source(source_mode),
            geometry=geometry,
            week_end=week_end,
        )
        st.session_state[state_key] = session
        st.session_state[f"{state_key}_source"] = source_mode
    elif st.session_state.get(f"{state_key}_source") != source_mode:
        session.count_source = build_count_source(source_mode)
        st.session_state[f"{state_key}_source"] = source_mode
    return session


def run_selection(selection: Awaitable[SelectionResult | None]) -> SelectionResult | None:
    """Run one selection; failures keep the map as it was."""
    try:
        return asyncio.run(selection)
    except DataShapeError as exc:
        logger.warning("step=selection_rejected reason=%s", exc)
        st.warning(f"Counts for this service could not be used: {exc}")
    except CountFetchError as exc:
        logger.error("step=selection_failed reason=%s", exc)
        st.error(f"Could not load counts: {exc}. Try again in a moment.")
    except WardPulseError as exc:
        logger.error("step=render_failed reason=%s", exc)
        st.error(f"Map update failed: {exc}")
    return None


def load_static_inputs() -> tuple[list[ServiceType], WardGeometry]:
    try:
        catalog = load_catalog()
        geometry = load_geometry()
    except WardPulseError as exc:
        st.error(f"{exc}. Add the service catalog and ward boundaries under data/ first.")
        st.stop()
    return catalog, geometry


def render_extremes_summary(result: SelectionResult) -> None:
    lowest = result.extremes.lowest
    highest = result.extremes.highest
    kpi1, kpi2, kpi3 = st.columns(3)
    kpi1.metric("Total requests", f"{int(result.ranked.sum())}")
    kpi2.metric("Most requests", f"Ward {highest.ward_id}", delta=f"{highest.count} requests", delta_color="off")
    kpi3.metric("Fewest requests", f"Ward {lowest.ward_id}", delta=f"{lowest.count} requests", delta_color="off")
    if lowest.count == highest.count:
        st.caption("Every ward has the same count this week; the highlighted wards are arbitrary.")


def render_ward_map(session: ViewSynchronizer) -> None:
    if len(session.registry) == 0:
        st.info("Ward map will appear once counts load.")
        return
    st.plotly_chart(session.registry.figure, width="stretch")


def render_ward_chart(result: SelectionResult) -> None:
    st.plotly_chart(build_ward_chart(result.ranked, result.extremes, result.service.name), width="stretch")


def render_ranking_table(result: SelectionResult, top_n: int = 10) -> None:
    ranked = result.ranked.sort_values(ascending=False, kind="stable").head(top_n)
    table = pd.DataFrame({"Ward": ranked.index.astype(int), "Requests": ranked.values})
    st.dataframe(table, width="stretch", hide_index=True)


def render_week_caption(result: SelectionResult) -> None:
    st.caption(f"Week ending {result.week_end.isoformat()} | Service code {result.service.code}")
