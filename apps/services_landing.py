from pathlib import Path
import sys

import pandas as pd
import streamlit as st

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from apps.dashboard_sections import (
    get_session,
    load_static_inputs,
    render_extremes_summary,
    render_source_controls,
    render_ward_chart,
    render_ward_map,
    render_week_caption,
    run_selection,
)
from apps.errors import WardPulseError
from apps.logging_setup import configure_logging
from apps.media_feed import count_by_service, fetch_media, filter_by_service
from apps.view_sync import page_title


@st.cache_data(ttl=300)
def load_media_records() -> list[dict]:
    return fetch_media()


configure_logging("apps", log_name="services_landing")
st.set_page_config(page_title=page_title(None), layout="wide")
st.title("Chicago Works For You")
st.caption("Page through service types to see which wards asked for help this week")

catalog, geometry = load_static_inputs()
source_mode, week_end = render_source_controls()
session = get_session("landing_session", catalog, geometry, source_mode, week_end)

prev_col, title_col, next_col = st.columns([1, 6, 1])
with prev_col:
    if st.button("Previous", disabled=not session.has_previous):
        run_selection(session.previous())
with next_col:
    if st.button("Next", disabled=not session.has_next):
        run_selection(session.next())

last = session.last_result
if last is None or last.week_end != week_end:
    session.week_end = week_end
    run_selection(session.refresh())

with title_col:
    st.subheader(session.current_service.name)
    st.caption(f"Service {session.current_index + 1} of {len(catalog)}")

result = session.last_result
if result is None:
    st.info("No counts loaded yet. Use Previous/Next to try another service.")
    st.stop()

if result.index != session.current_index:
    st.caption(f"Still showing {result.service.name}; the latest selection did not load.")
    if st.button("Retry"):
        run_selection(session.refresh())
        st.rerun()

render_week_caption(result)
render_extremes_summary(result)
render_ward_map(session)
render_ward_chart(result)

with st.sidebar.expander("Media mentions (14 days)", expanded=False):
    try:
        media_records = load_media_records()
    except WardPulseError as exc:
        st.caption(f"Media feed unavailable: {exc}")
    else:
        media_counts = count_by_service(media_records)
        service_media = filter_by_service(media_records, session.current_service.name)
        st.metric(session.current_service.name, len(service_media))
        st.caption(f"{sum(media_counts.values())} mentions across {len(media_counts)} services")
        if service_media:
            st.dataframe(pd.DataFrame(service_media).head(10), width="stretch", hide_index=True)
