from pathlib import Path
import sys

import streamlit as st

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from apps.dashboard_sections import (
    get_session,
    load_static_inputs,
    render_extremes_summary,
    render_ranking_table,
    render_source_controls,
    render_ward_chart,
    render_ward_map,
    render_week_caption,
    run_selection,
    title_for_slug,
)
from apps.logging_setup import configure_logging
from apps.service_catalog import lookup_slug

configure_logging("apps", log_name="dashboard")
service_slug = st.query_params.get("service")
st.set_page_config(page_title=title_for_slug(service_slug), layout="wide")

catalog, geometry = load_static_inputs()
service = lookup_slug(catalog, service_slug or catalog[0].slug)
if service is None:
    st.warning(f"Unknown service '{service_slug}'. Showing {catalog[0].name} instead.")
    service = catalog[0]
service_index = catalog.index(service)

source_mode, week_end = render_source_controls()
service_index = st.sidebar.selectbox(
    "Service",
    options=list(range(len(catalog))),
    format_func=lambda index: catalog[index].name,
    index=service_index,
)
st.query_params["service"] = catalog[service_index].slug

session = get_session("ward_map_session", catalog, geometry, source_mode, week_end)
last = session.last_result
if last is None or last.index != service_index or last.week_end != week_end:
    session.week_end = week_end
    run_selection(session.select_service(service_index))

st.title(session.current_service.name)
st.caption("Weekly service requests by ward")

result = session.last_result
if result is None:
    st.info("No counts loaded yet for this service.")
    st.stop()

if result.index != session.current_index:
    st.caption(f"Still showing {result.service.name}; the latest selection did not load.")

render_week_caption(result)
render_extremes_summary(result)
map_col, chart_col = st.columns([3, 2], gap="large")
with map_col:
    render_ward_map(session)
with chart_col:
    render_ward_chart(result)

with st.expander("Busiest wards", expanded=False):
    render_ranking_table(result)
