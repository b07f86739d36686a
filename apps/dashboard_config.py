from __future__ import annotations

from pathlib import Path
import os

API_DOMAIN = os.environ.get("WARD_PULSE_API_DOMAIN", "http://api.chicagoworksforyou.com/")
SERVICES_PATH = Path(os.environ.get("WARD_PULSE_SERVICES_PATH", "data/services.json"))
WARD_BOUNDARY_PATH = Path(os.environ.get("WARD_PULSE_WARDS_PATH", "data/boundaries/wards.geojson"))
DB_PATH = Path(os.environ.get("WARD_PULSE_DB_PATH", "data/db/ward_counts.duckdb"))
LOGS_DIR = Path("logs")

WARD_COUNT = 50
NUM_DAYS = 7
MEDIA_DAYS = 14
DATE_FORMAT = "%Y-%m-%d"
REQUEST_TIMEOUT = 30

BASE_COLOR = "#0873AD"
ALERT_COLOR = "#000000"
LOW_FILL_OPACITY = 0.1
HIGH_FILL_OPACITY = 1.0
OUTLINE_WIDTH = 2

MAP_CENTER = {"lat": 41.8369, "lon": -87.6847}
MAP_ZOOM = 9.3
MAP_STYLE = "carto-positron"

DEFAULT_TITLE = "Media | Chicago Works For You"
