from __future__ import annotations

from datetime import date, timedelta
from pathlib import Path
from typing import Protocol
import asyncio
import logging

import duckdb
import requests

from apps.dashboard_config import API_DOMAIN, DATE_FORMAT, DB_PATH, NUM_DAYS, REQUEST_TIMEOUT
from apps.errors import CountFetchError, DataShapeError
from apps.ward_counts import CountSeries

logger = logging.getLogger(__name__)

WARD_COUNTS_TABLE = "ward_counts"


class CountSource(Protocol):
    async def fetch_counts(self, service_code: str, week_end: date, num_days: int = NUM_DAYS) -> CountSeries: ...


def default_week_end(today: date) -> date:
    """Most recent Saturday strictly before ``today``."""
    days_back = (today.weekday() - 5) % 7 or 7
    return today - timedelta(days=days_back)


def counts_url(service_code: str, api_domain: str = API_DOMAIN) -> str:
    return f"{api_domain}requests/{service_code}/counts.json"


def fetch_counts_payload(
    service_code: str,
    week_end: date,
    num_days: int = NUM_DAYS,
    api_domain: str = API_DOMAIN,
    timeout: int = REQUEST_TIMEOUT,
) -> dict:
    url = counts_url(service_code, api_domain)
    params = {"end_date": week_end.strftime(DATE_FORMAT), "count": num_days}
    try:
        response = requests.get(url, params=params, timeout=timeout)
        response.raise_for_status()
        payload = response.json()
    except requests.exceptions.JSONDecodeError as exc:
        raise DataShapeError(f"count response for service={service_code} is not JSON") from exc
    except requests.RequestException as exc:
        raise CountFetchError(f"count fetch failed for service={service_code}: {exc}") from exc

    if not isinstance(payload, dict):
        raise DataShapeError(f"count response for service={service_code} is not an object")
    return payload


class ApiCountSource:
    """Counts from the open311 counts endpoint; the blocking call runs in a worker thread."""

    def __init__(self, api_domain: str = API_DOMAIN, timeout: int = REQUEST_TIMEOUT) -> None:
        self.api_domain = api_domain
        self.timeout = timeout

    async def fetch_counts(self, service_code: str, week_end: date, num_days: int = NUM_DAYS) -> CountSeries:
        logger.info("step=fetch_counts service=%s week_end=%s", service_code, week_end)
        payload = await asyncio.to_thread(
            fetch_counts_payload, service_code, week_end, num_days, self.api_domain, self.timeout
        )
        return CountSeries(service_code=service_code, week_end=week_end, counts=payload, num_days=num_days)


def ensure_counts_table(conn: duckdb.DuckDBPyConnection) -> None:
    conn.execute(
        f"""
        create table if not exists {WARD_COUNTS_TABLE} (
            service_code varchar,
            week_end date,
            num_days integer,
            position integer,
            entry_key varchar,
            request_count bigint
        )
        """
    )


def write_count_series(conn: duckdb.DuckDBPyConnection, series: CountSeries) -> int:
    ensure_counts_table(conn)
    conn.execute(
        f"delete from {WARD_COUNTS_TABLE} where service_code = ? and week_end = ? and num_days = ?",
        [series.service_code, series.week_end, series.num_days],
    )
    rows = [
        [series.service_code, series.week_end, series.num_days, position, str(key), value]
        for position, (key, value) in enumerate(series.counts.items())
    ]
    if rows:
        conn.executemany(f"insert into {WARD_COUNTS_TABLE} values (?, ?, ?, ?, ?, ?)", rows)
    return len(rows)


def read_count_series(db_path: Path, service_code: str, week_end: date, num_days: int = NUM_DAYS) -> CountSeries:
    try:
        with duckdb.connect(str(db_path), read_only=True) as conn:
            rows = conn.execute(
                f"""
                select entry_key, request_count
                from {WARD_COUNTS_TABLE}
                where service_code = ? and week_end = ? and num_days = ?
                order by position
                """,
                [service_code, week_end, num_days],
            ).fetchall()
    except duckdb.Error as exc:
        raise CountFetchError(f"snapshot read failed for service={service_code}: {exc}") from exc

    return CountSeries(
        service_code=service_code,
        week_end=week_end,
        counts={key: int(value) for key, value in rows},
        num_days=num_days,
    )


class DuckDBCountSource:
    """Counts from a snapshot written by ``scripts/snapshot_counts.py``."""

    def __init__(self, db_path: Path = DB_PATH) -> None:
        self.db_path = db_path

    async def fetch_counts(self, service_code: str, week_end: date, num_days: int = NUM_DAYS) -> CountSeries:
        if not self.db_path.exists():
            raise CountFetchError(f"snapshot database not found: {self.db_path}")
        return await asyncio.to_thread(read_count_series, self.db_path, service_code, week_end, num_days)
