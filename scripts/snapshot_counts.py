import argparse
import logging
import sys
from datetime import date, datetime
from pathlib import Path

import duckdb

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from apps.count_sources import default_week_end, fetch_counts_payload, write_count_series
from apps.dashboard_config import API_DOMAIN, DB_PATH, NUM_DAYS, SERVICES_PATH
from apps.errors import WardPulseError
from apps.logging_setup import configure_logging
from apps.service_catalog import ServiceType, load_service_catalog
from apps.ward_counts import CountSeries, rank


def select_services(catalog: list[ServiceType], slug: str) -> list[ServiceType]:
    if slug == "all":
        return list(catalog)
    selected = [service for service in catalog if service.slug == slug]
    if not selected:
        raise ValueError(f"unknown service slug: {slug}")
    return selected


def snapshot_service(
    service: ServiceType,
    week_end: date,
    num_days: int,
    conn: duckdb.DuckDBPyConnection | None,
    api_domain: str,
    logger: logging.Logger,
) -> bool:
    logger.info("service=%s step=start week_end=%s", service.slug, week_end)

    try:
        payload = fetch_counts_payload(service.code, week_end, num_days, api_domain)
        series = CountSeries(service_code=service.code, week_end=week_end, counts=payload, num_days=num_days)
        extremes = rank(series)
        logger.info(
            "service=%s step=validated entries=%s lowest_ward=%s highest_ward=%s",
            service.slug,
            len(payload),
            extremes.lowest.ward_id,
            extremes.highest.ward_id,
        )

        if conn is None:
            logger.info("service=%s step=dry_run_skip_write", service.slug)
            return True

        row_count = write_count_series(conn, series)
        logger.info("service=%s step=written rows=%s", service.slug, row_count)
        return True
    except WardPulseError as exc:
        logger.error("service=%s step=failed error=%s", service.slug, exc)
        return False


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Snapshot weekly per-ward request counts into DuckDB")
    parser.add_argument("--service", default="all", help="Service slug to snapshot, or 'all'")
    parser.add_argument(
        "--week-end",
        default=default_week_end(date.today()).strftime("%Y-%m-%d"),
        help="Last day of the counted week (YYYY-MM-DD)",
    )
    parser.add_argument("--days", type=int, default=NUM_DAYS, help="Number of days counted")
    parser.add_argument("--db-path", type=Path, default=DB_PATH, help="DuckDB file to write")
    parser.add_argument("--services-path", type=Path, default=SERVICES_PATH, help="Service catalog JSON")
    parser.add_argument("--api-domain", default=API_DOMAIN, help="Count API base URL")
    parser.add_argument("--dry-run", action="store_true", help="Fetch and validate without writing")
    return parser.parse_args(argv)


def snapshot_counts(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    logger = configure_logging("snapshot_counts")
    configure_logging("apps", log_name="snapshot_counts")

    try:
        catalog = load_service_catalog(args.services_path)
        selected = select_services(catalog, args.service)
        week_end = datetime.strptime(args.week_end, "%Y-%m-%d").date()
    except (WardPulseError, ValueError) as exc:
        logger.error("run_status=failed reason=%s", exc)
        return 1

    conn = None
    if not args.dry_run:
        args.db_path.parent.mkdir(parents=True, exist_ok=True)
        conn = duckdb.connect(str(args.db_path))

    failures = []
    try:
        for service in selected:
            success = snapshot_service(
                service=service,
                week_end=week_end,
                num_days=args.days,
                conn=conn,
                api_domain=args.api_domain,
                logger=logger,
            )
            if not success:
                failures.append(service.slug)
    finally:
        if conn is not None:
            conn.close()

    if failures:
        logger.error("run_status=failed failed_services=%s", failures)
        return 1

    logger.info("run_status=success service_count=%s week_end=%s", len(selected), week_end)
    return 0


if __name__ == "__main__":
    raise SystemExit(snapshot_counts())
