from __future__ import annotations

import pandas as pd
import requests

from apps.dashboard_config import API_DOMAIN, MEDIA_DAYS, REQUEST_TIMEOUT
from apps.errors import CountFetchError, DataShapeError


def fetch_media(days: int = MEDIA_DAYS, api_domain: str = API_DOMAIN, timeout: int = REQUEST_TIMEOUT) -> list[dict]:
    try:
        response = requests.get(f"{api_domain}requests/media.json", params={"days": days}, timeout=timeout)
        response.raise_for_status()
        payload = response.json()
    except requests.exceptions.JSONDecodeError as exc:
        raise DataShapeError("media response is not JSON") from exc
    except requests.RequestException as exc:
        raise CountFetchError(f"media fetch failed: {exc}") from exc

    if not isinstance(payload, list):
        raise DataShapeError("media response is not a list")
    return payload


def count_by_service(records: list[dict]) -> dict[str, int]:
    if not records:
        return {}
    media_df = pd.DataFrame(records)
    if "Service_name" not in media_df.columns:
        return {}
    counts = media_df["Service_name"].dropna().value_counts()
    return {str(name): int(count) for name, count in counts.items()}


def filter_by_service(records: list[dict], service_name: str | None) -> list[dict]:
    if not service_name:
        return list(records)
    return [record for record in records if record.get("Service_name") == service_name]
