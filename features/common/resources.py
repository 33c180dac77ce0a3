from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Any, Callable, Mapping, Optional

from base import get_logger

logger = get_logger(__name__)


def extract_items(payload: Any) -> list[dict[str, Any]]:
    """Rows of a list endpoint.

    Accepts a bare list, ``{"data": [...]}`` or the paginated
    ``{"data": {"data": [...]}}`` shape. Anything else yields no rows.
    """
    if isinstance(payload, list):
        return [row for row in payload if isinstance(row, dict)]
    if isinstance(payload, Mapping):
        inner = payload.get("data")
        if inner is not None and inner is not payload:
            return extract_items(inner)
    return []


def extract_record(payload: Any) -> dict[str, Any]:
    if isinstance(payload, Mapping):
        inner = payload.get("data")
        if isinstance(inner, Mapping):
            return dict(inner)
        return dict(payload)
    return {}


def format_cell(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "Yes" if value else "No"
    if isinstance(value, (list, tuple)):
        return ", ".join(format_cell(v) for v in value)
    if isinstance(value, Mapping):
        for key in ("name", "title", "room_number", "email"):
            if key in value:
                return format_cell(value[key])
        return ""
    return str(value)


def lookup(row: Mapping[str, Any], key: str) -> Any:
    """Read ``a.b.c`` style keys out of nested records."""
    value: Any = row
    for part in key.split("."):
        if not isinstance(value, Mapping):
            return None
        value = value.get(part)
    return value


def fetch_together(
    calls: Mapping[str, Callable[[], Any]],
    max_workers: Optional[int] = None,
) -> dict[str, Any]:
    """Run independent fetches concurrently, all or nothing.

    Results are keyed like ``calls`` regardless of completion order. If any
    call raises, the first failure (in completion order) is re-raised and no
    partial mapping is returned.
    """
    if not calls:
        return {}

    results: dict[str, Any] = {}
    with ThreadPoolExecutor(max_workers=max_workers or len(calls)) as executor:
        futures = {executor.submit(call): key for key, call in calls.items()}
        failure: Optional[BaseException] = None
        for future in as_completed(futures):
            key = futures[future]
            try:
                results[key] = future.result()
            except Exception as e:
                logger.error(f"Fetch '{key}' failed: {e}")
                if failure is None:
                    failure = e

    if failure is not None:
        raise failure
    return results
