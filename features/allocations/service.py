from __future__ import annotations

import csv
import io
import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any, Optional

from base import get_logger
from base.api.client import ApiResponse
from base.errors import ApiConnectionError, ApiError
from features.common.resources import extract_items, extract_record

if TYPE_CHECKING:
    from base.api.endpoints import DormitoryAPI

logger = get_logger(__name__)

EXPORT_FORMATS = ("csv", "json")


@dataclass(frozen=True)
class AllocationResult:
    """Outcome of an allocation run as reported by the server."""

    success: bool
    message: str
    allocated: int = 0
    failed: int = 0
    details: list[dict[str, Any]] = field(default_factory=list)

    @classmethod
    def from_response(cls, response: ApiResponse) -> "AllocationResult":
        data = extract_record(response.payload.get("data"))
        details = extract_items(data.get("details") or data.get("allocations") or [])
        return cls(
            success=response.success,
            message=response.message or ("Allocation completed" if response.success else "Allocation failed"),
            allocated=_count(data, "allocated_count", "allocated"),
            failed=_count(data, "failed_count", "failed"),
            details=details,
        )

    @classmethod
    def failure(cls, action: str, reason: str) -> "AllocationResult":
        return cls(success=False, message=f"{action} failed: {reason}")


def _count(data: dict[str, Any], *keys: str) -> int:
    """First usable count among ``keys``. A list stands for its length."""
    for key in keys:
        value = data.get(key)
        if isinstance(value, bool) or value is None:
            continue
        if isinstance(value, (list, tuple)):
            return len(value)
        if isinstance(value, (int, float)):
            return int(value)
        if isinstance(value, str):
            try:
                return int(float(value))
            except ValueError:
                continue
    return 0


class AllocationService:
    def __init__(self, api: "DormitoryAPI"):
        self.api = api

    def get_stats(self) -> dict[str, Any]:
        return extract_record(self.api.allocations.get_stats().payload)

    def get_allocations(self) -> list[dict[str, Any]]:
        return extract_items(self.api.allocations.get_all().payload)

    def _run(self, action: str, call) -> AllocationResult:
        try:
            result = AllocationResult.from_response(call())
        except ApiConnectionError:
            raise
        except ApiError as e:
            logger.error(f"{action} rejected by server: {e.message}")
            return AllocationResult.failure(action, e.message)
        logger.info(
            f"{action}: success={result.success}, allocated={result.allocated}, failed={result.failed}"
        )
        return result

    def auto_allocate(self) -> AllocationResult:
        return self._run("Auto allocation", self.api.allocations.auto_allocate)

    def reallocate(self) -> AllocationResult:
        return self._run("Re-allocation", self.api.allocations.reallocate)

    def export_report(self, destination: Path, format: Optional[str] = None) -> Path:
        """Write the allocation report to ``destination``; format follows the suffix."""
        format = format or destination.suffix.lstrip(".").lower() or "csv"
        if format not in EXPORT_FORMATS:
            raise ValueError(f"Unsupported export format: {format}")

        payload = self.api.allocations.export_report(format).payload
        data = payload.get("data")
        if format == "json":
            text = json.dumps(payload if data is None else data, indent=2)
        elif isinstance(data, str):
            text = data
        elif data is not None:
            text = _rows_to_csv(extract_items(data))
        else:
            # plain text/csv body
            text = payload.get("message", "")

        destination.parent.mkdir(parents=True, exist_ok=True)
        destination.write_text(text, encoding="utf-8")
        logger.info(f"Allocation report exported to {destination}")
        return destination


def _rows_to_csv(rows: list[dict[str, Any]]) -> str:
    if not rows:
        return ""
    headers: list[str] = []
    for row in rows:
        for key in row:
            if key not in headers:
                headers.append(key)
    buffer = io.StringIO()
    writer = csv.DictWriter(buffer, fieldnames=headers, lineterminator="\n")
    writer.writeheader()
    for row in rows:
        writer.writerow({key: _flat(row.get(key)) for key in headers})
    return buffer.getvalue()


def _flat(value: Any) -> Any:
    if isinstance(value, (dict, list)):
        return json.dumps(value)
    return value
