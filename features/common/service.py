from __future__ import annotations

from typing import TYPE_CHECKING, Any, Optional

from base import get_logger
from base.api.client import ApiResponse
from base.auth.models import User
from base.errors import ApiError, DormError, PermissionDenied

from .resources import extract_items, extract_record

if TYPE_CHECKING:
    from base.api.endpoints import DormitoryAPI
    from base.nav.router import PageDefinition
    from features.catalog import FormOptions, ListOptions, RowAction

logger = get_logger(__name__)


class FormIncomplete(DormError):
    def __init__(self, missing: list[str]):
        self.missing = missing
        super().__init__(f"Please fill in: {', '.join(missing)}")


class ResourceService:
    """Runs the loaders, forms and row actions declared in the page catalog."""

    def __init__(self, api: "DormitoryAPI"):
        self.api = api

    def _require(self, page: "PageDefinition", user: Optional[User]) -> User:
        return page.guard.require(user)

    def load_rows(self, page: "PageDefinition", user: Optional[User]) -> list[dict[str, Any]]:
        user = self._require(page, user)
        options: ListOptions = page.options["list"]
        response = options.loader(self.api, user)
        rows = extract_items(response.payload)
        logger.info(f"Loaded {len(rows)} rows for {page.path}")
        return rows

    def load_record(self, page: "PageDefinition", user: Optional[User]) -> Optional[dict[str, Any]]:
        """Single record page. A 404 means there is nothing to show."""
        user = self._require(page, user)
        try:
            response = page.options["loader"](self.api, user)
        except ApiError as e:
            if e.status_code == 404:
                return None
            raise
        return extract_record(response.payload) or None

    def load_report(
        self, page: "PageDefinition", user: Optional[User], name: str
    ) -> dict[str, Any]:
        user = self._require(page, user)
        loader = page.options["reports"].reports[name]
        return extract_record(loader(self.api, user).payload)

    def submit_form(
        self, page: "PageDefinition", user: Optional[User], values: dict[str, Any]
    ) -> ApiResponse:
        self._require(page, user)
        options: FormOptions = page.options["form"]

        cleaned: dict[str, Any] = {}
        missing = []
        for form_field in options.fields:
            value = values.get(form_field.name)
            if isinstance(value, str):
                value = value.strip()
            if value in (None, ""):
                if form_field.required:
                    missing.append(form_field.label)
                continue
            if form_field.choices and value not in form_field.choices:
                raise FormIncomplete([form_field.label])
            cleaned[form_field.name] = value

        if missing:
            raise FormIncomplete(missing)

        logger.info(f"Submitting {page.path} with fields: {sorted(cleaned)}")
        return options.submit(self.api, cleaned)

    def run_action(
        self, action: "RowAction", user: Optional[User], row: dict[str, Any]
    ) -> ApiResponse:
        if user is None or not action.available(user, row):
            raise PermissionDenied(f"'{action.label}' is not available for this record")
        logger.info(f"Running '{action.label}' on record {row.get('id')}")
        return action.call(self.api, row)
