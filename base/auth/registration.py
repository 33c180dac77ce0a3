from __future__ import annotations

from typing import Any, Mapping

from base.errors import ValidationError

from .models import Role

COMMON_FIELDS = ("name", "email", "password", "password_confirmation", "user_type")
ROLE_FIELDS = {
    Role.STUDENT: ("student_id", "department", "gender", "year_level"),
    Role.SUPERVISOR: ("assigned_block", "gender"),
    Role.ADMIN: (),
}
MIN_PASSWORD_LENGTH = 8


def build_registration_payload(form: Mapping[str, Any]) -> dict[str, Any]:
    """Registration body for the chosen account type.

    Only the fields that belong to that type are sent and blanks are dropped.
    Problems a server round trip would only repeat raise ValidationError.
    """
    errors: dict[str, list[str]] = {}

    role = Role.parse(form.get("user_type") or Role.STUDENT.value)
    if role is None:
        errors["user_type"] = ["Please select your account type"]
        raise ValidationError(errors)

    payload: dict[str, Any] = {}
    for name in COMMON_FIELDS + ROLE_FIELDS[role]:
        value = form.get(name)
        if isinstance(value, str):
            value = value.strip() if name not in ("password", "password_confirmation") else value
        if value in (None, ""):
            continue
        payload[name] = value
    payload["user_type"] = role.value

    for name in ("name", "email", "password"):
        if name not in payload:
            errors.setdefault(name, []).append(f"The {name} field is required.")

    password = payload.get("password", "")
    if password and len(password) < MIN_PASSWORD_LENGTH:
        errors.setdefault("password", []).append(
            f"Password must be at least {MIN_PASSWORD_LENGTH} characters"
        )
    if password and payload.get("password_confirmation") != password:
        errors.setdefault("password_confirmation", []).append("Passwords do not match")

    if "year_level" in payload:
        try:
            payload["year_level"] = int(payload["year_level"])
        except (TypeError, ValueError):
            errors.setdefault("year_level", []).append("Year level must be a number")

    if errors:
        raise ValidationError(errors)
    return payload
