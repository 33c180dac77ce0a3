from __future__ import annotations

from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any, Mapping, Optional


class Role(str, Enum):
    STUDENT = "student"
    SUPERVISOR = "supervisor"
    ADMIN = "admin"

    @classmethod
    def parse(cls, value: Any) -> Optional["Role"]:
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return None


class AccountStatus(str, Enum):
    PENDING = "pending"
    ACTIVE = "active"
    SUSPENDED = "suspended"
    REJECTED = "rejected"


@dataclass(frozen=True)
class User:
    id: int
    name: str
    email: str
    role: Role
    status: str = AccountStatus.ACTIVE.value
    student_id: Optional[str] = None
    department: Optional[str] = None
    gender: Optional[str] = None
    phone: Optional[str] = None
    mobile_operator: Optional[str] = None
    year_level: Optional[int] = None
    assigned_block: Optional[str] = None
    date_of_birth: Optional[str] = None
    address: Optional[str] = None
    emergency_contact: Optional[str] = None
    emergency_phone: Optional[str] = None
    extra: dict[str, Any] = field(default_factory=dict, compare=False)

    @property
    def is_active(self) -> bool:
        return self.status == AccountStatus.ACTIVE.value

    @property
    def initial(self) -> str:
        return self.name[:1].upper() if self.name else "?"

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "User":
        """Parse a user record as sent by the API (``user_type`` carries the role).

        Raises ValueError when the record lacks an id or has an unknown role.
        """
        role = Role.parse(data.get("user_type", data.get("role")))
        if role is None:
            raise ValueError(f"Unknown user role: {data.get('user_type')!r}")
        if data.get("id") is None:
            raise ValueError("User record has no id")

        optional = {
            f.name: data.get(f.name)
            for f in fields(cls)
            if f.name not in _CORE_FIELDS and f.name != "extra"
        }
        if optional["year_level"] is not None:
            optional["year_level"] = int(optional["year_level"])

        known = {f.name for f in fields(cls)} | {"user_type", "role"}
        return cls(
            id=int(data["id"]),
            name=str(data.get("name") or ""),
            email=str(data.get("email") or ""),
            role=role,
            status=str(data.get("status") or AccountStatus.ACTIVE.value),
            extra={k: v for k, v in data.items() if k not in known},
            **optional,
        )

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = dict(self.extra)
        for f in fields(self):
            if f.name in ("extra", "role"):
                continue
            value = getattr(self, f.name)
            if value is not None:
                payload[f.name] = value
        payload["user_type"] = self.role.value
        return payload


_CORE_FIELDS = {"id", "name", "email", "role", "status"}
