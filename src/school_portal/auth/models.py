"""
school_portal.auth.models

Auth domain models.

Responsibilities:
- Define the authenticated identity type (`CurrentUser`) injected into endpoints.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class CurrentUser:
    """
    Authenticated admin, as resolved from a bearer token.
    """

    id: uuid.UUID
    email: str
    name: str
    user_type: str
    device_type: str

    @property
    def is_super_admin(self) -> bool:
        return self.user_type == "super-admin"

    def to_profile(self) -> dict[str, Any]:
        return {
            "id": str(self.id),
            "email": self.email,
            "name": self.name,
            "userType": self.user_type,
            "deviceType": self.device_type,
        }
