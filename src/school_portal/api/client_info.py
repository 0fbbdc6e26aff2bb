"""
school_portal.api.client_info

Small helpers describing the calling client.

Responsibilities:
- Classify the User-Agent into Mobile / Tablet / Desktop.
- Resolve the caller's timezone (header first, server zone otherwise).
"""

from __future__ import annotations

import re
import time

from starlette.requests import Request

_MOBILE = re.compile(r"mobile", re.IGNORECASE)
_TABLET = re.compile(r"tablet", re.IGNORECASE)


def get_device_type(user_agent: str | None) -> str:
    user_agent = user_agent or ""
    if _MOBILE.search(user_agent):
        return "Mobile"
    if _TABLET.search(user_agent):
        return "Tablet"
    return "Desktop"


def request_device_type(request: Request) -> str:
    return get_device_type(request.headers.get("user-agent"))


def request_timezone(request: Request) -> str:
    return request.headers.get("time-zone") or time.tzname[0]
