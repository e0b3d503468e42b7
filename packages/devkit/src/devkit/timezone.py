from __future__ import annotations

from datetime import datetime
import os
import time
from zoneinfo import ZoneInfo

SERVICE_TZ_NAME = "Asia/Manila"
SERVICE_ZONE = ZoneInfo(SERVICE_TZ_NAME)

_configured = False


def configure_service_timezone() -> None:
    global _configured
    if _configured:
        return
    os.environ["TZ"] = SERVICE_TZ_NAME
    if hasattr(time, "tzset"):
        time.tzset()
    _configured = True


def now_local() -> datetime:
    return datetime.now(SERVICE_ZONE)


def now_local_iso() -> str:
    return now_local().isoformat()
