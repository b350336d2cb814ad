from __future__ import annotations

import time
from datetime import datetime, timezone


def utc_timestamp() -> str:
    return datetime.now(timezone.utc).strftime("%Y%m%d-%H%M%S")


def epoch_millis() -> int:
    return int(time.time() * 1000)
