# winpool/core/settings.py
import os


def _flag(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


# Refresh every 5 minutes by default, like the old dashboard timer.
REFRESH_SECONDS = float(os.getenv("POOL_REFRESH_SECONDS", "300"))
AUTO_REFRESH = _flag("POOL_AUTO_REFRESH", True)
POOL_CONFIG_FILE = os.getenv("POOL_CONFIG_FILE") or None
DISPLAY_TIMEZONE = os.getenv("POOL_TIMEZONE", "America/New_York")
