import os
from pathlib import Path

from letterbox.storage.guarded import LockSettings, LOCK_SCOPES


class ConfigError(Exception):
    pass


def get_base_root() -> Path:
    raw = os.environ.get("LETTERBOX_HOME")
    if not raw:
        raise ConfigError("LETTERBOX_HOME environment variable is not set")

    path = Path(raw).expanduser().resolve()

    if path.exists() and not path.is_dir():
        raise ConfigError(f"Base root is not a directory: {path}")

    return path


def _float_env(name: str, default: float) -> float:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        raise ConfigError(f"{name} must be a number of seconds, got {raw!r}")
    if value <= 0:
        raise ConfigError(f"{name} must be positive, got {raw!r}")
    return value


def get_lock_settings() -> LockSettings:
    scope = os.environ.get("LETTERBOX_LOCK_SCOPE", "").strip().lower() or "all"
    if scope not in LOCK_SCOPES:
        raise ConfigError(
            f"LETTERBOX_LOCK_SCOPE must be one of {', '.join(LOCK_SCOPES)}, got {scope!r}"
        )
    return LockSettings(
        timeout=_float_env("LETTERBOX_LOCK_TIMEOUT", 2.0),
        poll_interval=_float_env("LETTERBOX_LOCK_POLL", 0.02),
        scope=scope,
    )
