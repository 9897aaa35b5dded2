from pathlib import Path

import pytest

from letterbox.layout import ensure_layout


@pytest.fixture
def root(tmp_path: Path) -> Path:
    """Return a fresh base root with the directory layout already created."""
    base = tmp_path / "letterbox"
    ensure_layout(base)
    return base


@pytest.fixture(autouse=True)
def set_home_env(root: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Point LETTERBOX_HOME at the temp root for every test."""
    monkeypatch.setenv("LETTERBOX_HOME", str(root))
    for name in ("LETTERBOX_LOCK_TIMEOUT", "LETTERBOX_LOCK_POLL", "LETTERBOX_LOCK_SCOPE"):
        monkeypatch.delenv(name, raising=False)

