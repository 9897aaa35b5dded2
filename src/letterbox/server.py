import logging
from pathlib import Path

from fastmcp import FastMCP

from letterbox.config import get_base_root, get_lock_settings, ConfigError
from letterbox.storage.guarded import LockSettings

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(name)s %(levelname)s %(message)s")
logger = logging.getLogger(__name__)

mcp = FastMCP(
    name="letterbox",
    instructions=(
        "You are connected to a local store of email signatures, text templates, "
        "favourites, and remembered view selections. "
        "Use update_cache_tool for partial changes to remembered selections; "
        "save_cache_tool replaces every field. "
        "Always confirm before deleting or renaming a signature."
    ),
)

# Explicit registration: server -> tools (one direction only).
# The base root and lock settings are resolved once here and closed over in each tool wrapper.
from letterbox import layout  # noqa: E402
from letterbox.tools import cache, signatures, templates, lists  # noqa: E402


def _register_all(root: Path, locks: LockSettings) -> None:
    layout._register(mcp, root)
    cache._register(mcp, root, locks)
    signatures._register(mcp, root, locks)
    templates._register(mcp, root, locks)
    lists._register(mcp, root, locks)


def main() -> None:
    try:
        root = get_base_root()
        locks = get_lock_settings()
    except ConfigError as e:
        logger.error("Configuration error: %s", e)
        raise SystemExit(1)

    try:
        layout.ensure_layout(root)
    except OSError as e:
        logger.error("Cannot create base layout at %s: %s", root, e)
        raise SystemExit(1)

    logger.info("letterbox starting, base root: %s (lock scope: %s)", root, locks.scope)

    _register_all(root, locks)

    mcp.run()


if __name__ == "__main__":
    main()
