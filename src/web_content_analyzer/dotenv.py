"""Auto-load environment variables from ``.env`` files.

Looks at ``./.env`` first, then the shared
``~/.config/web-content-analyzer/.env``. Values already present in the
process environment always win. No external dependencies.
"""

from __future__ import annotations

import os
from pathlib import Path

USER_ENV_PATH = Path.home() / ".config" / "web-content-analyzer" / ".env"


def default_env_paths() -> list[Path]:
    """Return the ``.env`` locations checked by :func:`load_dotenv`, in priority order."""
    return [Path.cwd() / ".env", USER_ENV_PATH]


def _is_unset(value: str | None) -> bool:
    """Return True when the current env value should be treated as unset."""
    if value is None:
        return True
    normalized = value.strip()
    if len(normalized) >= 2 and normalized[0] == normalized[-1] and normalized[0] in ('"', "'"):
        normalized = normalized[1:-1].strip()
    return not normalized


def parse_dotenv(path: Path) -> dict[str, str]:
    """Parse a ``.env`` file into a dict of key-value pairs.

    Supports ``KEY=VALUE``, ``KEY="VALUE"``, ``KEY='VALUE'``,
    ``export KEY=VALUE``, blank lines, and ``#`` comments.
    No variable expansion.
    """
    result: dict[str, str] = {}
    if not path.is_file():
        return result

    for line in path.read_text().splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        if line.startswith("export "):
            line = line[len("export ") :]
        if "=" not in line:
            continue
        key, _, value = line.partition("=")
        key = key.strip()
        value = value.strip()
        if len(value) >= 2 and value[0] == value[-1] and value[0] in ('"', "'"):
            value = value[1:-1]
        if key:
            result[key] = value
    return result


def load_dotenv(paths: list[Path] | None = None) -> dict[str, str]:
    """Load vars from *paths* into ``os.environ`` where they are unset.

    Earlier paths take precedence over later ones. Blank env values count as
    unset and get overridden.

    Args:
        paths: Files to read. Defaults to :func:`default_env_paths`.

    Returns:
        Dict of vars that were actually injected.
    """
    if paths is None:
        paths = default_env_paths()
    injected: dict[str, str] = {}
    for path in paths:
        for key, value in parse_dotenv(path).items():
            if key in injected:
                continue
            if _is_unset(os.environ.get(key)):
                os.environ[key] = value
                injected[key] = value
    return injected
