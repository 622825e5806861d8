"""Project root resolution for `.quicklime/` config lookup."""

from __future__ import annotations

import os
from pathlib import Path

from quicklime.lib.config.settings import CONFIG_DIR_NAME


def resolve_root(explicit: Path | None = None) -> Path:
    """Resolve the project root that owns `.quicklime/`.

    Precedence:
    1. Explicit function argument.
    2. `QUICKLIME_ROOT` environment variable.
    3. Current directory / ancestors containing `.quicklime/` or a `.git` marker.
    4. Current working directory.
    """

    if explicit is not None:
        return explicit.expanduser().resolve()

    env_root = os.getenv("QUICKLIME_ROOT")
    if env_root:
        return Path(env_root).expanduser().resolve()

    cwd = Path.cwd().resolve()
    for candidate in (cwd, *cwd.parents):
        if (candidate / CONFIG_DIR_NAME).is_dir():
            return candidate
        # A .git file (worktree) or directory marks a repo boundary.
        if (candidate / ".git").exists():
            return candidate
    return cwd
