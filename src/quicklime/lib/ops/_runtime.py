"""Config resolution shared by operation handlers."""

from __future__ import annotations

from pathlib import Path

from quicklime.lib.config._paths import resolve_root
from quicklime.lib.config.settings import QuicklimeConfig, load_config


def resolve_config(root: str | None) -> QuicklimeConfig:
    explicit = Path(root) if root else None
    return load_config(resolve_root(explicit))
