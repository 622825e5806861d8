"""Configuration discovery and parsing helpers."""

from quicklime.lib.config.settings import LangConfig, QuicklimeConfig, TextConfig, load_config

__all__ = ["LangConfig", "QuicklimeConfig", "TextConfig", "load_config"]
