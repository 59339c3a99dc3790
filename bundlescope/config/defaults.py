from __future__ import annotations

from bundlescope.config.schema import AppConfig


def default_config() -> AppConfig:
    return AppConfig()
