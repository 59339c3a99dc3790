from __future__ import annotations

import json

from result import Err, Ok, Result

from bundlescope.config.defaults import default_config
from bundlescope.config.schema import AppConfig
from bundlescope.services.fs import DEFAULT_FS, FileSystem

CONFIG_FILES = (
    "bundlescope.config.json",
    ".bundlescoperc",
    ".bundlescoperc.json",
    "bundlescope.json",
)


def find_config(project_root: str, fs: FileSystem = DEFAULT_FS) -> str | None:
    for name in CONFIG_FILES:
        candidate = fs.join(project_root, name)
        if fs.exists(candidate):
            return candidate
    return None


def load_config(project_root: str | None = None, fs: FileSystem = DEFAULT_FS) -> Result[AppConfig, str]:
    resolved = find_config(fs.expanduser(project_root or "."), fs)
    if resolved is None:
        return Ok(default_config())

    try:
        payload = json.loads(fs.read_text(resolved))
        if not isinstance(payload, dict):
            return Err(f"Config at {resolved} must be a JSON object.")
        return Ok(AppConfig.from_dict(payload, default_config()))
    except Exception as exc:  # noqa: BLE001
        return Err(f"Failed reading config at {resolved}: {exc}.")


def sample_config_json() -> str:
    return json.dumps(default_config().to_dict(), indent=2)
