"""
Settings bootstrap for the school finder.

Every entry point (CLI command, API process) reads configuration through
`load_settings()` first. The returned dict carries the merged YAML config,
resolved runtime paths, and a `_meta` block describing where it came from.
"""

from __future__ import annotations

# `os.environ` receives variables from the project `.env` file.
import os
# Config, profile and runtime directory locations.
from pathlib import Path
# YAML sections are loosely typed until each client reads its own block.
from typing import Any

# PyYAML parses `config/default.yaml` and profile overrides.
import yaml

# Logging is configured as part of the bootstrap so clients log from the first request.
from schoolfinder.log import configure_logging

# Fallback values for keys a trimmed-down config file may leave out.
DEFAULTS: dict[str, Any] = {
    # Runtime directories are relative to the project root.
    "project": {
        "logs_dir": "logs",
        "exports_dir": "exports",
        "log_level": "INFO",
    },
    # Nominatim geocoding of the city text.
    "geocoder": {
        "url": "https://nominatim.openstreetmap.org/search",
        "user_agent": "schoolfinder/0.1",
        "request_timeout_s": 20,
        "language": "en",
    },
    # Mirrors are tried in order, once each, per search.
    "overpass": {
        "mirrors": [
            "https://overpass-api.de/api/interpreter",
            "https://overpass.openstreetmap.fr/api/interpreter",
            "https://overpass.kumi.systems/api/interpreter",
        ],
        "query_timeout_s": 60,
        "request_timeout_s": 90,
    },
    # Google Places Text Search, used when Overpass yields no schools.
    "fallback": {
        "enabled": True,
        "url": "https://places.googleapis.com/v1/places:searchText",
        "api_key_env": "GOOGLE_PLACES_API_KEY",
        "request_timeout_s": 15,
        "max_results": 20,
    },
    # `schoolfinder api-info` and uvicorn bind address.
    "api": {
        "host": "127.0.0.1",
        "port": 8000,
    },
}


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    # Work on a shallow copy; DEFAULTS and caller dicts stay untouched.
    merged: dict[str, Any] = dict(base)
    # Keys from the override side win on conflict.
    for key, value in override.items():
        # Nested mappings merge key by key, so a profile can change one mirror list only.
        if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            # Scalars and lists (e.g. `overpass.mirrors`) replace the base value wholesale.
            merged[key] = value
    # The merged view is a fresh dict at every nesting level that was merged.
    return merged


def _load_yaml(path: Path) -> dict[str, Any]:
    # A missing file means "no overrides"; profiles are optional.
    if not path.exists():
        return {}
    # Keyword tables and city names in configs may be non-ASCII.
    with path.open("r", encoding="utf-8") as f:
        # `safe_load` builds plain dicts/lists/scalars only; an empty file yields None.
        data = yaml.safe_load(f) or {}
    # Top level must be a mapping of sections (`geocoder`, `overpass`, ...).
    if not isinstance(data, dict):
        raise ValueError(f"YAML must be a mapping: {path}")
    return data


def _load_dotenv_if_present(dotenv_path: Path) -> None:
    # Without a `.env` file the process environment is used as is.
    if not dotenv_path.exists():
        return
    # One KEY=VALUE pair per line.
    for raw_line in dotenv_path.read_text(encoding="utf-8").splitlines():
        line = raw_line.strip()
        # Blank lines, comments and lines without "=" carry no variable.
        if not line or line.startswith("#") or "=" not in line:
            continue
        # Split at the first "="; values may themselves contain "=".
        key, value = line.split("=", 1)
        key = key.strip()
        # KEY="value" and KEY='value' both yield the bare value.
        value = value.strip().strip('"').strip("'")
        # Variables already set in the environment win over the file.
        os.environ.setdefault(key, value)


def _resolve_project_root(config_path: Path) -> Path:
    # Relative paths and symlinks are resolved before any path math.
    config_dir = config_path.resolve().parent
    # config/default.yaml lives one level below the project root.
    if config_dir.name == "config":
        return config_dir.parent
    # A config file outside `config/` marks the project root itself.
    return config_dir


def load_settings(config_path: Path, profile: str | None = None) -> dict[str, Any]:
    """
    Load the base config, merge an optional profile override, and prepare
    runtime directories and logging.

    Profiles live under `config/profiles/<profile>.yaml` and only need to
    list the keys they change (for example a self-hosted Overpass mirror).
    """
    # Accept str paths from the CLI and env vars as well as Path objects.
    config_path = Path(config_path).resolve()
    # `logs/`, `exports/`, `.env` and `config/profiles/` are all relative to this root.
    root = _resolve_project_root(config_path)

    # Credentials such as the fallback API key come from the environment.
    _load_dotenv_if_present(root / ".env")

    # Built-in defaults first, then the YAML file on top.
    settings = _deep_merge(DEFAULTS, _load_yaml(config_path))
    # Stays None when no profile was requested.
    profile_path: Path | None = None
    if profile:
        profile_path = root / "config" / "profiles" / f"{profile}.yaml"
        # A profile file that does not exist merges as an empty override.
        settings = _deep_merge(settings, _load_yaml(profile_path))

    # `project` always exists here because DEFAULTS defines it.
    project = settings["project"]
    # Absolute runtime locations derived from the project root.
    paths = {
        "root": root,
        # Search logs (mirror failures, fallback runs).
        "logs_dir": root / project.get("logs_dir", "logs"),
        # Default target for `schoolfinder search --out` CSV files.
        "exports_dir": root / project.get("exports_dir", "exports"),
    }
    # Both directories exist before any handler or export writes into them.
    for key in ("logs_dir", "exports_dir"):
        paths[key].mkdir(parents=True, exist_ok=True)

    # The named logger is configured once per process; later calls reuse its handlers.
    logger = configure_logging(paths["logs_dir"], level=str(project.get("log_level", "INFO")))

    # Where this settings dict came from, for the bootstrap log line and debugging.
    settings["_meta"] = {
        "config_path": str(config_path),
        "profile": profile,
        "profile_path": str(profile_path) if profile_path else None,
    }
    # Paths are stored as strings so the dict stays JSON-serializable.
    settings["paths"] = {k: str(v) for k, v in paths.items()}
    logger.info("Loaded settings: config=%s profile=%s", config_path, profile)
    return settings
