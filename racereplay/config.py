import copy
import os
from pathlib import Path

import yaml

from racereplay.errors import ConfigError

DEFAULT_CONFIG_PATH = Path(__file__).resolve().parent.parent / "config" / "config.yaml"

DEFAULTS = {
    "playback": {
        "speed": 1.0,
        "fps": 30,
    },
    "strava": {
        "token_file": "~/.racereplay/strava_tokens.json",
        "resolution": "medium",
    },
    "display": {
        "units": "metric",
    },
}


def _expand(value):
    """Recursively expand ~ and env vars in string values."""
    if isinstance(value, str):
        return os.path.expandvars(os.path.expanduser(value))
    if isinstance(value, dict):
        return {k: _expand(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_expand(v) for v in value]
    return value


def _merge(base: dict, override: dict) -> dict:
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _resolve_path(path=None) -> Path:
    if path:
        return Path(path)
    env_path = os.environ.get("RACEREPLAY_CONFIG")
    if env_path:
        return Path(env_path)
    return DEFAULT_CONFIG_PATH


def load_config(path=None):
    """Load YAML config, expanding ~ and $ENV_VARS in all string values."""
    path = _resolve_path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")
    with open(path) as f:
        try:
            raw = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {path}: {e}") from e
    if not isinstance(raw, dict):
        raise ConfigError(f"Config root must be a mapping: {path}")
    return _expand(raw)


def load_config_or_defaults(path=None):
    """Load config merged over DEFAULTS; a missing default file is not an error.

    An explicitly requested path that does not exist still raises.
    """
    try:
        loaded = load_config(path)
    except FileNotFoundError:
        if path:
            raise
        loaded = {}
    return _expand(_merge(DEFAULTS, loaded))
