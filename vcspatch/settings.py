"""ConfigManager — layered settings, environment profiles and logging setup."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any

from vcspatch.config import SETTINGS_DIR, SETTINGS_FILE

logger = logging.getLogger(__name__)

# All known configuration keys with defaults
_CONFIG_KEYS: dict[str, dict[str, Any]] = {
    "VCSPATCH_ENV": {"default": "development", "description": "Environment profile"},
    "VCSPATCH_LOG_LEVEL": {"default": "INFO", "description": "Logging level"},
    "VCSPATCH_AUDIT_DB": {"default": "vcspatch_audit.db", "description": "Audit database path"},
    "VCSPATCH_ACTOR": {"default": "vcspatch", "description": "Name recorded in audit entries"},
    "VCSPATCH_MASK_SECRETS": {"default": "true", "description": "Mask secrets in drift reports"},
}

_PROFILES: dict[str, dict[str, str]] = {
    "development": {
        "VCSPATCH_ENV": "development",
        "VCSPATCH_LOG_LEVEL": "DEBUG",
    },
    "production": {
        "VCSPATCH_ENV": "production",
        "VCSPATCH_LOG_LEVEL": "WARNING",
    },
    "testing": {
        "VCSPATCH_ENV": "testing",
        "VCSPATCH_LOG_LEVEL": "DEBUG",
        "VCSPATCH_AUDIT_DB": ":memory:",
    },
}

_LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


class ConfigManager:
    """Load vcspatch settings for a project directory."""

    def generate_env_template(self, project_path: str | Path) -> Path:
        """Create .env.example listing every config key with its default.

        Returns the path to the generated file.
        """
        env_path = Path(project_path) / ".env.example"

        lines = ["# vcspatch configuration template", "# Copy to .env and fill in values", ""]
        for key, info in _CONFIG_KEYS.items():
            lines.append(f"# {info['description']}")
            lines.append(f"{key}={info['default']}")
            lines.append("")

        env_path.write_text("\n".join(lines), encoding="utf-8")
        return env_path

    def load_config(self, project_path: str | Path) -> dict[str, str]:
        """Resolve every known key; later layers win.

        Layers: defaults, the profile named by ``VCSPATCH_ENV``,
        ``.vcspatch/config.json``, ``.env``, then the process environment.
        Keys outside the known set are ignored.
        """
        root = Path(project_path)
        config = {key: str(info["default"]) for key, info in _CONFIG_KEYS.items()}

        env_name = os.environ.get("VCSPATCH_ENV", config["VCSPATCH_ENV"])
        layers = (
            _PROFILES.get(env_name, {}),
            _read_settings_file(root / SETTINGS_DIR / SETTINGS_FILE),
            _read_dotenv(root / ".env"),
            os.environ,
        )
        for layer in layers:
            config.update((k, str(layer[k])) for k in _CONFIG_KEYS if k in layer)
        return config


def _read_settings_file(path: Path) -> dict[str, object]:
    if not path.is_file():
        return {}
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, OSError):
        logger.warning("Ignoring unreadable %s", path, exc_info=True)
        return {}
    if not isinstance(data, dict):
        logger.warning("Ignoring %s: expected a JSON object", path)
        return {}
    return data


def _read_dotenv(path: Path) -> dict[str, str]:
    if not path.is_file():
        return {}
    values: dict[str, str] = {}
    for line in path.read_text(encoding="utf-8").splitlines():
        key, sep, value = line.strip().partition("=")
        if sep and not key.startswith("#"):
            values[key.strip()] = value.strip()
    return values


def is_enabled(value: str) -> bool:
    """Interpret a config string as a boolean flag."""
    return value.strip().lower() in {"1", "true", "yes", "on"}


def configure_logging(config: dict[str, str] | None = None) -> logging.Logger:
    """Attach a stream handler to the ``vcspatch`` logger at the configured level.

    Unknown level names fall back to INFO.  Calling twice does not add a
    second handler.
    """
    level_name = (config or {}).get("VCSPATCH_LOG_LEVEL") or os.getenv("VCSPATCH_LOG_LEVEL", "INFO")
    level = logging.getLevelName(level_name.upper())
    if not isinstance(level, int):
        level = logging.INFO

    root_logger = logging.getLogger("vcspatch")
    if not root_logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(_LOG_FORMAT))
        root_logger.addHandler(handler)
    root_logger.setLevel(level)
    return root_logger
