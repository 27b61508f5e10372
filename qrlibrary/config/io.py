"""Settings file I/O (YAML or JSON) with environment overrides."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml
from pydantic import ValidationError as PydanticValidationError

from ..exceptions import ConfigurationError
from .models import AppSettings, validate_settings

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "QRLIBRARY_CONFIG"
HOME_ENV_VAR = "QRLIBRARY_HOME"
LOG_JSON_ENV_VAR = "QRLIBRARY_LOG_JSON"
LOG_LEVEL_ENV_VAR = "QRLIBRARY_LOG_LEVEL"


def _parse_settings_file(path: Path, raw: str) -> Optional[Dict[str, Any]]:
    if path.suffix.lower() == ".json":
        data = json.loads(raw)
    else:
        data = yaml.safe_load(raw)
    if data is None:
        return {}
    if isinstance(data, dict):
        return data
    return None


def _apply_env_overrides(data: Dict[str, Any]) -> Dict[str, Any]:
    home = os.environ.get(HOME_ENV_VAR)
    if home:
        data.setdefault("library", {})["root"] = home
    log_json = os.environ.get(LOG_JSON_ENV_VAR)
    if log_json is not None:
        data.setdefault("logging", {})["json_output"] = log_json.strip().lower() in ("1", "true", "yes", "on")
    log_level = os.environ.get(LOG_LEVEL_ENV_VAR)
    if log_level:
        data.setdefault("logging", {})["level"] = log_level.strip().upper()
    return data


def load_settings(config_path: Optional[Union[str, Path]] = None) -> AppSettings:
    """Load settings from ``config_path`` (or ``$QRLIBRARY_CONFIG``).

    A missing file yields defaults. Unreadable or invalid content is logged
    and replaced by defaults so the application can still start.
    """
    if config_path is None:
        config_path = os.environ.get(CONFIG_ENV_VAR) or None

    data: Dict[str, Any] = {}
    if config_path is not None:
        path = Path(config_path)
        if path.exists():
            try:
                parsed = _parse_settings_file(path, path.read_text(encoding="utf-8"))
            except (OSError, ValueError, yaml.YAMLError) as exc:
                logger.warning("Settings file %s could not be read: %s", path, exc)
            else:
                if parsed is None:
                    logger.warning("Settings file %s ignored: expected a mapping", path)
                else:
                    data = parsed
        else:
            logger.debug("Settings file %s not found, using defaults", path)

    data = _apply_env_overrides(data)
    try:
        return validate_settings(data)
    except PydanticValidationError as exc:
        logger.warning("Settings validation failed, using defaults: %s", exc)
        return validate_settings(_apply_env_overrides({}))


def save_settings(settings: AppSettings, config_path: Union[str, Path]) -> Path:
    path = Path(config_path)
    payload = settings.model_dump(mode="json")
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        if path.suffix.lower() == ".json":
            path.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")
        else:
            path.write_text(yaml.safe_dump(payload, sort_keys=False, allow_unicode=True), encoding="utf-8")
    except OSError as exc:
        raise ConfigurationError(
            f"Settings could not be written: {exc}", file_path=str(path)
        ) from exc
    return path
