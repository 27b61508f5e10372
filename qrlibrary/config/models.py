"""Pydantic settings models."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_ALLOWED_EXTENSIONS = ["txt", "qr", "qrtext"]


class _BaseSettingsModel(BaseModel):
    model_config = ConfigDict(extra="allow")


class LibrarySettings(_BaseSettingsModel):
    root: Optional[str] = None
    allowed_extensions: List[str] = Field(default_factory=lambda: list(DEFAULT_ALLOWED_EXTENSIONS))

    @field_validator("allowed_extensions")
    @classmethod
    def _normalize_extensions(cls, value: List[str]) -> List[str]:
        cleaned = []
        for ext in value:
            token = str(ext).strip().lstrip(".").lower()
            if token and token not in cleaned:
                cleaned.append(token)
        if not cleaned:
            raise ValueError("allowed_extensions must name at least one extension")
        return cleaned


class TransferSettings(_BaseSettingsModel):
    default_format: str = "csv"
    export_name_suffix: str = "QRLibrary"

    @field_validator("default_format")
    @classmethod
    def _check_format(cls, value: str) -> str:
        token = str(value).strip().lower()
        if token not in ("csv", "json"):
            raise ValueError("default_format must be 'csv' or 'json'")
        return token


class LoggingSettings(_BaseSettingsModel):
    level: str = "INFO"
    json_output: bool = False
    file_logging: bool = False
    log_dir: Optional[str] = None
    max_log_size: str = "10MB"
    backup_count: int = 3


class AppSettings(_BaseSettingsModel):
    library: LibrarySettings = Field(default_factory=LibrarySettings)
    transfer: TransferSettings = Field(default_factory=TransferSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


def validate_settings(payload: Dict[str, Any]) -> AppSettings:
    return AppSettings.model_validate(payload or {})
