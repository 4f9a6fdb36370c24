"""
Schema for the store-wide settings record.

The persisted settings blob has drifted between releases, so every field
carries a default; see ``makhzan.services.settings_merge`` for how a persisted
blob is resolved against these defaults.
"""
from typing import Literal
from pydantic import BaseModel, Field


DEFAULT_COLORS = {
    "primary": "#3B82F6",
    "secondary": "#8B5CF6",
    "accent": "#10B981",
    "success": "#059669",
    "warning": "#D97706",
    "error": "#DC2626",
    "info": "#0EA5E9",
}


class NotificationPreferences(BaseModel):
    sound: bool = True
    browser: bool = True
    email: bool = False
    low_stock: bool = True
    expiry: bool = True


class DisplayPreferences(BaseModel):
    items_per_page: int = Field(10, ge=1, le=500)
    show_animations: bool = True
    compact_mode: bool = False


class SecurityPreferences(BaseModel):
    """Advisory only: nothing is locked or encrypted by the store."""
    auto_lock_time: str = "30"  # minutes, "0" disables
    remember_login: bool = True
    encryption: bool = False


class BackupPreferences(BaseModel):
    auto_backup: bool = True
    backup_interval: Literal["daily", "weekly", "monthly"] = "daily"


class StoreSettings(BaseModel):
    currency: str = "SAR"
    language: str = "ar"
    theme: Literal["light", "dark", "auto"] = "light"
    notifications: NotificationPreferences = Field(default_factory=NotificationPreferences)
    colors: dict[str, str] = Field(default_factory=lambda: dict(DEFAULT_COLORS))
    display: DisplayPreferences = Field(default_factory=DisplayPreferences)
    security: SecurityPreferences = Field(default_factory=SecurityPreferences)
    backup: BackupPreferences = Field(default_factory=BackupPreferences)


class ColorSchemeUpdate(BaseModel):
    colors: dict[str, str]


class LanguageUpdate(BaseModel):
    language: str = Field(..., min_length=2, max_length=10)


def default_settings() -> dict:
    """The hard-coded defaults as a plain nested dict."""
    return StoreSettings().model_dump()
