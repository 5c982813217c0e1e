"""Configuration package for launcher settings and config file materialization."""

from .materialization import (
    TemplateMissingError,
    config_ensure_workspace,
    config_materialize_templates,
    config_render_frontend_env,
)
from .settings import LauncherSettings, SettingsLoadError, config_load_runtime_configuration, config_load_settings

__all__ = [
    "LauncherSettings",
    "SettingsLoadError",
    "TemplateMissingError",
    "config_ensure_workspace",
    "config_load_runtime_configuration",
    "config_load_settings",
    "config_materialize_templates",
    "config_render_frontend_env",
]
