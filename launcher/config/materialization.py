"""Effective config file materialization from WebSocket templates."""

from __future__ import annotations

import logging
import re
import shutil
from pathlib import Path
from typing import Final

from launcher.domain import MaterializationResult, RuntimeConfiguration

logger = logging.getLogger(__name__)

BACKEND_CONFIG_TEMPLATE: Final[str] = "config.websocket.toml"
BACKEND_CONFIG_TARGET: Final[str] = "config.toml"
FRONTEND_ENV_TEMPLATE: Final[str] = "frontend/.env.websocket"
FRONTEND_ENV_TARGET: Final[str] = "frontend/.env"


class TemplateMissingError(FileNotFoundError):
    """Raised when an effective config file is absent and its template is missing too."""


def config_render_frontend_env(template_text: str, config: RuntimeConfiguration) -> str:
    """Substitute browser-facing host and port values in frontend env text.

    The browser always reaches the backend through `localhost`, so the
    container bind address never leaks into `VITE_*` values.

    Args:
        template_text: Contents of the frontend env template.
        config: Resolved runtime configuration.

    Returns:
        str: Rendered env file contents.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    backend_address = f"localhost:{config.backend_port}"
    substitutions = (
        ("VITE_BACKEND_HOST", backend_address),
        ("VITE_BACKEND_BASE_URL", backend_address),
        ("VITE_FRONTEND_PORT", str(config.frontend_port)),
    )
    rendered_text = template_text
    for variable_name, value in substitutions:
        rendered_text = re.sub(
            rf"^{variable_name}=.*$",
            lambda _match, name=variable_name, replacement=value: f"{name}={replacement}",
            rendered_text,
            flags=re.MULTILINE,
        )
    return rendered_text


def config_materialize_templates(config: RuntimeConfiguration) -> MaterializationResult:
    """Produce effective config files from templates when they are absent.

    Existing effective files are kept untouched so manual edits persist
    across runs.

    Args:
        config: Resolved runtime configuration.

    Returns:
        MaterializationResult: Created and skipped effective file paths.

    Raises:
        TemplateMissingError: Raised when a required template does not exist.
        OSError: Raised when files cannot be read or written.
    """

    created: list[Path] = []
    skipped: list[Path] = []

    backend_target = config.project_root / BACKEND_CONFIG_TARGET
    if backend_target.exists():
        skipped.append(backend_target)
    else:
        backend_template = _config_require_template(config.project_root / BACKEND_CONFIG_TEMPLATE)
        logger.info("Creating %s from WebSocket template", BACKEND_CONFIG_TARGET)
        shutil.copyfile(backend_template, backend_target)
        created.append(backend_target)

    frontend_target = config.project_root / FRONTEND_ENV_TARGET
    if frontend_target.exists():
        skipped.append(frontend_target)
    else:
        frontend_template = _config_require_template(config.project_root / FRONTEND_ENV_TEMPLATE)
        logger.info("Creating %s from WebSocket template", FRONTEND_ENV_TARGET)
        rendered_text = config_render_frontend_env(
            template_text=frontend_template.read_text(encoding="utf-8"),
            config=config,
        )
        frontend_target.parent.mkdir(parents=True, exist_ok=True)
        frontend_target.write_text(rendered_text, encoding="utf-8")
        created.append(frontend_target)

    return MaterializationResult(created=tuple(created), skipped=tuple(skipped))


def config_ensure_workspace(config: RuntimeConfiguration) -> Path:
    """Create the host workspace directory when missing.

    Args:
        config: Resolved runtime configuration.

    Returns:
        Path: Workspace directory path.

    Raises:
        OSError: Raised when the directory cannot be created.
    """

    config.workspace_base.mkdir(parents=True, exist_ok=True)
    return config.workspace_base


def _config_require_template(template_path: Path) -> Path:
    if not template_path.is_file():
        raise TemplateMissingError(f"config template not found: {template_path}")
    return template_path
