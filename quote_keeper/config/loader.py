"""Configuration loading helpers for quote-keeper."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

import yaml
from dotenv import load_dotenv
from pydantic import ValidationError

from ..errors import ConfigError
from .models import KeeperSettings

HOME_ENV = "QUOTE_KEEPER_HOME"
SETTINGS_FILENAME = "quote_keeper.yaml"
COLLECTION_FILENAME = "quotes.json"
SEEDS_FILENAME = "seeds.json"

# Environment variable -> settings field
ENV_FIELDS = {
    "MAX_QUOTES_PER_RUN": "max_quotes_per_run",
    "OFFLINE_MODE": "offline_mode",
    "DRY_RUN": "dry_run",
}


@dataclass(slots=True)
class ConfigLocator:
    """Resolve important paths from project root."""

    project_root: Path | None = None
    data_dir: Path | None = None
    site_data_dir: Path | None = None
    logs_dir: Path | None = None

    def __post_init__(self) -> None:
        env_root = os.environ.get(HOME_ENV)
        if self.project_root is not None:
            root = self.project_root
        elif env_root:
            root = Path(env_root).expanduser()
        else:
            root = Path.cwd()
        root = root.resolve()
        self.project_root = root
        self.data_dir = (root / "data").resolve()
        self.site_data_dir = (root / "site" / "data").resolve()
        self.logs_dir = (root / "logs").resolve()
        self.ensure_directories()

    def ensure_directories(self) -> None:
        self.data_dir.mkdir(parents=True, exist_ok=True)

    def collection_path(self) -> Path:
        return self.data_dir / COLLECTION_FILENAME

    def mirror_path(self) -> Path:
        return self.site_data_dir / COLLECTION_FILENAME

    def seeds_path(self) -> Path:
        return self.data_dir / SEEDS_FILENAME

    def settings_path(self) -> Path:
        return self.data_dir / SETTINGS_FILENAME

    def dotenv_path(self) -> Path:
        return self.project_root / ".env"


def _read_settings_file(path: Path) -> dict:
    if not path.exists():
        return {}
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid settings file {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Settings file must contain a mapping: {path}")
    return data


class ConfigRepository:
    """Layer defaults, the YAML settings file, the environment and CLI overrides."""

    def __init__(self, locator: ConfigLocator | None = None, load_env_file: bool = True) -> None:
        self.locator = locator or ConfigLocator()
        if load_env_file:
            # Existing environment variables win over .env entries.
            load_dotenv(self.locator.dotenv_path(), override=False)

    def environment_values(self, environ: Mapping[str, str] | None = None) -> dict[str, Any]:
        env = os.environ if environ is None else environ
        return {field: env[name] for name, field in ENV_FIELDS.items() if name in env}

    def load_settings(
        self,
        overrides: Mapping[str, Any] | None = None,
        environ: Mapping[str, str] | None = None,
    ) -> KeeperSettings:
        payload: dict[str, Any] = {}
        payload.update(_read_settings_file(self.locator.settings_path()))
        payload.update(self.environment_values(environ))
        payload.update({key: value for key, value in (overrides or {}).items() if value is not None})
        try:
            return KeeperSettings.model_validate(payload)
        except ValidationError as exc:
            raise ConfigError(str(exc)) from exc


__all__ = ["ConfigLocator", "ConfigRepository", "ENV_FIELDS", "HOME_ENV"]
