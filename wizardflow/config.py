"""YAML-backed user configuration.

The configuration file ``wizardflow.yml`` lives in the directory named by the
``WIZARDFLOW_CONFIG_DIR`` environment variable, or ``~/.config/wizardflow``.
Its values only ever feed pre-supplied results into flows; nothing in the
engine reads it directly.
"""

import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from wizardflow.engine.errors import WizardFlowError

logger = logging.getLogger(__name__)

CONFIG_DIR_ENV = "WIZARDFLOW_CONFIG_DIR"
CONFIG_FILE = "wizardflow.yml"
DEFAULT_CONFIG_DIR = Path("~/.config/wizardflow")


class ConfigError(WizardFlowError):
    """Raised when the user configuration file is invalid."""


class TemplateRepository(BaseModel):
    """A project template repository users can start from."""

    model_config = ConfigDict(extra="allow")

    name: str
    url: str
    description: Optional[str] = None
    tags: List[str] = Field(default_factory=list)


class Defaults(BaseModel):
    model_config = ConfigDict(extra="allow")

    project_name: Optional[str] = None
    package_name: Optional[str] = None
    template_repository_name: Optional[str] = None


class CliProperties(BaseModel):
    """Validated contents of ``wizardflow.yml``."""

    model_config = ConfigDict(extra="allow")

    defaults: Defaults = Field(default_factory=Defaults)
    template_repositories: List[TemplateRepository] = Field(default_factory=list)

    def find_template(self, name: Optional[str]) -> Optional[TemplateRepository]:
        """Case-insensitive lookup of a template repository by name."""
        if not name or not name.strip():
            return None
        wanted = name.strip().lower()
        for repository in self.template_repositories:
            if repository.name.strip().lower() == wanted:
                return repository
        return None


def config_dir() -> Path:
    return Path(os.environ.get(CONFIG_DIR_ENV) or DEFAULT_CONFIG_DIR).expanduser()


def _deep_merge(base: dict, update: dict) -> dict:
    """Deep merge update dict into base dict."""
    result = base.copy()
    for key, value in update.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


class UserConfig:
    """Reads and writes ``wizardflow.yml``."""

    def __init__(self, path: Optional[Path] = None):
        self.path = Path(path) if path is not None else config_dir() / CONFIG_FILE

    def _read_raw(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, 'r') as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {self.path}: {e}") from e
        if not isinstance(data, dict):
            raise ConfigError(f"{self.path} must contain a mapping")
        return data

    def load(self) -> CliProperties:
        """Load the configuration; a missing file yields defaults."""
        data = self._read_raw()
        try:
            properties = CliProperties(**data)
        except ValidationError as e:
            raise ConfigError(f"Invalid configuration {self.path}:\n{e}") from e
        logger.debug("Loaded user config from %s", self.path)
        return properties

    def save(self, properties: CliProperties) -> None:
        """Merge *properties* into the file on disk, creating it if needed."""
        merged = _deep_merge(self._read_raw(), properties.model_dump(exclude_none=True))
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, 'w') as f:
            yaml.safe_dump(merged, f, sort_keys=False)
        logger.debug("Saved user config to %s", self.path)
