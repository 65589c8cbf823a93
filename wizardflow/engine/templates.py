"""Template resolution and rendering for prompt presentation."""

import logging
from abc import ABC, abstractmethod
from importlib import resources
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

import jinja2

from .errors import TemplateNotFoundError

logger = logging.getLogger(__name__)

PACKAGE_PREFIX = "package:"


class ResourceLoader:
    """
    Resolves template locations to template source text.

    Locations are either ``package:<file>`` (templates bundled in
    ``wizardflow/templates``) or filesystem paths. Relative filesystem paths
    are tried as given first, then against each search path in order.
    """

    def __init__(self, search_paths: Optional[Iterable[Path]] = None):
        self.search_paths = [Path(p) for p in (search_paths or [])]

    def load(self, location: str) -> str:
        """
        Load the template source at *location*.

        Raises:
            TemplateNotFoundError: If the location cannot be resolved
        """
        if location.startswith(PACKAGE_PREFIX):
            name = location[len(PACKAGE_PREFIX):]
            resource = resources.files("wizardflow").joinpath("templates").joinpath(name)
            if not resource.is_file():
                raise TemplateNotFoundError(f"Bundled template not found: {name}")
            return resource.read_text(encoding="utf-8")

        path = Path(location).expanduser()
        candidates = [path]
        if not path.is_absolute():
            candidates.extend(base / path for base in self.search_paths)

        for candidate in candidates:
            if candidate.is_file():
                logger.debug("Resolved template %s -> %s", location, candidate)
                return candidate.read_text(encoding="utf-8")

        raise TemplateNotFoundError(f"Template not found: {location}")


class TemplateExecutor(ABC):
    """Renders template source with a set of variables into display lines."""

    @abstractmethod
    def render(self, template: str, variables: Dict[str, Any]) -> List[str]:
        """Render *template* and return its lines, trailing blank lines dropped."""
        pass


class JinjaTemplateExecutor(TemplateExecutor):
    """TemplateExecutor backed by Jinja2."""

    def __init__(self, environment: Optional[jinja2.Environment] = None):
        self.environment = environment or jinja2.Environment(
            autoescape=False,
            undefined=jinja2.StrictUndefined,
            keep_trailing_newline=False,
            trim_blocks=True,
            lstrip_blocks=True,
        )

    def render(self, template: str, variables: Dict[str, Any]) -> List[str]:
        rendered = self.environment.from_string(template).render(**variables)
        lines = rendered.splitlines()
        while lines and not lines[-1].strip():
            lines.pop()
        return lines
