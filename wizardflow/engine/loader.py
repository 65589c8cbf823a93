"""FlowLoader - loads and validates YAML flow definitions."""

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .builder import FlowBuilder
from .errors import FlowDefinitionError
from .flow import Flow
from .runner import PromptRunner
from .schema import MultiChoiceStep, ResultMode, StepSpec
from .templates import ResourceLoader

logger = logging.getLogger(__name__)


class FlowDocument(BaseModel):
    """Top-level structure of a flow YAML file."""

    model_config = ConfigDict(extra="allow")

    name: str = Field(..., description="Flow identifier (e.g., 'new-project')")
    version: Union[str, float] = Field("1", description="Flow definition version")
    description: Optional[str] = Field(None, description="Human-readable description")
    steps: List[StepSpec] = Field(default_factory=list, description="Steps in execution order")


class FlowLoader:
    """
    Loads flow definitions from YAML files and compiles them into flows.

    A flow is looked up as ``<base_path>/flows/<name>.yaml`` unless an
    existing file path is given directly.
    """

    def __init__(self, base_path: Optional[Path] = None):
        """
        Initialize loader.

        Args:
            base_path: Base directory holding a ``flows/`` directory (default: cwd)
        """
        if base_path is None:
            base_path = Path.cwd()
        self.base_path = Path(base_path)

    def resolve(self, flow: Union[str, Path]) -> Path:
        candidate = Path(flow)
        if candidate.suffix in ('.yaml', '.yml') and candidate.is_file():
            return candidate
        flow_path = self.base_path / "flows" / f"{flow}.yaml"
        if not flow_path.exists():
            raise FlowDefinitionError(f"Flow not found: {flow_path}")
        return flow_path

    def load_document(self, flow: Union[str, Path]) -> FlowDocument:
        """
        Load a flow definition from YAML.

        Raises:
            FlowDefinitionError: If the file is missing, is not valid YAML,
                                 or doesn't match the schema
        """
        flow_path = self.resolve(flow)
        try:
            with open(flow_path, 'r') as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise FlowDefinitionError(f"Invalid YAML in {flow_path}: {e}") from e

        if not isinstance(data, dict):
            raise FlowDefinitionError(f"Flow file {flow_path} must contain a mapping")

        try:
            return FlowDocument(**data)
        except ValidationError as e:
            raise FlowDefinitionError(f"Invalid flow definition {flow_path}:\n{e}") from e

    def load_flow(
        self,
        flow: Union[str, Path],
        runner: Optional[PromptRunner] = None,
        overrides: Optional[Dict[str, Any]] = None,
        mode: ResultMode = ResultMode.ACCEPT,
    ) -> Flow:
        """
        Load a flow definition and compile it.

        Args:
            flow: Flow name or path to a YAML file
            runner: PromptRunner the compiled flow runs with
            overrides: ``{step_id: value}`` pre-supplied results
            mode: Result mode applied to overridden steps

        Raises:
            FlowDefinitionError: If the definition is invalid or an override
                                 names an unknown step
            DuplicateIdError: If two steps share an id
        """
        document = self.load_document(flow)
        overrides = dict(overrides or {})

        builder = FlowBuilder(runner).resource_loader(self._resource_loader())
        for step in document.steps:
            if step.id in overrides:
                step = self._apply_override(step, overrides.pop(step.id), mode)
            builder.add(step)

        if overrides:
            unknown = ", ".join(sorted(overrides))
            raise FlowDefinitionError(f"Flow '{document.name}' has no step(s): {unknown}")

        logger.debug("Loaded flow %s with %d step(s)", document.name, len(document.steps))
        return builder.build()

    def _resource_loader(self) -> ResourceLoader:
        return ResourceLoader(search_paths=[self.base_path, self.base_path / "templates"])

    @staticmethod
    def _apply_override(step, value: Any, mode: ResultMode):
        if isinstance(step, MultiChoiceStep):
            if isinstance(value, str):
                value = [v.strip() for v in value.split(',') if v.strip()]
            update = {'result_values': tuple(str(v) for v in value)}
        else:
            update = {'result_value': None if value is None else str(value)}
        update['result_mode'] = mode
        return step.model_copy(update=update)
