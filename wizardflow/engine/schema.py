"""Pydantic models describing the steps of a wizard flow."""

from abc import abstractmethod
from enum import Enum
from pathlib import Path
from typing import Annotated, Any, Callable, List, Literal, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field


class ResultMode(str, Enum):
    """How a pre-supplied result is treated when the step runs."""

    ACCEPT = "accept"
    VERIFY = "verify"


class SelectItem(BaseModel):
    """One selectable entry of a choice step."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Label shown to the user")
    value: str = Field(..., description="Value stored when the item is selected")
    enabled: bool = Field(True, description="Disabled items are shown but cannot be selected")


def _has_text(value: Optional[str]) -> bool:
    return value is not None and value.strip() != ""


class StepBase(BaseModel):
    """
    Fields shared by every step kind.

    Steps are frozen once constructed. The builder assigns ``order`` when the
    step is registered; it is the only thing that decides execution order.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    id: str = Field(..., min_length=1, description="Unique step identifier")
    order: int = Field(0, description="Global registration sequence number")
    name: Optional[str] = Field(None, description="Prompt label shown to the user")
    result_mode: Optional[ResultMode] = Field(None, description="accept or verify a pre-supplied result")
    store_result: bool = Field(True, description="Write the answer into the context under the step id")
    template: Optional[str] = Field(None, description="Template location overriding default presentation")
    renderer: Optional[Callable[[Any], List[str]]] = Field(None, exclude=True)
    pre_hooks: Tuple[Callable[[Any], None], ...] = Field(default=(), exclude=True)
    post_hooks: Tuple[Callable[[Any], None], ...] = Field(default=(), exclude=True)

    @abstractmethod
    def has_result(self) -> bool:
        """True if a usable pre-supplied result exists."""
        pass

    @abstractmethod
    def accepted_result(self) -> Any:
        """Value written to the context when the step is skipped."""
        pass

    def should_skip(self) -> bool:
        return (
            self.result_mode == ResultMode.ACCEPT
            and self.store_result
            and self.has_result()
        )


class TextStep(StepBase):
    kind: Literal["text"] = "text"
    default_value: Optional[str] = None
    result_value: Optional[str] = None

    def has_result(self) -> bool:
        return _has_text(self.result_value)

    def accepted_result(self) -> str:
        return self.result_value


class PathStep(StepBase):
    kind: Literal["path"] = "path"
    default_value: Optional[str] = None
    result_value: Optional[str] = None

    def has_result(self) -> bool:
        return _has_text(self.result_value)

    def accepted_result(self) -> Path:
        return Path(self.result_value.strip()).expanduser()


class ChoiceStepBase(StepBase):
    select_items: Tuple[SelectItem, ...] = ()
    sort: Optional[Callable[[SelectItem], Any]] = Field(None, exclude=True)
    max_items: Optional[int] = Field(None, ge=1, description="Maximum items shown at once")


class SingleChoiceStep(ChoiceStepBase):
    kind: Literal["single"] = "single"
    result_value: Optional[str] = None

    def has_result(self) -> bool:
        return _has_text(self.result_value)

    def accepted_result(self) -> str:
        return self.result_value


class MultiChoiceStep(ChoiceStepBase):
    kind: Literal["multi"] = "multi"
    result_values: Tuple[str, ...] = ()

    def has_result(self) -> bool:
        return len(self.result_values) > 0

    def accepted_result(self) -> List[str]:
        return list(self.result_values)


StepSpec = Annotated[
    Union[TextStep, PathStep, SingleChoiceStep, MultiChoiceStep],
    Field(discriminator="kind"),
]

STEP_KINDS = ("text", "path", "single", "multi")
