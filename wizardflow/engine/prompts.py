"""Prompting primitives - one blocking terminal exchange per step.

Each primitive owns a list of pre-run and post-run hooks. ``run()`` creates a
fresh :class:`PromptState`, calls the pre-run hooks, performs the exchange
through the :class:`~wizardflow.engine.runner.PromptRunner`, calls the
post-run hooks and hands the context back.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Sequence

from .context import WizardContext
from .runner import PromptRunner
from .schema import SelectItem
from .templates import JinjaTemplateExecutor, ResourceLoader, TemplateExecutor

logger = logging.getLogger(__name__)

PromptHook = Callable[["PromptState"], None]


@dataclass
class PromptState:
    """Mutable state of one prompt while it runs. Handed to every hook."""

    name: Optional[str]
    context: WizardContext
    default_value: Optional[str] = None
    default_values: List[str] = field(default_factory=list)
    result_value: Any = None
    result_values: List[str] = field(default_factory=list)
    items: List[SelectItem] = field(default_factory=list)
    max_items: Optional[int] = None
    page: int = 0
    message: Optional[str] = None

    def put(self, key: str, value: Any) -> None:
        """Write *value* into the flow context."""
        self.context.put(key, value)

    def get(self, key: str, default: Any = None) -> Any:
        return self.context.get(key, default)

    @property
    def page_count(self) -> int:
        if not self.max_items or not self.items:
            return 1
        return (len(self.items) + self.max_items - 1) // self.max_items

    def visible_rows(self) -> List[Dict[str, Any]]:
        """Numbered rows of the current page of items."""
        if self.max_items:
            start = self.page * self.max_items
            end = start + self.max_items
        else:
            start, end = 0, len(self.items)
        selected = set(self.default_values)
        if self.default_value is not None:
            selected.add(self.default_value)
        return [
            {
                'number': index + 1,
                'name': item.name,
                'value': item.value,
                'enabled': item.enabled,
                'selected': item.value in selected,
            }
            for index, item in enumerate(self.items[start:end], start)
        ]

    def template_variables(self) -> Dict[str, Any]:
        return {
            'name': self.name,
            'default_value': self.default_value,
            'default_values': self.default_values,
            'message': self.message,
            'rows': self.visible_rows(),
            'page': self.page + 1,
            'page_count': self.page_count,
            'has_more': self.page_count > 1,
            'context': self.context.as_dict(),
        }


class BasePrompt(ABC):
    """Shared hook handling and rendering for all prompt kinds."""

    default_template = None

    def __init__(
        self,
        runner: PromptRunner,
        name: Optional[str] = None,
        resource_loader: Optional[ResourceLoader] = None,
        template_executor: Optional[TemplateExecutor] = None,
        template: Optional[str] = None,
        renderer: Optional[Callable[[PromptState], Sequence[str]]] = None,
    ):
        self.runner = runner
        self.name = name
        self.resource_loader = resource_loader or ResourceLoader()
        self.template_executor = template_executor or JinjaTemplateExecutor()
        self.template = template
        self.renderer = renderer
        self._pre_run_hooks: List[PromptHook] = []
        self._post_run_hooks: List[PromptHook] = []

    def add_pre_run_hook(self, hook: PromptHook) -> None:
        self._pre_run_hooks.append(hook)

    def add_post_run_hook(self, hook: PromptHook) -> None:
        self._post_run_hooks.append(hook)

    def run(self, context: WizardContext) -> WizardContext:
        state = self.create_state(context)
        for hook in self._pre_run_hooks:
            hook(state)
        self.read(state)
        for hook in self._post_run_hooks:
            hook(state)
        return state.context

    def create_state(self, context: WizardContext) -> PromptState:
        return PromptState(name=self.name, context=context)

    @abstractmethod
    def read(self, state: PromptState) -> None:
        """Perform the terminal exchange and set the result on *state*."""
        pass

    def render(self, state: PromptState) -> List[str]:
        """Lines displayed before the input line.

        A custom renderer wins over templates; otherwise the configured
        template location (or the kind's bundled default) is rendered.
        """
        if self.renderer is not None:
            return list(self.renderer(state))
        location = self.template or self.default_template
        if location is None:
            return []
        source = self.resource_loader.load(location)
        return self.template_executor.render(source, state.template_variables())

    def show(self, state: PromptState) -> None:
        lines = self.render(state)
        if lines:
            self.runner.display("\n".join(lines))

    @property
    def label(self) -> str:
        return self.name or ""


class TextPrompt(BasePrompt):
    """Free-text input. Blank input takes the default."""

    default_template = "package:text-input.jinja2"

    def __init__(self, runner: PromptRunner, name: Optional[str] = None,
                 default_value: Optional[str] = None, **kwargs):
        super().__init__(runner, name, **kwargs)
        self.default_value = default_value

    def create_state(self, context: WizardContext) -> PromptState:
        return PromptState(name=self.name, context=context, default_value=self.default_value)

    def read(self, state: PromptState) -> None:
        self.show(state)
        answer = self.runner.get_input(self.label, state.default_value)
        state.result_value = answer or state.default_value or ""


class PathInputPrompt(TextPrompt):
    """Filesystem path input. The answer is converted to ``pathlib.Path``."""

    default_template = "package:path-input.jinja2"

    def read(self, state: PromptState) -> None:
        self.show(state)
        answer = self.runner.get_input(self.label, state.default_value)
        answer = (answer or state.default_value or "").strip()
        state.result_value = Path(answer).expanduser() if answer else None


class _SelectPrompt(BasePrompt):
    """Numbered item list with optional paging over ``max_items`` rows."""

    def __init__(
        self,
        runner: PromptRunner,
        items: Sequence[SelectItem],
        name: Optional[str] = None,
        sort: Optional[Callable[[SelectItem], Any]] = None,
        max_items: Optional[int] = None,
        **kwargs,
    ):
        super().__init__(runner, name, **kwargs)
        self.items = list(items)
        self.sort = sort
        self.max_items = max_items

    def create_state(self, context: WizardContext) -> PromptState:
        items = sorted(self.items, key=self.sort) if self.sort else list(self.items)
        return PromptState(
            name=self.name,
            context=context,
            items=items,
            max_items=self.max_items,
        )

    def _turn_page(self, state: PromptState, answer: str) -> bool:
        """Handle ``n``/``p`` paging answers. Returns True if consumed."""
        if state.page_count <= 1:
            return False
        if answer == 'n':
            state.page = min(state.page + 1, state.page_count - 1)
            return True
        if answer == 'p':
            state.page = max(state.page - 1, 0)
            return True
        return False

    def _pick(self, state: PromptState, token: str) -> SelectItem:
        """Resolve a 1-based item number.

        Raises:
            ValueError: If the number is invalid or the item is disabled
        """
        try:
            index = int(token)
        except ValueError:
            raise ValueError(f"Not a number: {token}") from None
        if not 1 <= index <= len(state.items):
            raise ValueError(f"Choose a number between 1 and {len(state.items)}")
        item = state.items[index - 1]
        if not item.enabled:
            raise ValueError(f"{item.name} cannot be selected")
        return item

    def _numbers_for(self, state: PromptState, values: Sequence[str]) -> Optional[str]:
        numbers = [
            str(index + 1)
            for index, item in enumerate(state.items)
            if item.value in values and item.enabled
        ]
        return ",".join(numbers) if numbers else None


class SingleSelectPrompt(_SelectPrompt):
    """Pick exactly one item. Blank input without a default selects nothing."""

    default_template = "package:single-select.jinja2"

    def read(self, state: PromptState) -> None:
        while True:
            self.show(state)
            default = None
            if state.default_value is not None:
                default = self._numbers_for(state, [state.default_value])
            answer = self.runner.get_input(self.label, default).strip().lower()

            if self._turn_page(state, answer):
                continue
            if not answer:
                state.result_value = None
                return
            try:
                item = self._pick(state, answer)
            except ValueError as e:
                state.message = f"Error: {e}"
                continue
            state.message = None
            state.result_value = item.value
            return


class MultiSelectPrompt(_SelectPrompt):
    """Pick any number of items as comma separated numbers."""

    default_template = "package:multi-select.jinja2"

    def read(self, state: PromptState) -> None:
        while True:
            self.show(state)
            default = self._numbers_for(state, state.default_values)
            answer = self.runner.get_input(self.label, default).strip().lower()

            if self._turn_page(state, answer):
                continue
            if not answer:
                state.result_values = []
                return
            try:
                picked = [self._pick(state, token.strip()) for token in answer.split(',') if token.strip()]
            except ValueError as e:
                state.message = f"Error: {e}"
                continue
            state.message = None
            chosen = {item.value for item in picked}
            state.result_values = [item.value for item in state.items if item.value in chosen]
            return
