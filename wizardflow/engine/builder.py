"""FlowBuilder - fluent declaration of wizard steps.

Usage::

    flow = (
        FlowBuilder(runner)
        .with_text('name').name('Project name').default_value('demo').and_()
        .with_path('target').name('Target directory').and_()
        .with_single_choice('language')
            .name('Language')
            .select_item('Python', 'python')
            .select_item('Go', 'go')
            .and_()
        .build()
    )
    result = flow.run()
    result.context.get('name')
"""

from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Tuple, Union

from .errors import DuplicateIdError
from .flow import Flow
from .runner import PromptRunner
from .schema import (
    STEP_KINDS,
    MultiChoiceStep,
    PathStep,
    ResultMode,
    SelectItem,
    SingleChoiceStep,
    StepBase,
    TextStep,
)
from .templates import ResourceLoader, TemplateExecutor

ItemsArg = Union[Mapping[str, str], Iterable[Union[SelectItem, Tuple[str, str], Tuple[str, str, bool]]]]


class FlowBuilder:
    """
    Collects step specifications and compiles them into a :class:`Flow`.

    Every registered step gets the next sequence number, whatever its kind,
    so execution order is registration order. Ids are unique across kinds.
    """

    def __init__(self, runner: Optional[PromptRunner] = None):
        self._runner = runner
        self._buckets: Dict[str, List[StepBase]] = {kind: [] for kind in STEP_KINDS}
        self._ids = set()
        self._next_order = 0
        self._resource_loader: Optional[ResourceLoader] = None
        self._template_executor: Optional[TemplateExecutor] = None

    def with_text(self, step_id: str) -> "TextSpec":
        return TextSpec(self, step_id)

    def with_path(self, step_id: str) -> "PathSpec":
        return PathSpec(self, step_id)

    def with_single_choice(self, step_id: str) -> "SingleChoiceSpec":
        return SingleChoiceSpec(self, step_id)

    def with_multi_choice(self, step_id: str) -> "MultiChoiceSpec":
        return MultiChoiceSpec(self, step_id)

    def resource_loader(self, resource_loader: ResourceLoader) -> "FlowBuilder":
        self._resource_loader = resource_loader
        return self

    def template_executor(self, template_executor: TemplateExecutor) -> "FlowBuilder":
        self._template_executor = template_executor
        return self

    def add(self, step: StepBase) -> "FlowBuilder":
        """
        Register a step specification.

        Raises:
            DuplicateIdError: If a step with the same id is already registered
        """
        if step.id in self._ids:
            raise DuplicateIdError(step.id)
        self._ids.add(step.id)
        sealed = step.model_copy(update={'order': self._next_order})
        self._next_order += 1
        self._buckets[sealed.kind].append(sealed)
        return self

    def __contains__(self, step_id: object) -> bool:
        return step_id in self._ids

    def build(self) -> Flow:
        return Flow(
            self._buckets,
            runner=self._runner,
            resource_loader=self._resource_loader,
            template_executor=self._template_executor,
        )


class _StepSpec:
    """Fluent accumulator for one step; ``and_()`` seals and registers it."""

    step_class = StepBase

    def __init__(self, builder: FlowBuilder, step_id: str):
        self._builder = builder
        self._fields: Dict[str, Any] = {'id': step_id}
        self._pre_hooks: List[Callable] = []
        self._post_hooks: List[Callable] = []

    def name(self, name: str):
        self._fields['name'] = name
        return self

    def result_mode(self, mode: Union[ResultMode, str]):
        self._fields['result_mode'] = ResultMode(mode)
        return self

    def store_result(self, store: bool):
        self._fields['store_result'] = store
        return self

    def renderer(self, renderer: Callable[[Any], List[str]]):
        self._fields['renderer'] = renderer
        return self

    def template(self, location: str):
        self._fields['template'] = location
        return self

    def pre_hook(self, hook: Callable[[Any], None]):
        self._pre_hooks.append(hook)
        return self

    def post_hook(self, hook: Callable[[Any], None]):
        self._post_hooks.append(hook)
        return self

    def to_step(self) -> StepBase:
        return self.step_class(
            **self._fields,
            pre_hooks=tuple(self._pre_hooks),
            post_hooks=tuple(self._post_hooks),
        )

    def and_(self) -> FlowBuilder:
        return self._builder.add(self.to_step())


class TextSpec(_StepSpec):
    step_class = TextStep

    def default_value(self, value: Optional[str]):
        self._fields['default_value'] = value
        return self

    def result_value(self, value: Optional[str]):
        self._fields['result_value'] = value
        return self


class PathSpec(_StepSpec):
    step_class = PathStep

    def default_value(self, value: Any):
        self._fields['default_value'] = None if value is None else str(value)
        return self

    def result_value(self, value: Any):
        self._fields['result_value'] = None if value is None else str(value)
        return self


class _ChoiceSpec(_StepSpec):

    def __init__(self, builder: FlowBuilder, step_id: str):
        super().__init__(builder, step_id)
        self._items: List[SelectItem] = []

    def select_item(self, name: str, value: str, enabled: bool = True):
        self._items.append(SelectItem(name=name, value=value, enabled=enabled))
        return self

    def select_items(self, items: ItemsArg):
        """Add items from a ``{name: value}`` mapping or an iterable of
        :class:`SelectItem` / ``(name, value[, enabled])`` tuples."""
        if isinstance(items, Mapping):
            items = items.items()
        for item in items:
            if isinstance(item, SelectItem):
                self._items.append(item)
            else:
                self.select_item(*item)
        return self

    def sort(self, key: Callable[[SelectItem], Any]):
        self._fields['sort'] = key
        return self

    def max_items(self, max_items: int):
        self._fields['max_items'] = max_items
        return self

    def to_step(self) -> StepBase:
        self._fields['select_items'] = tuple(self._items)
        return super().to_step()


class SingleChoiceSpec(_ChoiceSpec):
    step_class = SingleChoiceStep

    def result_value(self, value: Optional[str]):
        self._fields['result_value'] = value
        return self


class MultiChoiceSpec(_ChoiceSpec):
    step_class = MultiChoiceStep

    def result_values(self, values: Iterable[str]):
        self._fields['result_values'] = tuple(self._fields.get('result_values', ())) + tuple(values)
        return self
