"""Flow - the compiled, immutable pipeline produced by FlowBuilder."""

from types import MappingProxyType
from typing import List, Mapping, Optional, Sequence, Tuple

from .context import FlowResult
from .runner import ConsoleRunner, PromptRunner
from .schema import STEP_KINDS, StepBase
from .templates import ResourceLoader, TemplateExecutor


class Flow:
    """
    Ordered set of sealed steps plus the rendering configuration they share.

    A flow holds no run state; every ``run()`` starts from an empty context.
    """

    def __init__(
        self,
        buckets: Mapping[str, Sequence[StepBase]],
        runner: Optional[PromptRunner] = None,
        resource_loader: Optional[ResourceLoader] = None,
        template_executor: Optional[TemplateExecutor] = None,
    ):
        self._buckets: Mapping[str, Tuple[StepBase, ...]] = MappingProxyType(
            {kind: tuple(buckets.get(kind, ())) for kind in STEP_KINDS}
        )
        self._runner = runner
        self._resource_loader = resource_loader
        self._template_executor = template_executor

    @property
    def buckets(self) -> Mapping[str, Tuple[StepBase, ...]]:
        """Steps grouped by kind, each group in registration order."""
        return self._buckets

    @property
    def steps(self) -> List[StepBase]:
        """All steps in execution order."""
        return sorted(
            (step for bucket in self._buckets.values() for step in bucket),
            key=lambda step: step.order,
        )

    def step_ids(self) -> List[str]:
        return [step.id for step in self.steps]

    def run(self, runner: Optional[PromptRunner] = None) -> FlowResult:
        """Run the flow and return its result.

        Args:
            runner: Overrides the runner given to the builder
                    (default: ConsoleRunner)
        """
        from .engine import FlowEngine

        engine = FlowEngine(
            runner or self._runner or ConsoleRunner(),
            resource_loader=self._resource_loader,
            template_executor=self._template_executor,
        )
        return engine.run(self)

    def __len__(self) -> int:
        return sum(len(bucket) for bucket in self._buckets.values())

    def __repr__(self) -> str:
        return f"Flow(steps={self.step_ids()!r})"
