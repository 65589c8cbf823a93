"""Core wizard engine - folds a flow's steps into one result context."""

import logging
from typing import Callable, Dict, Optional

from .context import FlowResult, WizardContext
from .prompts import (
    BasePrompt,
    MultiSelectPrompt,
    PathInputPrompt,
    PromptState,
    SingleSelectPrompt,
    TextPrompt,
)
from .runner import PromptRunner
from .schema import (
    MultiChoiceStep,
    PathStep,
    ResultMode,
    SingleChoiceStep,
    StepBase,
    TextStep,
)
from .templates import ResourceLoader, TemplateExecutor

logger = logging.getLogger(__name__)


class FlowEngine:
    """
    Executes the steps of a flow in registration order.

    Key responsibilities:
    - Merge the per-kind step buckets into one ordered pipeline
    - Decide per step whether to skip (accepted result) or prompt
    - Wire seeding, storing and caller hooks onto each prompt
    - Thread a single context through every step
    """

    def __init__(
        self,
        runner: PromptRunner,
        resource_loader: Optional[ResourceLoader] = None,
        template_executor: Optional[TemplateExecutor] = None,
    ):
        """
        Initialize the engine.

        Args:
            runner: PromptRunner used by every prompt for terminal interaction
            resource_loader: Resolves template locations (default: ResourceLoader())
            template_executor: Renders templates (default: JinjaTemplateExecutor())
        """
        self.runner = runner
        self.resource_loader = resource_loader
        self.template_executor = template_executor
        self._prompt_factories: Dict[str, Callable[[StepBase], BasePrompt]] = {
            'text': self._text_prompt,
            'path': self._path_prompt,
            'single': self._single_prompt,
            'multi': self._multi_prompt,
        }

    def run(self, flow) -> FlowResult:
        """
        Run every step of *flow* against a fresh context.

        Exceptions raised by a prompt (including ``KeyboardInterrupt``) abort
        the run; no result is returned for a partial run.
        """
        steps = flow.steps
        logger.info("Running flow with %d step(s)", len(steps))

        context = WizardContext.empty()
        for step in steps:
            context = self.execute_step(step, context)

        logger.info("Flow complete, %d value(s) collected", len(context))
        return FlowResult(context)

    def execute_step(self, step: StepBase, context: WizardContext) -> WizardContext:
        """
        Execute a single step.

        Args:
            step: Sealed step specification
            context: Context produced by the previous step

        Returns:
            The context to hand to the next step
        """
        if step.should_skip():
            logger.debug("Step %s: accepting pre-supplied result", step.id)
            context.put(step.id, step.accepted_result())
            return context

        logger.debug("Step %s: prompting (%s)", step.id, step.kind)
        prompt = self._prompt_factories[step.kind](step)

        if step.result_mode == ResultMode.VERIFY and step.has_result():
            prompt.add_pre_run_hook(self._seed_hook(step))

        if step.store_result:
            prompt.add_post_run_hook(self._store_hook(step))

        for hook in step.pre_hooks:
            prompt.add_pre_run_hook(hook)
        for hook in step.post_hooks:
            prompt.add_post_run_hook(hook)

        return prompt.run(context)

    # -- prompt construction --------------------------------------------------

    def _common_options(self, step: StepBase) -> dict:
        return {
            'name': step.name,
            'resource_loader': self.resource_loader,
            'template_executor': self.template_executor,
            'template': step.template,
            'renderer': step.renderer,
        }

    def _text_prompt(self, step: TextStep) -> BasePrompt:
        return TextPrompt(self.runner, default_value=step.default_value, **self._common_options(step))

    def _path_prompt(self, step: PathStep) -> BasePrompt:
        return PathInputPrompt(self.runner, default_value=step.default_value, **self._common_options(step))

    def _single_prompt(self, step: SingleChoiceStep) -> BasePrompt:
        return SingleSelectPrompt(
            self.runner,
            step.select_items,
            sort=step.sort,
            max_items=step.max_items,
            **self._common_options(step),
        )

    def _multi_prompt(self, step: MultiChoiceStep) -> BasePrompt:
        return MultiSelectPrompt(
            self.runner,
            step.select_items,
            sort=step.sort,
            max_items=step.max_items,
            **self._common_options(step),
        )

    # -- engine hooks ---------------------------------------------------------

    @staticmethod
    def _seed_hook(step: StepBase) -> Callable[[PromptState], None]:
        if isinstance(step, MultiChoiceStep):
            def seed(state: PromptState) -> None:
                state.default_values = list(step.result_values)
        else:
            def seed(state: PromptState) -> None:
                state.default_value = step.result_value
        return seed

    @staticmethod
    def _store_hook(step: StepBase) -> Callable[[PromptState], None]:
        if isinstance(step, MultiChoiceStep):
            def store(state: PromptState) -> None:
                state.put(step.id, list(state.result_values))
        elif isinstance(step, SingleChoiceStep):
            def store(state: PromptState) -> None:
                if state.result_value is not None:
                    state.put(step.id, state.result_value)
        else:
            def store(state: PromptState) -> None:
                state.put(step.id, state.result_value)
        return store
