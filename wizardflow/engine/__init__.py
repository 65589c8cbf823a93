"""Wizard engine - flow builder, step schema and execution engine."""

from .builder import FlowBuilder, MultiChoiceSpec, PathSpec, SingleChoiceSpec, TextSpec
from .context import FlowResult, WizardContext
from .engine import FlowEngine
from .errors import DuplicateIdError, FlowDefinitionError, TemplateNotFoundError, WizardFlowError
from .flow import Flow
from .loader import FlowDocument, FlowLoader
from .prompts import MultiSelectPrompt, PathInputPrompt, PromptState, SingleSelectPrompt, TextPrompt
from .runner import ConsoleRunner, MockPromptRunner, PromptRunner
from .schema import (
    MultiChoiceStep,
    PathStep,
    ResultMode,
    SelectItem,
    SingleChoiceStep,
    StepSpec,
    TextStep,
)
from .templates import JinjaTemplateExecutor, ResourceLoader, TemplateExecutor

__all__ = [
    'FlowBuilder',
    'TextSpec',
    'PathSpec',
    'SingleChoiceSpec',
    'MultiChoiceSpec',
    'Flow',
    'FlowEngine',
    'FlowResult',
    'WizardContext',
    'FlowLoader',
    'FlowDocument',
    'PromptRunner',
    'ConsoleRunner',
    'MockPromptRunner',
    'PromptState',
    'TextPrompt',
    'PathInputPrompt',
    'SingleSelectPrompt',
    'MultiSelectPrompt',
    'ResultMode',
    'SelectItem',
    'StepSpec',
    'TextStep',
    'PathStep',
    'SingleChoiceStep',
    'MultiChoiceStep',
    'ResourceLoader',
    'TemplateExecutor',
    'JinjaTemplateExecutor',
    'WizardFlowError',
    'DuplicateIdError',
    'FlowDefinitionError',
    'TemplateNotFoundError',
]
