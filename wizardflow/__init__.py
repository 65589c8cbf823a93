"""wizardflow - declarative, data-driven CLI wizard engine."""

from .engine import (
    DuplicateIdError,
    FlowBuilder,
    FlowResult,
    ResultMode,
    SelectItem,
    WizardContext,
)

__version__ = "0.1.0"

__all__ = [
    'FlowBuilder',
    'FlowResult',
    'ResultMode',
    'SelectItem',
    'WizardContext',
    'DuplicateIdError',
]
