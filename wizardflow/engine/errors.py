"""Exception types raised by the wizard flow engine."""


class WizardFlowError(Exception):
    """Base class for all wizardflow errors."""


class DuplicateIdError(WizardFlowError, ValueError):
    """Raised when a step id is registered twice in the same builder."""

    def __init__(self, step_id: str):
        self.step_id = step_id
        super().__init__(f"Component with id {step_id} is already registered")


class FlowDefinitionError(WizardFlowError):
    """Raised when a YAML flow definition cannot be loaded or validated."""


class TemplateNotFoundError(WizardFlowError):
    """Raised when a template location cannot be resolved."""
