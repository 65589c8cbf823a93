"""PromptRunner interface - all terminal interaction goes here."""

from abc import ABC, abstractmethod
from typing import List, Optional


class PromptRunner(ABC):
    """Interface for the blocking terminal exchange behind every prompt."""

    @abstractmethod
    def display(self, message: str) -> None:
        """Display a message to the user.

        Args:
            message: Text to display (may contain newlines)
        """
        pass

    @abstractmethod
    def get_input(self, prompt: str, default: Optional[str] = None) -> str:
        """Get input from user.

        Args:
            prompt: Question to ask user
            default: Default value if user presses Enter (shown in [brackets])

        Returns:
            User's input string (or default if empty)
        """
        pass


class ConsoleRunner(PromptRunner):
    """Real implementation - reads stdin and writes stdout.

    ``KeyboardInterrupt`` and ``EOFError`` are not caught here; they abort
    the whole flow run.
    """

    def display(self, message: str) -> None:
        """Print message to stdout."""
        print(message)

    def get_input(self, prompt: str, default: Optional[str] = None) -> str:
        """Read from stdin with optional default."""
        if default:
            full_prompt = f"{prompt} [{default}]: "
        else:
            full_prompt = f"{prompt}: "

        response = input(full_prompt).strip()
        return response if response else (default or "")


class MockPromptRunner(PromptRunner):
    """Mock for testing - records calls and answers from a scripted queue."""

    def __init__(self, input_queue: Optional[List[str]] = None):
        self.calls = []
        self.input_queue = list(input_queue or [])

    def display(self, message: str) -> None:
        """Capture display call for test verification."""
        self.calls.append(('display', message))

    def get_input(self, prompt: str, default: Optional[str] = None) -> str:
        """Return next value from input_queue."""
        self.calls.append(('get_input', prompt, default))

        # Match ConsoleRunner: apply default if response is empty
        if self.input_queue:
            response = self.input_queue.pop(0)
            return response if response else (default or '')

        return default or ''

    @property
    def prompts(self) -> List[str]:
        """Prompt strings passed to get_input, in call order."""
        return [c[1] for c in self.calls if c[0] == 'get_input']
