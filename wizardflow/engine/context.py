"""WizardContext - the result store threaded through every step of a flow."""

from typing import Any, Dict, Iterator, Optional


class WizardContext:
    """
    Key/value store accumulated across all steps of a flow run.

    Keys are step ids. A later write to an existing key overwrites it; there
    is no remove operation. A fresh context is created for every run and is
    only ever written by one step at a time.
    """

    def __init__(self, values: Optional[Dict[str, Any]] = None):
        self._values: Dict[str, Any] = dict(values) if values else {}

    @classmethod
    def empty(cls) -> "WizardContext":
        return cls()

    def put(self, key: str, value: Any) -> None:
        """Store *value* under *key*, replacing any previous value."""
        self._values[key] = value

    def get(self, key: str, default: Any = None) -> Any:
        """Return the value stored under *key*, or *default* if absent."""
        return self._values.get(key, default)

    def keys(self):
        return self._values.keys()

    def as_dict(self) -> Dict[str, Any]:
        """Snapshot of the stored values."""
        return dict(self._values)

    def __getitem__(self, key: str) -> Any:
        return self._values[key]

    def __contains__(self, key: object) -> bool:
        return key in self._values

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"WizardContext({self._values!r})"


class FlowResult:
    """Outcome of a successful flow run."""

    def __init__(self, context: WizardContext):
        self._context = context

    @property
    def context(self) -> WizardContext:
        return self._context
