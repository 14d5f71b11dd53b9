"""The rule interface and the entries that rule chains store."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

from .calls import FakeCall, MethodKind


class FakeObjectCallRule(ABC):
    """A behavior that can handle calls made to a fake."""

    @property
    def max_invocations(self) -> int | None:
        """Number of times the rule may fire, or None for no limit."""
        return None

    @abstractmethod
    def is_applicable_to(self, call: FakeCall) -> bool:
        pass

    @abstractmethod
    def apply(self, call: FakeCall) -> None:
        pass


@dataclass(eq=False)
class RuleEntry:
    """A rule as stored in a rule chain, together with how often it has fired."""

    rule: FakeObjectCallRule
    invocation_count: int = 0

    def has_invocations_remaining(self) -> bool:
        max_invocations = self.rule.max_invocations
        return max_invocations is None or self.invocation_count < max_invocations


@dataclass
class PropertyBehaviorRule(FakeObjectCallRule):
    """Makes a property behave like a plain attribute: reads return the last written value."""

    name: str
    owner: type
    value: Any = None

    def is_applicable_to(self, call: FakeCall) -> bool:
        method = call.method
        return method.is_property and method.name == self.name and method.owner is self.owner

    def apply(self, call: FakeCall) -> None:
        if call.method.kind == MethodKind.PROPERTY_SET:
            self.value = call.arguments[0]
        else:
            call.set_return_value(self.value)
