"""Shared test utilities: sample faked types, rules and listeners."""

from abc import ABC, abstractmethod
from typing import Protocol

from feignit import Event, FakeCall, FakeObjectCallRule, InterceptionListener, Method, MethodKind


class Greeter:
    """Concrete class used as a faked type."""

    greeting = "Hello"

    def __init__(self):
        self._name = "world"

    def greet(self, name: str, punctuation: str = "!") -> str:
        return f"{self.greeting}, {name}{punctuation}"

    def count(self) -> int:
        return 42

    def untyped(self):
        return "real"

    def introduce(self) -> str:
        return f"I am {self.name}"

    @staticmethod
    def shout(text: str) -> str:
        return text.upper()

    @property
    def name(self) -> str:
        return self._name

    @name.setter
    def name(self, value: str) -> None:
        self._name = value

    clicked = Event()


class Repository(ABC):
    @abstractmethod
    def get(self, key: str) -> str | None:
        pass

    @abstractmethod
    def keys(self) -> list[str]:
        pass


class Clock(Protocol):
    def now(self) -> float: ...


class Service(ABC):
    @property
    @abstractmethod
    def repository(self) -> Repository:
        pass

    @abstractmethod
    def clock(self) -> Clock:
        pass


def make_call(
    name: str = "greet",
    *args,
    owner: type = Greeter,
    kind: MethodKind = MethodKind.METHOD,
    **kwargs,
) -> FakeCall:
    function = getattr(owner, name, None)
    if isinstance(function, property):
        function = function.fget
    elif not callable(function):
        function = None
    return FakeCall(Method(name, owner, kind, function), args, kwargs)


class ReturnValueRule(FakeObjectCallRule):
    """Test rule returning a fixed value for one method name (or every call)."""

    def __init__(self, value, method_name: str | None = None, max_invocations: int | None = None):
        self.value = value
        self.method_name = method_name
        self._max_invocations = max_invocations
        self.applied_calls = []

    @property
    def max_invocations(self) -> int | None:
        return self._max_invocations

    def is_applicable_to(self, call: FakeCall) -> bool:
        return self.method_name is None or call.method.name == self.method_name

    def apply(self, call: FakeCall) -> None:
        self.applied_calls.append(call)
        call.set_return_value(self.value)

    def __repr__(self) -> str:
        return f"ReturnValueRule({self.value!r})"


class RaisingRule(FakeObjectCallRule):
    def __init__(self, error: Exception):
        self.error = error

    def is_applicable_to(self, call: FakeCall) -> bool:
        return True

    def apply(self, call: FakeCall) -> None:
        raise self.error


class RecordingListener(InterceptionListener):
    """Listener appending (name, phase, ...) tuples to a shared journal."""

    def __init__(self, name: str, journal: list):
        self.name = name
        self.journal = journal

    def on_before_call_intercepted(self, call) -> None:
        self.journal.append((self.name, "before", call))

    def on_after_call_intercepted(self, call, rule_that_handled_call) -> None:
        self.journal.append((self.name, "after", call, rule_that_handled_call))
