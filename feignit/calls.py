"""Intercepted call records.

A call is handed to the manager as a writable `FakeCall`. Exactly one rule
mutates it, after which it is frozen into a `CompletedFakeCall` that is kept
in the call history for the rest of the fake's life.
"""

import itertools
import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any

from .exceptions import CallCompletedError

logger = logging.getLogger(__name__)

_sequence_numbers = itertools.count(1)


class MethodKind(Enum):
    METHOD = "method"
    PROPERTY_GET = "property_get"
    PROPERTY_SET = "property_set"
    EVENT_ADD = "event_add"
    EVENT_REMOVE = "event_remove"


@dataclass(frozen=True)
class Method:
    """Identity of an intercepted member: declaring class, name and kind."""

    name: str
    owner: type
    kind: MethodKind = MethodKind.METHOD
    function: Callable | None = field(default=None, compare=False, repr=False)

    @property
    def full_name(self) -> str:
        return f"{self.owner.__module__}.{self.owner.__qualname__}.{self.name}"

    @property
    def is_property(self) -> bool:
        return self.kind in (MethodKind.PROPERTY_GET, MethodKind.PROPERTY_SET)

    def __str__(self) -> str:
        if self.kind == MethodKind.METHOD:
            return f"{self.full_name}()"
        return f"{self.full_name} [{self.kind.value}]"


@dataclass(frozen=True, eq=False)
class CompletedFakeCall:
    """Immutable record of a call whose interception has finished."""

    method: Method
    arguments: tuple
    keyword_arguments: Mapping[str, Any]
    return_value: Any
    base_method_called: bool
    sequence_number: int

    def __str__(self) -> str:
        return _format_call(self.method, self.arguments, self.keyword_arguments)


class FakeCall:
    """A call being intercepted; writable until it is completed."""

    def __init__(
        self,
        method: Method,
        arguments: tuple = (),
        keyword_arguments: dict[str, Any] | None = None,
        base_invoker: Callable[..., Any] | None = None,
    ):
        self.method = method
        self._arguments = list(arguments)
        self._keyword_arguments = dict(keyword_arguments or {})
        self._base_invoker = base_invoker
        self._return_value: Any = None
        self._base_method_called = False
        self._completed: CompletedFakeCall | None = None
        self.sequence_number = next(_sequence_numbers)

    @property
    def arguments(self) -> tuple:
        return tuple(self._arguments)

    @property
    def keyword_arguments(self) -> dict[str, Any]:
        return dict(self._keyword_arguments)

    @property
    def return_value(self) -> Any:
        return self._return_value

    @property
    def base_method_called(self) -> bool:
        return self._base_method_called

    @property
    def is_completed(self) -> bool:
        return self._completed is not None

    def set_return_value(self, value: Any) -> None:
        self._ensure_writable()
        self._return_value = value

    def set_argument_value(self, index: int | str, value: Any) -> None:
        """
        Set the value of an argument.

        Args:
            index: Position of a positional argument, or the name of a keyword argument
            value: The new value

        Raises:
            IndexError: If there is no positional argument at index
            KeyError: If there is no keyword argument with that name
        """
        self._ensure_writable()
        if isinstance(index, str):
            if index not in self._keyword_arguments:
                raise KeyError(index)
            self._keyword_arguments[index] = value
        else:
            self._arguments[index] = value

    def call_base_method(self) -> None:
        """Invoke the real implementation of the method and use its result as return value."""
        self._ensure_writable()
        if self._base_invoker is None:
            raise NotImplementedError(f"{self.method} has no implementation to call")

        logger.debug(f"Calling base implementation of {self.method}")
        self._base_method_called = True
        self._return_value = self._base_invoker(*self._arguments, **self._keyword_arguments)

    def as_completed(self) -> CompletedFakeCall:
        """Freeze the call. Later calls return the same snapshot."""
        if self._completed is None:
            self._completed = CompletedFakeCall(
                method=self.method,
                arguments=tuple(self._arguments),
                keyword_arguments=MappingProxyType(dict(self._keyword_arguments)),
                return_value=self._return_value,
                base_method_called=self._base_method_called,
                sequence_number=self.sequence_number,
            )
        return self._completed

    def _ensure_writable(self) -> None:
        if self._completed is not None:
            raise CallCompletedError(f"Call to {self.method} has already completed")

    def __repr__(self) -> str:
        return f"<FakeCall {_format_call(self.method, self.arguments, self._keyword_arguments)}>"


def _format_call(method: Method, arguments: tuple, keyword_arguments: Mapping[str, Any]) -> str:
    parts = [repr(arg) for arg in arguments]
    parts.extend(f"{name}={value!r}" for name, value in keyword_arguments.items())
    if method.kind == MethodKind.METHOD:
        return f"{method.full_name}({', '.join(parts)})"
    return f"{method.full_name} [{method.kind.value}]({', '.join(parts)})"
