"""Events declared on faked types and the helpers used to raise them."""

from collections.abc import Callable
from typing import Any


class Event:
    """
    Declares an event on a class or interface.

    Handlers subscribe with ``obj.clicked += handler`` (or ``obj.clicked.add(handler)``)
    and are called with the sender followed by the event arguments.
    """


class EventRaiser:
    """A pseudo handler that, when subscribed to a fake's event, raises that event."""

    def __init__(self, args: tuple, kwargs: dict[str, Any]):
        self.args = args
        self.kwargs = kwargs

    def __repr__(self) -> str:
        return f"<EventRaiser args={self.args!r} kwargs={self.kwargs!r}>"


def raise_with(*args, **kwargs) -> EventRaiser:
    """
    Build a value that raises an event on a fake when subscribed.

    Example:
        fake.clicked += raise_with("left", count=2)
    """
    return EventRaiser(args, kwargs)


class EventAccessor:
    """Subscription surface a fake exposes for an `Event` member."""

    def __init__(self, name: str, add: Callable[[Any], None], remove: Callable[[Any], None]):
        self.name = name
        self._add = add
        self._remove = remove

    def add(self, handler) -> None:
        self._add(handler)

    def remove(self, handler) -> None:
        self._remove(handler)

    def __iadd__(self, handler):
        self.add(handler)
        return self

    def __isub__(self, handler):
        self.remove(handler)
        return self

    def __repr__(self) -> str:
        return f"<EventAccessor {self.name}>"
