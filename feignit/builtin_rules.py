"""Reserved rules every fake manager installs around the user rules."""

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from .calls import FakeCall, MethodKind
from .dummies import DummyValueFactory, return_annotation
from .events import EventRaiser
from .rules import FakeObjectCallRule, PropertyBehaviorRule, RuleEntry

if TYPE_CHECKING:
    from .manager import FakeManager

logger = logging.getLogger(__name__)


def _remember_property_value(manager: "FakeManager", call: FakeCall, value) -> None:
    # Not routed through the current scope; property state outlives child scopes.
    rule = PropertyBehaviorRule(name=call.method.name, owner=call.method.owner, value=value)
    manager.all_user_rules.insert(0, RuleEntry(rule))


@dataclass
class EventRule(FakeObjectCallRule):
    """Keeps track of event subscriptions and raises events on request."""

    manager: "FakeManager" = field(repr=False, compare=False)
    handlers: dict[str, list] = field(default_factory=dict, repr=False, compare=False)

    def is_applicable_to(self, call: FakeCall) -> bool:
        return call.method.kind in (MethodKind.EVENT_ADD, MethodKind.EVENT_REMOVE)

    def apply(self, call: FakeCall) -> None:
        event_name = call.method.name
        handler = call.arguments[0]

        if call.method.kind == MethodKind.EVENT_REMOVE:
            subscribed = self.handlers.get(event_name, [])
            if handler in subscribed:
                subscribed.remove(handler)
            return

        if isinstance(handler, EventRaiser):
            self._raise(event_name, handler)
        else:
            self.handlers.setdefault(event_name, []).append(handler)

    def _raise(self, event_name: str, raiser: EventRaiser) -> None:
        subscribed = list(self.handlers.get(event_name, []))
        logger.debug(f"Raising event {event_name} to {len(subscribed)} handler(s)")

        sender = self.manager.object
        for handler in subscribed:
            handler(sender, *raiser.args, **raiser.kwargs)


@dataclass
class AutoFakePropertyRule(FakeObjectCallRule):
    """Gives unconfigured property getters a stable dummy value."""

    manager: "FakeManager" = field(repr=False, compare=False)

    def is_applicable_to(self, call: FakeCall) -> bool:
        return call.method.kind == MethodKind.PROPERTY_GET

    def apply(self, call: FakeCall) -> None:
        value = self.manager.dummy_factory.create(return_annotation(call.method))
        call.set_return_value(value)

        _remember_property_value(self.manager, call, value)


@dataclass
class PropertySetterRule(FakeObjectCallRule):
    """Turns the first write to a property into a rule that serves later reads."""

    manager: "FakeManager" = field(repr=False, compare=False)

    def is_applicable_to(self, call: FakeCall) -> bool:
        return call.method.kind == MethodKind.PROPERTY_SET

    def apply(self, call: FakeCall) -> None:
        _remember_property_value(self.manager, call, call.arguments[0])


@dataclass
class DefaultReturnValueRule(FakeObjectCallRule):
    """Catch-all: returns a dummy for the annotated result type."""

    dummy_factory: DummyValueFactory = field(repr=False, compare=False)
    dummy_return_values: bool = True

    def is_applicable_to(self, call: FakeCall) -> bool:
        return True

    def apply(self, call: FakeCall) -> None:
        if not self.dummy_return_values:
            call.set_return_value(None)
            return

        call.set_return_value(self.dummy_factory.create(return_annotation(call.method)))
