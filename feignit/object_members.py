"""Handling of the identity members every object has: equality, hashing and str()."""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from .calls import FakeCall, Method
from .rules import FakeObjectCallRule

if TYPE_CHECKING:
    from .manager import FakeManager

EQUALS = Method(name="__eq__", owner=object, function=object.__eq__)
TO_STRING = Method(name="__str__", owner=object, function=object.__str__)
GET_HASH_CODE = Method(name="__hash__", owner=object, function=object.__hash__)

OBJECT_METHODS = frozenset({EQUALS, TO_STRING, GET_HASH_CODE})


@runtime_checkable
class Taggable(Protocol):
    """Something that carries a tag identifying who owns it."""

    tag: object


@dataclass
class ObjectMemberRule(FakeObjectCallRule):
    """Answers __eq__, __hash__ and __str__ on behalf of the fake manager."""

    manager: "FakeManager" = field(repr=False, compare=False)

    def is_applicable_to(self, call: FakeCall) -> bool:
        return call.method in OBJECT_METHODS

    def apply(self, call: FakeCall) -> None:
        match call.method:
            case method if method == TO_STRING:
                call.set_return_value(self._describe_fake())
            case method if method == GET_HASH_CODE:
                call.set_return_value(hash(self.manager))
            case method if method == EQUALS:
                argument = call.arguments[0]
                if isinstance(argument, Taggable):
                    call.set_return_value(argument.tag == self.manager)
                else:
                    call.set_return_value(False)

    def _describe_fake(self) -> str:
        fake_type = self.manager.fake_type
        type_name = f"{fake_type.__module__}.{fake_type.__qualname__}"
        return self.manager.settings.fake_label_format.format(type_name=type_name)
