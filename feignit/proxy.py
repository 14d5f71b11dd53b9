"""Creation of fake objects that route every member access into a `FakeManager`."""

import logging
from collections.abc import Callable
from functools import partial
from typing import Any

from .calls import FakeCall, Method, MethodKind
from .config import FeignitSettings, get_settings
from .dummies import DummyValueFactory
from .events import Event, EventAccessor
from .exceptions import FakeError
from .manager import FakeManager
from .object_members import EQUALS, GET_HASH_CODE, TO_STRING
from .scope import ScopeContext

logger = logging.getLogger(__name__)


class CallInterceptedEventRaiser:
    """Signal raised by a fake each time one of its members is called."""

    def __init__(self):
        self._handlers: list[Callable[[FakeCall], None]] = []

    def subscribe(self, handler: Callable[[FakeCall], None]) -> None:
        self._handlers.append(handler)

    def raise_call(self, call: FakeCall) -> None:
        for handler in self._handlers:
            handler(call)


def _find_member(fake_type: type, name: str) -> tuple[type, Any] | None:
    for klass in fake_type.__mro__:
        if klass is object:
            break
        if name in vars(klass):
            return klass, vars(klass)[name]
    return None


def _is_abstract(function: Callable | None) -> bool:
    return function is None or getattr(function, "__isabstractmethod__", False)


def _intercept(
    proxy: "FakeProxy",
    method: Method,
    args: tuple,
    kwargs: dict[str, Any],
    base_invoker: Callable[..., Any] | None,
) -> Any:
    call = FakeCall(method, args, kwargs, base_invoker=base_invoker)
    object.__getattribute__(proxy, "_event_raiser").raise_call(call)
    return call.return_value


class FakeProxy:
    """Stand-in object for a faked type. Use `create_fake` to build one."""

    def __init__(self, fake_type: type, event_raiser: CallInterceptedEventRaiser, tag: Any):
        object.__setattr__(self, "_fake_type", fake_type)
        object.__setattr__(self, "_event_raiser", event_raiser)
        object.__setattr__(self, "tag", tag)

    @property
    def __class__(self):
        return object.__getattribute__(self, "_fake_type")

    def __getattr__(self, name: str) -> Any:
        fake_type = object.__getattribute__(self, "_fake_type")
        member = _find_member(fake_type, name)
        if member is None:
            raise AttributeError(f"Fake {fake_type.__qualname__} has no attribute '{name}'")

        owner, raw = member
        match raw:
            case property():
                method = Method(name, owner, MethodKind.PROPERTY_GET, raw.fget)
                base = None if _is_abstract(raw.fget) else partial(raw.fget, self)
                return _intercept(self, method, (), {}, base)
            case Event():
                return EventAccessor(
                    name,
                    add=partial(self._feignit_subscribe, owner, name, MethodKind.EVENT_ADD),
                    remove=partial(self._feignit_subscribe, owner, name, MethodKind.EVENT_REMOVE),
                )
            case staticmethod():
                return self._feignit_method(owner, name, raw.__func__, raw.__func__)
            case classmethod():
                return self._feignit_method(
                    owner, name, raw.__func__, partial(raw.__func__, fake_type)
                )
            case _ if callable(raw):
                return self._feignit_method(owner, name, raw, partial(raw, self))
            case _:
                return getattr(fake_type, name)

    def __setattr__(self, name: str, value: Any) -> None:
        fake_type = object.__getattribute__(self, "_fake_type")
        member = _find_member(fake_type, name)
        if member is None:
            object.__setattr__(self, name, value)
            return

        owner, raw = member
        match raw:
            case property():
                method = Method(name, owner, MethodKind.PROPERTY_SET, raw.fset)
                base = None if _is_abstract(raw.fset) else partial(raw.fset, self)
                _intercept(self, method, (value,), {}, base)
            case Event():
                # `fake.event += handler` assigns the accessor back after subscribing.
                if not isinstance(value, EventAccessor):
                    raise AttributeError(f"Cannot assign to event '{name}'")
            case _:
                object.__setattr__(self, name, value)

    def _feignit_method(
        self, owner: type, name: str, function: Callable, base: Callable[..., Any]
    ) -> Callable[..., Any]:
        method = Method(name, owner, MethodKind.METHOD, function)
        base_invoker = None if _is_abstract(function) else base

        def invoke(*args, **kwargs):
            return _intercept(self, method, args, kwargs, base_invoker)

        invoke.__name__ = name
        invoke.__qualname__ = f"{owner.__qualname__}.{name}"
        return invoke

    def _feignit_subscribe(self, owner: type, name: str, kind: MethodKind, handler) -> None:
        _intercept(self, Method(name, owner, kind), (handler,), {}, None)

    def __eq__(self, other):
        return _intercept(self, EQUALS, (other,), {}, partial(object.__eq__, self))

    def __hash__(self):
        return _intercept(self, GET_HASH_CODE, (), {}, partial(object.__hash__, self))

    def __str__(self):
        return _intercept(self, TO_STRING, (), {}, partial(object.__str__, self))

    def __repr__(self):
        fake_type = object.__getattribute__(self, "_fake_type")
        return f"<fake {fake_type.__qualname__} at {id(self):#x}>"


def create_fake(
    fake_type: type,
    *,
    scopes: ScopeContext | None = None,
    settings: FeignitSettings | None = None,
) -> Any:
    """
    Create a fake for a class or protocol.

    Args:
        fake_type: The type to fake
        scopes: Scope stack the fake's manager uses; a new one when omitted
        settings: Settings for the manager; loaded from configuration when omitted

    Returns:
        A `FakeProxy` that behaves like an instance of fake_type
    """
    if not isinstance(fake_type, type):
        raise FakeError(f"Can only fake classes, got {fake_type!r}")

    settings = settings or get_settings()
    scopes = scopes or ScopeContext()

    def create_nested_fake(nested_type: type) -> Any:
        return create_fake(nested_type, scopes=scopes, settings=settings)

    manager = FakeManager(
        scopes=scopes,
        settings=settings,
        dummy_factory=DummyValueFactory(fake_factory=create_nested_fake),
    )
    event_raiser = CallInterceptedEventRaiser()
    proxy = FakeProxy(fake_type, event_raiser, manager)
    manager.attach_proxy(fake_type, proxy, event_raiser)

    logger.debug(f"Created fake for {fake_type.__module__}.{fake_type.__qualname__}")
    return proxy


def get_fake_manager(fake: Any) -> FakeManager:
    """Return the manager behind a fake created by `create_fake`."""
    if type(fake) is not FakeProxy:
        raise FakeError(f"{fake!r} is not a fake")
    return object.__getattribute__(fake, "tag")
