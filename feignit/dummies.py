"""Dummy values used when a fake has to return something nobody configured."""

import inspect
import logging
import types
import typing
from collections.abc import Callable
from typing import Any, Protocol

from .calls import Method, MethodKind

logger = logging.getLogger(__name__)

_BUILTIN_DUMMIES: dict[type, Callable[[], Any]] = {
    int: int,
    float: float,
    complex: complex,
    bool: bool,
    str: str,
    bytes: bytes,
    list: list,
    dict: dict,
    set: set,
    frozenset: frozenset,
    tuple: tuple,
}


def return_annotation(method: Method) -> Any:
    """
    Resolve the annotated result type of a member.

    Property getters and plain methods report their return annotation. Anything
    that cannot be resolved (builtins, missing or unresolvable annotations) is None.
    """
    function = method.function
    if function is None or method.kind not in (MethodKind.METHOD, MethodKind.PROPERTY_GET):
        return None

    try:
        hints = typing.get_type_hints(function)
    except Exception as e:
        logger.debug(f"Could not resolve type hints of {method}: {e}")
        return None

    return hints.get("return")


class DummyValueFactory:
    """Creates placeholder values for annotated types."""

    def __init__(self, fake_factory: Callable[[type], Any] | None = None):
        self.fake_factory = fake_factory

    def create(self, annotation: Any) -> Any:
        if annotation is None or annotation is type(None) or annotation is Any:
            return None

        origin = typing.get_origin(annotation)
        if origin in (typing.Union, types.UnionType):
            # Optional results default to None, other unions to their first member.
            members = typing.get_args(annotation)
            if type(None) in members:
                return None
            return self.create(members[0])

        if origin is not None:
            annotation = origin

        factory = _BUILTIN_DUMMIES.get(annotation)
        if factory is not None:
            return factory()

        if self.fake_factory is not None and self._is_fakeable(annotation):
            logger.debug(f"Creating nested fake for {annotation!r}")
            return self.fake_factory(annotation)

        return None

    def _is_fakeable(self, annotation: Any) -> bool:
        if not isinstance(annotation, type):
            return False
        if getattr(annotation, "_is_protocol", False) and annotation is not Protocol:
            return True
        return inspect.isabstract(annotation)
