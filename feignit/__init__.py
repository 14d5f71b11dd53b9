"""feignit: call interception and rule dispatch for fake objects."""

from .calls import CompletedFakeCall, FakeCall, Method, MethodKind
from .events import Event, raise_with
from .exceptions import (
    ArgumentNullError,
    CallCompletedError,
    FakeError,
    FeignitError,
    ScopeError,
    UnhandledCallError,
)
from .listeners import InterceptionListener, LoggingInterceptionListener
from .manager import FakeManager
from .proxy import create_fake, get_fake_manager
from .rules import FakeObjectCallRule, PropertyBehaviorRule, RuleEntry
from .scope import ScopeContext

__all__ = [
    "ArgumentNullError",
    "CallCompletedError",
    "CompletedFakeCall",
    "Event",
    "FakeCall",
    "FakeError",
    "FakeManager",
    "FakeObjectCallRule",
    "FeignitError",
    "InterceptionListener",
    "LoggingInterceptionListener",
    "Method",
    "MethodKind",
    "PropertyBehaviorRule",
    "RuleEntry",
    "ScopeContext",
    "ScopeError",
    "UnhandledCallError",
    "create_fake",
    "get_fake_manager",
    "raise_with",
]
