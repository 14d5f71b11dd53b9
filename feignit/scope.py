"""
Scopes decide where new user rules are inserted and which calls belong together.

A `ScopeContext` is handed to every fake manager explicitly. Rules added while a
child scope is current are removed again when that scope closes, and the calls
recorded in a child scope are visible only through that scope (and its parents).
"""

import logging
import weakref
from abc import ABC, abstractmethod
from collections.abc import Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING

from .calls import CompletedFakeCall
from .exceptions import ScopeError
from .rules import RuleEntry

if TYPE_CHECKING:
    from .manager import FakeManager

logger = logging.getLogger(__name__)


class FakeScope(ABC):
    def __init__(self):
        self._recorded_calls: weakref.WeakKeyDictionary["FakeManager", list[CompletedFakeCall]] = (
            weakref.WeakKeyDictionary()
        )

    @abstractmethod
    def add_rule_first(self, manager: "FakeManager", entry: RuleEntry) -> None:
        pass

    @abstractmethod
    def add_rule_last(self, manager: "FakeManager", entry: RuleEntry) -> None:
        pass

    def add_intercepted_call(self, manager: "FakeManager", call: CompletedFakeCall) -> None:
        self._recorded_calls.setdefault(manager, []).append(call)

    def get_calls_within_scope(self, manager: "FakeManager") -> tuple[CompletedFakeCall, ...]:
        return tuple(self._recorded_calls.get(manager, ()))

    def close(self) -> None:
        pass


class RootScope(FakeScope):
    """Outermost scope; rules go straight into the manager's user rule chain."""

    def add_rule_first(self, manager: "FakeManager", entry: RuleEntry) -> None:
        manager.all_user_rules.insert(0, entry)

    def add_rule_last(self, manager: "FakeManager", entry: RuleEntry) -> None:
        manager.all_user_rules.append(entry)


class ChildScope(FakeScope):
    """Nested scope whose rules are withdrawn when it closes."""

    def __init__(self, parent: FakeScope):
        super().__init__()
        self.parent = parent
        self._added_rules: list[tuple["FakeManager", RuleEntry]] = []

    def add_rule_first(self, manager: "FakeManager", entry: RuleEntry) -> None:
        self.parent.add_rule_first(manager, entry)
        self._added_rules.append((manager, entry))

    def add_rule_last(self, manager: "FakeManager", entry: RuleEntry) -> None:
        self.parent.add_rule_last(manager, entry)
        self._added_rules.append((manager, entry))

    def add_intercepted_call(self, manager: "FakeManager", call: CompletedFakeCall) -> None:
        super().add_intercepted_call(manager, call)
        self.parent.add_intercepted_call(manager, call)

    def close(self) -> None:
        logger.debug(f"Closing scope, withdrawing {len(self._added_rules)} rule(s)")
        for manager, entry in self._added_rules:
            # The rule may already be gone, e.g. after clear_user_rules().
            if entry in manager.all_user_rules:
                manager.all_user_rules.remove(entry)
        self._added_rules.clear()


class ScopeContext:
    """A stack of scopes; the top of the stack is the current scope."""

    def __init__(self):
        self._scopes: list[FakeScope] = [RootScope()]

    @property
    def current(self) -> FakeScope:
        return self._scopes[-1]

    @property
    def root(self) -> FakeScope:
        return self._scopes[0]

    def push(self) -> ChildScope:
        scope = ChildScope(self.current)
        self._scopes.append(scope)
        return scope

    def pop(self, scope: FakeScope) -> None:
        """
        Close and remove the current scope.

        Raises:
            ScopeError: If scope is not the current scope, or is the root scope
        """
        if scope is self.root:
            raise ScopeError("The root scope cannot be closed")
        if scope is not self.current:
            raise ScopeError("Only the current scope can be closed")

        scope.close()
        self._scopes.pop()

    @contextmanager
    def create_scope(self) -> Iterator[ChildScope]:
        scope = self.push()
        try:
            yield scope
        finally:
            self.pop(scope)
