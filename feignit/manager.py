"""The fake manager: intercepts calls made to a fake and dispatches them to rules."""

import logging
import weakref
from collections.abc import Iterator
from typing import Any

from .builtin_rules import (
    AutoFakePropertyRule,
    DefaultReturnValueRule,
    EventRule,
    PropertySetterRule,
)
from .calls import CompletedFakeCall, FakeCall
from .config.models import FeignitSettings
from .dummies import DummyValueFactory
from .exceptions import ArgumentNullError, UnhandledCallError
from .listeners import InterceptionListener
from .object_members import ObjectMemberRule
from .rules import FakeObjectCallRule, RuleEntry
from .scope import ScopeContext

logger = logging.getLogger(__name__)


class FakeManager:
    """
    Handles every call made to one fake object by means of a set of rules.

    Rules are consulted in three chains: reserved rules that always run first,
    the user rules in priority order, and reserved rules that supply the default
    behavior. The first applicable rule that has not used up its invocations wins.
    """

    def __init__(
        self,
        scopes: ScopeContext | None = None,
        settings: FeignitSettings | None = None,
        dummy_factory: DummyValueFactory | None = None,
    ):
        self.scopes = scopes or ScopeContext()
        self.settings = settings or FeignitSettings()
        self.dummy_factory = dummy_factory or DummyValueFactory()
        self.fake_type: type | None = None
        self._object_reference: weakref.ref | None = None

        self._pre_user_rules = (RuleEntry(EventRule(self)),)
        self.all_user_rules: list[RuleEntry] = []
        self._post_user_rules = (
            RuleEntry(ObjectMemberRule(self)),
            RuleEntry(AutoFakePropertyRule(self)),
            RuleEntry(PropertySetterRule(self)),
            RuleEntry(
                DefaultReturnValueRule(
                    self.dummy_factory, dummy_return_values=self.settings.dummy_return_values
                )
            ),
        )

        self._recorded_calls: list[CompletedFakeCall] = []
        self._interception_listeners: list[InterceptionListener] = []

    @property
    def object(self) -> Any:
        """The faked object, or None once it has been garbage collected."""
        if self._object_reference is None:
            return None
        return self._object_reference()

    @property
    def rules(self) -> tuple[FakeObjectCallRule, ...]:
        """The user rules, highest priority first."""
        return tuple(entry.rule for entry in self.all_user_rules)

    @property
    def pre_user_rules(self) -> tuple[FakeObjectCallRule, ...]:
        return tuple(entry.rule for entry in self._pre_user_rules)

    @property
    def post_user_rules(self) -> tuple[FakeObjectCallRule, ...]:
        return tuple(entry.rule for entry in self._post_user_rules)

    @property
    def recorded_calls_in_scope(self) -> tuple[CompletedFakeCall, ...]:
        return self.scopes.current.get_calls_within_scope(self)

    @property
    def all_recorded_calls(self) -> tuple[CompletedFakeCall, ...]:
        return tuple(self._recorded_calls)

    def _all_rules(self) -> Iterator[RuleEntry]:
        yield from self._pre_user_rules
        yield from self.all_user_rules
        yield from self._post_user_rules

    def attach_proxy(self, fake_type: type, proxy: Any, event_raiser) -> None:
        """Bind this manager to a fake. Must be called exactly once."""
        self._object_reference = weakref.ref(proxy)
        self.fake_type = fake_type

        event_raiser.subscribe(self.intercept)

    def add_rule_first(self, rule: FakeObjectCallRule) -> None:
        """Add a rule with the highest priority among the user rules."""
        self.scopes.current.add_rule_first(self, RuleEntry(rule))

    def add_rule_last(self, rule: FakeObjectCallRule) -> None:
        """Add a rule with the lowest priority among the user rules."""
        self.scopes.current.add_rule_last(self, RuleEntry(rule))

    def remove_rule(self, rule: FakeObjectCallRule) -> None:
        if rule is None:
            raise ArgumentNullError("rule")

        for entry in self.all_user_rules:
            if entry.rule == rule:
                self.all_user_rules.remove(entry)
                return

    def clear_user_rules(self) -> None:
        self.all_user_rules.clear()

    def move_rule_to_front(self, rule: FakeObjectCallRule) -> None:
        """
        Give a user rule the highest priority, keeping its invocation count.

        Reserved rules keep their position.

        Raises:
            ValueError: If the rule is not known to this manager
        """
        for entry in self._all_rules():
            if entry.rule is rule:
                break
        else:
            raise ValueError(f"Rule {rule!r} is not registered with this fake")

        if entry in self.all_user_rules:
            self.all_user_rules.remove(entry)
            self.all_user_rules.insert(0, entry)

    def add_interception_listener(self, listener: InterceptionListener) -> None:
        self._interception_listeners.insert(0, listener)

    def intercept(self, call: FakeCall) -> None:
        self._on_before_call_intercepted(call)

        entry = self._select_rule_to_use(call)

        try:
            self._apply_rule(entry, call)
        except BaseException:
            try:
                self._finish_call(call, entry.rule)
            except Exception:
                logger.exception(
                    f"Recording of {call.method} failed while its rule raised; "
                    "re-raising the rule error"
                )
            raise

        self._finish_call(call, entry.rule)

    def _select_rule_to_use(self, call: FakeCall) -> RuleEntry:
        for entry in self._all_rules():
            if entry.rule.is_applicable_to(call) and entry.has_invocations_remaining():
                return entry

        raise UnhandledCallError(call)

    def _apply_rule(self, entry: RuleEntry, call: FakeCall) -> None:
        logger.debug(f"Applying rule {entry.rule!r} to {call.method}")
        entry.invocation_count += 1
        entry.rule.apply(call)

    def _finish_call(self, call: FakeCall, rule: FakeObjectCallRule) -> None:
        completed = call.as_completed()
        self.scopes.current.add_intercepted_call(self, completed)
        self._recorded_calls.append(completed)

        self._on_after_call_intercepted(completed, rule)

    def _on_before_call_intercepted(self, call: FakeCall) -> None:
        for listener in self._interception_listeners:
            listener.on_before_call_intercepted(call)

    def _on_after_call_intercepted(
        self, call: CompletedFakeCall, rule_that_handled_call: FakeObjectCallRule
    ) -> None:
        for listener in reversed(self._interception_listeners):
            listener.on_after_call_intercepted(call, rule_that_handled_call)

    def __repr__(self) -> str:
        type_name = self.fake_type.__qualname__ if self.fake_type is not None else "unattached"
        return f"<FakeManager {type_name}>"
