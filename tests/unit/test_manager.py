"""Tests for FakeManager rule selection and call interception."""

import gc
import logging
from unittest.mock import Mock, patch

import pytest

from feignit import (
    ArgumentNullError,
    FakeManager,
    FakeObjectCallRule,
    MethodKind,
    PropertyBehaviorRule,
    ScopeContext,
    UnhandledCallError,
)
from feignit.builtin_rules import (
    AutoFakePropertyRule,
    DefaultReturnValueRule,
    EventRule,
    PropertySetterRule,
)
from feignit.config import FeignitSettings
from feignit.object_members import ObjectMemberRule
from tests.utils import Greeter, RaisingRule, RecordingListener, ReturnValueRule, make_call


def _handled_by(journal: list) -> list:
    return [entry[3] for entry in journal if entry[1] == "after"]


class TestFakeManagerInit:
    def test_reserved_rules_in_fixed_order(self, manager):
        assert [type(rule) for rule in manager.pre_user_rules] == [EventRule]
        assert [type(rule) for rule in manager.post_user_rules] == [
            ObjectMemberRule,
            AutoFakePropertyRule,
            PropertySetterRule,
            DefaultReturnValueRule,
        ]

    def test_reserved_rules_bound_to_manager(self, manager):
        assert manager.pre_user_rules[0].manager is manager
        assert manager.post_user_rules[0].manager is manager

    def test_starts_empty(self, manager):
        assert manager.rules == ()
        assert manager.all_recorded_calls == ()
        assert manager.recorded_calls_in_scope == ()

    def test_unattached_manager_has_no_object(self):
        manager = FakeManager()

        assert manager.object is None
        assert manager.fake_type is None
        assert isinstance(manager.scopes, ScopeContext)

    def test_dummy_return_values_setting_passed_to_default_rule(self):
        manager = FakeManager(settings=FeignitSettings(dummy_return_values=False))

        assert manager.post_user_rules[-1].dummy_return_values is False


class TestAttachProxy:
    def test_attach_sets_type_object_and_subscribes(self):
        manager = FakeManager()
        proxy = Greeter()
        event_raiser = Mock()

        manager.attach_proxy(Greeter, proxy, event_raiser)

        assert manager.fake_type is Greeter
        assert manager.object is proxy
        event_raiser.subscribe.assert_called_once_with(manager.intercept)

    def test_object_is_weakly_referenced(self):
        manager = FakeManager()
        proxy = Greeter()
        manager.attach_proxy(Greeter, proxy, Mock())

        del proxy
        gc.collect()

        assert manager.object is None


class TestRuleSelection:
    def test_unconfigured_calls_use_default_rule(self, manager):
        journal = []
        manager.add_interception_listener(RecordingListener("listener", journal))

        calls = [make_call("greet", "bob"), make_call("count"), make_call("untyped")]
        for call in calls:
            manager.intercept(call)

        assert all(isinstance(rule, DefaultReturnValueRule) for rule in _handled_by(journal))
        assert [call.return_value for call in calls] == ["", 0, None]

    def test_rule_added_first_wins_over_earlier_rules(self, manager):
        first = ReturnValueRule("first")
        second = ReturnValueRule("second")
        manager.add_rule_first(first)
        manager.add_rule_first(second)

        call = make_call("greet", "bob")
        manager.intercept(call)

        assert call.return_value == "second"
        assert manager.rules == (second, first)

    def test_rule_added_last_has_lowest_user_priority(self, manager):
        first = ReturnValueRule("first")
        last = ReturnValueRule("last")
        manager.add_rule_first(first)
        manager.add_rule_last(last)

        call = make_call("greet", "bob")
        manager.intercept(call)

        assert call.return_value == "first"
        assert manager.rules == (first, last)

    def test_user_rule_wins_over_reserved_post_rules(self, manager):
        manager.add_rule_first(ReturnValueRule("custom", method_name="__str__"))

        call = make_call("__str__", owner=object)
        manager.intercept(call)

        assert call.return_value == "custom"

    def test_reserved_pre_rule_wins_over_user_rules(self, manager):
        journal = []
        catch_all = ReturnValueRule("user")
        manager.add_rule_first(catch_all)
        manager.add_interception_listener(RecordingListener("listener", journal))

        manager.intercept(make_call("clicked", Mock(), kind=MethodKind.EVENT_ADD))

        assert isinstance(_handled_by(journal)[0], EventRule)
        assert catch_all.applied_calls == []

    def test_inapplicable_user_rule_is_skipped(self, manager):
        manager.add_rule_first(ReturnValueRule("counted", method_name="count"))

        call = make_call("greet", "bob")
        manager.intercept(call)

        assert call.return_value == ""

    def test_rule_with_max_invocations_falls_through_when_exhausted(self, manager):
        limited = ReturnValueRule("limited", max_invocations=2)
        manager.add_rule_first(ReturnValueRule("fallback"))
        manager.add_rule_first(limited)

        results = []
        for _ in range(4):
            call = make_call("greet", "bob")
            manager.intercept(call)
            results.append(call.return_value)

        assert results == ["limited", "limited", "fallback", "fallback"]
        assert len(limited.applied_calls) == 2

    def test_exhausted_rule_falls_through_to_default(self, manager):
        manager.add_rule_first(ReturnValueRule(7, max_invocations=1))

        first = make_call("count")
        second = make_call("count")
        manager.intercept(first)
        manager.intercept(second)

        assert first.return_value == 7
        assert second.return_value == 0

    def test_rule_with_zero_max_invocations_is_never_selected(self, manager):
        rule = ReturnValueRule("never", max_invocations=0)
        manager.add_rule_first(rule)

        manager.intercept(make_call("greet", "bob"))

        assert rule.applied_calls == []

    def test_invocation_count_incremented_once_per_application(self, manager):
        manager.add_rule_first(ReturnValueRule("value"))

        for _ in range(3):
            manager.intercept(make_call("greet", "bob"))

        assert manager.all_user_rules[0].invocation_count == 3

    def test_no_applicable_rule_raises_unhandled_call(self, manager):
        journal = []
        manager.add_interception_listener(RecordingListener("listener", journal))
        call = make_call("greet", "bob")

        with patch.object(DefaultReturnValueRule, "is_applicable_to", return_value=False):
            with pytest.raises(UnhandledCallError) as exc_info:
                manager.intercept(call)

        assert exc_info.value.call is call
        assert manager.all_recorded_calls == ()
        assert [entry[1] for entry in journal] == ["before"]


class TestCallRecording:
    def test_each_interception_recorded_once_in_order(self, manager):
        calls = [make_call("greet", "a"), make_call("count"), make_call("greet", "b")]

        for index, call in enumerate(calls, start=1):
            manager.intercept(call)
            assert len(manager.all_recorded_calls) == index

        assert manager.all_recorded_calls == tuple(call.as_completed() for call in calls)

    def test_recorded_call_is_completed(self, manager):
        call = make_call("greet", "bob")

        manager.intercept(call)

        assert call.is_completed
        assert manager.all_recorded_calls[0] is call.as_completed()
        assert manager.all_recorded_calls[0].return_value == ""

    def test_calls_recorded_in_current_scope(self, manager):
        manager.intercept(make_call("count"))

        assert manager.recorded_calls_in_scope == manager.all_recorded_calls

    def test_rule_error_propagates_after_recording(self, manager):
        error = RuntimeError("boom")
        journal = []
        rule = RaisingRule(error)
        manager.add_rule_first(rule)
        manager.add_interception_listener(RecordingListener("listener", journal))

        with pytest.raises(RuntimeError) as exc_info:
            manager.intercept(make_call("greet", "bob"))

        assert exc_info.value is error
        assert len(manager.all_recorded_calls) == 1
        assert len(manager.recorded_calls_in_scope) == 1
        assert _handled_by(journal) == [rule]

    def test_finalization_error_does_not_mask_rule_error(self, manager, caplog):
        failing_listener = Mock()
        failing_listener.on_after_call_intercepted.side_effect = ValueError("listener failed")
        manager.add_interception_listener(failing_listener)
        manager.add_rule_first(RaisingRule(RuntimeError("rule failed")))

        with caplog.at_level(logging.ERROR, logger="feignit.manager"):
            with pytest.raises(RuntimeError, match="rule failed"):
                manager.intercept(make_call("greet", "bob"))

        assert "re-raising the rule error" in caplog.text
        assert len(manager.all_recorded_calls) == 1

    def test_finalization_error_without_rule_error_propagates(self, manager):
        failing_listener = Mock()
        failing_listener.on_after_call_intercepted.side_effect = ValueError("listener failed")
        manager.add_interception_listener(failing_listener)

        with pytest.raises(ValueError, match="listener failed"):
            manager.intercept(make_call("greet", "bob"))

    def test_reentrant_interception_records_in_completion_order(self, manager):
        class NestedCallRule(FakeObjectCallRule):
            def is_applicable_to(self, call):
                return call.method.name == "greet"

            def apply(self, call):
                manager.intercept(make_call("count"))
                call.set_return_value("outer")

        manager.add_rule_first(NestedCallRule())

        outer = make_call("greet", "bob")
        manager.intercept(outer)

        assert outer.return_value == "outer"
        assert [call.method.name for call in manager.all_recorded_calls] == ["count", "greet"]

    def test_reentrant_interception_on_other_manager(self, manager):
        other = FakeManager()

        class DelegatingRule(FakeObjectCallRule):
            def is_applicable_to(self, call):
                return True

            def apply(self, call):
                inner = make_call("count")
                other.intercept(inner)
                call.set_return_value(inner.return_value + 1)

        manager.add_rule_first(DelegatingRule())

        call = make_call("count")
        manager.intercept(call)

        assert call.return_value == 1
        assert len(manager.all_recorded_calls) == 1
        assert len(other.all_recorded_calls) == 1
        assert other.all_recorded_calls[0].sequence_number > call.sequence_number


class TestInterceptionListeners:
    def test_before_newest_first_after_oldest_first(self, manager):
        journal = []
        manager.add_interception_listener(RecordingListener("L1", journal))
        manager.add_interception_listener(RecordingListener("L2", journal))

        manager.intercept(make_call("greet", "bob"))

        assert [(entry[0], entry[1]) for entry in journal] == [
            ("L2", "before"),
            ("L1", "before"),
            ("L1", "after"),
            ("L2", "after"),
        ]

    def test_listeners_receive_writable_then_completed_call(self, manager):
        journal = []
        manager.add_interception_listener(RecordingListener("listener", journal))
        call = make_call("greet", "bob")

        manager.intercept(call)

        assert journal[0][2] is call
        assert journal[1][2] is call.as_completed()
        assert isinstance(journal[1][3], DefaultReturnValueRule)

    def test_before_phase_runs_before_rule_is_applied(self, manager):
        seen = []
        listener = Mock()
        listener.on_before_call_intercepted.side_effect = lambda call: seen.append(
            call.is_completed
        )
        manager.add_interception_listener(listener)

        manager.intercept(make_call("count"))

        assert seen == [False]


class TestRuleConfiguration:
    def test_add_rule_delegates_to_current_scope(self, manager):
        manager.scopes = Mock()
        rule = ReturnValueRule("value")

        manager.add_rule_first(rule)
        manager.add_rule_last(rule)

        first_args = manager.scopes.current.add_rule_first.call_args.args
        last_args = manager.scopes.current.add_rule_last.call_args.args
        assert first_args[0] is manager
        assert first_args[1].rule is rule
        assert first_args[1].invocation_count == 0
        assert last_args[1] is not first_args[1]

    def test_remove_rule_none_raises(self, manager):
        with pytest.raises(ArgumentNullError, match="rule"):
            manager.remove_rule(None)

    def test_remove_rule_none_is_value_error(self, manager):
        with pytest.raises(ValueError):
            manager.remove_rule(None)

    def test_remove_unregistered_rule_is_noop(self, manager):
        rule = ReturnValueRule("kept")
        manager.add_rule_first(rule)

        manager.remove_rule(ReturnValueRule("other"))

        assert manager.rules == (rule,)

    def test_remove_rule_removes_first_equal_rule_only(self, manager):
        manager.add_rule_last(PropertyBehaviorRule("name", Greeter, "a"))
        manager.add_rule_last(PropertyBehaviorRule("name", Greeter, "a"))
        manager.add_rule_last(PropertyBehaviorRule("name", Greeter, "b"))

        manager.remove_rule(PropertyBehaviorRule("name", Greeter, "a"))

        assert [rule.value for rule in manager.rules] == ["a", "b"]

    def test_clear_user_rules_keeps_reserved_rules(self, manager):
        manager.add_rule_first(ReturnValueRule("one"))
        manager.add_rule_first(ReturnValueRule("two"))
        journal = []
        manager.add_interception_listener(RecordingListener("listener", journal))

        manager.clear_user_rules()
        manager.intercept(make_call("greet", "bob"))
        manager.intercept(make_call("clicked", Mock(), kind=MethodKind.EVENT_ADD))

        assert manager.rules == ()
        assert len(manager.pre_user_rules) == 1
        assert len(manager.post_user_rules) == 4
        handled = _handled_by(journal)
        assert isinstance(handled[0], DefaultReturnValueRule)
        assert isinstance(handled[1], EventRule)


class TestMoveRuleToFront:
    def test_moves_user_rule_keeping_invocation_count(self, manager):
        first = ReturnValueRule("first")
        second = ReturnValueRule("second")
        manager.add_rule_first(first)
        manager.intercept(make_call("greet", "bob"))
        manager.add_rule_first(second)

        manager.move_rule_to_front(first)

        assert manager.rules == (first, second)
        assert manager.all_user_rules[0].invocation_count == 1

    def test_reserved_rule_stays_in_place(self, manager):
        user_rule = ReturnValueRule("user")
        manager.add_rule_first(user_rule)
        default_rule = manager.post_user_rules[-1]

        manager.move_rule_to_front(default_rule)

        assert manager.rules == (user_rule,)
        assert manager.post_user_rules[-1] is default_rule

    def test_unknown_rule_raises(self, manager):
        with pytest.raises(ValueError, match="not registered"):
            manager.move_rule_to_front(ReturnValueRule("unknown"))

    def test_matches_by_identity(self, manager):
        registered = PropertyBehaviorRule("name", Greeter, "a")
        manager.add_rule_first(registered)

        with pytest.raises(ValueError):
            manager.move_rule_to_front(PropertyBehaviorRule("name", Greeter, "a"))
