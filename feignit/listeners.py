"""Observers notified around every intercepted call."""

import logging
from abc import ABC, abstractmethod

from .calls import CompletedFakeCall, FakeCall
from .rules import FakeObjectCallRule


class InterceptionListener(ABC):
    """Observer notified around every call intercepted by a fake manager."""

    @abstractmethod
    def on_before_call_intercepted(self, call: FakeCall) -> None:
        pass

    @abstractmethod
    def on_after_call_intercepted(
        self, call: CompletedFakeCall, rule_that_handled_call: FakeObjectCallRule
    ) -> None:
        pass


class LoggingInterceptionListener(InterceptionListener):
    """Logs each intercepted call and the rule that handled it."""

    def __init__(self, logger: logging.Logger | None = None, level: int = logging.DEBUG):
        self.logger = logger or logging.getLogger(__name__)
        self.level = level

    def on_before_call_intercepted(self, call: FakeCall) -> None:
        self.logger.log(self.level, f"Intercepting {call.method}")

    def on_after_call_intercepted(
        self, call: CompletedFakeCall, rule_that_handled_call: FakeObjectCallRule
    ) -> None:
        self.logger.log(
            self.level,
            f"Call #{call.sequence_number} {call} handled by "
            f"{type(rule_that_handled_call).__name__}, returned {call.return_value!r}",
        )
