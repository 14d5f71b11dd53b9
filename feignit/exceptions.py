"""Exceptions raised by the interception engine."""


class FeignitError(Exception):
    """Base class for all feignit errors."""


class ArgumentNullError(FeignitError, ValueError):
    """Raised when a required argument is None."""

    def __init__(self, argument_name: str):
        self.argument_name = argument_name
        super().__init__(f"Argument '{argument_name}' must not be None")


class UnhandledCallError(FeignitError):
    """Raised when no rule in any chain accepts an intercepted call."""

    def __init__(self, call):
        self.call = call
        super().__init__(f"No rule was applicable to the call {call.method}")


class CallCompletedError(FeignitError):
    """Raised when a completed call is modified."""


class ScopeError(FeignitError):
    """Raised when scopes are closed out of order."""


class FakeError(FeignitError, TypeError):
    """Raised when an object is expected to be a fake but is not."""
