"""Module defining custom exceptions for the brewdesk application."""

from __future__ import annotations

import asyncio
import functools
import time
from typing import TYPE_CHECKING, Any, Callable, Self, TypeVar

from brewdesk.core.logging import get_logger

if TYPE_CHECKING:
    from brewdesk.core.classify import TapOutcome

log = get_logger(__name__)

T = TypeVar("T")

# Exit Codes
EXIT_SUCCESS = 0
EXIT_USER_ERROR = 1
EXIT_SYSTEM_ERROR = 2
EXIT_TRANSIENT_ERROR = 3


class BrewError(Exception):
    """Base exception class with context propagation.

    All exceptions in brewdesk should inherit from this class.
    Context is a dictionary that accumulates relevant information
    as the exception propagates up the call stack.

    Example:
        raise BrewError("An error occurred", context={"tap": "foo/bar"})

        # Or with context propagation
        try:
            ...
        except BrewError as e:
            raise e.with_context(operation="untap")
    """
    def __init__(self, message: str, context: dict[str, Any] | None = None) -> None:
        self.message = message
        self.context = context or {}
        super().__init__(message)

    def with_context(self, **new_context: Any) -> Self:
        """Merge additional context into the exception.

        Args:
            **new_context: Additional context to add to the exception.

        Returns:
            The same exception instance with merged context.
        """
        self.context.update(new_context)
        return self

    def __str__(self) -> str:
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{self.message} [{context_str}]"
        return self.message


class TransientError(BrewError):
    """Errors that may succeed when retried.

    These errors are typically due to temporary conditions such as
    network issues or resource unavailability.

    Operations raising this exception should be idempotent.
    """
    pass


class UserError(BrewError):
    """Errors caused by user actions or inputs.

    These should not be retried without correction.
    """
    pass


class SystemError(BrewError):
    """Errors due to system-level issues.

    Missing executables, permission problems and other conditions that need
    the user to fix their environment.
    """
    pass


## Specific Exceptions ##

class BrewCommandError(TransientError):
    """Brew command returned a non-zero exit code.

    Typically indicates:
        - Network issues
        - Brew service outages
        - Rate limiting
        - Corrupted local Brew installation
    """
    def __init__(
        self,
        message: str | None = None,
        command: str | None = None,
        returncode: int | None = None,
        error: str | None = None,
        context: dict[str, Any] | None = None
    ) -> None:
        ctx = context or {}
        if command:
            ctx["command"] = command
        if returncode is not None:
            ctx["returncode"] = returncode
        if error:
            ctx["error"] = error

        if message is None:
            message = f"Brew command failed with exit code {returncode or 'unknown'}"

        super().__init__(message, context=ctx)


class BrewTimeoutError(TransientError):
    """Brew command timed out."""
    def __init__(
        self,
        message: str | None = None,
        command: str | None = None,
        timeout: float | None = None,
        context: dict[str, Any] | None = None
    ) -> None:
        ctx = context or {}
        if command:
            ctx["command"] = command
        if timeout is not None:
            ctx["timeout"] = timeout

        if message is None:
            message = f"Brew command timed out after {timeout or 'unknown'}s"

        super().__init__(message, context=ctx)


class BrewLaunchError(SystemError):
    """The brew executable could not be started.

    Typically indicates:
        - Homebrew is not installed
        - BREWDESK_BREW points at a missing or non-executable file
    """
    def __init__(
        self,
        message: str | None = None,
        command: str | None = None,
        error: str | None = None,
        context: dict[str, Any] | None = None
    ) -> None:
        ctx = context or {}
        if command:
            ctx["command"] = command
        if error:
            ctx["error"] = error

        if message is None:
            message = "Could not launch brew"

        super().__init__(message, context=ctx)


class UntapError(BrewError):
    """A tap could not be removed.

    Raised for every non-successful untap. ``failure_reason`` carries the raw
    text brew printed so it can be shown or logged as-is.
    """
    def __init__(
        self,
        tap_name: str,
        failure_reason: str,
        message: str | None = None,
        context: dict[str, Any] | None = None
    ) -> None:
        self.tap_name = tap_name
        self.failure_reason = failure_reason

        ctx = context or {}
        ctx["tap"] = tap_name
        ctx["error"] = failure_reason

        if message is None:
            message = f"Could not remove tap '{tap_name}'"

        super().__init__(message, context=ctx)


class TapBusyError(UserError):
    """A removal of the same tap is already running."""
    def __init__(self, tap_name: str, context: dict[str, Any] | None = None) -> None:
        self.tap_name = tap_name
        ctx = context or {}
        ctx["tap"] = tap_name
        super().__init__(f"Tap '{tap_name}' is already being removed", context=ctx)


class AddTapError(BrewError):
    """A tap could not be added."""
    def __init__(
        self,
        tap_name: str,
        reason: TapOutcome,
        failure_reason: str = "",
        message: str | None = None,
        context: dict[str, Any] | None = None
    ) -> None:
        self.tap_name = tap_name
        self.reason = reason
        self.failure_reason = failure_reason

        ctx = context or {}
        ctx["tap"] = tap_name
        ctx["reason"] = reason.value
        if failure_reason:
            ctx["error"] = failure_reason

        if message is None:
            message = f"Could not add tap '{tap_name}'"

        super().__init__(message, context=ctx)


def retry_on_transient(
    max_retries: int = 3,
    base_delay: float = 1.0,
    backoff: float = 2.0
) -> Callable[[Callable[..., T]], Callable[..., T]]:
    """Retry functions on transient errors with exponential backoff.

    Args:
        max_retries: Maximum number of attempts before giving up.
        base_delay: Initial delay between retries in seconds.
        backoff: Multiplier for delay to implement exponential backoff.

    Returns:
        A decorator that applies the retry logic to the decorated function.

    Example:
        @retry_on_transient(max_retries=5, base_delay=2.0)
        async def fetch_data():
            ...

    Note:
        - Only retries on TransientError exceptions.
        - Works with sync and async functions.
        - Delays: 1s, 2s, 4s with default settings.
    """
    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        def on_failure(attempt: int, e: TransientError) -> float:
            if attempt == max_retries:
                log.error(
                    "retry_exhausted",
                    function=func.__name__,
                    attempts=max_retries,
                    error=str(e),
                    context=e.context
                )
                raise e

            delay = base_delay * (backoff ** (attempt - 1))
            log.warning(
                "retry_attempt",
                function=func.__name__,
                attempt=attempt,
                max_attempts=max_retries,
                delay_seconds=delay,
                error=str(e),
                context=e.context
            )
            return delay

        @functools.wraps(func)
        async def async_wrapper(*args: Any, **kwargs: Any) -> T:
            for attempt in range(1, max_retries + 1):
                try:
                    return await func(*args, **kwargs)
                except TransientError as e:
                    await asyncio.sleep(on_failure(attempt, e))
            raise AssertionError("unreachable")

        @functools.wraps(func)
        def sync_wrapper(*args: Any, **kwargs: Any) -> T:
            for attempt in range(1, max_retries + 1):
                try:
                    return func(*args, **kwargs)
                except TransientError as e:
                    time.sleep(on_failure(attempt, e))
            raise AssertionError("unreachable")

        if asyncio.iscoroutinefunction(func):
            return async_wrapper  # type: ignore
        else:
            return sync_wrapper  # type: ignore

    return decorator


# CLI Error Message Templates

ERROR_TEMPLATES = {
    TapBusyError: (
        "⏳ Tap {tap} is already being removed\n"
        "   Wait for the running removal to finish"
    ),
    UntapError: (
        "❌ Could not remove tap {tap}\n"
        "   Brew said: {error}"
    ),
    AddTapError: (
        "❌ Could not add tap {tap} ({reason})\n"
        "   Brew said: {error}"
    ),
    BrewTimeoutError: (
        "⚠️ Command timed out after {timeout}s: {command}\n"
        "   The operation took too long - this may be due to network issues"
    ),
    BrewCommandError: (
        "⚠️ Brew command failed: {command}\n"
        "   Exit Code: {returncode}\n"
        "   Error: {error}"
    ),
    BrewLaunchError: (
        "⚠️ Could not run brew: {command}\n"
        "   Error: {error}\n"
        "   Fix: Install Homebrew or point BREWDESK_BREW at the brew executable"
    ),
    TransientError: (
        "⚠️ Temporary failure: {message}\n"
        "   This may resolve itself - try again in a moment"
    ),
    UserError: (
        "❌ {message}"
    ),
    SystemError: (
        "⚠️ System error: {message}\n"
        "   Please check your system configuration and try again"
    ),
    BrewError: (
        "❌ {message}"
    ),
}

def format_error_message(error: BrewError) -> str:
    """Formats an error message for CLI display based on the error type.

    Args:
        error: The BrewError instance to format.

    Returns:
        A formatted string message for CLI display.
    """
    template = ERROR_TEMPLATES.get(type(error), ERROR_TEMPLATES[BrewError])
    try:
        return template.format(message=error.message, **error.context)
    except KeyError:
        return f"❌ {error.message}"
