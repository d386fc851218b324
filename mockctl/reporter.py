"""Reporters through which the mock controller signals test failures."""

from __future__ import annotations

import sys
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any, Protocol


def _format(fmt: str, args: tuple[Any, ...]) -> str:
    return fmt % args if args else fmt


class TestReporter(Protocol):
    """Anything that can report a failure."""

    def errorf(self, fmt: str, *args: Any) -> None:
        """Report a failure and continue."""

    def fatalf(self, fmt: str, *args: Any) -> None:
        """Report a failure and stop the test."""


class FatalError(AssertionError):
    """Raised by a reporter to abort the running test."""


@dataclass
class RaisingReporter:
    """Collects errors and raises :class:`FatalError` on fatal ones."""

    errors: list[str] = field(default_factory=list)

    def errorf(self, fmt: str, *args: Any) -> None:
        self.errors.append(_format(fmt, args))

    def fatalf(self, fmt: str, *args: Any) -> None:
        message = _format(fmt, args)
        self.errors.append(message)
        raise FatalError(message)

    def helper(self) -> None:
        """Mark the caller as a helper; nothing to record here."""


@dataclass
class NopTestHelper:
    """Gives a reporter without ``helper`` a do-nothing one."""

    reporter: Any

    def errorf(self, fmt: str, *args: Any) -> None:
        self.reporter.errorf(fmt, *args)

    def fatalf(self, fmt: str, *args: Any) -> None:
        self.reporter.fatalf(fmt, *args)

    def helper(self) -> None:
        """The wrapped reporter has no helper marking."""


@dataclass
class CancelReporter:
    """Calls ``cancel`` after every fatal failure."""

    reporter: Any
    cancel: Callable[[], None]

    def errorf(self, fmt: str, *args: Any) -> None:
        self.reporter.errorf(fmt, *args)

    def fatalf(self, fmt: str, *args: Any) -> None:
        try:
            self.reporter.fatalf(fmt, *args)
        finally:
            self.cancel()

    def helper(self) -> None:
        self.reporter.helper()


def as_helper(reporter: Any) -> Any:
    """Return ``reporter`` if it has ``helper``, else wrap it."""
    if callable(getattr(reporter, "helper", None)):
        return reporter
    return NopTestHelper(reporter)


def unwrap_reporter(reporter: Any) -> Any:
    """Strip the wrappers this module adds to get the base reporter."""
    if isinstance(reporter, CancelReporter):
        inner = reporter.reporter
        return inner.reporter if isinstance(inner, NopTestHelper) else inner
    if isinstance(reporter, NopTestHelper):
        return reporter.reporter
    return reporter


def cleanup_hook(reporter: Any) -> Callable[[Callable[[], None]], Any] | None:
    """Return the base reporter's ``cleanup`` method, or None if it has none."""
    hook = getattr(unwrap_reporter(reporter), "cleanup", None)
    return hook if callable(hook) else None


def caller_info(skip: int) -> str:
    """Return ``file:line`` of a caller; 0 is the caller of this function."""
    try:
        frame = sys._getframe(skip + 1)
    except ValueError:
        return "unknown file"
    return f"{frame.f_code.co_filename}:{frame.f_lineno}"