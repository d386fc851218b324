"""Matchers describing the arguments a mocked method is expected to receive."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any


def _type_name(value: Any) -> str:
    cls = type(value)
    if cls.__module__ == "builtins":
        return cls.__qualname__
    return f"{cls.__module__.rpartition('.')[2]}.{cls.__qualname__}"


def _compatible(first: type, second: type) -> bool:
    """Whether values of the two types may be compared for equality."""
    if (first is bool) != (second is bool):
        return False
    return issubclass(first, second) or issubclass(second, first)


class Matcher(ABC):
    """A class of values accepted as an argument to a mocked method."""

    @abstractmethod
    def matches(self, x: Any) -> bool:
        """Return whether ``x`` belongs to the class of values."""


class GotFormatter(ABC):
    """Formats a received value for failure messages."""

    @abstractmethod
    def got(self, got: Any) -> str:
        """Describe the received value."""


@dataclass(frozen=True)
class AnyMatcher(Matcher):
    """Matches every value."""

    def matches(self, x: Any) -> bool:
        return True

    def __str__(self) -> str:
        return "is anything"


@dataclass(frozen=True)
class EqMatcher(Matcher):
    """Matches values equal to ``x`` and of a compatible type."""

    x: Any

    def matches(self, x: Any) -> bool:
        expected = self.x
        if expected is None or x is None:
            return expected is x
        if not _compatible(type(expected), type(x)):
            return False
        try:
            return bool(expected == x)
        except Exception:
            return False

    def __str__(self) -> str:
        return f"is equal to {self.x} ({_type_name(self.x)})"


@dataclass(frozen=True)
class NilMatcher(Matcher):
    """Matches ``None``."""

    def matches(self, x: Any) -> bool:
        return x is None

    def __str__(self) -> str:
        return "is None"


@dataclass(frozen=True)
class NotMatcher(Matcher):
    """Inverts another matcher."""

    matcher: Matcher

    def matches(self, x: Any) -> bool:
        return not self.matcher.matches(x)

    def __str__(self) -> str:
        return f"not({self.matcher})"


@dataclass(frozen=True)
class AssignableToTypeOfMatcher(Matcher):
    """Matches instances of ``target_type``."""

    target_type: type

    def matches(self, x: Any) -> bool:
        return isinstance(x, self.target_type)

    def __str__(self) -> str:
        return f"is assignable to {self.target_type.__name__}"


@dataclass(frozen=True)
class AllMatcher(Matcher):
    """Matches when every one of its matchers does."""

    matchers: tuple[Matcher, ...]

    def matches(self, x: Any) -> bool:
        return all(m.matches(x) for m in self.matchers)

    def __str__(self) -> str:
        return "; ".join(str(m) for m in self.matchers)


@dataclass(frozen=True)
class LenMatcher(Matcher):
    """Matches sized values of length ``n``."""

    n: int

    def matches(self, x: Any) -> bool:
        try:
            return len(x) == self.n
        except TypeError:
            return False

    def __str__(self) -> str:
        return f"has length {self.n}"


def _is_collection(value: Any) -> bool:
    return isinstance(value, (list, tuple))


@dataclass(frozen=True)
class InAnyOrderMatcher(Matcher):
    """Matches lists or tuples holding the same elements in any order."""

    x: Any

    def matches(self, x: Any) -> bool:
        if not (_is_collection(x) and _is_collection(self.x)):
            return False
        given = list(x)
        wanted = list(self.x)
        if len(given) != len(wanted):
            return False
        used = [False] * len(given)
        for item in wanted:
            matcher = EqMatcher(item)
            for j, candidate in enumerate(given):
                if not used[j] and matcher.matches(candidate):
                    used[j] = True
                    break
            else:
                return False
        return all(used)

    def __str__(self) -> str:
        return f"has the same elements as {self.x}"


@dataclass(frozen=True)
class WantFormattedMatcher(Matcher):
    """A matcher whose description comes from ``stringer``."""

    stringer: Any
    matcher: Matcher

    def matches(self, x: Any) -> bool:
        return self.matcher.matches(x)

    def __str__(self) -> str:
        if callable(self.stringer):
            return str(self.stringer())
        return str(self.stringer)


@dataclass(frozen=True)
class GotFormattedMatcher(Matcher, GotFormatter):
    """A matcher that formats received values with ``formatter``."""

    formatter: GotFormatter | Callable[[Any], str]
    matcher: Matcher

    def matches(self, x: Any) -> bool:
        return self.matcher.matches(x)

    def got(self, got: Any) -> str:
        if isinstance(self.formatter, GotFormatter):
            return self.formatter.got(got)
        return self.formatter(got)

    def __str__(self) -> str:
        return str(self.matcher)


def want_formatter(stringer: Any, matcher: Matcher) -> Matcher:
    """Describe ``matcher`` with ``stringer`` (a string, object or no-argument callable)."""
    return WantFormattedMatcher(stringer, matcher)


def got_formatter_adapter(
    formatter: GotFormatter | Callable[[Any], str], matcher: Matcher
) -> Matcher:
    """Attach a formatter for received values to ``matcher``."""
    return GotFormattedMatcher(formatter, matcher)


def format_got(matcher: Matcher, arg: Any) -> str:
    """Describe a received argument the way ``matcher`` wants it shown."""
    if isinstance(matcher, GotFormatter):
        return matcher.got(arg)
    return f"{arg} ({_type_name(arg)})"


def all_of(*args: Matcher) -> Matcher:
    """Match only when all of the given matchers match."""
    return AllMatcher(tuple(args))


def any_value() -> Matcher:
    """Match anything."""
    return AnyMatcher()


def eq(x: Any) -> Matcher:
    """Match values equal to ``x``."""
    return EqMatcher(x)


def has_len(n: int) -> Matcher:
    """Match sized values of length ``n``."""
    return LenMatcher(n)


def is_none() -> Matcher:
    """Match ``None``."""
    return NilMatcher()


def not_(x: Any) -> Matcher:
    """Invert a matcher, or match anything not equal to a plain value."""
    if isinstance(x, Matcher):
        return NotMatcher(x)
    return NotMatcher(EqMatcher(x))


def assignable_to_type_of(x: Any) -> Matcher:
    """Match instances of ``x`` if it is a type, else of ``type(x)``."""
    if isinstance(x, type):
        return AssignableToTypeOfMatcher(x)
    return AssignableToTypeOfMatcher(type(x))


def in_any_order(x: Any) -> Matcher:
    """Match collections holding the same elements as ``x`` in any order."""
    return InAnyOrderMatcher(x)


def as_matcher(arg: Any) -> Matcher:
    """Turn an expected argument into a matcher."""
    if isinstance(arg, Matcher):
        return arg
    if arg is None:
        return NilMatcher()
    return EqMatcher(arg)