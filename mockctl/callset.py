"""The set of expected calls held by a controller."""

from __future__ import annotations

import threading
from collections.abc import Hashable, Sequence
from typing import Any

from .call import Call, CallMismatchError


def _key(receiver: Any, method: str) -> tuple[Any, str]:
    """Key calls by receiver value if hashable, else by identity."""
    if isinstance(receiver, Hashable):
        try:
            hash(receiver)
        except TypeError:
            pass
        else:
            return (receiver, method)
    return (("id", id(receiver)), method)


class CallSet:
    """Expected and exhausted calls, indexed by receiver and method name."""

    def __init__(self, allow_override: bool = False) -> None:
        self.allow_override = allow_override
        self._expected: dict[tuple[Any, str], list[Call]] = {}
        self._exhausted: dict[tuple[Any, str], list[Call]] = {}
        self._lock = threading.Lock()

    def add(self, call: Call) -> None:
        """Add a new expected call; it replaces earlier ones if overriding is on."""
        key = _key(call.receiver, call.method)
        with self._lock:
            target = self._exhausted if call.exhausted() else self._expected
            if self.allow_override:
                target[key] = []
            target.setdefault(key, []).append(call)

    def remove(self, call: Call) -> None:
        """Move ``call`` from the expected calls to the exhausted ones."""
        key = _key(call.receiver, call.method)
        with self._lock:
            calls = self._expected.get(key, [])
            for i, candidate in enumerate(calls):
                if candidate is call:
                    del calls[i]
                    self._exhausted.setdefault(key, []).append(call)
                    break

    def find_match(self, receiver: Any, method: str, args: Sequence[Any]) -> Call:
        """Return the first expected call matching ``args``.

        Raises :class:`CallMismatchError` explaining why nothing matched.
        """
        key = _key(receiver, method)
        with self._lock:
            expected = self._expected.get(key, [])
            errors: list[str] = []
            for call in expected:
                try:
                    call.check(args)
                except CallMismatchError as exc:
                    errors.append(f"\n{exc}")
                else:
                    return call

            exhausted = self._exhausted.get(key, [])
            for call in exhausted:
                try:
                    call.check(args)
                except CallMismatchError as exc:
                    errors.append(f"\n{exc}")
                    continue
                errors.append(
                    f'all expected calls for method "{method}" have been exhausted')

            if not expected and not exhausted:
                errors.append(
                    f'there are no expected calls of the method "{method}" for that receiver')

        raise CallMismatchError("".join(errors))

    def failures(self) -> list[Call]:
        """Return the expected calls that have not been made often enough."""
        with self._lock:
            return [call for calls in self._expected.values()
                    for call in calls if not call.satisfied()]

    def satisfied(self) -> bool:
        """Whether every expected call has been made often enough."""
        with self._lock:
            return all(call.satisfied()
                       for calls in self._expected.values() for call in calls)

    def expected_for(self, receiver: Any, method: str) -> list[Call]:
        """Return the calls still expected for ``receiver.method``, in order."""
        with self._lock:
            return list(self._expected.get(_key(receiver, method), []))