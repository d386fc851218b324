"""Expected calls to a mocked method and the actions they run."""

from __future__ import annotations

import types
import typing
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any

from .matchers import Matcher, as_matcher, format_got
from .reporter import caller_info

UNLIMITED = 10**8

Action = Callable[[list[Any]], "list[Any] | None"]

_IMMUTABLE = (int, float, complex, str, bytes, bool, tuple, frozenset, type(None))

_CO_VARARGS = 0x04


@dataclass(frozen=True)
class MethodSignature:
    """Parameter and return shape of a mocked method."""

    params: tuple[Any, ...] = ()
    variadic: bool = False
    returns: tuple[Any, ...] = ()

    @property
    def num_in(self) -> int:
        return len(self.params)

    @property
    def num_out(self) -> int:
        return len(self.returns)


def _function_parts(func: Callable[..., Any]) -> tuple[Any, int]:
    """Return the plain function behind ``func`` and how many leading params are bound."""
    if isinstance(func, types.FunctionType):
        return func, 0
    if isinstance(func, types.MethodType):
        return func.__func__, 1
    call = getattr(type(func), "__call__", None)
    if not isinstance(func, type) and isinstance(call, types.FunctionType):
        return call, 1
    raise TypeError(f"cannot describe the signature of {func!r}")


def _is_none_annotation(ann: Any) -> bool:
    return ann is None or ann is type(None) or ann == "None"


def signature_of(func: Callable[..., Any]) -> MethodSignature:
    """Describe ``func``: one parameter per positional argument, ``*args`` last."""
    target, bound = _function_parts(func)
    code = target.__code__
    annotations = dict(getattr(target, "__annotations__", None) or {})
    names = list(code.co_varnames[: code.co_argcount])[bound:]
    params: list[Any] = [annotations.get(name, Any) for name in names]
    variadic = bool(code.co_flags & _CO_VARARGS)
    if variadic:
        star_name = code.co_varnames[code.co_argcount + code.co_kwonlyargcount]
        params.append(annotations.get(star_name, Any))
    if "return" not in annotations or _is_none_annotation(annotations["return"]):
        returns: tuple[Any, ...] = ()
    else:
        ann = annotations["return"]
        if typing.get_origin(ann) is tuple:
            returns = tuple(typing.get_args(ann))
        else:
            returns = (ann,)
    return MethodSignature(tuple(params), variadic, returns)


def _zero(tp: Any) -> Any:
    if isinstance(tp, type) and tp is not type(None):
        try:
            return tp()
        except Exception:
            return None
    return None


def _arity(f: Callable[..., Any]) -> tuple[int, bool] | None:
    try:
        sig = signature_of(f)
    except TypeError:
        return None
    return sig.num_in, sig.variadic


class CallMismatchError(Exception):
    """An actual call does not match an expected one."""


_MISSING = object()


class Call:
    """An expected call to a mocked method."""

    def __init__(self, reporter: Any, receiver: Any, method: str,
                 signature: MethodSignature, *args: Any) -> None:
        self.reporter = reporter
        self.receiver = receiver
        self.method = method
        self.signature = signature
        self.args: list[Matcher] = [as_matcher(a) for a in args]
        self.origin = caller_info(2)
        self.prereqs: list[Call] = []
        self.min_calls = 1
        self.max_calls = 1
        self.num_calls = 0
        self.actions: list[Action] = [
            lambda _args: [_zero(t) for t in signature.returns]
        ]

    def _name(self) -> str:
        return f"{type(self.receiver).__name__}.{self.method}"

    def any_times(self) -> Call:
        self.min_calls, self.max_calls = 0, UNLIMITED
        return self

    def min_times(self, n: int) -> Call:
        self.min_calls = n
        if self.max_calls == 1:
            self.max_calls = UNLIMITED
        return self

    def max_times(self, n: int) -> Call:
        self.max_calls = n
        if self.min_calls == 1:
            self.min_calls = 0
        return self

    def times(self, n: int) -> Call:
        self.min_calls = self.max_calls = n
        return self

    def _run(self, kind: str, f: Callable[..., Any], args: list[Any]) -> Any:
        if not callable(f):
            raise TypeError(f"{kind} action {f!r} is not callable")
        arity = _arity(f)
        if arity is not None:
            num_in, variadic = arity
            if num_in != self.signature.num_in:
                if variadic:
                    self.reporter.fatalf(
                        "wrong number of arguments in %s func for %s The function signature "
                        "must match the mocked method, a variadic function cannot be used.",
                        kind, self._name())
                else:
                    self.reporter.fatalf(
                        "wrong number of arguments in %s func for %s: got %d, want %d [%s]",
                        kind, self._name(), num_in, self.signature.num_in, self.origin)
                return _MISSING
        return f(*args)

    def do_and_return(self, f: Callable[..., Any]) -> Call:
        """Run ``f`` with the call's arguments and return its result."""
        def action(args: list[Any]) -> list[Any] | None:
            result = self._run("DoAndReturn", f, args)
            if result is _MISSING:
                return None
            n = self.signature.num_out
            if n == 0:
                return []
            if n > 1 and isinstance(result, tuple):
                return list(result)
            return [result]
        self.actions.append(action)
        return self

    def do(self, f: Callable[..., Any]) -> Call:
        """Run ``f`` with the call's arguments, ignoring its result."""
        def action(args: list[Any]) -> None:
            self._run("Do", f, args)
            return None
        self.actions.append(action)
        return self

    def returns(self, *args: Any) -> Call:
        """Declare the values the mocked method returns."""
        want = self.signature.returns
        if len(args) != len(want):
            self.reporter.fatalf(
                "wrong number of arguments to Return for %s: got %d, want %d [%s]",
                self._name(), len(args), len(want), self.origin)
        for i, (ret, tp) in enumerate(zip(args, want)):
            if ret is None or not isinstance(tp, type) or tp is type(None):
                continue
            if not isinstance(ret, tp):
                self.reporter.fatalf(
                    "wrong type of argument %d to Return for %s: %s is not assignable to %s [%s]",
                    i, self._name(), type(ret).__name__, tp.__name__, self.origin)
        rets = list(args)
        self.actions.append(lambda _args: rets)
        return self

    def set_arg(self, n: int, value: Any) -> Call:
        """Overwrite the contents of the mutable ``n``th argument with ``value``."""
        if n < 0 or n >= self.signature.num_in:
            self.reporter.fatalf("SetArg(%d, ...) called for a method with %d args [%s]",
                                 n, self.signature.num_in, self.origin)
            return self
        tp = self.signature.params[n]
        if isinstance(tp, type) and issubclass(tp, _IMMUTABLE):
            self.reporter.fatalf(
                "SetArg(%d, ...) referring to argument of immutable type %s [%s]",
                n, tp.__name__, self.origin)
            return self

        def action(args: list[Any]) -> None:
            target = args[n]
            if isinstance(target, (list, bytearray)):
                target[: len(value)] = value
            elif isinstance(target, (dict, set)):
                target.clear()
                target.update(value)
            elif hasattr(target, "__dict__"):
                target.__dict__.update(vars(value))
            else:
                raise TypeError(f"cannot set argument of type {type(target).__name__}")
            return None
        self.actions.append(action)
        return self

    def is_prereq(self, other: Call) -> bool:
        """Whether ``other`` is a direct or indirect prerequisite of this call."""
        return any(other is p or p.is_prereq(other) for p in self.prereqs)

    def after(self, prereq: Call) -> Call:
        """Allow this call only once ``prereq`` has been satisfied."""
        if self is prereq:
            self.reporter.fatalf("A call isn't allowed to be its own prerequisite")
            return self
        if prereq.is_prereq(self):
            self.reporter.fatalf(
                "Loop in call order: %s is a prerequisite to %s (possibly indirectly).",
                self, prereq)
            return self
        self.prereqs.append(prereq)
        return self

    def satisfied(self) -> bool:
        return self.num_calls >= self.min_calls

    def exhausted(self) -> bool:
        return self.num_calls >= self.max_calls

    def __str__(self) -> str:
        return f"{self._name()}({', '.join(str(a) for a in self.args)}) {self.origin}"

    def _mismatch(self, i: int, m: Matcher, got: Any, want: Any) -> CallMismatchError:
        return CallMismatchError(
            f"expected call at {self.origin} doesn't match the argument at index {i}.\n"
            f"Got: {format_got(m, got)}\nWant: {want}")

    def check(self, args: Sequence[Any]) -> None:
        """Raise :class:`CallMismatchError` unless ``args`` match this call now."""
        args = list(args)
        sig = self.signature
        if not sig.variadic:
            if len(args) != len(self.args):
                raise CallMismatchError(
                    f"expected call at {self.origin} has the wrong number of arguments. "
                    f"Got: {len(args)}, want: {len(self.args)}")
            for i, (m, a) in enumerate(zip(self.args, args)):
                if not m.matches(a):
                    raise self._mismatch(i, m, a, m)
        else:
            fixed = sig.num_in - 1
            if len(self.args) < fixed:
                raise CallMismatchError(
                    f"expected call at {self.origin} has the wrong number of matchers. "
                    f"Got: {len(self.args)}, want: {fixed}")
            if len(self.args) != sig.num_in and len(args) != len(self.args):
                raise CallMismatchError(
                    f"expected call at {self.origin} has the wrong number of arguments. "
                    f"Got: {len(args)}, want: {len(self.args)}")
            if len(args) < len(self.args) - 1:
                raise CallMismatchError(
                    f"expected call at {self.origin} has the wrong number of arguments. "
                    f"Got: {len(args)}, want: greater than or equal to {len(self.args) - 1}")
            for i, m in enumerate(self.args):
                if i < fixed:
                    if not m.matches(args[i]):
                        raise self._mismatch(i, m, args[i], m)
                    continue
                if i < len(args) and m.matches(args[i]):
                    continue
                rest = args[i:]
                if m.matches(rest):
                    break
                raise self._mismatch(i, m, rest, m)
        for p in self.prereqs:
            if not p.satisfied():
                raise CallMismatchError(
                    f"expected call at {self.origin} doesn't have a prerequisite call "
                    f"satisfied:\n{p}\nshould be called before:\n{self}")
        if self.exhausted():
            raise CallMismatchError(
                f"expected call at {self.origin} has already been called the max number of times")

    def drop_prereqs(self) -> list[Call]:
        """Stop checking prerequisites and return the ones there were."""
        prereqs, self.prereqs = self.prereqs, []
        return prereqs

    def invoke(self) -> list[Action]:
        """Count one call and return the actions to run."""
        self.num_calls += 1
        return self.actions


def in_order(*args: Call) -> None:
    """Require the given calls to happen in this order."""
    for prev, nxt in zip(args, args[1:]):
        nxt.after(prev)