# mockctl

`mockctl` provides the parts for writing tests with mock objects that
have expectations. It has argument matchers, expected calls with call
counts, return values, actions and ordering, and a set that finds which
expected call a real call matches.

## Installation

```
pip install mockctl
```

## Expected calls

`mockctl.call.Call(reporter, receiver, method, signature, *args)`
describes one expected call. `signature` is a `MethodSignature`, and
`signature_of(func)` builds one from a function or bound method. Its
positional parameters, any `*args` and the return annotation are used.
A return annotation of `tuple[...]` counts as several return values.
Plain expected arguments are turned into matchers with `as_matcher`.

The methods of a `Call` return the call, so they can be chained:

- `times(n)`, `min_times(n)`, `max_times(n)` and `any_times()` set how
  many calls are allowed. By default the count is exactly one.
- `returns(*values)` sets the return values. It checks their number
  against the signature and checks types where the annotation is a
  class.
- `do(f)` runs `f` with the call's arguments and ignores what it returns.
- `do_and_return(f)` runs `f` with the call's arguments and uses its
  result as the return value.
- `set_arg(n, value)` fills the list, bytearray, dict, set or object
  passed as argument `n` with the contents of `value`.
- `after(other)` allows the call only once `other` has been satisfied.
  `in_order(*calls)` chains several calls this way.

A call with no return values set returns a zero value for each return
type, for example `""` for `str` and `0` for `int`.

`check(args)` raises `CallMismatchError` if the arguments do not match,
if a prerequisite is not yet satisfied, or if the call is exhausted.
`invoke()` counts one call and returns its actions. `satisfied()` and
`exhausted()` compare the count with the limits. Misuse, such as a
wrong number of values passed to `returns`, or a call made its own
prerequisite, is reported through the reporter's `fatalf`.

## Call sets

`mockctl.callset.CallSet` holds the expected calls, keyed by receiver
and method name:

```python
from mockctl.call import Call, signature_of
from mockctl.callset import CallSet
from mockctl.matchers import any_value
from mockctl.reporter import RaisingReporter


class Index:
    def bar(self, key: str) -> str:
        return ""


index = Index()
calls = CallSet()
calls.add(
    Call(RaisingReporter(), index, "bar", signature_of(index.bar), any_value())
    .returns("foo")
)

match = calls.find_match(index, "bar", ["input"])
results = None
for action in match.invoke():
    out = action(["input"])
    if out is not None:
        results = out
if match.exhausted():
    calls.remove(match)

assert results == ["foo"]
assert calls.satisfied()
```

`find_match` returns the first expected call that matches. If none
matches, it raises `CallMismatchError` with the reason from each
candidate. `failures()` lists the expected calls that were not made
often enough. `expected_for(receiver, method)` lists the calls still
expected. With `CallSet(allow_override=True)`, each new call for a
receiver and method replaces the earlier ones.

## Matchers

The matchers are in `mockctl.matchers`:

| Function | Matches |
| --- | --- |
| `any_value()` | anything |
| `eq(x)` | values equal to `x` and of a compatible type (`bool` is never equal to `int`) |
| `is_none()` | `None` |
| `not_(m)` | anything the matcher `m` (or the value `m`) does not match |
| `all_of(*ms)` | values that every matcher in `ms` matches |
| `has_len(n)` | sized values of length `n` |
| `assignable_to_type_of(x)` | instances of `x` if it is a type, else of `type(x)` |
| `in_any_order(xs)` | lists or tuples with the same elements as `xs`, in any order |

`want_formatter(stringer, m)` changes the "Want" text in failure
messages. `stringer` can be a string, an object, or a callable that
takes no arguments. `got_formatter_adapter(formatter, m)` changes how
the received value is shown as "Got". `format_got(m, arg)` gives that
text. To write a new matcher, subclass `Matcher` and implement
`matches`.

## Reporters

A reporter has `errorf(fmt, *args)` and `fatalf(fmt, *args)` methods
(see `mockctl.reporter.TestReporter`).

- `RaisingReporter` records every message in `errors`. On fatal
  failures it also raises `FatalError`.
- `NopTestHelper` adds a `helper()` method that does nothing.
  `as_helper(reporter)` applies it when the reporter has no `helper`.
- `CancelReporter(reporter, cancel)` calls `cancel()` after every
  fatal failure.
- `unwrap_reporter` removes these wrappers. `cleanup_hook` returns the
  base reporter's `cleanup` method, if it has one.
- `caller_info(skip)` gives the `file:line` of a caller.

## What is not included

The package has no controller object that ties reporters, call sets
and mocks together, and it does not generate mock classes. A mock
method, or your own helper, must do these steps itself: call
`CallSet.find_match`, run the actions, remove exhausted calls, and
report `failures()` when the test ends.

## Running the tests

```
pip install -e .[test]
pytest
```