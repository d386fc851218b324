import pytest

from mockctl.call import Call, CallMismatchError, MethodSignature
from mockctl.callset import CallSet
from mockctl.reporter import RaisingReporter

RECEIVER = "TestReceiver"
METHOD = "TestMethod"
NO_ARGS = MethodSignature()
ONE_ARG = MethodSignature(params=(str,))


def make_call(*args, receiver=RECEIVER, method=METHOD, signature=None):
    sig = signature if signature is not None else (ONE_ARG if args else NO_ARGS)
    return Call(RaisingReporter(), receiver, method, sig, *args)


def test_add_then_find_match_returns_first_call():
    cs = CallSet()
    calls = [make_call() for _ in range(10)]
    for c in calls:
        cs.add(c)
    found = cs.find_match(RECEIVER, METHOD, [])
    assert found is calls[0]


def test_add_without_override_keeps_all_calls():
    cs = CallSet()
    cs.add(make_call())
    cs.add(make_call())
    assert len(cs.expected_for(RECEIVER, METHOD)) == 2


def test_add_when_overridable_replaces_previous_expected():
    cs = CallSet(allow_override=True)
    first = make_call()
    cs.add(first)
    assert cs.expected_for(RECEIVER, METHOD) == [first]
    second = make_call()
    cs.add(second)
    remaining = cs.expected_for(RECEIVER, METHOD)
    assert len(remaining) == 1
    assert remaining[0] is second


def test_remove_preserves_order_of_remaining_calls():
    cs = CallSet()
    calls = [make_call().any_times() for _ in range(10)]
    for c in calls:
        cs.add(c)
    for i, c in enumerate(calls):
        current = cs.expected_for(RECEIVER, METHOD)
        assert [id(x) for x in current] == [id(x) for x in calls[i:]]
        cs.remove(c)
    assert cs.expected_for(RECEIVER, METHOD) == []


def test_removed_call_reports_exhausted():
    cs = CallSet()
    c = make_call().any_times()
    cs.add(c)
    cs.remove(c)
    with pytest.raises(CallMismatchError) as info:
        cs.find_match(RECEIVER, METHOD, [])
    assert 'all expected calls for method "TestMethod" have been exhausted' in str(info.value)


def test_find_match_on_exhausted_call_has_message():
    cs = CallSet()
    c = make_call().times(0)
    cs.add(c)
    assert cs.expected_for(RECEIVER, METHOD) == []
    with pytest.raises(CallMismatchError) as info:
        cs.find_match(RECEIVER, METHOD, [])
    message = str(info.value)
    assert message != ""
    assert "has already been called the max number of times" in message


def test_find_match_with_no_expected_calls():
    cs = CallSet()
    with pytest.raises(CallMismatchError) as info:
        cs.find_match(RECEIVER, "Other", [])
    assert str(info.value) == (
        'there are no expected calls of the method "Other" for that receiver')


def test_find_match_argument_mismatch():
    cs = CallSet()
    cs.add(make_call("a"))
    with pytest.raises(CallMismatchError) as info:
        cs.find_match(RECEIVER, METHOD, ["b"])
    message = str(info.value)
    assert message.startswith("\n")
    assert "doesn't match the argument at index 0" in message
    assert "Got: b (str)" in message


def test_find_match_skips_non_matching_call():
    cs = CallSet()
    cs.add(make_call("a"))
    second = make_call("b")
    cs.add(second)
    assert cs.find_match(RECEIVER, METHOD, ["b"]) is second


def test_receivers_are_kept_apart():
    cs = CallSet()
    one = make_call(receiver="one")
    cs.add(one)
    with pytest.raises(CallMismatchError):
        cs.find_match("two", METHOD, [])
    assert cs.find_match("one", METHOD, []) is one


def test_unhashable_receiver_is_keyed_by_identity():
    cs = CallSet()
    receiver = []
    c = make_call(receiver=receiver)
    cs.add(c)
    assert cs.find_match(receiver, METHOD, []) is c
    with pytest.raises(CallMismatchError):
        cs.find_match([], METHOD, [])


def test_failures_and_satisfied():
    cs = CallSet()
    c = make_call()
    optional = make_call(method="Optional").any_times()
    cs.add(c)
    cs.add(optional)
    assert cs.failures() == [c]
    assert cs.satisfied() is False
    c.invoke()
    assert cs.failures() == []
    assert cs.satisfied() is True


def test_empty_set_is_satisfied():
    cs = CallSet()
    assert cs.satisfied() is True
    assert cs.failures() == []