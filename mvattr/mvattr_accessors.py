"""
Multi-value accessors: first, last, rest, trunc, strip, reverse and length.

Each accessor treats an attribute as a sequence of zero, one or many values,
so templates never need to know whether an attribute is "really" a list.
A scalar behaves as a one-element sequence for first/last/length and has no
rest or trunc. None (absent) yields None everywhere except length, which
is 0. Accessors that build new lists return an AttributeList the caller owns.
"""
from typing import Any, Callable, Dict, List

from mvattr.mvattr_datatypes import AttributeList, ScalarHandle, SequenceHandle
from mvattr.mvattr_errors import UnknownFunctionError
from mvattr.mvattr_normalize import normalize, is_indexable, is_sized


def first(v: Any) -> Any:
    """Return the first value if multi-valued, or the attribute itself if single-valued."""
    match normalize(v):
        case SequenceHandle() as seq:
            for item in seq:
                return item
            return None
        case ScalarHandle(x):
            return x
        case _:
            return None


def last(v: Any) -> Any:
    """Return the last value if multi-valued, or the attribute itself if single-valued.

    Indexable sources (lists, tuples, ranges) are read by position; any other
    sequence is walked to its end. An empty sequence yields None whatever
    its source kind.
    """
    if is_indexable(v):
        return v[len(v) - 1] if len(v) > 0 else None
    match normalize(v):
        case SequenceHandle() as seq:
            item = None
            for item in seq:
                pass
            return item
        case ScalarHandle(x):
            return x
        case _:
            return None


def rest(v: Any) -> Any:
    """Return everything but the first value, or None if there are fewer than two."""
    if is_indexable(v):
        n = len(v)
        if n <= 1:
            return None
        return AttributeList(v[i] for i in range(1, n))
    match normalize(v):
        case SequenceHandle() as seq:
            items = seq.materialize()
            if len(items) <= 1:
                return None
            del items[0]
            return items
        case _:
            # rest of a single-valued attribute is None
            return None


def trunc(v: Any) -> Any:
    """Return everything but the last value, or None if there are fewer than two."""
    if is_indexable(v):
        n = len(v)
        if n <= 1:
            return None
        return AttributeList(v[i] for i in range(n - 1))
    match normalize(v):
        case SequenceHandle() as seq:
            items = seq.materialize()
            if len(items) <= 1:
                return None
            items.pop()
            return items
        case _:
            return None


def strip(v: Any) -> Any:
    """Return a new list without None values. Scalars pass through unchanged."""
    match normalize(v):
        case SequenceHandle() as seq:
            return AttributeList(x for x in seq if x is not None)
        case ScalarHandle(x):
            return x
        case _:
            return None


def reverse(v: Any) -> Any:
    """Return the values in reverse order.

    None values are kept; use strip(reverse(v)) to drop them.
    """
    match normalize(v):
        case SequenceHandle() as seq:
            items = seq.materialize()
            items.reverse()
            return items
        case ScalarHandle(x):
            return x
        case _:
            return None


def length(v: Any) -> int:
    """Return the number of values: 0 for None, 1 for a scalar."""
    if is_sized(v):
        return len(v)
    match normalize(v):
        case SequenceHandle() as seq:
            n = 0
            for _ in seq:
                n += 1
            return n
        case ScalarHandle():
            return 1
        case _:
            return 0


def add_to_list(target: List[Any], v: Any) -> None:
    """Append the values of `v` to `target`, flattening one level.

    Nested sequences are appended as single items. A scalar, or None, is
    appended as one value.
    """
    match normalize(v):
        case SequenceHandle() as seq:
            target.extend(seq)
        case ScalarHandle(x):
            target.append(x)
        case _:
            target.append(None)


MULTI_VALUE_FUNCTIONS: Dict[str, Callable[[Any], Any]] = {
    "first": first,
    "last": last,
    "rest": rest,
    "trunc": trunc,
    "strip": strip,
    "reverse": reverse,
    "length": length,
}


def apply_function(name: str, v: Any) -> Any:
    """Dispatch a multi-value function by name, e.g. `apply_function('first', names)`."""
    try:
        fn = MULTI_VALUE_FUNCTIONS[name]
    except KeyError:
        raise UnknownFunctionError(name) from None
    return fn(v)
