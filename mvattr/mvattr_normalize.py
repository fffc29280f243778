"""
Reduces any host value to a normalized handle.
"""
from typing import Any
import collections.abc

from mvattr.mvattr_datatypes import (
    ABSENT, Handle, ScalarHandle, SequenceHandle, is_iterable_source, is_text
)


def normalize(value: Any) -> Handle:
    """Return ABSENT, a ScalarHandle or a SequenceHandle for `value`.

    Text, bytes and template instances are always scalars. Any other
    iterable (lists, tuples, sets, ranges, mappings, iterators, generators)
    becomes a sequence in its own iteration order; a mapping therefore yields
    its keys. Everything else is a scalar.
    """
    if value is None:
        return ABSENT
    if is_iterable_source(value):
        return SequenceHandle(value)
    return ScalarHandle(value)


def is_indexable(value: Any) -> bool:
    """True when `value` supports len() and positional indexing."""
    return isinstance(value, collections.abc.Sequence) and not is_text(value)


def is_sized(value: Any) -> bool:
    """True when `value` is a multi-valued source that reports its size directly."""
    return isinstance(value, collections.abc.Sized) and is_iterable_source(value)
