"""
Core data types for the multi-value attribute model.

This module defines the normalized handle variants that every attribute
value is reduced to, the template instance whose argument slots receive
attribute values, the evaluation scope passed through a render, and the
list type used for multi-valued attributes.
"""

from abc import ABC
from typing import Any, Dict, Iterator, List, Optional
import collections.abc

from mvattr.mvattr_errors import HandleConsumedError

# Reserved attribute name used when a template declares no arguments.
IMPLICIT_ARG_NAME = "it"


class _EmptyAttr:
    """Marker for an argument slot that was never assigned."""
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self):
        return "EMPTY_ATTR"

    def __bool__(self):
        return False


EMPTY_ATTR = _EmptyAttr()


class AttributeList(list):
    """A list holding the values of a multi-valued attribute.

    Renders as the concatenation of its present items, so a multi-valued
    attribute interpolated directly into a template reads as its values
    written one after another.
    """
    def __str__(self):
        return "".join(str(x) for x in self if x is not None)

    def __repr__(self):
        return f"AttributeList({list.__repr__(self)})"


# =================================================================
# Normalized Handles
# =================================================================

class Handle(ABC):
    """Abstract base class for the normalized form of an attribute value."""
    kind: str = "handle"


class AbsentHandle(Handle):
    kind = "absent"
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self):
        return "ABSENT"

    def __bool__(self):
        return False


ABSENT = AbsentHandle()


class ScalarHandle(Handle):
    """Exactly one value, never decomposed further."""
    kind = "scalar"
    __match_args__ = ("value",)

    def __init__(self, value: Any):
        self.value = value

    def __repr__(self):
        return f"ScalarHandle({self.value!r})"

    def __eq__(self, other):
        return isinstance(other, ScalarHandle) and self.value == other.value


class SequenceHandle(Handle):
    """A single-pass cursor over the items of a multi-valued source.

    The handle starts fresh and becomes consumed the first time it is
    iterated or materialized. A consumed handle refuses a second pass even
    when the underlying source could be restarted.
    """
    kind = "sequence"
    __match_args__ = ("source",)

    def __init__(self, source: Any):
        self.source = source
        self.consumed = False

    def __iter__(self) -> Iterator[Any]:
        if self.consumed:
            raise HandleConsumedError(self.source)
        self.consumed = True
        return iter(self.source)

    def materialize(self) -> AttributeList:
        """Consume the handle into an owned list that can be walked any number of times."""
        return AttributeList(iter(self))

    def __repr__(self):
        state = "consumed" if self.consumed else "fresh"
        return f"<SequenceHandle {state} over {type(self.source).__name__}>"


# =================================================================
# Template Instances and Scopes
# =================================================================

class TemplateInstance:
    """A template plus the attribute values bound to it.

    `formal_arguments` is None until an argument is declared, either up front
    or implicitly by `add` on an untyped instance. `has_formal_args` marks a
    typed instance that only accepts its declared arguments. Values live in
    `locals`, one slot per formal argument.
    """
    def __init__(self, name: str, template: str = "",
                 formal_arguments: Optional[List[str]] = None,
                 has_formal_args: bool = False):
        self.name = name
        self.template = template
        self.has_formal_args = has_formal_args
        self.formal_arguments: Optional[List[str]] = (
            list(formal_arguments) if formal_arguments is not None else None
        )
        self.locals: List[Any] = [EMPTY_ATTR] * len(self.formal_arguments or [])

    def _define_arg(self, name: str) -> int:
        if self.formal_arguments is None:
            self.formal_arguments = []
        self.formal_arguments.append(name)
        self.locals.append(EMPTY_ATTR)
        return len(self.formal_arguments) - 1

    def add(self, name: str, value: Any) -> "TemplateInstance":
        """Bind `value` to `name`, accumulating repeated adds into an AttributeList."""
        if "." in name:
            raise ValueError(f"cannot have '.' in attribute names: {name}")
        args = self.formal_arguments or []
        if name in args:
            idx = args.index(name)
        elif self.has_formal_args:
            raise KeyError(f"no such attribute: {name}")
        else:
            idx = self._define_arg(name)

        cur = self.locals[idx]
        if cur is EMPTY_ATTR:
            self.locals[idx] = value
            return self

        multi = cur if isinstance(cur, AttributeList) else (
            AttributeList(cur) if isinstance(cur, (list, tuple)) else AttributeList([cur])
        )
        self.locals[idx] = multi
        if isinstance(value, (list, tuple)):
            multi.extend(value)
        else:
            multi.append(value)
        return self

    def remove(self, name: str):
        args = self.formal_arguments or []
        if name not in args:
            raise KeyError(f"no such attribute: {name}")
        self.locals[args.index(name)] = EMPTY_ATTR

    def get_attribute(self, name: str) -> Any:
        args = self.formal_arguments or []
        if name not in args:
            return None
        value = self.locals[args.index(name)]
        return None if value is EMPTY_ATTR else value

    @property
    def attributes(self) -> Dict[str, Any]:
        """Assigned attributes by name; unassigned slots are left out."""
        return {
            n: v for n, v in zip(self.formal_arguments or [], self.locals)
            if v is not EMPTY_ATTR
        }

    def __repr__(self):
        return f"<TemplateInstance {self.name} args={self.formal_arguments!r}>"


class InstanceScope:
    """The evaluation context for one template instance during a render.

    `early_eval` marks a nested render done only to produce a string; it is
    inherited by child scopes.
    """
    def __init__(self, parent: Optional["InstanceScope"], st: Optional[TemplateInstance],
                 early_eval: bool = False):
        self.parent = parent
        self.st = st
        self.early_eval = early_eval or (parent is not None and parent.early_eval)

    def depth(self) -> int:
        n = 0
        cur = self.parent
        while cur is not None:
            n += 1
            cur = cur.parent
        return n

    def __repr__(self):
        name = self.st.name if self.st is not None else None
        return f"<InstanceScope {name} early_eval={self.early_eval}>"


def is_text(value: Any) -> bool:
    return isinstance(value, (str, bytes, bytearray))


def is_iterable_source(value: Any) -> bool:
    """True for values the model treats as multi-valued."""
    if value is None or is_text(value) or isinstance(value, TemplateInstance):
        return False
    return isinstance(value, (collections.abc.Iterable, collections.abc.Iterator))
