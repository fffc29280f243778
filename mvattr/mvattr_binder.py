"""
Binds an attribute value to the first argument of a template instance.
"""
from typing import Any

from mvattr.mvattr_datatypes import IMPLICIT_ARG_NAME, InstanceScope, TemplateInstance
from mvattr.mvattr_errors import ArgumentCountMismatch


def set_first_argument(scope: InstanceScope, st: TemplateInstance, attr: Any, interpreter: Any) -> None:
    """Store `attr` as the first argument of `st`.

    An untyped instance with no declared arguments receives the value under
    the implicit argument name. An instance with declared arguments gets it in
    slot 0. Anything else is an argument count mismatch: the diagnostic is
    reported and `st` is left untouched.
    """
    if not st.has_formal_args and st.formal_arguments is None:
        st.add(IMPLICIT_ARG_NAME, attr)
        return
    if not st.formal_arguments:
        interpreter.err_mgr.run_time_error(
            interpreter, scope,
            ArgumentCountMismatch(expected=1, actual=0, instance_name=st.name),
        )
        return
    st.locals[0] = attr
