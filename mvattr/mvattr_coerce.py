"""
Renders an attribute value to text through the rendering pipeline.
"""
import io
from typing import Any, Optional

from mvattr.mvattr_datatypes import InstanceScope
from mvattr.mvattr_errors import WriterConstructionError, WriterConstructionIssue
from mvattr.mvattr_writer import AutoIndentWriter, Writer


def fresh_writer(out: Writer, scope: Optional[InstanceScope], sink: Any, interpreter: Any) -> Writer:
    """Build a writer of the same kind as `out` over `sink`.

    Falls back to an AutoIndentWriter and reports a WriterConstructionIssue
    when the factory cannot build that kind.
    """
    try:
        return interpreter.writer_factory.build(out, sink)
    except WriterConstructionError as e:
        interpreter.err_mgr.run_time_error(
            interpreter, scope, WriterConstructionIssue(writer_kind=e.kind)
        )
        return AutoIndentWriter(sink)


def to_string(out: Writer, scope: Optional[InstanceScope], value: Any, interpreter: Any) -> Optional[str]:
    """Return the text form of `value`, or None when it is absent.

    A plain `str` is returned as-is. Anything else is rendered into a
    fresh writer of the same kind as `out` over an in-memory buffer. If such a
    writer cannot be built, an AutoIndentWriter is used and a
    WriterConstructionIssue is reported.
    """
    if value is None:
        return None
    if type(value) is str:
        return value

    # not a string yet, must evaluate it
    sink = io.StringIO()
    writer = fresh_writer(out, scope, sink, interpreter)

    if interpreter.debug and not (scope is not None and scope.early_eval):
        scope = InstanceScope(scope, scope.st if scope is not None else None, early_eval=True)

    interpreter.write_object_no_options(writer, scope, value)
    return sink.getvalue()
