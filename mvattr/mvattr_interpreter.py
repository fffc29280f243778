"""
The rendering pipeline: writes attribute values and template instances to a writer.
"""
import io
import os
import sys
import collections.abc
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
import pystache

from mvattr.mvattr_datatypes import (
    AttributeList, InstanceScope, ScalarHandle, SequenceHandle, TemplateInstance
)
from mvattr.mvattr_errors import ErrorManager, TemplateRenderIssue
from mvattr.mvattr_writer import AutoIndentWriter, Writer, WriterFactory, default_writer_factory
from mvattr.mvattr_normalize import normalize
from mvattr import mvattr_accessors
from mvattr.mvattr_binder import set_first_argument
from mvattr.mvattr_coerce import fresh_writer, to_string


def _scalar_text(x: Any) -> str:
    if isinstance(x, (bytes, bytearray)):
        return x.decode("utf-8", errors="replace")
    return str(x)


@dataclass
class EvalTemplateEvent:
    """Debug trace record for one instance evaluation that is part of the output."""
    name: str
    output_start: int
    output_stop: int = -1
    attributes: Dict[str, Any] = field(default_factory=dict)


class Interpreter:
    """Renders attribute values, evaluating nested template instances on the way.

    Template instances are Mustache templates rendered by pystache with their
    bound attributes as context. Nested instances are rendered in a child scope
    into a buffer and their text becomes the attribute value. Diagnostics go to
    `err_mgr`. In debug mode every instance evaluation that is not an early
    evaluation (see `to_string`) is recorded in `events`, with offsets into the
    writer it was written to, and `_dbg` traces to stderr.
    """

    def __init__(self, err_mgr: Optional[ErrorManager] = None, debug: Optional[bool] = None,
                 writer_factory: Optional[WriterFactory] = None):
        self.err_mgr = err_mgr if err_mgr is not None else ErrorManager()
        self.debug: bool = bool(os.environ.get("MVATTR_DEBUG")) if debug is None else debug
        self.writer_factory = writer_factory if writer_factory is not None else default_writer_factory()
        self.events: List[EvalTemplateEvent] = []
        self.renderer = pystache.Renderer(escape=lambda u: u)

    def _dbg(self, *parts):
        if self.debug:
            try:
                print("[DBG]", *parts, file=sys.stderr)
            except Exception:
                pass

    # --- Entry points ---

    def exec_instance(self, st: TemplateInstance) -> str:
        """Render `st` as a top-level template and return the text."""
        sink = io.StringIO()
        out = AutoIndentWriter(sink)
        self._exec(out, InstanceScope(None, st), st)
        return sink.getvalue()

    def write_object_no_options(self, out: Writer, scope: Optional[InstanceScope], value: Any) -> int:
        """Write `value` to `out` and return the number of characters written.

        None writes nothing. A multi-valued attribute writes each of its values
        in turn, skipping None.
        """
        if value is None:
            return 0
        if isinstance(value, TemplateInstance):
            return self._exec(out, InstanceScope(scope, value), value)
        match normalize(value):
            case SequenceHandle() as seq:
                n = 0
                for item in seq:
                    n += self.write_object_no_options(out, scope, item)
                return n
            case ScalarHandle(x):
                return out.write(_scalar_text(x))
        return 0

    # --- Template evaluation ---

    def _exec(self, out: Writer, scope: InstanceScope, st: TemplateInstance) -> int:
        event = None
        if self.debug and not scope.early_eval:
            event = EvalTemplateEvent(st.name, out.index(), attributes=dict(st.attributes))
        self._dbg("exec", st.name, "depth", scope.depth(), "early_eval", scope.early_eval)

        context = self._template_context(out, scope, st)
        try:
            text = self.renderer.render(st.template, context)
        except Exception as e:
            self.err_mgr.run_time_error(self, scope, TemplateRenderIssue(st.name, str(e)))
            text = st.template
        n = out.write(text)

        if event is not None:
            event.output_stop = out.index()
            self.events.append(event)
        return n

    def _template_context(self, out: Writer, scope: InstanceScope, st: TemplateInstance) -> Dict[str, Any]:
        return {name: self._tmpl_normalize_value(out, scope, v) for name, v in st.attributes.items()}

    def _tmpl_normalize_value(self, out: Writer, scope: InstanceScope, v: Any) -> Any:
        """Convert attribute values into plain Python values for Mustache."""
        if v is None:
            return None
        if isinstance(v, TemplateInstance):
            # nested templates are part of the final output, not an early evaluation
            return self._render_nested(out, scope, v)
        if isinstance(v, collections.abc.Mapping):
            return {k: self._tmpl_normalize_value(out, scope, x) for k, x in v.items()}
        match normalize(v):
            case SequenceHandle():
                items: List[Any] = []
                self.add_to_list(scope, items, v)
                return AttributeList(self._tmpl_normalize_value(out, scope, x) for x in items)
            case ScalarHandle(x) if isinstance(x, (bytes, bytearray)):
                return _scalar_text(x)
        return v

    def _render_nested(self, out: Writer, scope: InstanceScope, st: TemplateInstance) -> str:
        sink = io.StringIO()
        writer = fresh_writer(out, scope, sink, self)
        self.write_object_no_options(writer, scope, st)
        return sink.getvalue()

    # --- Multi-value attribute operations ---

    def apply_function(self, scope: Optional[InstanceScope], name: str, value: Any) -> Any:
        self._dbg("apply", name, "to", type(value).__name__)
        return mvattr_accessors.apply_function(name, value)

    def add_to_list(self, scope: Optional[InstanceScope], target: List[Any], value: Any) -> None:
        mvattr_accessors.add_to_list(target, value)

    def set_first_argument(self, scope: InstanceScope, st: TemplateInstance, attr: Any) -> None:
        set_first_argument(scope, st, attr, self)

    def to_string(self, out: Writer, scope: Optional[InstanceScope], value: Any) -> Optional[str]:
        return to_string(out, scope, value, self)
