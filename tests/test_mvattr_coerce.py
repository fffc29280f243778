import io
import pytest
from mvattr.mvattr_coerce import to_string
from mvattr.mvattr_datatypes import AttributeList, InstanceScope, TemplateInstance
from mvattr.mvattr_errors import WriterConstructionIssue
from mvattr.mvattr_interpreter import Interpreter
from mvattr.mvattr_writer import AutoIndentWriter, NoIndentWriter, WriterFactory


class CountingInterpreter(Interpreter):
    """Records every call into the rendering pipeline."""
    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.calls = []

    def write_object_no_options(self, out, scope, value):
        self.calls.append((out, scope, value))
        return super().write_object_no_options(out, scope, value)


@pytest.fixture
def interp():
    return CountingInterpreter(debug=False)


@pytest.fixture
def scope():
    return InstanceScope(None, TemplateInstance("outer", ""))


@pytest.fixture
def out():
    return AutoIndentWriter(io.StringIO())


def test_none_is_absent(interp, scope, out):
    assert to_string(out, scope, None, interp) is None
    assert interp.calls == []

def test_plain_str_skips_pipeline(interp, scope, out):
    s = "already text"
    assert to_string(out, scope, s, interp) is s
    assert interp.calls == []

def test_str_subclass_is_rendered(interp, scope, out):
    class Markup(str):
        pass
    assert to_string(out, scope, Markup("<b>"), interp) == "<b>"
    assert len(interp.calls) == 1

def test_scalar_and_sequence_values(interp, scope, out):
    assert to_string(out, scope, 42, interp) == "42"
    assert to_string(out, scope, ["a", None, 1, ["b", "c"]], interp) == "a1bc"
    assert to_string(out, scope, AttributeList(), interp) == ""

def test_renders_template_instance(interp, scope, out):
    st = TemplateInstance("greet", "Hello {{name}}!")
    st.add("name", "Ter")
    assert to_string(out, scope, st, interp) == "Hello Ter!"

def test_writer_of_same_kind_is_used(interp, scope):
    st = TemplateInstance("lines", "a\nb")
    ref = NoIndentWriter(io.StringIO())
    to_string(ref, scope, st, interp)
    writer = interp.calls[0][0]
    assert type(writer) is NoIndentWriter
    assert writer is not ref
    assert ref.sink.getvalue() == ""

def test_writer_construction_failure_falls_back(scope):
    interp = CountingInterpreter(debug=False, writer_factory=WriterFactory())
    ref = NoIndentWriter(io.StringIO())
    st = TemplateInstance("greet", "Hi {{it}}")
    st.add("it", "there")
    assert to_string(ref, scope, st, interp) == "Hi there"
    assert type(interp.calls[0][0]) is AutoIndentWriter
    assert interp.err_mgr.errors == [WriterConstructionIssue(writer_kind="no-indent")]

def test_debug_mode_marks_scope_early_eval(scope, out):
    interp = CountingInterpreter(debug=True)
    to_string(out, scope, 7, interp)
    used = interp.calls[0][1]
    assert used is not scope
    assert used.early_eval
    assert used.parent is scope
    assert used.st is scope.st
    assert not scope.early_eval

def test_debug_mode_reuses_early_scope(out):
    interp = CountingInterpreter(debug=True)
    early = InstanceScope(None, None, early_eval=True)
    to_string(out, early, 7, interp)
    assert interp.calls[0][1] is early

def test_non_debug_mode_keeps_scope(interp, scope, out):
    to_string(out, scope, 7, interp)
    assert interp.calls[0][1] is scope

def test_debug_mode_without_scope(out):
    interp = CountingInterpreter(debug=True)
    assert to_string(out, None, 7, interp) == "7"
    used = interp.calls[0][1]
    assert used.early_eval
    assert used.parent is None and used.st is None

def test_fallback_without_scope(out):
    interp = CountingInterpreter(debug=False, writer_factory=WriterFactory())
    assert to_string(out, None, ["a", "b"], interp) == "ab"
    assert interp.err_mgr.errors == [WriterConstructionIssue(writer_kind="auto-indent")]
